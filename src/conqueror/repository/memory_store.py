"""In-process game store, used by tests and the ``memory`` backend."""

from __future__ import annotations

import threading
from copy import deepcopy

from conqueror.domain import models as dm


class InMemoryGameStore:
    """Keep every entity in dictionaries keyed like the store contract.

    Loads hand out deep copies so callers never alias stored state.
    """

    def __init__(self) -> None:
        self._games: dict[dm.GameID, dm.Game] = {}
        self._players: dict[tuple[dm.GameID, int], dm.Player] = {}
        self._tiles: dict[tuple[dm.GameID, int], dm.Tile] = {}
        self._events: dict[dm.GameID, list[dm.Event]] = {}
        self._last_id = 0
        self._lock = threading.Lock()

    def next_game_id(self) -> dm.GameID:
        with self._lock:
            self._last_id += 1
            return dm.GameID(self._last_id)

    def load_game(self, game_id: dm.GameID) -> dm.Game | None:
        return deepcopy(self._games.get(game_id))

    def save_game(self, game: dm.Game) -> None:
        self._games[game.id] = deepcopy(game)

    def delete_game(self, game_id: dm.GameID) -> None:
        self._games.pop(game_id, None)
        self._events.pop(game_id, None)
        for key in [key for key in self._players if key[0] == game_id]:
            del self._players[key]
        for key in [key for key in self._tiles if key[0] == game_id]:
            del self._tiles[key]

    def list_games(self) -> list[dm.GameID]:
        return sorted(self._games, key=int)

    def load_player(self, game_id: dm.GameID, index: int) -> dm.Player | None:
        return deepcopy(self._players.get((game_id, index)))

    def load_players(self, game_id: dm.GameID) -> list[dm.Player]:
        players = [player for key, player in self._players.items() if key[0] == game_id]
        return deepcopy(sorted(players, key=lambda player: player.index))

    def save_player(self, player: dm.Player) -> None:
        self._players[(player.game_id, player.index)] = deepcopy(player)

    def delete_player(self, game_id: dm.GameID, index: int) -> None:
        self._players.pop((game_id, index), None)

    def load_tile(self, game_id: dm.GameID, index: int) -> dm.Tile | None:
        return deepcopy(self._tiles.get((game_id, index)))

    def load_all_tiles(self, game_id: dm.GameID) -> list[dm.Tile]:
        tiles = [tile for key, tile in self._tiles.items() if key[0] == game_id]
        return deepcopy(sorted(tiles, key=lambda tile: tile.index))

    def save_tile(self, tile: dm.Tile) -> None:
        self._tiles[(tile.game_id, tile.index)] = deepcopy(tile)

    def append_event(self, event: dm.Event) -> None:
        self._events.setdefault(event.game_id, []).append(deepcopy(event))

    def load_events(self, game_id: dm.GameID) -> list[dm.Event]:
        return deepcopy(self._events.get(game_id, []))

    def apply(self, changes: dm.ChangeSet) -> None:
        game_id = changes.game_id
        staged = deepcopy(changes)
        with self._lock:
            if staged.game is not None:
                self._games[game_id] = staged.game
            for index in staged.removed_players:
                self._players.pop((game_id, index), None)
            for player in staged.players:
                self._players[(game_id, player.index)] = player
            for tile in staged.tiles:
                self._tiles[(game_id, tile.index)] = tile
            self._events.setdefault(game_id, []).extend(staged.events)
