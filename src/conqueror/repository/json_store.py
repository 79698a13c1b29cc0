"""JSON-based repository for Conqueror games."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import TypeAdapter

from conqueror.domain import models as dm


@dataclass(slots=True)
class GameRecord:
    """On-disk snapshot of one game with all of its entities."""

    game: dm.Game
    players: dict[int, dm.Player] = field(default_factory=dict)
    tiles: dict[int, dm.Tile] = field(default_factory=dict)
    events: list[dm.Event] = field(default_factory=list)


class JsonGameStore:
    """Persist games as JSON snapshots on disk, one file per game."""

    def __init__(self, base_path: Path) -> None:
        self.base_path = base_path
        self.base_path.mkdir(parents=True, exist_ok=True)
        self._adapter: TypeAdapter[GameRecord] = TypeAdapter(GameRecord)
        self._lock = threading.Lock()
        self._reserved: set[int] = set()

    def _path_for(self, game_id: dm.GameID) -> Path:
        return self.base_path / f"game_{int(game_id)}.json"

    def _read(self, game_id: dm.GameID) -> GameRecord | None:
        path = self._path_for(game_id)
        if not path.exists():
            return None
        return self._adapter.validate_json(path.read_bytes())

    def _write(self, record: GameRecord) -> Path:
        """Replace the snapshot in one step so readers never see a partial file."""

        path = self._path_for(record.game.id)
        payload = self._adapter.dump_json(record, indent=2)
        staging = path.with_name(f"{path.name}.tmp")
        try:
            staging.write_bytes(payload)
            staging.replace(path)
        except OSError:
            staging.unlink(missing_ok=True)
            raise
        return path

    def _require(self, game_id: dm.GameID) -> GameRecord:
        record = self._read(game_id)
        if record is None:
            raise FileNotFoundError(f"no snapshot for game {int(game_id)}")
        return record

    def next_game_id(self) -> dm.GameID:
        with self._lock:
            taken = {int(game_id) for game_id in self.list_games()} | self._reserved
            next_id = max(taken, default=0) + 1
            self._reserved.add(next_id)
            return dm.GameID(next_id)

    def list_games(self) -> list[dm.GameID]:
        """Return all game ids currently persisted in the repository."""

        ids: list[dm.GameID] = []
        prefix = "game_"
        suffix = ".json"
        for path in self.base_path.glob("game_*.json"):
            raw = path.name[len(prefix) : -len(suffix)]
            if raw.isdigit():
                ids.append(dm.GameID(int(raw)))
        return sorted(ids, key=int)

    def load_game(self, game_id: dm.GameID) -> dm.Game | None:
        record = self._read(game_id)
        return record.game if record is not None else None

    def save_game(self, game: dm.Game) -> None:
        record = self._read(game.id)
        if record is None:
            record = GameRecord(game=game)
        record.game = game
        self._write(record)

    def delete_game(self, game_id: dm.GameID) -> None:
        """Remove a game snapshot if it exists."""

        path = self._path_for(game_id)
        if path.exists():
            path.unlink()
        with self._lock:
            self._reserved.discard(int(game_id))

    def load_player(self, game_id: dm.GameID, index: int) -> dm.Player | None:
        record = self._read(game_id)
        return record.players.get(index) if record is not None else None

    def load_players(self, game_id: dm.GameID) -> list[dm.Player]:
        record = self._read(game_id)
        if record is None:
            return []
        return [record.players[index] for index in sorted(record.players)]

    def save_player(self, player: dm.Player) -> None:
        record = self._require(player.game_id)
        record.players[player.index] = player
        self._write(record)

    def delete_player(self, game_id: dm.GameID, index: int) -> None:
        record = self._read(game_id)
        if record is not None and record.players.pop(index, None) is not None:
            self._write(record)

    def load_tile(self, game_id: dm.GameID, index: int) -> dm.Tile | None:
        record = self._read(game_id)
        return record.tiles.get(index) if record is not None else None

    def load_all_tiles(self, game_id: dm.GameID) -> list[dm.Tile]:
        record = self._read(game_id)
        if record is None:
            return []
        return [record.tiles[index] for index in sorted(record.tiles)]

    def save_tile(self, tile: dm.Tile) -> None:
        record = self._require(tile.game_id)
        record.tiles[tile.index] = tile
        self._write(record)

    def append_event(self, event: dm.Event) -> None:
        record = self._require(event.game_id)
        record.events.append(event)
        self._write(record)

    def load_events(self, game_id: dm.GameID) -> list[dm.Event]:
        record = self._read(game_id)
        return list(record.events) if record is not None else []

    def apply(self, changes: dm.ChangeSet) -> None:
        record = self._read(changes.game_id)
        if record is None:
            if changes.game is None:
                raise FileNotFoundError(f"no snapshot for game {int(changes.game_id)}")
            record = GameRecord(game=changes.game)
        if changes.game is not None:
            record.game = changes.game
        for index in changes.removed_players:
            record.players.pop(index, None)
        for player in changes.players:
            record.players[player.index] = player
        for tile in changes.tiles:
            record.tiles[tile.index] = tile
        record.events.extend(changes.events)
        self._write(record)

