"""Game Store Protocol Interface.

This module defines the persistence contract the action service relies on.
Entities are addressed by composite keys: games by ``game_id``, players and
tiles by ``(game_id, index)``.
"""

from typing import Protocol

from conqueror.domain.models import ChangeSet, Event, Game, GameID, Player, Tile


class IGameStore(Protocol):
    """Protocol defining the key-value persistence of match entities.

    Loads return ``None`` (or an empty list) for missing keys instead of
    raising. Returned entities are copies: mutating them has no effect until
    they are saved.
    """

    def next_game_id(self) -> GameID:
        """Reserve a fresh game identifier."""
        ...

    def load_game(self, game_id: GameID) -> Game | None: ...

    def save_game(self, game: Game) -> None: ...

    def delete_game(self, game_id: GameID) -> None:
        """Remove a game with all of its players, tiles and events."""
        ...

    def list_games(self) -> list[GameID]: ...

    def load_player(self, game_id: GameID, index: int) -> Player | None: ...

    def load_players(self, game_id: GameID) -> list[Player]:
        """All players of a game ordered by index."""
        ...

    def save_player(self, player: Player) -> None: ...

    def delete_player(self, game_id: GameID, index: int) -> None: ...

    def load_tile(self, game_id: GameID, index: int) -> Tile | None: ...

    def load_all_tiles(self, game_id: GameID) -> list[Tile]:
        """All tiles of a game ordered by index."""
        ...

    def save_tile(self, tile: Tile) -> None: ...

    def append_event(self, event: Event) -> None: ...

    def load_events(self, game_id: GameID) -> list[Event]: ...

    def apply(self, changes: ChangeSet) -> None:
        """Write every entity in ``changes`` or, on failure, none of them.

        Removed players are deleted before the saved ones are written; events
        are appended in list order.
        """
        ...
