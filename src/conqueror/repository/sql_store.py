"""SQLAlchemy-backed game store."""

from __future__ import annotations

import threading

from sqlalchemy import delete, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from conqueror.database import create_session_factory, init_db
from conqueror.domain import models as dm
from conqueror.domain.enums import EventKind
from conqueror.models import EventRow, GameRow, PlayerRow, TileRow

_GAME_FIELDS = (
    "host",
    "name",
    "seed",
    "map_id",
    "round_limit",
    "player_count",
    "nonce",
    "started",
    "over",
    "sets_redeemed",
    "battles",
    "winner",
    "claimed",
)
_PLAYER_FIELDS = ("identity", "name", "supply", "cards", "eliminated", "rank")
_TILE_FIELDS = ("army", "owner", "dispatched", "target", "source", "order")


def _to_game(row: GameRow) -> dm.Game:
    return dm.Game(id=dm.GameID(row.id), **{name: getattr(row, name) for name in _GAME_FIELDS})


def _to_player(row: PlayerRow) -> dm.Player:
    player = dm.Player(
        game_id=dm.GameID(row.game_id),
        index=row.index,
        **{name: getattr(row, name) for name in _PLAYER_FIELDS},
    )
    player.cards = list(player.cards)
    return player


def _to_tile(row: TileRow) -> dm.Tile:
    return dm.Tile(
        game_id=dm.GameID(row.game_id),
        index=row.index,
        **{name: getattr(row, name) for name in _TILE_FIELDS},
    )


def _to_event(row: EventRow) -> dm.Event:
    return dm.Event(
        game_id=dm.GameID(row.game_id),
        nonce=row.nonce,
        kind=EventKind(row.kind),
        payload=dict(row.payload),
    )


def _put_game(session: Session, game: dm.Game) -> None:
    row = session.get(GameRow, int(game.id))
    if row is None:
        row = GameRow(id=int(game.id))
        session.add(row)
    for name in _GAME_FIELDS:
        setattr(row, name, getattr(game, name))


def _put_player(session: Session, player: dm.Player) -> None:
    row = session.get(PlayerRow, (int(player.game_id), player.index))
    if row is None:
        row = PlayerRow(game_id=int(player.game_id), index=player.index)
        session.add(row)
    for name in _PLAYER_FIELDS:
        setattr(row, name, getattr(player, name))
    row.cards = list(player.cards)


def _drop_player(session: Session, game_id: dm.GameID, index: int) -> None:
    session.execute(
        delete(PlayerRow).where(PlayerRow.game_id == int(game_id), PlayerRow.index == index)
    )


def _put_tile(session: Session, tile: dm.Tile) -> None:
    row = session.get(TileRow, (int(tile.game_id), tile.index))
    if row is None:
        row = TileRow(game_id=int(tile.game_id), index=tile.index)
        session.add(row)
    for name in _TILE_FIELDS:
        setattr(row, name, getattr(tile, name))


def _add_event(session: Session, event: dm.Event) -> None:
    session.add(
        EventRow(
            game_id=int(event.game_id),
            nonce=event.nonce,
            kind=str(event.kind),
            payload=event.payload,
        )
    )


class SqlGameStore:
    """Persist games in relational tables.

    Each call runs in its own short session; :meth:`apply` commits a whole
    action in one transaction.
    """

    def __init__(self, engine: Engine, *, create_tables: bool = True) -> None:
        self.engine = engine
        self._sessions: sessionmaker[Session] = create_session_factory(engine)
        self._id_lock = threading.Lock()
        self._last_id = 0
        if create_tables:
            init_db(engine)

    def next_game_id(self) -> dm.GameID:
        """One above both the stored maximum and any id already handed out."""

        with self._id_lock, self._sessions() as session:
            current = session.scalar(select(func.max(GameRow.id))) or 0
            self._last_id = max(self._last_id, current) + 1
            return dm.GameID(self._last_id)

    def list_games(self) -> list[dm.GameID]:
        with self._sessions() as session:
            rows = session.scalars(select(GameRow.id).order_by(GameRow.id))
            return [dm.GameID(game_id) for game_id in rows]

    def load_game(self, game_id: dm.GameID) -> dm.Game | None:
        with self._sessions() as session:
            row = session.get(GameRow, int(game_id))
            return _to_game(row) if row is not None else None

    def save_game(self, game: dm.Game) -> None:
        with self._sessions.begin() as session:
            _put_game(session, game)

    def delete_game(self, game_id: dm.GameID) -> None:
        with self._sessions.begin() as session:
            key = int(game_id)
            session.execute(delete(EventRow).where(EventRow.game_id == key))
            session.execute(delete(PlayerRow).where(PlayerRow.game_id == key))
            session.execute(delete(TileRow).where(TileRow.game_id == key))
            session.execute(delete(GameRow).where(GameRow.id == key))

    def load_player(self, game_id: dm.GameID, index: int) -> dm.Player | None:
        with self._sessions() as session:
            row = session.get(PlayerRow, (int(game_id), index))
            return _to_player(row) if row is not None else None

    def load_players(self, game_id: dm.GameID) -> list[dm.Player]:
        with self._sessions() as session:
            rows = session.scalars(
                select(PlayerRow)
                .where(PlayerRow.game_id == int(game_id))
                .order_by(PlayerRow.index)
            )
            return [_to_player(row) for row in rows]

    def save_player(self, player: dm.Player) -> None:
        with self._sessions.begin() as session:
            _put_player(session, player)

    def delete_player(self, game_id: dm.GameID, index: int) -> None:
        with self._sessions.begin() as session:
            _drop_player(session, game_id, index)

    def load_tile(self, game_id: dm.GameID, index: int) -> dm.Tile | None:
        with self._sessions() as session:
            row = session.get(TileRow, (int(game_id), index))
            return _to_tile(row) if row is not None else None

    def load_all_tiles(self, game_id: dm.GameID) -> list[dm.Tile]:
        with self._sessions() as session:
            rows = session.scalars(
                select(TileRow).where(TileRow.game_id == int(game_id)).order_by(TileRow.index)
            )
            return [_to_tile(row) for row in rows]

    def save_tile(self, tile: dm.Tile) -> None:
        with self._sessions.begin() as session:
            _put_tile(session, tile)

    def append_event(self, event: dm.Event) -> None:
        with self._sessions.begin() as session:
            _add_event(session, event)

    def load_events(self, game_id: dm.GameID) -> list[dm.Event]:
        with self._sessions() as session:
            rows = session.scalars(
                select(EventRow).where(EventRow.game_id == int(game_id)).order_by(EventRow.id)
            )
            return [_to_event(row) for row in rows]

    def apply(self, changes: dm.ChangeSet) -> None:
        """Write the whole change set in one transaction."""

        with self._sessions.begin() as session:
            if changes.game is not None:
                _put_game(session, changes.game)
            for index in changes.removed_players:
                _drop_player(session, changes.game_id, index)
            for player in changes.players:
                _put_player(session, player)
            for tile in changes.tiles:
                _put_tile(session, tile)
            for event in changes.events:
                _add_event(session, event)
