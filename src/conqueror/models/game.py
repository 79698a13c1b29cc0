"""Game tables for the Conqueror persistence layer.

One row per game, per seat, per tile and per emitted event. Players and tiles
are keyed by ``(game_id, index)``, mirroring the store contract.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampCreatedMixin, utc_now


class GameRow(Base):
    """Represents one match.

    Attributes:
        id: Primary key
        host: Identity of the creating player
        seed: Seed every random outcome of the match derives from
        nonce: Canonical turn counter
        winner: Index of the winning seat, ``None`` while running or on a draw
    """

    __tablename__ = "games"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    host: Mapped[str] = mapped_column(String, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    seed: Mapped[str] = mapped_column(String, nullable=False)
    map_id: Mapped[str] = mapped_column(String, nullable=False)
    round_limit: Mapped[int] = mapped_column(Integer, nullable=False)
    player_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    nonce: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    started: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    over: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    sets_redeemed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    battles: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    winner: Mapped[int | None] = mapped_column(Integer, nullable=True)
    claimed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now
    )

    players: Mapped[list["PlayerRow"]] = relationship(
        "PlayerRow", back_populates="game", cascade="all, delete-orphan"
    )
    tiles: Mapped[list["TileRow"]] = relationship(
        "TileRow", back_populates="game", cascade="all, delete-orphan"
    )
    events: Mapped[list["EventRow"]] = relationship(
        "EventRow", back_populates="game", cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint("round_limit >= 1", name="ck_games_round_limit"),
        CheckConstraint("nonce >= 0", name="ck_games_nonce"),
    )

    def __repr__(self) -> str:
        return f"<GameRow(id={self.id}, name='{self.name}', nonce={self.nonce})>"


class PlayerRow(Base):
    """Represents one seat of a match."""

    __tablename__ = "players"

    game_id: Mapped[int] = mapped_column(Integer, ForeignKey("games.id"), primary_key=True)
    index: Mapped[int] = mapped_column(Integer, primary_key=True)
    identity: Mapped[str] = mapped_column(String, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    supply: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    cards: Mapped[list[int]] = mapped_column(JSON, nullable=False, default=list)
    eliminated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    rank: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    game: Mapped["GameRow"] = relationship("GameRow", back_populates="players")

    __table_args__ = (CheckConstraint("supply >= 0", name="ck_players_supply"),)


class TileRow(Base):
    """Ownership and army state of one map node."""

    __tablename__ = "tiles"

    game_id: Mapped[int] = mapped_column(Integer, ForeignKey("games.id"), primary_key=True)
    index: Mapped[int] = mapped_column(Integer, primary_key=True)
    army: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    owner: Mapped[int | None] = mapped_column(Integer, nullable=True)
    dispatched: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    target: Mapped[int | None] = mapped_column(Integer, nullable=True)
    source: Mapped[int | None] = mapped_column(Integer, nullable=True)
    order: Mapped[int | None] = mapped_column(Integer, nullable=True)

    game: Mapped["GameRow"] = relationship("GameRow", back_populates="tiles")

    __table_args__ = (
        CheckConstraint("army >= 0", name="ck_tiles_army"),
        CheckConstraint("dispatched >= 0", name="ck_tiles_dispatched"),
    )


class EventRow(Base, TimestampCreatedMixin):
    """Append-only audit trail of one game.

    Attributes:
        id: Primary key, gives the emission order
        nonce: Game nonce at emission time
        kind: Event kind (battle/supplied/phase_changed/...)
        payload: JSON with event-specific data, enough to replay dice
    """

    __tablename__ = "events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    game_id: Mapped[int] = mapped_column(Integer, ForeignKey("games.id"), nullable=False)
    nonce: Mapped[int] = mapped_column(Integer, nullable=False)
    kind: Mapped[str] = mapped_column(String, nullable=False)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    game: Mapped["GameRow"] = relationship("GameRow", back_populates="events")

    __table_args__ = (Index("idx_events_game", "game_id", "id"),)
