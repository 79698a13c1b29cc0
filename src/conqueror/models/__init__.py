"""SQLAlchemy models for the Conqueror persistence layer.

This module exports the declarative base and every table.
"""

from .base import Base, TimestampCreatedMixin, utc_now
from .game import EventRow, GameRow, PlayerRow, TileRow

__all__ = [
    "Base",
    "EventRow",
    "GameRow",
    "PlayerRow",
    "TileRow",
    "TimestampCreatedMixin",
    "utc_now",
]
