"""Persistence adapters implementing :class:`conqueror.interfaces.IGameStore`."""

from .json_store import GameRecord, JsonGameStore
from .memory_store import InMemoryGameStore
from .sql_store import SqlGameStore

__all__ = ["GameRecord", "InMemoryGameStore", "JsonGameStore", "SqlGameStore"]
