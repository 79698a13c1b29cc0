"""Service Factory for Conqueror.

Wires the action service to the storage backend named in the settings. For
testing, construct :class:`~conqueror.services.GameService` directly with an
in-memory store and a static identity instead.
"""

from __future__ import annotations

from conqueror.config import Settings, get_settings
from conqueror.database import create_db_engine
from conqueror.domain.rules_config import DEFAULT_RULES, RulesConfig
from conqueror.interfaces import IGameStore, IIdentityProvider
from conqueror.repository import InMemoryGameStore, JsonGameStore, SqlGameStore
from conqueror.services import GameService


def create_store(settings: Settings | None = None) -> IGameStore:
    """Create the store selected by ``settings.store_backend``.

    Args:
        settings: Application settings, defaults to the cached instance

    Returns:
        A store implementing the ``IGameStore`` protocol
    """
    settings = settings or get_settings()
    if settings.store_backend == "memory":
        return InMemoryGameStore()
    if settings.store_backend == "sql":
        engine = create_db_engine(settings.database_url, echo=settings.database_echo)
        return SqlGameStore(engine)
    return JsonGameStore(settings.data_dir)


def create_game_service(
    identity: IIdentityProvider,
    *,
    settings: Settings | None = None,
    store: IGameStore | None = None,
    rules: RulesConfig = DEFAULT_RULES,
) -> GameService:
    """Create a GameService with all dependencies.

    Args:
        identity: Resolves the caller of each action
        settings: Application settings, defaults to the cached instance
        store: Explicit store, overriding the configured backend
        rules: Ruleset applied to every game

    Returns:
        Fully initialized GameService
    """
    settings = settings or get_settings()
    return GameService(
        store or create_store(settings),
        identity,
        rules=rules,
        default_map=settings.default_map,
        default_round_limit=settings.default_round_limit,
    )
