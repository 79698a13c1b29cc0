"""Service layer for Conqueror.

The action service depends on Protocol interfaces only:

- ``IGameStore`` for persistence (in-memory, JSON snapshots or SQL tables)
- ``IIdentityProvider`` for resolving the caller of an action

Production Usage:
    from conqueror.factory import create_game_service
    from conqueror.identity import RequestIdentity

    identity = RequestIdentity()
    games = create_game_service(identity, settings=settings)
    with identity.acting_as("ann"):
        game_id = games.create(name="Friday night", player_name="Ann")

Testing Usage:
    from conqueror.identity import StaticIdentity
    from conqueror.repository import InMemoryGameStore
    from conqueror.services import GameService

    games = GameService(InMemoryGameStore(), StaticIdentity("ann"))
"""

from conqueror.services.game_service import GameService

__all__ = ["GameService"]
