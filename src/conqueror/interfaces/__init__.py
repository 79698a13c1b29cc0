"""Protocol-based interfaces for the collaborators of the rule engine.

The action service depends on these contracts only, so tests can inject
in-memory fakes and production can wire JSON or SQL storage.
"""

from conqueror.interfaces.identity import IIdentityProvider
from conqueror.interfaces.store import IGameStore

__all__ = [
    "IGameStore",
    "IIdentityProvider",
]
