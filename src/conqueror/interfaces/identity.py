"""Identity Provider Protocol Interface."""

from typing import Protocol


class IIdentityProvider(Protocol):
    """Protocol for resolving who issued the current action.

    The engine performs no authentication; it only compares the returned
    identity against identities stored on games and players.
    """

    def current_caller(self) -> str:
        """Return the opaque identity of the acting party."""
        ...
