"""Typed rejections raised by the rule engine.

Every reachable invalid input maps to one of these kinds. They are local
validation failures: the action is rejected and the match state is left as
it was before the call.
"""

from __future__ import annotations


class GameError(RuntimeError):
    """Base class for every rejected action."""

    code = "game_error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.__class__.__doc__ or self.code
        super().__init__(self.detail)


class NotFound(GameError):
    """Unknown game, player, tile or map."""

    code = "not_found"


class InvalidPhase(GameError):
    """Action attempted outside its allowed phase."""

    code = "invalid_phase"


class GameAlreadyStarted(InvalidPhase):
    """Lobby action attempted after the match started."""

    code = "game_already_started"


class GameNotStarted(GameError):
    """In-match action attempted before the match started."""

    code = "game_not_started"


class GameOver(GameError):
    """Action attempted after the match ended."""

    code = "game_over"


class InvalidPlayer(GameError):
    """Caller does not control the acting seat."""

    code = "invalid_player"


class InvalidOwner(GameError):
    """Caller does not own the tile."""

    code = "invalid_owner"


class InvalidAttacker(InvalidOwner):
    """Attacking tile is not owned by the acting player."""

    code = "invalid_attacker"


class InvalidDefender(GameError):
    """Defending tile is not owned by an opponent."""

    code = "invalid_defender"


class InvalidAdjacency(GameError):
    """Tiles are not neighbours or not connected."""

    code = "invalid_adjacency"


class InvalidDispatch(GameError):
    """Dispatched troop count is out of bounds."""

    code = "invalid_dispatch"


class InsufficientSupply(GameError):
    """Not enough pending reinforcements."""

    code = "insufficient_supply"


class InvalidMove(GameError):
    """Quantity constraint of a move violated."""

    code = "invalid_move"


class InvalidSet(GameError):
    """Three cards do not form a redeemable set."""

    code = "invalid_set"


class InvalidCard(GameError):
    """Card id is invalid or not in the hand."""

    code = "invalid_card"
