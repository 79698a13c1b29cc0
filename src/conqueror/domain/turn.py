"""Turn and phase arithmetic.

The canonical turn state is the game ``nonce``: the active seat is
``(nonce // 3) % player_count`` and the phase ``nonce % 3``. Everything
here is derived from it.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from conqueror.domain.enums import PHASE_SEQUENCE, Action, Phase
from conqueror.domain.errors import GameNotStarted, GameOver, InvalidPhase, InvalidPlayer
from conqueror.domain.models import Game, Match, Player

PHASES_PER_TURN = len(PHASE_SEQUENCE)

ALLOWED_ACTIONS: Mapping[Phase, frozenset[Action]] = MappingProxyType(
    {
        Phase.SUPPLY: frozenset({Action.SUPPLY, Action.DISCARD, Action.FINISH}),
        Phase.ATTACK: frozenset({Action.ATTACK, Action.DEFEND, Action.EMOTE, Action.FINISH}),
        Phase.TRANSFER: frozenset({Action.TRANSFER, Action.FINISH}),
    }
)


def phase_of(nonce: int) -> Phase:
    return Phase.from_int(nonce)


def player_of(nonce: int, player_count: int) -> int:
    return (nonce // PHASES_PER_TURN) % player_count


def round_of(nonce: int, player_count: int) -> int:
    """Zero-based round number."""

    return nonce // (PHASES_PER_TURN * player_count)


def increment(game: Game) -> None:
    """Advance one phase."""

    game.nonce += 1


def roll(game: Game) -> None:
    """Advance one full turn, keeping the phase."""

    game.nonce += PHASES_PER_TURN


def next_turn(game: Game) -> None:
    """Jump to the next seat's Supply phase."""

    game.nonce += PHASES_PER_TURN - phase_of(game.nonce).to_int()


def require_running(game: Game) -> None:
    if not game.started:
        raise GameNotStarted(f"game {game.id} has not started")
    if game.over:
        raise GameOver(f"game {game.id} is over")


def require_nonce(game: Game, nonce: int | None) -> None:
    """Reject actions computed against an older state."""

    if nonce is not None and nonce != game.nonce:
        raise InvalidPhase(f"stale action: expected nonce {game.nonce}, got {nonce}")


def require_phase(game: Game, action: Action) -> None:
    phase = phase_of(game.nonce)
    if action not in ALLOWED_ACTIONS[phase]:
        raise InvalidPhase(f"{action} is not allowed during the {phase} phase")


def require_turn(match: Match, identity: str) -> Player:
    """Return the active player, checking that ``identity`` controls it."""

    player = match.current_player()
    if player.identity != identity:
        raise InvalidPlayer(f"it is player {player.index}'s turn")
    return player
