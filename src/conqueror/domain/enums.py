"""Enumerations used across the Conqueror domain."""

from __future__ import annotations

from enum import StrEnum


class Phase(StrEnum):
    """Phases of a player's turn, in order."""

    SUPPLY = "supply"
    ATTACK = "attack"
    TRANSFER = "transfer"

    @classmethod
    def from_int(cls, value: int) -> Phase:
        """Decode the wire representation (``nonce % 3``)."""

        return PHASE_SEQUENCE[value % len(PHASE_SEQUENCE)]

    def to_int(self) -> int:
        """Encode to the wire representation."""

        return PHASE_SEQUENCE.index(self)


PHASE_SEQUENCE: tuple[Phase, ...] = (Phase.SUPPLY, Phase.ATTACK, Phase.TRANSFER)


class Unit(StrEnum):
    """Unit printed on a reinforcement card."""

    INFANTRY = "infantry"
    CAVALRY = "cavalry"
    ARTILLERY = "artillery"
    JOKER = "joker"


class Action(StrEnum):
    """In-match actions, checked against the active phase."""

    SUPPLY = "supply"
    DISCARD = "discard"
    ATTACK = "attack"
    DEFEND = "defend"
    EMOTE = "emote"
    TRANSFER = "transfer"
    FINISH = "finish"


class EventKind(StrEnum):
    """Kinds of structured events emitted by the engine."""

    GAME_CREATED = "game_created"
    PLAYER_JOINED = "player_joined"
    PLAYER_LEFT = "player_left"
    PLAYER_KICKED = "player_kicked"
    GAME_STARTED = "game_started"
    SUPPLY_GRANTED = "supply_granted"
    SUPPLIED = "supplied"
    SET_REDEEMED = "set_redeemed"
    ATTACK_DISPATCHED = "attack_dispatched"
    BATTLE = "battle"
    TILE_CAPTURED = "tile_captured"
    CARD_DRAWN = "card_drawn"
    PLAYER_ELIMINATED = "player_eliminated"
    TRANSFERRED = "transferred"
    PHASE_CHANGED = "phase_changed"
    EMOTE = "emote"
    SURRENDERED = "surrendered"
    GAME_OVER = "game_over"
    CLAIMED = "claimed"


class BattleOutcome(StrEnum):
    """Terminal states of a resolved attack."""

    ATTACKER_WINS = "attacker_wins"
    DEFENDER_WINS = "defender_wins"
