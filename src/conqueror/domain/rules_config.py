"""Declarative rule configuration for the domain layer."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CombatRules:
    """Dice caps and battle length."""

    attacker_dice: int = 3
    defender_dice: int = 2
    die_sides: int = 6
    max_duels: int | None = None  # None fights until one side is exhausted


@dataclass(frozen=True, slots=True)
class SupplyRules:
    """Reinforcement formula constants."""

    minimum: int = 3
    territory_divisor: int = 3


@dataclass(frozen=True, slots=True)
class CardRules:
    """Deck sizing and set redemption schedule."""

    small_map_threshold: int = 20
    extra_card_percent: int = 5
    set_bonus_schedule: tuple[int, ...] = (4, 6, 8, 10, 12, 15)
    set_bonus_increment: int = 5
    territory_bonus: int = 2
    max_hand: int = 5


@dataclass(frozen=True, slots=True)
class MovementRules:
    """Fortify constraints."""

    multi_hop: bool = True


@dataclass(frozen=True, slots=True)
class SessionRules:
    """Lobby bounds."""

    min_players: int = 2
    max_players: int = 6
    default_round_limit: int = 100


@dataclass(frozen=True, slots=True)
class RulesConfig:
    """Top-level configuration container for all subsystems."""

    combat: CombatRules = CombatRules()
    supply: SupplyRules = SupplyRules()
    cards: CardRules = CardRules()
    movement: MovementRules = MovementRules()
    session: SessionRules = SessionRules()


DEFAULT_RULES = RulesConfig()
