"""Reinforcement cards, hands and set redemption."""

from __future__ import annotations

from collections.abc import Collection, Iterable, Sequence
from itertools import combinations

from conqueror.domain.enums import Unit
from conqueror.domain.errors import InvalidCard, InvalidSet
from conqueror.domain.rules_config import DEFAULT_RULES, RulesConfig
from conqueror.utils.rng import random_choice

UNIT_CYCLE: tuple[Unit, ...] = (Unit.INFANTRY, Unit.CAVALRY, Unit.ARTILLERY)
SET_SIZE = 3


def card_count(territory_count: int, rules: RulesConfig = DEFAULT_RULES) -> int:
    """Number of cards in the deck of a map with ``territory_count`` tiles."""

    if territory_count > rules.cards.small_map_threshold:
        # halves round up
        extra = (territory_count * rules.cards.extra_card_percent + 50) // 100
        return territory_count + extra
    return territory_count + 1


def card_unit(card_id: int, territory_count: int, rules: RulesConfig = DEFAULT_RULES) -> Unit:
    """Unit printed on ``card_id``; ids past the territories are jokers."""

    if card_id <= 0 or card_id > card_count(territory_count, rules):
        raise InvalidCard(f"card {card_id} does not exist")
    if card_id > territory_count:
        return Unit.JOKER
    return UNIT_CYCLE[(card_id - 1) % len(UNIT_CYCLE)]


def set_bonus(sets_redeemed: int, rules: RulesConfig = DEFAULT_RULES) -> int:
    """Supply granted by the next set given how many were redeemed before it."""

    schedule = rules.cards.set_bonus_schedule
    if sets_redeemed < len(schedule):
        return schedule[sets_redeemed]
    overflow = sets_redeemed - len(schedule) + 1
    return schedule[-1] + overflow * rules.cards.set_bonus_increment


def is_valid_set(units: Sequence[Unit]) -> bool:
    """Three of a kind or one of each; jokers stand in for anything."""

    if len(units) != SET_SIZE:
        return False
    natural = [unit for unit in units if unit != Unit.JOKER]
    distinct = len(set(natural))
    return distinct <= 1 or distinct == len(natural)


def validate_set(
    units: Sequence[Unit],
    sets_redeemed: int = 0,
    rules: RulesConfig = DEFAULT_RULES,
) -> int:
    """Return the supply bonus of a set or raise ``InvalidSet``."""

    if not is_valid_set(units):
        raise InvalidSet(f"{', '.join(units)} is not a valid set")
    return set_bonus(sets_redeemed, rules)


def ownership_bonus(
    cards: Iterable[int],
    owned_tiles: Collection[int],
    rules: RulesConfig = DEFAULT_RULES,
) -> int:
    """Extra supply for every card whose territory the redeemer holds."""

    return sum(rules.cards.territory_bonus for card in cards if card in owned_tiles)


def redeem_set(
    hand: Sequence[int],
    cards: Sequence[int],
    territory_count: int,
    *,
    sets_redeemed: int,
    owned_tiles: Collection[int] = (),
    rules: RulesConfig = DEFAULT_RULES,
) -> tuple[list[int], int]:
    """Remove ``cards`` from ``hand`` and compute the supply they grant.

    Returns the remaining hand and the total bonus (escalating set bonus plus
    the ownership bonus).
    """

    if len(cards) != SET_SIZE or len(set(cards)) != SET_SIZE:
        raise InvalidCard("a set is three distinct cards")
    units = [card_unit(card, territory_count, rules) for card in cards]
    missing = [card for card in cards if card not in hand]
    if missing:
        raise InvalidCard(f"cards {missing} are not in hand")

    bonus = validate_set(units, sets_redeemed, rules)
    bonus += ownership_bonus(cards, owned_tiles, rules)
    remaining = [card for card in hand if card not in cards]
    return remaining, bonus


def find_sets(
    hand: Sequence[int],
    territory_count: int,
    rules: RulesConfig = DEFAULT_RULES,
) -> list[tuple[int, int, int]]:
    """Every redeemable set in ``hand``, in ascending card order."""

    ordered = sorted(hand)
    return [
        combo
        for combo in combinations(ordered, SET_SIZE)
        if is_valid_set([card_unit(card, territory_count, rules) for card in combo])
    ]


def unclaimed_cards(
    territory_count: int,
    hands: Iterable[Iterable[int]],
    rules: RulesConfig = DEFAULT_RULES,
) -> list[int]:
    """Cards currently held by nobody."""

    held = {card for hand in hands for card in hand}
    return [
        card for card in range(1, card_count(territory_count, rules) + 1) if card not in held
    ]


def draw_card(pool: Sequence[int], seed: str) -> int | None:
    """Draw one card from ``pool`` deterministically; ``None`` when empty."""

    if not pool:
        return None
    return random_choice(seed, list(pool))["choice"]
