"""Tests for cards, set validation and redemption."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from conqueror.domain import deck
from conqueror.domain.enums import Unit
from conqueror.domain.errors import InvalidCard, InvalidSet
from conqueror.domain.rules_config import CardRules, RulesConfig

NATURAL = [Unit.INFANTRY, Unit.CAVALRY, Unit.ARTILLERY]


class TestCardCount:
    def test_small_map_adds_one_joker(self):
        assert deck.card_count(5) == 6
        assert deck.card_count(20) == 21

    def test_large_map_adds_five_percent(self):
        assert deck.card_count(42) == 44
        assert deck.card_count(100) == 105

    def test_exact_halves_round_up(self):
        assert deck.card_count(30) == 32
        assert deck.card_count(50) == 53
        assert deck.card_count(70) == 74

    def test_percentage_is_a_rule(self):
        rules = RulesConfig(cards=CardRules(extra_card_percent=10))
        assert deck.card_count(45, rules) == 50


class TestCardUnit:
    def test_units_cycle(self):
        assert [deck.card_unit(card, 42) for card in range(1, 7)] == NATURAL * 2

    def test_ids_past_the_territories_are_jokers(self):
        assert deck.card_unit(43, 42) == Unit.JOKER
        assert deck.card_unit(44, 42) == Unit.JOKER
        assert deck.card_unit(6, 5) == Unit.JOKER

    @pytest.mark.parametrize("card", [0, -3, 45])
    def test_unknown_cards(self, card):
        with pytest.raises(InvalidCard):
            deck.card_unit(card, 42)


class TestSetBonus:
    def test_schedule(self):
        assert [deck.set_bonus(n) for n in range(9)] == [4, 6, 8, 10, 12, 15, 20, 25, 30]

    def test_strictly_increasing(self):
        bonuses = [deck.set_bonus(n) for n in range(50)]
        assert all(later > earlier for earlier, later in zip(bonuses, bonuses[1:]))

    def test_custom_schedule(self):
        rules = RulesConfig(cards=CardRules(set_bonus_schedule=(2, 3), set_bonus_increment=1))
        assert [deck.set_bonus(n, rules) for n in range(4)] == [2, 3, 4, 5]


class TestValidateSet:
    def test_three_of_a_kind(self):
        assert deck.validate_set([Unit.CAVALRY] * 3) == 4

    def test_one_of_each(self):
        assert deck.validate_set(NATURAL, sets_redeemed=2) == 8

    def test_jokers_are_wild(self):
        assert deck.is_valid_set([Unit.JOKER, Unit.INFANTRY, Unit.INFANTRY])
        assert deck.is_valid_set([Unit.JOKER, Unit.INFANTRY, Unit.CAVALRY])
        assert deck.is_valid_set([Unit.JOKER, Unit.JOKER, Unit.ARTILLERY])

    def test_mixed_pair_is_rejected(self):
        with pytest.raises(InvalidSet):
            deck.validate_set([Unit.INFANTRY, Unit.INFANTRY, Unit.CAVALRY])

    def test_wrong_size(self):
        assert not deck.is_valid_set([Unit.INFANTRY, Unit.INFANTRY])

    @given(st.lists(st.sampled_from(list(Unit)), min_size=3, max_size=3))
    def test_accepts_iff_equal_or_distinct(self, units):
        natural = [unit for unit in units if unit != Unit.JOKER]
        expected = len(set(natural)) in (0, 1, len(natural))
        assert deck.is_valid_set(units) == expected


class TestRedeemSet:
    def test_removes_cards_and_grants_bonus(self):
        hand, bonus = deck.redeem_set([1, 2, 3, 7], [1, 2, 3], 42, sets_redeemed=0)
        assert hand == [7]
        assert bonus == 4

    def test_ownership_bonus(self):
        _, bonus = deck.redeem_set(
            [1, 2, 3], [1, 2, 3], 42, sets_redeemed=1, owned_tiles={1, 3, 9}
        )
        assert bonus == 6 + 2 * 2

    def test_joker_grants_no_ownership_bonus(self):
        _, bonus = deck.redeem_set([1, 4, 43], [1, 4, 43], 42, sets_redeemed=0, owned_tiles={1})
        assert bonus == 4 + 2

    def test_cards_must_be_in_hand(self):
        with pytest.raises(InvalidCard, match="not in hand"):
            deck.redeem_set([1, 2], [1, 2, 3], 42, sets_redeemed=0)

    def test_cards_must_be_distinct(self):
        with pytest.raises(InvalidCard):
            deck.redeem_set([1, 1, 4], [1, 1, 4], 42, sets_redeemed=0)

    def test_invalid_combination(self):
        with pytest.raises(InvalidSet):
            deck.redeem_set([1, 4, 2], [1, 4, 2], 42, sets_redeemed=0)

    def test_second_redemption_fails(self):
        hand, _ = deck.redeem_set([1, 2, 3], [1, 2, 3], 42, sets_redeemed=0)
        with pytest.raises(InvalidCard):
            deck.redeem_set(hand, [1, 2, 3], 42, sets_redeemed=1)


class TestPool:
    def test_find_sets(self):
        assert deck.find_sets([1, 2, 4], 42) == []
        assert deck.find_sets([1, 4, 7, 2], 42) == [(1, 4, 7)]

    def test_unclaimed_cards(self):
        assert deck.unclaimed_cards(5, [[1, 2], [6]]) == [3, 4, 5]

    def test_draw_card(self):
        pool = [3, 4, 5]
        card = deck.draw_card(pool, "seed:1:card")
        assert card in pool
        assert card == deck.draw_card(pool, "seed:1:card")

    def test_draw_from_empty_pool(self):
        assert deck.draw_card([], "seed") is None
