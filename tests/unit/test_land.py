"""Tests for the territory and army ledger."""

from __future__ import annotations

import pytest

from conqueror.domain import land
from conqueror.domain.errors import (
    InsufficientSupply,
    InvalidAdjacency,
    InvalidMove,
    InvalidOwner,
)
from conqueror.domain.maps import get_variant
from conqueror.domain.rules_config import MovementRules, RulesConfig


@pytest.fixture
def tiny():
    return get_variant("tiny")


class TestBaseSupply:
    @pytest.mark.parametrize(
        ("territories", "expected"),
        [(0, 3), (3, 3), (9, 3), (11, 3), (12, 4), (42, 14)],
    )
    def test_formula(self, territories, expected):
        assert land.base_supply(territories) == expected

    def test_faction_bonus_is_added(self):
        assert land.base_supply(12, faction_bonus=5) == 9


class TestPlayerSupply:
    def test_without_full_faction(self, make_match, tiny):
        match = make_match({1: (0, 1), 2: (0, 1), 4: (0, 1), 3: (1, 1), 5: (1, 1)})
        assert land.fully_owned_factions(match.tiles, 0, tiny) == []
        assert land.player_supply(match.tiles, 0, tiny) == 3

    def test_full_faction_adds_its_score(self, make_match, tiny):
        match = make_match({1: (0, 1), 2: (0, 1), 3: (0, 1), 4: (1, 1), 5: (1, 1)})
        assert land.fully_owned_factions(match.tiles, 0, tiny) == [0]
        assert land.player_supply(match.tiles, 0, tiny) == 4
        assert land.fully_owned_factions(match.tiles, 1, tiny) == [1]
        assert land.player_supply(match.tiles, 1, tiny) == 3

    def test_score(self, make_match, tiny):
        match = make_match({1: (0, 1), 2: (0, 1), 3: (0, 1), 4: (1, 1), 5: (1, 1)})
        assert land.score(match.tiles, 0, tiny) == 4
        assert land.score(match.tiles, 1, tiny) == 2


class TestSupply:
    def test_places_troops(self, make_match):
        match = make_match({1: (0, 2), 2: (1, 1)})
        player = match.player(0)
        player.supply = 3
        land.supply(match.tile(1), player, 2)
        assert match.tile(1).army == 4
        assert player.supply == 1

    def test_rejects_foreign_tile(self, make_match):
        match = make_match({1: (0, 2), 2: (1, 1)})
        player = match.player(0)
        player.supply = 3
        with pytest.raises(InvalidOwner):
            land.supply(match.tile(2), player, 1)

    @pytest.mark.parametrize("amount", [0, -1, 4])
    def test_rejects_bad_amounts(self, make_match, amount):
        match = make_match({1: (0, 2)})
        player = match.player(0)
        player.supply = 3
        with pytest.raises(InsufficientSupply):
            land.supply(match.tile(1), player, amount)
        assert match.tile(1).army == 2
        assert player.supply == 3


class TestTransfer:
    def test_direct_neighbour(self, make_match, tiny):
        match = make_match({1: (0, 5), 2: (0, 1)})
        land.transfer(match.tile(1), match.tile(2), 4, match.tiles, tiny)
        assert (match.tile(1).army, match.tile(2).army) == (1, 5)

    def test_through_owned_tiles(self, make_match, tiny):
        match = make_match({1: (0, 5), 3: (0, 1), 4: (0, 1), 5: (0, 1), 2: (1, 1)})
        land.transfer(match.tile(1), match.tile(5), 2, match.tiles, tiny)
        assert match.tile(5).army == 3

    def test_path_blocked_by_enemy(self, make_match, tiny):
        match = make_match({1: (0, 5), 3: (0, 1), 4: (1, 1), 5: (0, 1), 2: (1, 1)})
        with pytest.raises(InvalidAdjacency):
            land.transfer(match.tile(1), match.tile(5), 2, match.tiles, tiny)

    def test_single_hop_rule(self, make_match, tiny):
        rules = RulesConfig(movement=MovementRules(multi_hop=False))
        match = make_match({1: (0, 5), 3: (0, 1), 4: (0, 1), 2: (1, 1), 5: (1, 1)})
        with pytest.raises(InvalidAdjacency):
            land.transfer(match.tile(1), match.tile(4), 2, match.tiles, tiny, rules)

    def test_owners_must_match(self, make_match, tiny):
        match = make_match({1: (0, 5), 2: (1, 1)})
        with pytest.raises(InvalidOwner):
            land.transfer(match.tile(1), match.tile(2), 1, match.tiles, tiny)

    @pytest.mark.parametrize("amount", [0, 5, 6])
    def test_one_troop_stays_behind(self, make_match, tiny, amount):
        match = make_match({1: (0, 5), 2: (0, 1)})
        with pytest.raises(InvalidMove):
            land.transfer(match.tile(1), match.tile(2), amount, match.tiles, tiny)

    def test_same_tile(self, make_match, tiny):
        match = make_match({1: (0, 5)})
        with pytest.raises(InvalidMove):
            land.transfer(match.tile(1), match.tile(1), 1, match.tiles, tiny)


def test_capture_needs_survivors(make_match):
    match = make_match({1: (1, 0)})
    with pytest.raises(InvalidMove):
        land.capture(match.tile(1), 0, 0)
    land.capture(match.tile(1), 0, 2)
    assert (match.tile(1).owner, match.tile(1).army) == (0, 2)
