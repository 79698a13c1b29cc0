"""Tests for the static map graphs."""

from __future__ import annotations

import pytest

from conqueror.domain.errors import NotFound
from conqueror.domain.map_data import VariantData
from conqueror.domain.maps import build_variant, get_variant, list_variants


@pytest.fixture
def tiny():
    return get_variant("tiny")


def test_variants_are_registered():
    assert {variant.id for variant in list_variants()} == {"tiny", "classic"}


def test_unknown_variant():
    with pytest.raises(NotFound):
        get_variant("atlantis")


def test_tiny_shape(tiny):
    assert tiny.tile_count == 5
    assert list(tiny.tiles) == [1, 2, 3, 4, 5]
    assert tiny.army_number == 5
    assert tiny.faction_members(0) == (1, 2, 3)
    assert tiny.faction_members(1) == (4, 5)


def test_neighbors_are_symmetric(tiny):
    assert tiny.neighbors(1) == frozenset({2, 3})
    assert tiny.neighbors(3) == frozenset({1, 2, 4})
    assert tiny.neighbors(5) == frozenset({4})


def test_are_neighbors_checks_both_directions(tiny):
    assert tiny.are_neighbors(1, 2)
    assert tiny.are_neighbors(2, 1)
    assert not tiny.are_neighbors(1, 5)


@pytest.mark.parametrize("index", [0, 6, -1])
def test_out_of_range_lookups(tiny, index):
    with pytest.raises(NotFound):
        tiny.neighbors(index)
    with pytest.raises(NotFound):
        tiny.faction(index)


def test_faction_lookup(tiny):
    assert tiny.faction(2) == 0
    assert tiny.faction(5) == 1


def test_faction_score(tiny):
    # floor((members - 1) / 2)
    assert tiny.faction_score(0) == 1
    assert tiny.faction_score(1) == 0


def test_unknown_faction(tiny):
    with pytest.raises(NotFound):
        tiny.faction_members(2)


def test_classic_graph_is_connected():
    classic = get_variant("classic")
    assert classic.tile_count == 42
    seen = {1}
    frontier = [1]
    while frontier:
        current = frontier.pop()
        for neighbor in classic.neighbors(current):
            if neighbor not in seen:
                seen.add(neighbor)
                frontier.append(neighbor)
    assert seen == set(classic.tiles)


def test_classic_faction_scores():
    classic = get_variant("classic")
    sizes = [len(classic.faction_members(faction)) for faction in range(len(classic.factions))]
    assert sizes == [9, 4, 7, 6, 12, 4]
    assert [classic.faction_score(faction) for faction in range(6)] == [4, 1, 3, 2, 5, 1]


def test_tile_without_faction_is_rejected():
    data = VariantData(
        id="broken",
        name="Broken",
        tile_count=3,
        army_number=3,
        edges={1: (2,), 2: (3,)},
        factions=((1, 2),),
    )
    with pytest.raises(ValueError, match="belong to no faction"):
        build_variant(data)
