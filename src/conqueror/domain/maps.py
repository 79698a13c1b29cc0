"""Static map graphs.

A variant is built once into immutable lookup tables (tile -> neighbours,
tile -> faction) and shared read-only by every match that uses it.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from .errors import NotFound
from .map_data import CLASSIC, TINY, VariantData


@dataclass(frozen=True, slots=True)
class MapVariant:
    """Adjacency graph and faction partition of one map."""

    id: str
    name: str
    army_number: int
    edges: Mapping[int, frozenset[int]]
    adjacency: Mapping[int, frozenset[int]]
    factions: tuple[tuple[int, ...], ...]
    tile_factions: Mapping[int, int]

    def __deepcopy__(self, memo: dict[int, object]) -> MapVariant:
        # Shared read-only between matches.
        return self

    @property
    def tile_count(self) -> int:
        return len(self.adjacency)

    @property
    def tiles(self) -> range:
        return range(1, self.tile_count + 1)

    def _check(self, tile_index: int) -> None:
        if tile_index not in self.adjacency:
            raise NotFound(f"tile {tile_index} is not on map '{self.id}'")

    def neighbors(self, tile_index: int) -> frozenset[int]:
        self._check(tile_index)
        return self.adjacency[tile_index]

    def are_neighbors(self, first: int, second: int) -> bool:
        """Check the authored edges in both directions."""

        self._check(first)
        self._check(second)
        return second in self.edges[first] or first in self.edges[second]

    def faction(self, tile_index: int) -> int:
        self._check(tile_index)
        return self.tile_factions[tile_index]

    def faction_members(self, faction_id: int) -> tuple[int, ...]:
        if not 0 <= faction_id < len(self.factions):
            raise NotFound(f"faction {faction_id} is not on map '{self.id}'")
        return self.factions[faction_id]

    def faction_score(self, faction_id: int) -> int:
        return (len(self.faction_members(faction_id)) - 1) // 2


def build_variant(data: VariantData) -> MapVariant:
    """Freeze authored map data into lookup tables."""

    edges: dict[int, set[int]] = {index: set() for index in range(1, data.tile_count + 1)}
    adjacency: dict[int, set[int]] = {index: set() for index in edges}
    for source, targets in data.edges.items():
        for target in targets:
            edges[source].add(target)
            adjacency[source].add(target)
            adjacency[target].add(source)

    tile_factions: dict[int, int] = {}
    for faction_id, members in enumerate(data.factions):
        for member in members:
            tile_factions[member] = faction_id

    missing = set(edges) - set(tile_factions)
    if missing:
        raise ValueError(f"tiles {sorted(missing)} of '{data.id}' belong to no faction")

    return MapVariant(
        id=data.id,
        name=data.name,
        army_number=data.army_number,
        edges=MappingProxyType({k: frozenset(v) for k, v in edges.items()}),
        adjacency=MappingProxyType({k: frozenset(v) for k, v in adjacency.items()}),
        factions=tuple(tuple(members) for members in data.factions),
        tile_factions=MappingProxyType(tile_factions),
    )


def _build_all(datas: Iterable[VariantData]) -> Mapping[str, MapVariant]:
    return MappingProxyType({data.id: build_variant(data) for data in datas})


VARIANTS: Mapping[str, MapVariant] = _build_all((TINY, CLASSIC))


def get_variant(map_id: str) -> MapVariant:
    variant = VARIANTS.get(map_id)
    if variant is None:
        raise NotFound(f"map '{map_id}' not found")
    return variant


def list_variants() -> list[MapVariant]:
    return list(VARIANTS.values())
