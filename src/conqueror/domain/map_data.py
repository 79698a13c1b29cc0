"""Authored map tables.

Edges are listed once per pair (lower index first); lookups check them in
both directions. Tiles are numbered from 1 so that territory card ids match
tile indices.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class VariantData:
    id: str
    name: str
    tile_count: int
    army_number: int
    edges: dict[int, tuple[int, ...]]
    factions: tuple[tuple[int, ...], ...]


TINY = VariantData(
    id="tiny",
    name="Skirmish",
    tile_count=5,
    army_number=5,
    edges={
        1: (2, 3),
        2: (3,),
        3: (4,),
        4: (5,),
    },
    factions=(
        (1, 2, 3),
        (4, 5),
    ),
)


# 1-9 North America, 10-13 South America, 14-20 Europe, 21-26 Africa,
# 27-38 Asia, 39-42 Oceania.
CLASSIC = VariantData(
    id="classic",
    name="World",
    tile_count=42,
    army_number=84,
    edges={
        1: (2, 4, 30),
        2: (3, 4, 5),
        3: (5, 6, 14),
        4: (5, 7),
        5: (6, 7, 8),
        6: (8,),
        7: (8, 9),
        8: (9,),
        9: (10,),
        10: (11, 12),
        11: (12, 13),
        12: (13, 21),
        14: (15, 16),
        15: (16, 17, 18),
        16: (17, 19),
        17: (18, 19, 20),
        18: (20, 27, 34, 36),
        19: (20, 21),
        20: (21, 22, 36),
        21: (22, 23, 24),
        22: (23, 36),
        23: (24, 25, 26, 36),
        24: (25,),
        25: (26,),
        27: (28, 34, 35),
        28: (29, 31, 32, 35),
        29: (30, 31),
        30: (31, 32, 33),
        31: (32,),
        32: (33, 35),
        34: (35, 36, 37),
        35: (37, 38),
        36: (37,),
        37: (38,),
        38: (39,),
        39: (40, 41),
        40: (41, 42),
        41: (42,),
    },
    factions=(
        (1, 2, 3, 4, 5, 6, 7, 8, 9),
        (10, 11, 12, 13),
        (14, 15, 16, 17, 18, 19, 20),
        (21, 22, 23, 24, 25, 26),
        (27, 28, 29, 30, 31, 32, 33, 34, 35, 36, 37, 38),
        (39, 40, 41, 42),
    ),
)
