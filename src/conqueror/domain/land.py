"""Territory and army ledger.

These are the only functions that change ``army`` and ``owner`` on a tile
outside of combat resolution.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Mapping

from conqueror.domain.errors import (
    InsufficientSupply,
    InvalidAdjacency,
    InvalidMove,
    InvalidOwner,
)
from conqueror.domain.maps import MapVariant
from conqueror.domain.models import Land, Player, Tile
from conqueror.domain.rules_config import DEFAULT_RULES, RulesConfig


def build_lands(tiles: Iterable[Tile], variant: MapVariant) -> dict[int, Land]:
    return {
        tile.index: Land(
            tile=tile,
            neighbors=variant.neighbors(tile.index),
            faction=variant.faction(tile.index),
        )
        for tile in tiles
    }


def fully_owned_factions(
    tiles: Mapping[int, Tile], player_index: int, variant: MapVariant
) -> list[int]:
    owned = {index for index, tile in tiles.items() if tile.owner == player_index}
    return [
        faction_id
        for faction_id, members in enumerate(variant.factions)
        if owned.issuperset(members)
    ]


def base_supply(
    territory_count: int,
    faction_bonus: int = 0,
    rules: RulesConfig = DEFAULT_RULES,
) -> int:
    """Reinforcements for holding ``territory_count`` tiles."""

    return max(rules.supply.minimum, territory_count // rules.supply.territory_divisor) + (
        faction_bonus
    )


def player_supply(
    tiles: Mapping[int, Tile],
    player_index: int,
    variant: MapVariant,
    rules: RulesConfig = DEFAULT_RULES,
) -> int:
    territory_count = sum(1 for tile in tiles.values() if tile.owner == player_index)
    bonus = sum(
        variant.faction_score(faction_id)
        for faction_id in fully_owned_factions(tiles, player_index, variant)
    )
    return base_supply(territory_count, bonus, rules)


def score(tiles: Mapping[int, Tile], player_index: int, variant: MapVariant) -> int:
    """End-of-match score: territories held plus full-faction bonuses."""

    territory_count = sum(1 for tile in tiles.values() if tile.owner == player_index)
    return territory_count + sum(
        variant.faction_score(faction_id)
        for faction_id in fully_owned_factions(tiles, player_index, variant)
    )


def supply(tile: Tile, player: Player, amount: int) -> None:
    """Place ``amount`` pending reinforcements on ``tile``."""

    if tile.owner != player.index:
        raise InvalidOwner(f"tile {tile.index} is not owned by player {player.index}")
    if amount <= 0 or amount > player.supply:
        raise InsufficientSupply(f"cannot supply {amount} with {player.supply} available")
    tile.army += amount
    player.supply -= amount


def connected(
    source: Tile,
    target: Tile,
    tiles: Mapping[int, Tile],
    variant: MapVariant,
    *,
    multi_hop: bool = True,
) -> bool:
    """Whether ``target`` is reachable from ``source`` through the owner's tiles."""

    if variant.are_neighbors(source.index, target.index):
        return True
    if not multi_hop:
        return False

    owner = source.owner
    seen = {source.index}
    queue = deque([source.index])
    while queue:
        current = queue.popleft()
        for neighbor in variant.neighbors(current):
            if neighbor in seen:
                continue
            tile = tiles.get(neighbor)
            if tile is None or tile.owner != owner:
                continue
            if neighbor == target.index:
                return True
            seen.add(neighbor)
            queue.append(neighbor)
    return False


def transfer(
    source: Tile,
    target: Tile,
    amount: int,
    tiles: Mapping[int, Tile],
    variant: MapVariant,
    rules: RulesConfig = DEFAULT_RULES,
) -> None:
    """Fortify ``target`` with ``amount`` troops from ``source``."""

    if source.owner is None or source.owner != target.owner:
        raise InvalidOwner("both tiles must belong to the same player")
    if source.index == target.index:
        raise InvalidMove("source and target are the same tile")
    if amount <= 0 or amount >= source.army:
        raise InvalidMove(f"cannot move {amount} of {source.army} troops")
    if not connected(source, target, tiles, variant, multi_hop=rules.movement.multi_hop):
        raise InvalidAdjacency(f"tiles {source.index} and {target.index} are not connected")
    source.army -= amount
    target.army += amount


def capture(tile: Tile, new_owner: int, army: int) -> None:
    """Hand a tile emptied by combat to the conqueror."""

    if army < 1:
        raise InvalidMove("a captured tile needs at least one troop")
    tile.owner = new_owner
    tile.army = army
