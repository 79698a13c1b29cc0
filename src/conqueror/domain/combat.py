"""Attack dispatch and dice-based battle resolution.

An attack is two steps: :func:`dispatch` commits troops from the attacking
tile and links both tiles, :func:`resolve` fights the whole battle in one
call. Dice come from :func:`conqueror.utils.rng.roll_die`, so a battle is
fully determined by the game seed and its battle id.
"""

from __future__ import annotations

from conqueror.domain import land
from conqueror.domain.enums import BattleOutcome
from conqueror.domain.errors import (
    InvalidAdjacency,
    InvalidAttacker,
    InvalidDefender,
    InvalidDispatch,
)
from conqueror.domain.models import Battle, Duel, Land, Tile
from conqueror.domain.rules_config import DEFAULT_RULES, RulesConfig
from conqueror.utils.rng import roll_die


def validate_attack(attacker: Land, defender: Land, player_index: int, dispatched: int) -> None:
    if attacker.owner != player_index:
        raise InvalidAttacker(f"tile {attacker.index} is not owned by player {player_index}")
    if defender.owner is None or defender.owner == player_index:
        raise InvalidDefender(f"tile {defender.index} is not held by an opponent")
    if defender.index not in attacker.neighbors:
        raise InvalidAdjacency(f"tiles {attacker.index} and {defender.index} are not neighbours")
    if attacker.tile.dispatched or attacker.tile.target is not None:
        raise InvalidDispatch(f"tile {attacker.index} already has an attack pending")
    if defender.tile.source is not None:
        raise InvalidDispatch(f"tile {defender.index} is already under attack")
    if dispatched < 1 or dispatched >= attacker.army:
        raise InvalidDispatch(
            f"dispatched must be between 1 and {attacker.army - 1}, got {dispatched}"
        )


def dispatch(
    attacker: Land, defender: Land, player_index: int, dispatched: int, order: int
) -> None:
    """Validate and commit ``dispatched`` troops against ``defender``."""

    validate_attack(attacker, defender, player_index, dispatched)
    attacker.tile.army -= dispatched
    attacker.tile.dispatched = dispatched
    attacker.tile.target = defender.index
    attacker.tile.order = order
    defender.tile.source = attacker.index
    defender.tile.order = order


def roll_duel(
    game_seed: str,
    battle_id: int,
    duel_index: int,
    attacker_troops: int,
    defender_troops: int,
    rules: RulesConfig = DEFAULT_RULES,
) -> tuple[list[int], list[int]]:
    """Dice of both sides for one duel, each sorted highest first."""

    combat = rules.combat
    attacker_dice = [
        roll_die(game_seed, battle_id, duel_index, "attacker", die, combat.die_sides)
        for die in range(min(attacker_troops, combat.attacker_dice))
    ]
    defender_dice = [
        roll_die(game_seed, battle_id, duel_index, "defender", die, combat.die_sides)
        for die in range(min(defender_troops, combat.defender_dice))
    ]
    return sorted(attacker_dice, reverse=True), sorted(defender_dice, reverse=True)


def compare_dice(
    attacker_dice: list[int],
    defender_dice: list[int],
    attacker_troops: int,
    defender_troops: int,
) -> tuple[int, int]:
    """Pairwise comparison; ties go to the defender.

    Returns ``(attacker_losses, defender_losses)``. Comparison stops as soon
    as either side has no troops left.
    """

    attacker_losses = 0
    defender_losses = 0
    for attack, defend in zip(attacker_dice, defender_dice):
        if attacker_troops - attacker_losses <= 0 or defender_troops - defender_losses <= 0:
            break
        if attack > defend:
            defender_losses += 1
        else:
            attacker_losses += 1
    return attacker_losses, defender_losses


def fight(
    battle: Battle,
    game_seed: str,
    rules: RulesConfig = DEFAULT_RULES,
) -> tuple[int, int]:
    """Run duels until a side is exhausted or the duel cap is reached.

    Fills ``battle.duels`` and returns the surviving ``(attackers, defenders)``.
    """

    attackers = battle.dispatched
    defenders = battle.defender_army
    max_duels = rules.combat.max_duels
    duel_index = 0
    while attackers > 0 and defenders > 0:
        if max_duels is not None and duel_index >= max_duels:
            break
        attacker_dice, defender_dice = roll_duel(
            game_seed, battle.battle_id, duel_index, attackers, defenders, rules
        )
        attacker_losses, defender_losses = compare_dice(
            attacker_dice, defender_dice, attackers, defenders
        )
        attackers -= attacker_losses
        defenders -= defender_losses
        battle.duels.append(
            Duel(
                index=duel_index,
                attacker_dice=attacker_dice,
                defender_dice=defender_dice,
                attacker_losses=attacker_losses,
                defender_losses=defender_losses,
            )
        )
        duel_index += 1
    return attackers, defenders


def resolve(
    attacker: Land,
    defender: Land,
    game_seed: str,
    rules: RulesConfig = DEFAULT_RULES,
) -> Battle:
    """Resolve the attack pending from ``attacker`` onto ``defender``.

    On capture the survivors occupy the defender's tile; otherwise they
    return to the attacker's tile. Both tiles are unlinked afterwards.
    """

    if attacker.tile.target != defender.index or defender.tile.source != attacker.index:
        raise InvalidDispatch(f"no attack pending from {attacker.index} to {defender.index}")

    battle = Battle(
        game_id=attacker.tile.game_id,
        battle_id=attacker.tile.order or 0,
        attacker=attacker.owner if attacker.owner is not None else -1,
        defender=defender.owner if defender.owner is not None else -1,
        attacker_tile=attacker.index,
        defender_tile=defender.index,
        dispatched=attacker.tile.dispatched,
        defender_army=defender.army,
    )
    attackers, defenders = fight(battle, game_seed, rules)
    battle.survivors = attackers

    if defenders == 0:
        battle.outcome = BattleOutcome.ATTACKER_WINS
        land.capture(defender.tile, battle.attacker, attackers)
    else:
        battle.outcome = BattleOutcome.DEFENDER_WINS
        defender.tile.army = defenders
        attacker.tile.army += attackers

    _unlink(attacker.tile, defender.tile)
    return battle


def recall(attacker: Tile, defender: Tile | None) -> None:
    """Cancel a pending attack; dispatched troops go back home."""

    attacker.army += attacker.dispatched
    _unlink(attacker, defender)


def _unlink(attacker: Tile, defender: Tile | None) -> None:
    attacker.dispatched = 0
    attacker.target = None
    attacker.order = None
    if defender is not None:
        defender.source = None
        defender.order = None
