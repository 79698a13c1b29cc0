"""In-match actions.

Each action validates everything it needs before the first mutation, so a
rejected action leaves the :class:`~conqueror.domain.models.Match` untouched.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict

from conqueror.domain import combat, deck, land, session, turn
from conqueror.domain.enums import Action, BattleOutcome, EventKind, Phase
from conqueror.domain.errors import InvalidOwner, InvalidPlayer, InvalidSet
from conqueror.domain.models import Battle, Match, Player
from conqueror.domain.rules_config import DEFAULT_RULES, RulesConfig
from conqueror.utils.rng import generate_seed


def _prepare(match: Match, identity: str, action: Action, nonce: int | None) -> Player:
    turn.require_running(match.game)
    turn.require_nonce(match.game, nonce)
    player = turn.require_turn(match, identity)
    turn.require_phase(match.game, action)
    return player


def _require_hand_limit(match: Match, player: Player, rules: RulesConfig) -> None:
    if len(player.cards) < rules.cards.max_hand:
        return
    sets = deck.find_sets(player.cards, match.variant.tile_count, rules)
    if sets:
        raise InvalidSet(
            f"holding {len(player.cards)} cards; redeem one of {sets} before continuing"
        )


def supply(
    match: Match,
    identity: str,
    tile_index: int,
    amount: int,
    *,
    nonce: int | None = None,
    rules: RulesConfig = DEFAULT_RULES,
) -> None:
    player = _prepare(match, identity, Action.SUPPLY, nonce)
    _require_hand_limit(match, player, rules)
    tile = match.tile(tile_index)
    land.supply(tile, player, amount)
    match.emit(
        EventKind.SUPPLIED, player=player.index, tile=tile.index, amount=amount, army=tile.army
    )


def discard(
    match: Match,
    identity: str,
    cards: Sequence[int],
    *,
    nonce: int | None = None,
    rules: RulesConfig = DEFAULT_RULES,
) -> int:
    """Redeem a set of three cards; returns the supply gained."""

    player = _prepare(match, identity, Action.DISCARD, nonce)
    game = match.game
    owned = {tile.index for tile in match.owned_by(player.index)}
    hand, bonus = deck.redeem_set(
        player.cards,
        list(cards),
        match.variant.tile_count,
        sets_redeemed=game.sets_redeemed,
        owned_tiles=owned,
        rules=rules,
    )
    player.cards = hand
    player.supply += bonus
    game.sets_redeemed += 1
    match.emit(
        EventKind.SET_REDEEMED,
        player=player.index,
        cards=list(cards),
        bonus=bonus,
        sets_redeemed=game.sets_redeemed,
    )
    return bonus


def attack(
    match: Match,
    identity: str,
    attacker_index: int,
    defender_index: int,
    dispatched: int,
    *,
    nonce: int | None = None,
    rules: RulesConfig = DEFAULT_RULES,
) -> int:
    """Commit troops against a neighbour; returns the battle id."""

    player = _prepare(match, identity, Action.ATTACK, nonce)
    game = match.game
    lands = land.build_lands(
        [match.tile(attacker_index), match.tile(defender_index)], match.variant
    )
    order = game.battles + 1
    combat.dispatch(lands[attacker_index], lands[defender_index], player.index, dispatched, order)
    game.battles = order
    match.emit(
        EventKind.ATTACK_DISPATCHED,
        battle_id=order,
        player=player.index,
        attacker_tile=attacker_index,
        defender_tile=defender_index,
        dispatched=dispatched,
    )
    return order


def defend(
    match: Match,
    identity: str,
    attacker_index: int,
    defender_index: int,
    *,
    nonce: int | None = None,
    rules: RulesConfig = DEFAULT_RULES,
) -> Battle:
    """Resolve the attack pending between two tiles."""

    _prepare(match, identity, Action.DEFEND, nonce)
    return _resolve(match, attacker_index, defender_index, rules)


def _resolve(match: Match, attacker_index: int, defender_index: int, rules: RulesConfig) -> Battle:
    game = match.game
    lands = land.build_lands(
        [match.tile(attacker_index), match.tile(defender_index)], match.variant
    )
    battle = combat.resolve(lands[attacker_index], lands[defender_index], game.seed, rules)
    conqueror = match.player(battle.attacker)
    defender = match.player(battle.defender)

    if battle.outcome == BattleOutcome.ATTACKER_WINS:
        pool = deck.unclaimed_cards(
            match.variant.tile_count, (player.cards for player in match.players), rules
        )
        card = deck.draw_card(pool, generate_seed(game.seed, battle.battle_id, "card"))
        if card is not None:
            conqueror.cards.append(card)
            battle.card = card

    match.emit(EventKind.BATTLE, **asdict(battle))

    if battle.outcome == BattleOutcome.ATTACKER_WINS:
        match.emit(
            EventKind.TILE_CAPTURED,
            tile=defender_index,
            player=conqueror.index,
            previous_owner=defender.index,
            army=battle.survivors,
        )
        if battle.card is not None:
            match.emit(EventKind.CARD_DRAWN, player=conqueror.index, card=battle.card)
        if not match.owned_by(defender.index):
            session.eliminate(match, defender, conqueror)
            session.check_survivors(match)
    return battle


def transfer(
    match: Match,
    identity: str,
    source_index: int,
    target_index: int,
    amount: int,
    *,
    nonce: int | None = None,
    rules: RulesConfig = DEFAULT_RULES,
) -> None:
    player = _prepare(match, identity, Action.TRANSFER, nonce)
    source = match.tile(source_index)
    target = match.tile(target_index)
    if source.owner != player.index:
        raise InvalidOwner(f"tile {source_index} is not owned by player {player.index}")
    land.transfer(source, target, amount, match.tiles, match.variant, rules)
    match.emit(
        EventKind.TRANSFERRED,
        player=player.index,
        source=source_index,
        target=target_index,
        amount=amount,
    )


def finish(
    match: Match,
    identity: str,
    *,
    nonce: int | None = None,
    rules: RulesConfig = DEFAULT_RULES,
) -> None:
    """End the active phase and hand over to the next phase or seat."""

    player = _prepare(match, identity, Action.FINISH, nonce)
    game = match.game
    phase = match.phase
    if phase == Phase.SUPPLY:
        _require_hand_limit(match, player, rules)
    elif phase == Phase.ATTACK:
        pending = [tile for tile in match.owned_by(player.index) if tile.target is not None]
        for tile in sorted(pending, key=lambda item: item.order or 0):
            _resolve(match, tile.index, tile.target, rules)
            if game.over:
                return

    turn.increment(game)
    match.emit(
        EventKind.PHASE_CHANGED,
        player=match.current_index,
        phase=str(match.phase),
        nonce=game.nonce,
    )
    if match.phase == Phase.SUPPLY:
        session.begin_turn(match, rules)


def emote(
    match: Match,
    identity: str,
    emote_id: int,
    *,
    nonce: int | None = None,
) -> None:
    game = match.game
    turn.require_running(game)
    turn.require_nonce(game, nonce)
    player = match.player_for(identity)
    if player.eliminated:
        raise InvalidPlayer("eliminated players cannot emote")
    turn.require_phase(game, Action.EMOTE)
    match.emit(EventKind.EMOTE, player=player.index, emote=emote_id)
