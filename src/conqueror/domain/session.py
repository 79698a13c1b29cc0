"""Match lifecycle: lobby, opening deal, turn hand-over and termination."""

from __future__ import annotations

from conqueror.domain import combat, land, turn
from conqueror.domain.enums import EventKind
from conqueror.domain.errors import (
    GameAlreadyStarted,
    InvalidMove,
    InvalidPhase,
    InvalidPlayer,
)
from conqueror.domain.maps import MapVariant
from conqueror.domain.models import Game, GameID, Match, Player, Tile
from conqueror.domain.rules_config import DEFAULT_RULES, RulesConfig
from conqueror.utils.rng import generate_seed, shuffled

# --- Lobby ----------------------------------------------------------------------


def create(
    game_id: GameID,
    variant: MapVariant,
    *,
    host: str,
    name: str,
    player_name: str,
    seed: str,
    round_limit: int,
) -> Match:
    """Open a lobby with the host seated at index 0."""

    if round_limit < 1:
        raise InvalidMove(f"round_limit must be at least 1, got {round_limit}")
    game = Game(
        id=game_id,
        host=host,
        name=name,
        seed=seed,
        map_id=variant.id,
        round_limit=round_limit,
    )
    match = Match(game=game, variant=variant)
    match.emit(EventKind.GAME_CREATED, host=host, map_id=variant.id, round_limit=round_limit)
    _seat(match, host, player_name)
    return match


def join(match: Match, identity: str, name: str, rules: RulesConfig = DEFAULT_RULES) -> Player:
    _require_lobby(match)
    if any(player.identity == identity for player in match.players):
        raise InvalidPlayer("caller is already seated")
    if len(match.players) >= rules.session.max_players:
        raise InvalidPlayer(f"game {match.game.id} is full")
    return _seat(match, identity, name)


def leave(match: Match, identity: str) -> None:
    _require_lobby(match)
    player = match.player_for(identity)
    if identity == match.game.host:
        raise InvalidPlayer("the host cannot leave; delete the game instead")
    _unseat(match, player.index)
    match.emit(EventKind.PLAYER_LEFT, index=player.index, identity=identity)


def kick(match: Match, identity: str, index: int) -> None:
    _require_lobby(match)
    _require_host(match, identity)
    player = match.player(index)
    if player.identity == match.game.host:
        raise InvalidPlayer("the host cannot kick itself")
    _unseat(match, index)
    match.emit(EventKind.PLAYER_KICKED, index=index, identity=player.identity)


def require_deletable(match: Match, identity: str) -> None:
    _require_lobby(match)
    _require_host(match, identity)
    if len(match.players) > 1:
        raise InvalidPlayer("other players are still seated")


def _require_lobby(match: Match) -> None:
    if match.game.started:
        raise GameAlreadyStarted(f"game {match.game.id} has already started")


def _require_host(match: Match, identity: str) -> None:
    if identity != match.game.host:
        raise InvalidPlayer("only the host can do this")


def _seat(match: Match, identity: str, name: str) -> Player:
    player = Player(
        game_id=match.game.id,
        index=len(match.players),
        identity=identity,
        name=name,
    )
    match.players.append(player)
    match.game.player_count = len(match.players)
    match.emit(EventKind.PLAYER_JOINED, index=player.index, identity=identity, name=name)
    return player


def _unseat(match: Match, index: int) -> None:
    match.players.pop(index)
    for position, player in enumerate(match.players):
        player.index = position
    match.game.player_count = len(match.players)


# --- Start ----------------------------------------------------------------------


def start(match: Match, identity: str, rules: RulesConfig = DEFAULT_RULES) -> None:
    """Deal the map and open player 0's Supply phase."""

    _require_lobby(match)
    _require_host(match, identity)
    count = len(match.players)
    bounds = rules.session
    if not bounds.min_players <= count <= bounds.max_players:
        raise InvalidPlayer(
            f"need between {bounds.min_players} and {bounds.max_players} players, have {count}"
        )

    game = match.game
    variant = match.variant
    order = shuffled(generate_seed(game.seed, 0, "deal"), list(variant.tiles))
    match.tiles = {}
    for position, index in enumerate(order):
        match.tiles[index] = Tile(game_id=game.id, index=index, army=1, owner=position % count)
    for extra in range(max(0, variant.army_number - len(order))):
        match.tiles[order[extra % len(order)]].army += 1

    game.started = True
    game.nonce = 0
    match.emit(
        EventKind.GAME_STARTED,
        owners=[match.tiles[index].owner for index in variant.tiles],
        armies=[match.tiles[index].army for index in variant.tiles],
    )
    begin_turn(match, rules)


# --- Turn hand-over -------------------------------------------------------------


def begin_turn(match: Match, rules: RulesConfig = DEFAULT_RULES) -> None:
    """Open the Supply phase of the seat the nonce points at.

    Eliminated seats are skipped; reaching the round limit ends the match.
    """

    game = match.game
    for _ in range(game.player_count):
        if turn.round_of(game.nonce, game.player_count) >= game.round_limit:
            end_by_score(match)
            return
        if not match.current_player().eliminated:
            break
        turn.roll(game)

    player = match.current_player()
    player.supply = land.player_supply(match.tiles, player.index, match.variant, rules)
    match.emit(EventKind.SUPPLY_GRANTED, player=player.index, supply=player.supply)


# --- Elimination and termination ------------------------------------------------


def eliminate(match: Match, player: Player, conqueror: Player | None = None) -> None:
    """Remove ``player`` from play; its hand goes to ``conqueror``.

    A player who already surrendered keeps its hand out of play.
    """

    if player.eliminated:
        return

    player.rank = len(match.alive())
    player.eliminated = True
    player.supply = 0
    for tile in match.owned_by(player.index):
        if tile.target is not None:
            combat.recall(tile, match.tiles.get(tile.target))
    cards = list(player.cards)
    if conqueror is not None:
        conqueror.cards.extend(cards)
        player.cards = []
    match.emit(
        EventKind.PLAYER_ELIMINATED,
        player=player.index,
        rank=player.rank,
        conqueror=conqueror.index if conqueror is not None else None,
        cards=cards,
    )


def check_survivors(match: Match) -> bool:
    """End the match when at most one player remains."""

    alive = match.alive()
    if len(alive) > 1:
        return False
    game = match.game
    game.over = True
    if alive:
        alive[0].rank = 1
        game.winner = alive[0].index
    match.emit(EventKind.GAME_OVER, winner=game.winner, reason="last_player_standing")
    return True


def end_by_score(match: Match) -> None:
    """Round limit reached: rank the survivors by score; a shared top is a draw."""

    game = match.game
    scores = {
        player.index: land.score(match.tiles, player.index, match.variant)
        for player in match.alive()
    }
    for player in match.alive():
        player.rank = 1 + sum(1 for value in scores.values() if value > scores[player.index])
    best = max(scores.values(), default=0)
    leaders = [index for index, value in scores.items() if value == best]
    game.over = True
    game.winner = leaders[0] if len(leaders) == 1 else None
    match.emit(
        EventKind.GAME_OVER,
        winner=game.winner,
        reason="round_limit",
        scores=[{"player": index, "score": value} for index, value in scores.items()],
    )


def surrender(match: Match, identity: str, rules: RulesConfig = DEFAULT_RULES) -> None:
    turn.require_running(match.game)
    player = match.player_for(identity)
    if player.eliminated:
        raise InvalidPlayer("player is already out of the game")

    on_turn = match.current_index == player.index
    match.emit(EventKind.SURRENDERED, player=player.index)
    eliminate(match, player)
    if check_survivors(match):
        return
    if on_turn:
        turn.next_turn(match.game)
        begin_turn(match, rules)


def claim(match: Match, identity: str) -> None:
    """The winner acknowledges a finished match."""

    game = match.game
    if not game.over:
        raise InvalidPhase(f"game {game.id} is still running")
    player = match.player_for(identity)
    if game.winner != player.index:
        raise InvalidPlayer("only the winner can claim")
    if game.claimed:
        raise InvalidPlayer("already claimed")
    game.claimed = True
    match.emit(EventKind.CLAIMED, player=player.index)
