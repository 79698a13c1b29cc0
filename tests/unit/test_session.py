"""Tests for the match lifecycle: lobby, deal, hand-over and termination."""

from __future__ import annotations

import pytest

from conqueror.domain import land, session
from conqueror.domain.enums import EventKind, Phase
from conqueror.domain.errors import (
    GameAlreadyStarted,
    GameOver,
    InvalidMove,
    InvalidPhase,
    InvalidPlayer,
    NotFound,
)
from conqueror.domain.maps import get_variant
from conqueror.domain.models import GameID


def _lobby(*guests: str, map_id: str = "tiny", seed: str = "lobby-seed", round_limit: int = 100):
    match = session.create(
        GameID(1),
        get_variant(map_id),
        host="host",
        name="Lobby",
        player_name="Host",
        seed=seed,
        round_limit=round_limit,
    )
    for guest in guests:
        session.join(match, guest, guest.title())
    return match


class TestLobby:
    def test_create_seats_the_host(self):
        match = _lobby()
        assert [player.identity for player in match.players] == ["host"]
        assert match.game.player_count == 1
        assert [event.kind for event in match.events] == [
            EventKind.GAME_CREATED,
            EventKind.PLAYER_JOINED,
        ]

    def test_round_limit_must_be_positive(self):
        with pytest.raises(InvalidMove):
            _lobby(round_limit=0)

    def test_join_twice(self):
        match = _lobby("ann")
        with pytest.raises(InvalidPlayer):
            session.join(match, "ann", "Ann")

    def test_table_is_full(self):
        match = _lobby("a", "b", "c", "d", "e")
        with pytest.raises(InvalidPlayer, match="full"):
            session.join(match, "f", "F")

    def test_leave_shifts_seats(self):
        match = _lobby("ann", "bob")
        session.leave(match, "ann")
        assert [(player.index, player.identity) for player in match.players] == [
            (0, "host"),
            (1, "bob"),
        ]
        assert match.game.player_count == 2

    def test_host_cannot_leave(self):
        match = _lobby("ann")
        with pytest.raises(InvalidPlayer):
            session.leave(match, "host")

    def test_stranger_cannot_leave(self):
        match = _lobby("ann")
        with pytest.raises(InvalidPlayer):
            session.leave(match, "zed")

    def test_kick_is_host_only(self):
        match = _lobby("ann", "bob")
        with pytest.raises(InvalidPlayer):
            session.kick(match, "ann", 2)
        session.kick(match, "host", 1)
        assert [player.identity for player in match.players] == ["host", "bob"]

    def test_kick_unknown_seat(self):
        match = _lobby("ann")
        with pytest.raises(NotFound):
            session.kick(match, "host", 5)

    def test_delete_requires_an_empty_table(self):
        match = _lobby("ann")
        with pytest.raises(InvalidPlayer):
            session.require_deletable(match, "host")
        session.leave(match, "ann")
        with pytest.raises(InvalidPlayer):
            session.require_deletable(match, "ann")
        session.require_deletable(match, "host")


class TestStart:
    def test_two_players_on_five_tiles(self):
        match = _lobby("ann")
        session.start(match, "host")

        variant = match.variant
        assert sorted(match.tiles) == [1, 2, 3, 4, 5]
        assert sum(tile.army for tile in match.tiles.values()) == variant.army_number == 5
        assert all(tile.army == 1 for tile in match.tiles.values())
        assert len(match.owned_by(0)) == 3
        assert len(match.owned_by(1)) == 2

        assert match.game.started
        assert match.game.nonce == 0
        assert match.phase == Phase.SUPPLY
        host = match.player(0)
        bonus = sum(
            variant.faction_score(faction)
            for faction in land.fully_owned_factions(match.tiles, 0, variant)
        )
        assert land.base_supply(3) == 3
        assert host.supply == 3 + bonus
        assert match.player(1).supply == 0

    def test_deal_is_deterministic(self):
        first = _lobby("ann", map_id="classic")
        second = _lobby("ann", map_id="classic")
        session.start(first, "host")
        session.start(second, "host")
        assert first.tiles == second.tiles

    def test_classic_deal_spreads_all_armies(self):
        match = _lobby("ann", "bob", map_id="classic")
        session.start(match, "host")
        assert sum(tile.army for tile in match.tiles.values()) == 84
        assert [len(match.owned_by(index)) for index in range(3)] == [14, 14, 14]

    def test_only_host_starts(self):
        match = _lobby("ann")
        with pytest.raises(InvalidPlayer):
            session.start(match, "ann")

    def test_needs_two_players(self):
        match = _lobby()
        with pytest.raises(InvalidPlayer):
            session.start(match, "host")
        assert not match.game.started

    def test_lobby_closes_after_start(self):
        match = _lobby("ann")
        session.start(match, "host")
        with pytest.raises(GameAlreadyStarted):
            session.join(match, "bob", "Bob")
        with pytest.raises(InvalidPhase):
            session.start(match, "host")


class TestTermination:
    def test_elimination_ends_two_player_match(self, make_match):
        match = make_match({1: (0, 3), 2: (0, 3)})
        loser = match.player(1)
        loser.cards = [4, 5]
        session.eliminate(match, loser, match.player(0))
        assert loser.eliminated
        assert loser.rank == 2
        assert match.player(0).cards == [4, 5]
        assert session.check_survivors(match)
        assert match.game.over
        assert match.game.winner == 0
        assert match.player(0).rank == 1

    def test_three_players_continue_after_one_falls(self, make_match):
        match = make_match({1: (0, 3), 2: (1, 3)}, players=3)
        session.eliminate(match, match.player(2))
        assert match.player(2).rank == 3
        assert not session.check_survivors(match)
        assert not match.game.over

    def test_end_by_score(self, make_match):
        match = make_match({1: (0, 1), 2: (0, 1), 3: (0, 1), 4: (1, 1), 5: (1, 1)})
        session.end_by_score(match)
        assert match.game.over
        assert match.game.winner == 0
        assert [match.player(0).rank, match.player(1).rank] == [1, 2]
        event = match.events[-1]
        assert event.kind == EventKind.GAME_OVER
        assert event.payload["scores"] == [
            {"player": 0, "score": 4},
            {"player": 1, "score": 2},
        ]

    def test_equal_scores_are_a_draw(self, make_match):
        match = make_match({1: (0, 1), 2: (1, 1), 4: (0, 1), 5: (1, 1)})
        session.end_by_score(match)
        assert match.game.over
        assert match.game.winner is None
        assert [match.player(0).rank, match.player(1).rank] == [1, 1]

    def test_round_limit_ends_the_match(self, make_match):
        match = make_match(
            {1: (0, 1), 2: (0, 1), 3: (0, 1), 4: (1, 1), 5: (1, 1)}, nonce=6, round_limit=1
        )
        session.begin_turn(match)
        assert match.game.over
        assert match.game.winner == 0

    def test_begin_turn_skips_eliminated_seats(self, make_match):
        match = make_match({1: (0, 2), 2: (2, 2)}, players=3, nonce=3)
        match.player(1).eliminated = True
        session.begin_turn(match)
        assert match.game.nonce == 6
        assert match.current_index == 2
        assert match.player(2).supply == 3


class TestSurrenderAndClaim:
    def test_surrender_on_turn_passes_it_on(self, make_match):
        match = make_match({1: (0, 2), 2: (1, 2), 3: (2, 2)}, players=3, nonce=1)
        session.surrender(match, "p0")
        assert match.player(0).eliminated
        assert match.current_index == 1
        assert match.phase == Phase.SUPPLY
        assert match.player(1).supply == 3

    def test_surrender_off_turn_keeps_the_nonce(self, make_match):
        match = make_match({1: (0, 2), 2: (1, 2), 3: (2, 2)}, players=3, nonce=1)
        session.surrender(match, "p2")
        assert match.game.nonce == 1

    def test_surrender_recalls_pending_attacks(self, make_match):
        match = make_match({1: (0, 4), 2: (1, 2), 3: (2, 2)}, players=3, nonce=1)
        match.tile(1).army = 1
        match.tile(1).dispatched = 3
        match.tile(1).target = 2
        match.tile(2).source = 1
        session.surrender(match, "p0")
        assert match.tile(1).army == 4
        assert match.tile(2).source is None

    def test_last_surrender_ends_the_match(self, make_match):
        match = make_match({1: (0, 2), 2: (1, 2)})
        session.surrender(match, "p1")
        assert match.game.over
        assert match.game.winner == 0
        with pytest.raises(GameOver):
            session.surrender(match, "p0")

    def test_claim(self, make_match):
        match = make_match({1: (0, 2), 2: (1, 2)})
        with pytest.raises(InvalidPhase):
            session.claim(match, "p0")
        session.surrender(match, "p1")
        with pytest.raises(InvalidPlayer):
            session.claim(match, "p1")
        session.claim(match, "p0")
        assert match.game.claimed
        with pytest.raises(InvalidPlayer):
            session.claim(match, "p0")
