"""Action service for Conqueror.

Loads a match from the store, runs one rule operation against it and writes
back what changed as one :class:`~conqueror.domain.models.ChangeSet`. Actions
on the same game are serialised by a per-game lock, released once a finished
game is settled; a rejected action writes nothing.
"""

from __future__ import annotations

import logging
import secrets
import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from copy import deepcopy

from conqueror.domain import play, session
from conqueror.domain.errors import GameError, NotFound
from conqueror.domain.maps import get_variant
from conqueror.domain.models import Battle, ChangeSet, Event, Game, GameID, Match
from conqueror.domain.rules_config import DEFAULT_RULES, RulesConfig
from conqueror.interfaces import IGameStore, IIdentityProvider

logger = logging.getLogger(__name__)


def _settled(game: Game) -> bool:
    """A finished game that no action can change any more."""

    return game.over and (game.claimed or game.winner is None)


class GameService:
    """One entry point per action, each keyed by a game id."""

    def __init__(
        self,
        store: IGameStore,
        identity: IIdentityProvider,
        *,
        rules: RulesConfig = DEFAULT_RULES,
        default_map: str = "classic",
        default_round_limit: int | None = None,
    ) -> None:
        self.store = store
        self.identity = identity
        self.rules = rules
        self.default_map = default_map
        self.default_round_limit = default_round_limit or rules.session.default_round_limit
        self._locks: dict[GameID, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    # --- Loading and committing -------------------------------------------------

    def _lock_for(self, game_id: GameID) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(game_id, threading.Lock())

    def _forget(self, game_id: GameID) -> None:
        with self._locks_guard:
            self._locks.pop(game_id, None)

    def load_match(self, game_id: GameID) -> Match:
        """Assemble the aggregate of one game, raising ``NotFound`` if absent."""

        game = self.store.load_game(game_id)
        if game is None:
            raise NotFound(f"game {int(game_id)} not found")
        match = Match(game=game, variant=get_variant(game.map_id))
        match.players = self.store.load_players(game_id)
        match.tiles = {tile.index: tile for tile in self.store.load_all_tiles(game_id)}
        return match

    @contextmanager
    def _transaction(self, game_id: GameID, action: str) -> Iterator[Match]:
        with self._lock_for(game_id):
            match = self.load_match(game_id)
            before = deepcopy(match)
            try:
                yield match
            except GameError as exc:
                logger.warning(
                    "game %s: %s rejected (%s): %s", int(game_id), action, exc.code, exc.detail
                )
                if _settled(before.game):
                    self._forget(game_id)
                raise
            self._commit(match, before)

    def _commit(self, match: Match, before: Match | None) -> None:
        game_id = match.game.id
        changes = ChangeSet(game_id=game_id)
        if before is None or match.game != before.game:
            changes.game = match.game

        previous_players = before.players if before is not None else []
        changes.players = [
            player
            for player in match.players
            if player.index >= len(previous_players) or previous_players[player.index] != player
        ]
        changes.removed_players = list(range(len(match.players), len(previous_players)))

        previous_tiles = before.tiles if before is not None else {}
        changes.tiles = [
            tile for index, tile in match.tiles.items() if previous_tiles.get(index) != tile
        ]
        changes.events = list(match.events)

        if changes.is_empty():
            return
        self.store.apply(changes)
        for event in changes.events:
            logger.info(
                "game %s nonce %s: %s %s", int(game_id), event.nonce, event.kind, event.payload
            )
        if _settled(match.game):
            self._forget(game_id)

    def _caller(self) -> str:
        return self.identity.current_caller()

    # --- Queries ------------------------------------------------------------------

    def get(self, game_id: GameID) -> Match:
        return self.load_match(game_id)

    def events(self, game_id: GameID) -> list[Event]:
        if self.store.load_game(game_id) is None:
            raise NotFound(f"game {int(game_id)} not found")
        return self.store.load_events(game_id)

    def list_games(self) -> list[GameID]:
        return self.store.list_games()

    # --- Lobby --------------------------------------------------------------------

    def create(
        self,
        *,
        name: str,
        player_name: str,
        map_id: str | None = None,
        round_limit: int | None = None,
        seed: str | None = None,
    ) -> GameID:
        """Open a lobby hosted by the caller and return its id."""

        variant = get_variant(map_id or self.default_map)
        game_id = self.store.next_game_id()
        match = session.create(
            game_id,
            variant,
            host=self._caller(),
            name=name,
            player_name=player_name,
            seed=seed or secrets.token_hex(16),
            round_limit=self.default_round_limit if round_limit is None else round_limit,
        )
        with self._lock_for(game_id):
            self._commit(match, None)
        return game_id

    def join(self, game_id: GameID, player_name: str) -> int:
        with self._transaction(game_id, "join") as match:
            return session.join(match, self._caller(), player_name, self.rules).index

    def leave(self, game_id: GameID) -> None:
        with self._transaction(game_id, "leave") as match:
            session.leave(match, self._caller())

    def kick(self, game_id: GameID, index: int) -> None:
        with self._transaction(game_id, "kick") as match:
            session.kick(match, self._caller(), index)

    def delete(self, game_id: GameID) -> None:
        with self._lock_for(game_id):
            match = self.load_match(game_id)
            try:
                session.require_deletable(match, self._caller())
            except GameError as exc:
                logger.warning(
                    "game %s: delete rejected (%s): %s", int(game_id), exc.code, exc.detail
                )
                raise
            self.store.delete_game(game_id)
            logger.info("game %s deleted", int(game_id))
        self._forget(game_id)

    def start(self, game_id: GameID) -> None:
        with self._transaction(game_id, "start") as match:
            session.start(match, self._caller(), self.rules)

    def claim(self, game_id: GameID) -> None:
        with self._transaction(game_id, "claim") as match:
            session.claim(match, self._caller())

    def surrender(self, game_id: GameID) -> None:
        with self._transaction(game_id, "surrender") as match:
            session.surrender(match, self._caller(), self.rules)

    # --- In-match actions ---------------------------------------------------------

    def supply(
        self, game_id: GameID, tile: int, amount: int, *, nonce: int | None = None
    ) -> None:
        with self._transaction(game_id, "supply") as match:
            play.supply(match, self._caller(), tile, amount, nonce=nonce, rules=self.rules)

    def discard(
        self, game_id: GameID, cards: Sequence[int], *, nonce: int | None = None
    ) -> int:
        with self._transaction(game_id, "discard") as match:
            return play.discard(match, self._caller(), cards, nonce=nonce, rules=self.rules)

    def attack(
        self,
        game_id: GameID,
        attacker: int,
        defender: int,
        dispatched: int,
        *,
        nonce: int | None = None,
    ) -> int:
        with self._transaction(game_id, "attack") as match:
            return play.attack(
                match, self._caller(), attacker, defender, dispatched, nonce=nonce, rules=self.rules
            )

    def defend(
        self, game_id: GameID, attacker: int, defender: int, *, nonce: int | None = None
    ) -> Battle:
        with self._transaction(game_id, "defend") as match:
            return play.defend(
                match, self._caller(), attacker, defender, nonce=nonce, rules=self.rules
            )

    def transfer(
        self,
        game_id: GameID,
        source: int,
        target: int,
        amount: int,
        *,
        nonce: int | None = None,
    ) -> None:
        with self._transaction(game_id, "transfer") as match:
            play.transfer(
                match, self._caller(), source, target, amount, nonce=nonce, rules=self.rules
            )

    def finish(self, game_id: GameID, *, nonce: int | None = None) -> None:
        with self._transaction(game_id, "finish") as match:
            play.finish(match, self._caller(), nonce=nonce, rules=self.rules)

    def emote(self, game_id: GameID, emote_id: int, *, nonce: int | None = None) -> None:
        with self._transaction(game_id, "emote") as match:
            play.emote(match, self._caller(), emote_id, nonce=nonce)
