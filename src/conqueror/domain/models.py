"""Dataclasses describing every Conqueror game entity.

Entities are keyed in the store by game id, players and tiles by
``(game_id, index)``; the writes of one action travel together as a
:class:`ChangeSet`. Within an action the rules layer works on a
:class:`Match`, the in-memory aggregate of one game's entities.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NewType

from .enums import BattleOutcome, EventKind, Phase
from .errors import InvalidPlayer, NotFound
from .maps import MapVariant

# --- Strongly typed identifiers -------------------------------------------------

GameID = NewType("GameID", int)


# --- Persisted entities ---------------------------------------------------------


@dataclass(slots=True)
class Game:
    """One match."""

    id: GameID
    host: str
    name: str
    seed: str
    map_id: str
    round_limit: int
    player_count: int = 0
    nonce: int = 0
    started: bool = False
    over: bool = False
    sets_redeemed: int = 0
    battles: int = 0
    winner: int | None = None
    claimed: bool = False


@dataclass(slots=True)
class Player:
    """One seat of a match."""

    game_id: GameID
    index: int
    identity: str
    name: str
    supply: int = 0
    cards: list[int] = field(default_factory=list)
    eliminated: bool = False
    rank: int = 0


@dataclass(slots=True)
class Tile:
    """Ownership and army state of one map node."""

    game_id: GameID
    index: int
    army: int = 0
    owner: int | None = None
    dispatched: int = 0
    target: int | None = None
    source: int | None = None
    order: int | None = None


@dataclass(slots=True)
class Event:
    """Structured event emitted by an action."""

    game_id: GameID
    nonce: int
    kind: EventKind
    payload: dict[str, object] = field(default_factory=dict)


@dataclass(slots=True)
class ChangeSet:
    """Everything one action writes, applied by the store as a single unit."""

    game_id: GameID
    game: Game | None = None
    players: list[Player] = field(default_factory=list)
    removed_players: list[int] = field(default_factory=list)
    tiles: list[Tile] = field(default_factory=list)
    events: list[Event] = field(default_factory=list)

    def is_empty(self) -> bool:
        return self.game is None and not (
            self.players or self.removed_players or self.tiles or self.events
        )


# --- Combat records -------------------------------------------------------------


@dataclass(slots=True)
class Duel:
    """Dice and losses of one exchange inside a battle."""

    index: int
    attacker_dice: list[int]
    defender_dice: list[int]
    attacker_losses: int = 0
    defender_losses: int = 0

    @property
    def pairs(self) -> int:
        return self.attacker_losses + self.defender_losses


@dataclass(slots=True)
class Battle:
    """Auditable record of a resolved attack."""

    game_id: GameID
    battle_id: int
    attacker: int
    defender: int
    attacker_tile: int
    defender_tile: int
    dispatched: int
    defender_army: int
    duels: list[Duel] = field(default_factory=list)
    outcome: BattleOutcome = BattleOutcome.DEFENDER_WINS
    survivors: int = 0
    card: int | None = None

    @property
    def attacker_losses(self) -> int:
        return sum(duel.attacker_losses for duel in self.duels)

    @property
    def defender_losses(self) -> int:
        return sum(duel.defender_losses for duel in self.duels)


# --- Views and aggregates -------------------------------------------------------


@dataclass(slots=True)
class Land:
    """Per-action view joining a tile with its map data."""

    tile: Tile
    neighbors: frozenset[int]
    faction: int

    @property
    def index(self) -> int:
        return self.tile.index

    @property
    def owner(self) -> int | None:
        return self.tile.owner

    @property
    def army(self) -> int:
        return self.tile.army


@dataclass(slots=True)
class Match:
    """Aggregate of one game's entities loaded for a single action."""

    game: Game
    variant: MapVariant
    players: list[Player] = field(default_factory=list)
    tiles: dict[int, Tile] = field(default_factory=dict)
    events: list[Event] = field(default_factory=list)

    @property
    def phase(self) -> Phase:
        return Phase.from_int(self.game.nonce)

    @property
    def current_index(self) -> int:
        return (self.game.nonce // 3) % max(1, self.game.player_count)

    def current_player(self) -> Player:
        return self.players[self.current_index]

    def player(self, index: int) -> Player:
        if not 0 <= index < len(self.players):
            raise NotFound(f"player {index} not found")
        return self.players[index]

    def player_for(self, identity: str) -> Player:
        """Return the seat controlled by ``identity``."""

        for player in self.players:
            if player.identity == identity:
                return player
        raise InvalidPlayer("caller is not seated in this game")

    def tile(self, index: int) -> Tile:
        tile = self.tiles.get(index)
        if tile is None:
            raise NotFound(f"tile {index} not found")
        return tile

    def owned_by(self, player_index: int) -> list[Tile]:
        return [tile for tile in self.tiles.values() if tile.owner == player_index]

    def alive(self) -> list[Player]:
        return [player for player in self.players if not player.eliminated]

    def emit(self, kind: EventKind, **payload: object) -> Event:
        event = Event(game_id=self.game.id, nonce=self.game.nonce, kind=kind, payload=payload)
        self.events.append(event)
        return event
