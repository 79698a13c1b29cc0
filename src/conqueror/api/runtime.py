"""Runtime primitives backing the Conqueror HTTP API."""

from __future__ import annotations

import logging
from dataclasses import asdict

from conqueror.config import Settings, get_settings
from conqueror.domain import deck, land
from conqueror.domain.maps import MapVariant
from conqueror.domain.models import Event, Match, Player, Tile
from conqueror.domain.rules_config import DEFAULT_RULES, RulesConfig
from conqueror.factory import create_game_service
from conqueror.identity import RequestIdentity
from conqueror.interfaces import IGameStore
from conqueror.repository import SqlGameStore

logger = logging.getLogger(__name__)


class ApiState:
    """Aggregated services shared by the FastAPI layer."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        rules: RulesConfig = DEFAULT_RULES,
        store: IGameStore | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.rules = rules
        self.identity = RequestIdentity()
        self.games = create_game_service(
            self.identity, settings=self.settings, store=store, rules=rules
        )

    async def shutdown(self) -> None:
        store = self.games.store
        if isinstance(store, SqlGameStore):
            store.engine.dispose()
            logger.info("database engine disposed")


def build_state() -> ApiState:
    """Factory used by the API to initialize state."""

    return ApiState()


# --- JSON views -------------------------------------------------------------------


def to_player_dict(match: Match, player: Player) -> dict[str, object]:
    return {
        "index": player.index,
        "name": player.name,
        "identity": player.identity,
        "supply": player.supply,
        "cards": list(player.cards),
        "eliminated": player.eliminated,
        "rank": player.rank,
        "territories": len(match.owned_by(player.index)),
    }


def to_tile_dict(match: Match, tile: Tile) -> dict[str, object]:
    return {
        "index": tile.index,
        "owner": tile.owner,
        "army": tile.army,
        "faction": match.variant.faction(tile.index),
        "dispatched": tile.dispatched,
        "target": tile.target,
        "source": tile.source,
    }


def to_game_dict(match: Match, rules: RulesConfig = DEFAULT_RULES) -> dict[str, object]:
    """Return a JSON-friendly representation of one match."""

    game = match.game
    running = game.started and not game.over
    players = match.players
    return {
        "id": int(game.id),
        "name": game.name,
        "host": game.host,
        "map_id": game.map_id,
        "round_limit": game.round_limit,
        "nonce": game.nonce,
        "started": game.started,
        "over": game.over,
        "winner": game.winner,
        "claimed": game.claimed,
        "sets_redeemed": game.sets_redeemed,
        "next_set_bonus": deck.set_bonus(game.sets_redeemed, rules),
        "phase": str(match.phase) if running else None,
        "current_player": match.current_index if running else None,
        "players": [to_player_dict(match, player) for player in players],
        "tiles": [to_tile_dict(match, match.tiles[index]) for index in sorted(match.tiles)],
        "scores": {
            str(player.index): land.score(match.tiles, player.index, match.variant)
            for player in players
        }
        if game.started
        else {},
    }


def to_event_dict(event: Event) -> dict[str, object]:
    data = asdict(event)
    data["game_id"] = int(event.game_id)
    data["kind"] = str(event.kind)
    return data


def to_variant_dict(variant: MapVariant) -> dict[str, object]:
    return {
        "id": variant.id,
        "name": variant.name,
        "tile_count": variant.tile_count,
        "army_number": variant.army_number,
        "factions": [list(members) for members in variant.factions],
        "edges": [
            [tile, neighbor]
            for tile, targets in sorted(variant.edges.items())
            for neighbor in sorted(targets)
        ],
    }
