"""HTTP routes for the Conqueror API."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import asdict
from typing import Annotated, TypeVar

from fastapi import APIRouter, Depends, Header, Request, Response, status
from pydantic import BaseModel, Field

from conqueror.api.runtime import (
    ApiState,
    to_event_dict,
    to_game_dict,
    to_variant_dict,
)
from conqueror.domain.maps import list_variants
from conqueror.domain.models import GameID

router = APIRouter()

T = TypeVar("T")


def get_state(request: Request) -> ApiState:
    state = getattr(request.app.state, "api_state", None)
    if state is None:  # pragma: no cover - FastAPI should always initialise state
        raise RuntimeError("API state not initialised")
    return state


def get_caller(x_player: Annotated[str, Header(min_length=1)]) -> str:
    return x_player


ApiStateDep = Annotated[ApiState, Depends(get_state)]
CallerDep = Annotated[str, Depends(get_caller)]


def _act(state: ApiState, caller: str, action: Callable[..., T], *args, **kwargs) -> T:
    with state.identity.acting_as(caller):
        return action(*args, **kwargs)


def _detail(state: ApiState, game_id: int) -> GameDetail:
    match = state.games.get(GameID(game_id))
    return GameDetail.model_validate(to_game_dict(match, state.rules))


# --- Schemas ------------------------------------------------------------------------


class PlayerSummary(BaseModel):
    index: int
    name: str
    identity: str
    supply: int
    cards: list[int]
    eliminated: bool
    rank: int
    territories: int


class TileSummary(BaseModel):
    index: int
    owner: int | None
    army: int
    faction: int
    dispatched: int
    target: int | None
    source: int | None


class GameDetail(BaseModel):
    id: int
    name: str
    host: str
    map_id: str
    round_limit: int
    nonce: int
    started: bool
    over: bool
    winner: int | None
    claimed: bool
    sets_redeemed: int
    next_set_bonus: int
    phase: str | None
    current_player: int | None
    players: list[PlayerSummary]
    tiles: list[TileSummary]
    scores: dict[str, int]


class MapSummary(BaseModel):
    id: str
    name: str
    tile_count: int
    army_number: int
    factions: list[list[int]]
    edges: list[list[int]]


class EventSummary(BaseModel):
    game_id: int
    nonce: int
    kind: str
    payload: dict[str, object]


class DuelSummary(BaseModel):
    index: int
    attacker_dice: list[int]
    defender_dice: list[int]
    attacker_losses: int
    defender_losses: int


class BattleSummary(BaseModel):
    battle_id: int
    attacker: int
    defender: int
    attacker_tile: int
    defender_tile: int
    dispatched: int
    defender_army: int
    duels: list[DuelSummary]
    outcome: str
    survivors: int
    card: int | None


class CreateGameRequest(BaseModel):
    name: str = Field(min_length=1)
    player_name: str = Field(min_length=1)
    map_id: str | None = None
    round_limit: int | None = Field(default=None, ge=1)
    seed: str | None = Field(default=None, min_length=1)


class JoinRequest(BaseModel):
    player_name: str = Field(min_length=1)


class KickRequest(BaseModel):
    index: int = Field(ge=0)


class ActionRequest(BaseModel):
    nonce: int | None = Field(default=None, ge=0)


class SupplyRequest(ActionRequest):
    tile: int
    amount: int


class DiscardRequest(ActionRequest):
    cards: list[int] = Field(min_length=3, max_length=3)


class AttackRequest(ActionRequest):
    attacker: int
    defender: int
    dispatched: int


class DefendRequest(ActionRequest):
    attacker: int
    defender: int


class TransferRequest(ActionRequest):
    source: int
    target: int
    amount: int


class EmoteRequest(ActionRequest):
    emote: int = Field(ge=0)


class AttackResponse(BaseModel):
    battle_id: int
    game: GameDetail


class DiscardResponse(BaseModel):
    bonus: int
    game: GameDetail


class DefendResponse(BaseModel):
    battle: BattleSummary
    game: GameDetail


# --- Queries ------------------------------------------------------------------------


@router.get("/health")
async def health(state: ApiStateDep) -> dict[str, object]:
    return {
        "status": "ok",
        "store_backend": state.settings.store_backend,
        "default_map": state.settings.default_map,
    }


@router.get("/maps", response_model=list[MapSummary])
async def list_maps() -> list[MapSummary]:
    return [MapSummary.model_validate(to_variant_dict(variant)) for variant in list_variants()]


@router.get("/games", response_model=list[int])
async def list_games(state: ApiStateDep) -> list[int]:
    return [int(game_id) for game_id in state.games.list_games()]


@router.get("/games/{game_id}", response_model=GameDetail)
async def get_game(game_id: int, state: ApiStateDep) -> GameDetail:
    return _detail(state, game_id)


@router.get("/games/{game_id}/events", response_model=list[EventSummary])
async def list_events(game_id: int, state: ApiStateDep) -> list[EventSummary]:
    events = state.games.events(GameID(game_id))
    return [EventSummary.model_validate(to_event_dict(event)) for event in events]


# --- Lobby --------------------------------------------------------------------------


@router.post("/games", response_model=GameDetail, status_code=status.HTTP_201_CREATED)
async def create_game(
    request: CreateGameRequest, state: ApiStateDep, caller: CallerDep
) -> GameDetail:
    game_id = _act(
        state,
        caller,
        state.games.create,
        name=request.name,
        player_name=request.player_name,
        map_id=request.map_id,
        round_limit=request.round_limit,
        seed=request.seed,
    )
    return _detail(state, int(game_id))


@router.delete("/games/{game_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_game(game_id: int, state: ApiStateDep, caller: CallerDep) -> Response:
    _act(state, caller, state.games.delete, GameID(game_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/games/{game_id}/join", response_model=GameDetail)
async def join_game(
    game_id: int, request: JoinRequest, state: ApiStateDep, caller: CallerDep
) -> GameDetail:
    _act(state, caller, state.games.join, GameID(game_id), request.player_name)
    return _detail(state, game_id)


@router.post("/games/{game_id}/leave", response_model=GameDetail)
async def leave_game(game_id: int, state: ApiStateDep, caller: CallerDep) -> GameDetail:
    _act(state, caller, state.games.leave, GameID(game_id))
    return _detail(state, game_id)


@router.post("/games/{game_id}/kick", response_model=GameDetail)
async def kick_player(
    game_id: int, request: KickRequest, state: ApiStateDep, caller: CallerDep
) -> GameDetail:
    _act(state, caller, state.games.kick, GameID(game_id), request.index)
    return _detail(state, game_id)


@router.post("/games/{game_id}/start", response_model=GameDetail)
async def start_game(game_id: int, state: ApiStateDep, caller: CallerDep) -> GameDetail:
    _act(state, caller, state.games.start, GameID(game_id))
    return _detail(state, game_id)


@router.post("/games/{game_id}/claim", response_model=GameDetail)
async def claim_game(game_id: int, state: ApiStateDep, caller: CallerDep) -> GameDetail:
    _act(state, caller, state.games.claim, GameID(game_id))
    return _detail(state, game_id)


@router.post("/games/{game_id}/surrender", response_model=GameDetail)
async def surrender(game_id: int, state: ApiStateDep, caller: CallerDep) -> GameDetail:
    _act(state, caller, state.games.surrender, GameID(game_id))
    return _detail(state, game_id)


# --- In-match actions ---------------------------------------------------------------


@router.post("/games/{game_id}/supply", response_model=GameDetail)
async def supply(
    game_id: int, request: SupplyRequest, state: ApiStateDep, caller: CallerDep
) -> GameDetail:
    _act(
        state,
        caller,
        state.games.supply,
        GameID(game_id),
        request.tile,
        request.amount,
        nonce=request.nonce,
    )
    return _detail(state, game_id)


@router.post("/games/{game_id}/discard", response_model=DiscardResponse)
async def discard(
    game_id: int, request: DiscardRequest, state: ApiStateDep, caller: CallerDep
) -> DiscardResponse:
    bonus = _act(
        state, caller, state.games.discard, GameID(game_id), request.cards, nonce=request.nonce
    )
    return DiscardResponse(bonus=bonus, game=_detail(state, game_id))


@router.post("/games/{game_id}/attack", response_model=AttackResponse)
async def attack(
    game_id: int, request: AttackRequest, state: ApiStateDep, caller: CallerDep
) -> AttackResponse:
    battle_id = _act(
        state,
        caller,
        state.games.attack,
        GameID(game_id),
        request.attacker,
        request.defender,
        request.dispatched,
        nonce=request.nonce,
    )
    return AttackResponse(battle_id=battle_id, game=_detail(state, game_id))


@router.post("/games/{game_id}/defend", response_model=DefendResponse)
async def defend(
    game_id: int, request: DefendRequest, state: ApiStateDep, caller: CallerDep
) -> DefendResponse:
    battle = _act(
        state,
        caller,
        state.games.defend,
        GameID(game_id),
        request.attacker,
        request.defender,
        nonce=request.nonce,
    )
    return DefendResponse(
        battle=BattleSummary.model_validate(asdict(battle)), game=_detail(state, game_id)
    )


@router.post("/games/{game_id}/transfer", response_model=GameDetail)
async def transfer(
    game_id: int, request: TransferRequest, state: ApiStateDep, caller: CallerDep
) -> GameDetail:
    _act(
        state,
        caller,
        state.games.transfer,
        GameID(game_id),
        request.source,
        request.target,
        request.amount,
        nonce=request.nonce,
    )
    return _detail(state, game_id)


@router.post("/games/{game_id}/finish", response_model=GameDetail)
async def finish(
    game_id: int, request: ActionRequest, state: ApiStateDep, caller: CallerDep
) -> GameDetail:
    _act(state, caller, state.games.finish, GameID(game_id), nonce=request.nonce)
    return _detail(state, game_id)


@router.post("/games/{game_id}/emote", response_model=GameDetail)
async def emote(
    game_id: int, request: EmoteRequest, state: ApiStateDep, caller: CallerDep
) -> GameDetail:
    _act(state, caller, state.games.emote, GameID(game_id), request.emote, nonce=request.nonce)
    return _detail(state, game_id)
