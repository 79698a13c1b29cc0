"""FastAPI application wiring for Conqueror."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from conqueror.api import routes
from conqueror.api.runtime import ApiState, build_state
from conqueror.config import get_settings
from conqueror.domain.errors import GameError, InvalidOwner, InvalidPlayer, NotFound


def status_for(exc: GameError) -> int:
    """HTTP status of a rejected action."""

    if isinstance(exc, NotFound):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, InvalidPlayer | InvalidOwner):
        return status.HTTP_403_FORBIDDEN
    return status.HTTP_409_CONFLICT


async def handle_game_error(request: Request, exc: GameError) -> JSONResponse:  # noqa: ARG001
    return JSONResponse(
        status_code=status_for(exc),
        content={"code": exc.code, "detail": exc.detail},
    )


def create_app(*, state_factory: Callable[[], ApiState] = build_state) -> FastAPI:
    """Instantiate the FastAPI application with routing and lifecycle hooks."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        state = state_factory()
        app.state.api_state = state
        try:
            yield
        finally:
            await state.shutdown()

    app = FastAPI(title="Conqueror API", version="0.1.0", lifespan=lifespan)
    settings = get_settings()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(GameError, handle_game_error)
    app.include_router(routes.router)
    return app


app = create_app()
