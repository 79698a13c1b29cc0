"""Pytest configuration to ensure the `src` package layout is importable.

This adds the `src/` directory to `sys.path` so tests can import the
`conqueror` package without requiring an editable install in CI, and keeps
the default settings on the in-memory store so importing the API module does
not touch the working directory.
"""

import os
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

SRC_PATH = Path(__file__).resolve().parents[1] / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

os.environ.setdefault("CONQUEROR_STORE_BACKEND", "memory")

from conqueror.domain import models as dm  # noqa: E402
from conqueror.domain.maps import get_variant  # noqa: E402

MatchFactory = Callable[..., dm.Match]


@pytest.fixture
def make_match() -> MatchFactory:
    """Build a started match with a hand-placed board.

    ``board`` maps tile index to ``(owner, army)``; seats are named
    ``p0``, ``p1``, ... after their index.
    """

    def factory(
        board: dict[int, tuple[int, int]],
        *,
        players: int = 2,
        nonce: int = 0,
        map_id: str = "tiny",
        seed: str = "test-seed",
        round_limit: int = 100,
    ) -> dm.Match:
        game = dm.Game(
            id=dm.GameID(1),
            host="p0",
            name="test",
            seed=seed,
            map_id=map_id,
            round_limit=round_limit,
            player_count=players,
            nonce=nonce,
            started=True,
        )
        match = dm.Match(game=game, variant=get_variant(map_id))
        match.players = [
            dm.Player(game_id=game.id, index=index, identity=f"p{index}", name=f"Player {index}")
            for index in range(players)
        ]
        match.tiles = {
            index: dm.Tile(game_id=game.id, index=index, owner=owner, army=army)
            for index, (owner, army) in board.items()
        }
        return match

    return factory
