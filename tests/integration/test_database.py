"""Integration tests for the relational store.

Plays a short game through the action service against a throwaway SQLite
file, then reopens the database to check that every write landed.
"""

from __future__ import annotations

import pytest

from conqueror.config import Settings
from conqueror.database import (
    check_database_health,
    create_db_engine,
    create_session_factory,
    get_table_names,
)
from conqueror.domain.enums import EventKind
from conqueror.factory import create_game_service, create_store
from conqueror.identity import StaticIdentity
from conqueror.models import GameRow
from conqueror.repository import SqlGameStore


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'conqueror.db'}"


@pytest.fixture
def engine(db_url):
    engine = create_db_engine(db_url, echo=False)
    yield engine
    engine.dispose()


def test_schema_and_health(engine):
    SqlGameStore(engine)
    assert check_database_health(engine)
    assert {"games", "players", "tiles", "events"} <= set(get_table_names(engine))


def test_factory_selects_sql_backend(db_url, tmp_path):
    store = create_store(Settings(store_backend="sql", database_url=db_url, data_dir=tmp_path))
    assert isinstance(store, SqlGameStore)
    store.engine.dispose()


def test_game_survives_reopening(engine, db_url, tmp_path):
    identity = StaticIdentity("host")
    settings = Settings(store_backend="sql", database_url=db_url, data_dir=tmp_path)
    games = create_game_service(identity, settings=settings, store=SqlGameStore(engine))

    game_id = games.create(name="Persisted", player_name="Host", map_id="tiny", seed="sql-seed")
    identity.identity = "ann"
    games.join(game_id, "Ann")
    identity.identity = "host"
    games.start(game_id)
    games.finish(game_id, nonce=0)
    games.finish(game_id, nonce=1)
    games.finish(game_id, nonce=2)

    reopened = create_db_engine(db_url, echo=False)
    try:
        store = SqlGameStore(reopened, create_tables=False)
        game = store.load_game(game_id)
        assert game is not None
        assert game.started
        assert game.nonce == 3
        assert [player.identity for player in store.load_players(game_id)] == ["host", "ann"]
        assert len(store.load_all_tiles(game_id)) == 5
        kinds = [event.kind for event in store.load_events(game_id)]
        assert kinds.count(EventKind.PHASE_CHANGED) == 3
        assert kinds.count(EventKind.SUPPLY_GRANTED) == 2

        with create_session_factory(reopened)() as session:
            row = session.get(GameRow, int(game_id))
            assert row.name == "Persisted"
    finally:
        reopened.dispose()
