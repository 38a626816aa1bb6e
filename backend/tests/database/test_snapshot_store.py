"""Database schema and snapshot store tests."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

import pytest

from tycoon_backend.database import (
    BaseSchema,
    DatabaseGameStateStore,
    DatabaseService,
    GameSnapshotRepository,
    GameSnapshotSchema,
)
from tycoon_backend.game_logic import GameStateService, GameStateSnapshot

if TYPE_CHECKING:
    from pathlib import Path

    from sqlalchemy import Table


@pytest.fixture
def database(tmp_path: Path) -> DatabaseService:
    service = DatabaseService(f"sqlite:///{tmp_path / 'tycoon.db'}")
    BaseSchema.metadata.create_all(service.engine)
    return service


def test_snapshot_table_is_keyed_by_session() -> None:
    table = cast("Table", GameSnapshotSchema.__table__)

    assert [column.name for column in table.primary_key.columns] == ["session_id"]


def test_missing_snapshot_loads_as_none(database) -> None:
    assert DatabaseGameStateStore(database).load_snapshot("missing") is None


def test_snapshot_round_trips_through_database(database) -> None:
    store = DatabaseGameStateStore(database)
    state = GameStateService.new_game(2, seed=13).state

    store.save_snapshot("alpha", GameStateSnapshot(version=3, state=state))
    loaded = store.load_snapshot("alpha")

    assert loaded is not None
    assert loaded.version == 3
    assert loaded.state.phase is state.phase
    assert loaded.state.players == state.players
    assert loaded.state.dealt_leader_cards == state.dealt_leader_cards
    assert loaded.state.round_state == state.round_state


def test_saving_twice_overwrites_row(database) -> None:
    store = DatabaseGameStateStore(database)
    state = GameStateService.new_game(2, seed=13).state
    store.save_snapshot("alpha", GameStateSnapshot(version=0, state=state))

    store.save_snapshot("alpha", GameStateSnapshot(version=1, state=state))

    with database.session() as session:
        repository = GameSnapshotRepository(session)
        assert repository.list_session_ids() == ("alpha",)
        row = repository.get("alpha")
        assert row is not None
        assert row.version == 1
        assert row.phase == state.phase.value
