"""Test configuration and fixtures for the backend test suite."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

import pytest

from tycoon_backend.api.dependencies import get_game_session_service
from tycoon_backend.game_logic.configuration import (
    RulesConfiguration,
    get_default_rules_configuration,
)
from tycoon_backend.game_logic.phases import GamePhase
from tycoon_backend.game_logic.setup import init_game, select_funding, select_leader
from tycoon_backend.game_logic.state import (
    GameState,
    HiredEngineer,
    Player,
    Strategy,
)
from tycoon_backend.settings import get_settings
from tycoon_backend.shared.enums import (
    CorporationStyle,
    EngineerLevel,
    FundingType,
    ProductType,
    TechApproach,
)
from tycoon_backend.shared.value_objects import PlayerMetrics, PlayerResources


@pytest.fixture(autouse=True)
def _reset_caches(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Ensure settings and cached services are rebuilt for every test."""
    monkeypatch.setenv("SESSION_STORE", "memory")
    get_settings.cache_clear()
    get_default_rules_configuration.cache_clear()
    get_game_session_service.cache_clear()
    yield
    get_settings.cache_clear()
    get_default_rules_configuration.cache_clear()
    get_game_session_service.cache_clear()


@pytest.fixture
def rules() -> RulesConfiguration:
    return RulesConfiguration()


@pytest.fixture
def make_engineer() -> Callable[..., HiredEngineer]:
    """Build hired engineers with neutral defaults."""

    def factory(
        engineer_id: str = "eng-1",
        level: EngineerLevel = EngineerLevel.JUNIOR,
        **fields: Any,
    ) -> HiredEngineer:
        fields.setdefault("name", engineer_id)
        fields.setdefault("base_salary", 15)
        return HiredEngineer(id=engineer_id, level=level, **fields)

    return factory


@pytest.fixture
def make_player() -> Callable[..., Player]:
    """Build founded players without a leader so no passive interferes."""

    def factory(
        player_id: str = "player-1",
        seat: int = 0,
        *,
        money: int = 100,
        mau: int = 1000,
        rating: int = 5,
        tech_debt: int = 0,
        ai_capacity: int = 2,
        tech: TechApproach = TechApproach.MOVE_FAST,
        style: CorporationStyle = CorporationStyle.PRODUCT,
        **fields: Any,
    ) -> Player:
        return Player(
            id=player_id,
            name=player_id,
            color="#000000",
            seat=seat,
            resources=PlayerResources(
                money=money,
                server_capacity=10,
                ai_capacity=ai_capacity,
                tech_debt=tech_debt,
            ),
            metrics=PlayerMetrics(mau=mau, revenue=0, rating=rating),
            strategy=Strategy(
                funding=FundingType.ANGEL_BACKED, tech=tech, product=ProductType.PLATFORM
            ),
            corporation_style=style,
            **fields,
        )

    return factory


@pytest.fixture
def make_state(rules: RulesConfiguration) -> Callable[..., GameState]:
    """Wrap players into a game state sitting in a given phase and round."""

    def factory(
        *players: Player,
        phase: GamePhase = GamePhase.PLANNING,
        current_round: int = 1,
        configuration: RulesConfiguration | None = None,
        **fields: Any,
    ) -> GameState:
        return GameState(
            configuration=configuration or rules,
            seed=7,
            phase=phase,
            current_round=current_round,
            players=players,
            **fields,
        )

    return factory


@pytest.fixture
def founded_game(rules: RulesConfiguration) -> Callable[..., GameState]:
    """Play the leader draft and funding selection with default choices."""

    def factory(
        player_count: int = 2,
        *,
        seed: int = 11,
        funding: FundingType = FundingType.BOOTSTRAPPED,
        configuration: RulesConfiguration | None = None,
    ) -> GameState:
        state = init_game(configuration or rules, player_count, seed)
        for player in state.players:
            state = select_leader(state, player.id, state.dealt_leader_cards[player.id][0])
        for player in state.players:
            state = select_funding(state, player.id, funding)
        return state

    return factory
