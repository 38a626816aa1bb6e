"""Tests for the state-owning game service."""

from __future__ import annotations

from tycoon_backend.game_logic.commands import SelectLeader, SetPlayerName
from tycoon_backend.game_logic.configuration import RulesConfiguration
from tycoon_backend.game_logic.phases import GamePhase
from tycoon_backend.game_logic.service import GameStateService
from tycoon_backend.shared.enums import ActionType


def test_new_game_is_reproducible_from_seed() -> None:
    first = GameStateService.new_game(3, seed=21).state
    second = GameStateService.new_game(3, seed=21).state

    assert first.phase is GamePhase.LEADER_DRAFT
    assert first.dealt_leader_cards == second.dealt_leader_cards
    assert first.event_deck == second.event_deck


def test_new_game_uses_configured_seed() -> None:
    service = GameStateService.new_game(2, configuration=RulesConfiguration(seed=99))

    assert service.state.seed == 99


def test_accepted_command_returns_new_events() -> None:
    service = GameStateService.new_game(2, seed=4)
    leader = service.state.dealt_leader_cards["player-1"][0]

    outcome = service.execute(SelectLeader(player_id="player-1", persona_id=leader))

    assert outcome.accepted
    assert outcome.state is service.state
    assert [event.event_type for event in outcome.events] == ["leader-selected"]
    assert service.can_undo


def test_rejected_command_changes_nothing() -> None:
    service = GameStateService.new_game(2, seed=4)
    leader = service.state.dealt_leader_cards["player-1"][0]
    service.execute(SelectLeader(player_id="player-1", persona_id=leader))
    before = service.state

    outcome = service.execute(SelectLeader(player_id="player-1", persona_id=leader))

    assert not outcome.accepted
    assert outcome.events == ()
    assert service.state is before


def test_undo_and_redo_walk_the_history() -> None:
    service = GameStateService.new_game(2, seed=4)
    initial = service.state
    service.execute(SetPlayerName(player_id="player-1", name="Ada"))
    renamed = service.state

    assert service.undo()
    assert service.state is initial
    assert not service.undo()
    assert service.redo()
    assert service.state is renamed
    assert not service.can_redo


def test_new_command_clears_redo() -> None:
    service = GameStateService.new_game(2, seed=4)
    service.execute(SetPlayerName(player_id="player-1", name="Ada"))
    service.undo()

    service.execute(SetPlayerName(player_id="player-1", name="Grace"))

    assert not service.redo()


def test_queries_after_founding(founded_game) -> None:
    service = GameStateService(founded_game())

    assert service.current_player() == "player-1"
    assert service.draft_order() == ("player-1", "player-2")
    assert service.upcoming_event() is not None
    assert service.upcoming_event().id == service.state.event_deck[-1]
    actions = service.available_actions()
    assert ActionType.GO_VIRAL not in actions
    assert ActionType.IPO_PREP not in actions
    assert len(service.milestones()) == 5


def test_slot_queries_for_a_player(founded_game) -> None:
    service = GameStateService(founded_game())

    marketing = service.occupancy(ActionType.MARKETING)

    assert (marketing.current, marketing.players) == (0, ())
    assert service.can_afford("player-1", ActionType.MONETIZATION)
    assert not service.is_available("player-1", ActionType.IPO_PREP)


def test_scores_cover_every_player(founded_game) -> None:
    scores = GameStateService(founded_game()).scores()

    assert [score.player_id for score in scores] == ["player-1", "player-2"]
