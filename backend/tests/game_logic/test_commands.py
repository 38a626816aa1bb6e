"""Tests for command parsing and dispatch."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from tycoon_backend.game_logic.commands import (
    AssignEngineer,
    CommandBase,
    PickEngineer,
    SelectLeader,
    SetPlayerName,
    parse_command,
)
from tycoon_backend.game_logic.phases import GamePhase
from tycoon_backend.game_logic.setup import init_game
from tycoon_backend.shared.enums import ActionType


def test_parse_command_picks_model_from_kind() -> None:
    command = parse_command(
        {
            "kind": "assign-engineer",
            "player_id": "player-1",
            "engineer_id": "eng-1",
            "action": "develop-features",
        }
    )

    assert isinstance(command, AssignEngineer)
    assert command.action is ActionType.DEVELOP_FEATURES
    assert command.use_ai is False


@pytest.mark.parametrize(
    "payload",
    [
        {"kind": "fly-to-the-moon", "player_id": "player-1"},
        {"kind": "lock-plan", "player_id": "player-1", "force": True},
        {"kind": "lock-plan", "player_id": ""},
        {"kind": "submit-bid", "player_id": "player-1", "engineer_id": "e", "amount": -1},
    ],
)
def test_parse_command_rejects_invalid_payloads(payload: dict[str, object]) -> None:
    with pytest.raises(ValidationError):
        parse_command(payload)


def test_commands_are_frozen() -> None:
    command = SetPlayerName(player_id="player-1", name="Ada")

    with pytest.raises(ValidationError):
        command.name = "Grace"  # type: ignore[misc]


def test_apply_dispatches_to_the_rules(rules) -> None:
    state = init_game(rules, 2, seed=5)
    leader = state.dealt_leader_cards["player-1"][0]

    renamed = SetPlayerName(player_id="player-1", name="  Ada  ").apply(state)
    picked = SelectLeader(player_id="player-1", persona_id=leader).apply(state)

    assert renamed.player("player-1").name == "Ada"
    assert picked.player("player-1").leader_id == leader
    assert picked.phase is GamePhase.LEADER_DRAFT


def test_out_of_turn_command_returns_same_state(founded_game) -> None:
    state = founded_game()
    engineer_id = state.round_state.engineer_pool[0].id

    assert state.phase is GamePhase.ENGINEER_DRAFT
    assert PickEngineer(player_id="player-2", engineer_id=engineer_id).apply(state) is state


def test_command_base_cannot_be_instantiated() -> None:
    with pytest.raises(TypeError):
        CommandBase()  # type: ignore[abstract]
