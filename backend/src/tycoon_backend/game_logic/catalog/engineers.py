"""Engineer templates, the specialty bonus table and the draft pool generator."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tycoon_backend.game_logic.catalog.personas import PERSONA_BASE_SALARY, get_persona
from tycoon_backend.game_logic.state import Engineer
from tycoon_backend.shared.enums import (
    ActionType,
    EngineerLevel,
    EngineerTrait,
    Specialty,
    TokenColor,
)

if TYPE_CHECKING:
    from tycoon_backend.shared.rng import DeterministicRandomService

FIRST_NAMES: tuple[str, ...] = (
    "Alex",
    "Sam",
    "Jordan",
    "Taylor",
    "Casey",
    "Morgan",
    "Riley",
    "Quinn",
    "Avery",
    "Cameron",
    "Drew",
    "Jamie",
    "Skyler",
    "Reese",
    "Sage",
    "River",
    "Blake",
    "Charlie",
    "Dakota",
    "Emery",
    "Finley",
    "Harper",
    "Indigo",
    "Kai",
)
LAST_INITIALS: tuple[str, ...] = tuple("ABCDEFGHJKLMNPRSTVWZ")

BASE_SALARY: dict[EngineerLevel, int] = {
    EngineerLevel.INTERN: 5,
    EngineerLevel.JUNIOR: 15,
    EngineerLevel.SENIOR: 30,
}
EQUITY_HUNGRY_SALARY = 5
TRAIT_CHANCE = 0.35
SALARY_VARIANCE = (-5, 4)

AI_POWER_BONUS = 2
AI_DEBT_TOKENS: dict[EngineerLevel, int] = {
    EngineerLevel.INTERN: 4,
    EngineerLevel.JUNIOR: 3,
    EngineerLevel.SENIOR: 1,
}

SPECIALTY_BONUS_ACTIONS: dict[Specialty, frozenset[ActionType]] = {
    Specialty.FRONTEND: frozenset(
        {ActionType.DEVELOP_FEATURES, ActionType.MARKETING}
    ),
    Specialty.BACKEND: frozenset(
        {ActionType.OPTIMIZE_CODE, ActionType.UPGRADE_SERVERS}
    ),
    Specialty.FULLSTACK: frozenset(
        {ActionType.DEVELOP_FEATURES, ActionType.OPTIMIZE_CODE}
    ),
    Specialty.DEVOPS: frozenset(
        {ActionType.UPGRADE_SERVERS, ActionType.RESEARCH_AI}
    ),
    Specialty.AI: frozenset({ActionType.RESEARCH_AI, ActionType.OPTIMIZE_CODE}),
}

SPECIALTY_TOKEN_COLORS: dict[Specialty, TokenColor] = {
    Specialty.FRONTEND: TokenColor.GREEN,
    Specialty.BACKEND: TokenColor.ORANGE,
    Specialty.DEVOPS: TokenColor.PURPLE,
    Specialty.FULLSTACK: TokenColor.BLUE,
    Specialty.AI: TokenColor.PURPLE,
}
DEFAULT_DEBT_COLOR = TokenColor.ORANGE


def specialty_bonus(specialty: Specialty | None, action: ActionType) -> int:
    """Return the flat power bonus for *specialty* working on *action*."""
    if specialty is None:
        return 0
    return 1 if action in SPECIALTY_BONUS_ACTIONS[specialty] else 0


def debt_token_color(specialty: Specialty | None) -> TokenColor:
    """Return the colour of debt tokens produced by an engineer."""
    if specialty is None:
        return DEFAULT_DEBT_COLOR
    return SPECIALTY_TOKEN_COLORS[specialty]


def senior_probability(round_number: int) -> float:
    """Return the chance that a generated pool engineer is a senior."""
    return min(1.0, 0.2 + 0.1 * round_number)


def generate_name(rng: DeterministicRandomService) -> str:
    return f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_INITIALS)}."


def generate_engineer(
    level: EngineerLevel, rng: DeterministicRandomService, engineer_id: str
) -> Engineer:
    """Roll a junior or senior engineer with specialty, trait and salary."""
    specialty = rng.choice(tuple(Specialty))
    trait = rng.choice(tuple(EngineerTrait)) if rng.chance(TRAIT_CHANCE) else None
    salary = BASE_SALARY[level] + rng.randint(*SALARY_VARIANCE)
    if trait is EngineerTrait.EQUITY_HUNGRY:
        salary += EQUITY_HUNGRY_SALARY
    return Engineer(
        id=engineer_id,
        name=generate_name(rng),
        level=level,
        specialty=specialty,
        base_salary=max(0, salary),
        trait=trait,
    )


def generate_engineer_pool(
    round_number: int,
    size: int,
    rng: DeterministicRandomService,
) -> tuple[Engineer, ...]:
    """Generate *size* engineers for *round_number*, seniors listed first."""
    senior_chance = senior_probability(round_number)
    pool = [
        generate_engineer(
            EngineerLevel.SENIOR if rng.chance(senior_chance) else EngineerLevel.JUNIOR,
            rng,
            f"eng-r{round_number}-{index + 1}",
        )
        for index in range(max(0, size))
    ]
    pool.sort(key=lambda engineer: -engineer.base_power)
    return tuple(pool)


def generate_intern(rng: DeterministicRandomService, engineer_id: str) -> Engineer:
    """Return a specialty-less intern used by the draft safety net."""
    return Engineer(
        id=engineer_id,
        name=generate_name(rng),
        level=EngineerLevel.INTERN,
        base_salary=BASE_SALARY[EngineerLevel.INTERN],
    )


def persona_engineer(persona_id: str) -> Engineer:
    """Return the engineer side of persona card *persona_id*."""
    card = get_persona(persona_id)
    return Engineer(
        id=f"persona-{card.id}",
        name=card.name,
        level=EngineerLevel.SENIOR,
        specialty=card.specialty,
        base_salary=PERSONA_BASE_SALARY,
        persona_id=card.id,
        persona_trait=card.trait,
    )


__all__ = [
    "AI_DEBT_TOKENS",
    "AI_POWER_BONUS",
    "BASE_SALARY",
    "SPECIALTY_BONUS_ACTIONS",
    "SPECIALTY_TOKEN_COLORS",
    "debt_token_color",
    "generate_engineer",
    "generate_engineer_pool",
    "generate_intern",
    "persona_engineer",
    "senior_probability",
    "specialty_bonus",
]
