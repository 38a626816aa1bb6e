"""Dual-sided persona cards: leader side for setup, engineer side for auctions."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from tycoon_backend.game_logic.errors import ProgrammerError
from tycoon_backend.shared.enums import ProductType, Specialty


class LeaderPassive(StrEnum):
    """Always-on abilities granted by the leader side of a persona card."""

    ENTERPRISE_CULTURE = "enterprise-culture"
    PERFECTIONIST = "perfectionist"
    HYPE_MACHINE = "hype-machine"
    INFRASTRUCTURE_EMPIRE = "infrastructure-empire"
    NETWORK_EFFECTS = "network-effects"
    EFFICIENT_AI = "efficient-ai"
    AD_NETWORK = "ad-network"
    IMMUTABLE_LEDGER = "immutable-ledger"
    GPU_ROYALTIES = "gpu-royalties"
    ALIGNMENT_TAX = "alignment-tax"
    LEAN_EFFICIENCY = "lean-efficiency"
    SUBSCRIBER_LOYALTY = "subscriber-loyalty"
    TRUST_SAFETY = "trust-safety"
    SAAS_COMPOUNDING = "saas-compounding"
    MARKETPLACE_TAX = "marketplace-tax"
    DUAL_FOCUS = "dual-focus"
    DOUBLE_OPTIMIZE = "double-optimize"
    CRISIS_RESILIENCE = "crisis-resilience"


class PersonaTrait(StrEnum):
    """Named traits carried by persona engineers."""

    PHILANTHROPIST = "Philanthropist"
    PERFECTIONIST = "Perfectionist"
    VOLATILE = "Volatile"
    OPTIMIZER = "Optimizer"
    GROWTH_HACKER = "Growth Hacker"
    RESEARCHER = "Researcher"
    MONETIZER = "Monetizer"
    DECENTRALIST = "Decentralist"
    PARALLEL_PROCESSOR = "Parallel Processor"
    ALIGNMENT_RESEARCHER = "Alignment Researcher"
    PROCESS_OPTIMIZER = "Process Optimizer"
    CONTENT_ALGORITHM = "Content Algorithm"
    COMMUNITY_MANAGER = "Community Manager"
    ENTERPRISE_SALES = "Enterprise Sales"
    FLAT_HIERARCHY = "Flat Hierarchy"
    PROTOCOL_PURIST = "Protocol Purist"
    ADMIRALS_DISCIPLINE = "Admiral's Discipline"
    RESILIENCE_ARCHITECT = "Resilience Architect"


class StartingBonus(BaseModel):
    """Resources a leader adds to the corporation at funding selection.

    ``rating`` and ``tech_debt`` replace the base values when present; all other
    fields are added on top of the funding/tech/product baseline.
    """

    model_config = ConfigDict(frozen=True)

    money: int = 0
    server_capacity: int = 0
    ai_capacity: int = 0
    mau_production: int = 0
    revenue_production: int = 0
    rating: int | None = Field(default=None, ge=1, le=10)
    tech_debt: int | None = Field(default=None, ge=0)


class PersonaCard(BaseModel):
    """A persona card with both of its sides."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    title: str
    starting_bonus: StartingBonus
    product_lock: tuple[ProductType, ...]
    power_id: str
    passive: LeaderPassive
    specialty: Specialty
    trait: PersonaTrait


_B2B = ProductType.B2B
_CONSUMER = ProductType.CONSUMER
_PLATFORM = ProductType.PLATFORM

PERSONA_CARDS: tuple[PersonaCard, ...] = (
    PersonaCard(
        id="william-doors",
        name="William Doors",
        title="Founder & Chairman",
        starting_bonus=StartingBonus(money=20, revenue_production=1, rating=7),
        product_lock=(_B2B, _PLATFORM),
        power_id="blue-screen-protocol",
        passive=LeaderPassive.ENTERPRISE_CULTURE,
        specialty=Specialty.BACKEND,
        trait=PersonaTrait.PHILANTHROPIST,
    ),
    PersonaCard(
        id="steeve-careers",
        name="Steeve Careers",
        title="Chief Visionary Officer",
        starting_bonus=StartingBonus(money=10, rating=8),
        product_lock=(_CONSUMER,),
        power_id="reality-distortion-field",
        passive=LeaderPassive.PERFECTIONIST,
        specialty=Specialty.FRONTEND,
        trait=PersonaTrait.PERFECTIONIST,
    ),
    PersonaCard(
        id="elom-tusk",
        name="Elom Tusk",
        title="Technoking",
        starting_bonus=StartingBonus(ai_capacity=3, mau_production=2),
        product_lock=(_B2B, _CONSUMER, _PLATFORM),
        power_id="meme-power",
        passive=LeaderPassive.HYPE_MACHINE,
        specialty=Specialty.AI,
        trait=PersonaTrait.VOLATILE,
    ),
    PersonaCard(
        id="jess-bezos",
        name="Jess Bezos",
        title="CEO & Optimization Overlord",
        starting_bonus=StartingBonus(server_capacity=10, revenue_production=1, rating=4),
        product_lock=(_PLATFORM, _B2B),
        power_id="prime-day",
        passive=LeaderPassive.INFRASTRUCTURE_EMPIRE,
        specialty=Specialty.DEVOPS,
        trait=PersonaTrait.OPTIMIZER,
    ),
    PersonaCard(
        id="mark-zucker",
        name="Mark Zucker",
        title="Chief Connectivity Officer",
        starting_bonus=StartingBonus(mau_production=3, rating=4),
        product_lock=(_CONSUMER, _PLATFORM),
        power_id="data-harvest",
        passive=LeaderPassive.NETWORK_EFFECTS,
        specialty=Specialty.FULLSTACK,
        trait=PersonaTrait.GROWTH_HACKER,
    ),
    PersonaCard(
        id="lora-page",
        name="Lora Page",
        title="Co-Founder & Chief Scientist",
        starting_bonus=StartingBonus(ai_capacity=3, mau_production=1),
        product_lock=(_PLATFORM,),
        power_id="moonshot-lab",
        passive=LeaderPassive.EFFICIENT_AI,
        specialty=Specialty.AI,
        trait=PersonaTrait.RESEARCHER,
    ),
    PersonaCard(
        id="susan-fry",
        name="Susan Fry",
        title="Chief Operating Officer",
        starting_bonus=StartingBonus(revenue_production=2, rating=6),
        product_lock=(_B2B,),
        power_id="ipo-fast-track",
        passive=LeaderPassive.AD_NETWORK,
        specialty=Specialty.BACKEND,
        trait=PersonaTrait.MONETIZER,
    ),
    PersonaCard(
        id="satoshi-nakamaybe",
        name="Satoshi Nakamaybe",
        title="Anonymous Founder",
        starting_bonus=StartingBonus(
            tech_debt=0, mau_production=1, revenue_production=1
        ),
        product_lock=(_PLATFORM,),
        power_id="decentralize",
        passive=LeaderPassive.IMMUTABLE_LEDGER,
        specialty=Specialty.BACKEND,
        trait=PersonaTrait.DECENTRALIST,
    ),
    PersonaCard(
        id="jensen-wattson",
        name="Jensen Wattson",
        title="Supreme Leather Jacket Officer",
        starting_bonus=StartingBonus(ai_capacity=2, revenue_production=1, money=20),
        product_lock=(_PLATFORM, _B2B),
        power_id="gpu-tax",
        passive=LeaderPassive.GPU_ROYALTIES,
        specialty=Specialty.AI,
        trait=PersonaTrait.PARALLEL_PROCESSOR,
    ),
    PersonaCard(
        id="sam-chatman",
        name="Sam Chatman",
        title="Chief Alignment Officer",
        starting_bonus=StartingBonus(ai_capacity=3, rating=6),
        product_lock=(_PLATFORM,),
        power_id="safety-pause",
        passive=LeaderPassive.ALIGNMENT_TAX,
        specialty=Specialty.AI,
        trait=PersonaTrait.ALIGNMENT_RESEARCHER,
    ),
    PersonaCard(
        id="silica-su",
        name="Silica Su",
        title="CEO & Chief Engineer",
        starting_bonus=StartingBonus(mau_production=1),
        product_lock=(_B2B,),
        power_id="roadmap-execution",
        passive=LeaderPassive.LEAN_EFFICIENCY,
        specialty=Specialty.FULLSTACK,
        trait=PersonaTrait.PROCESS_OPTIMIZER,
    ),
    PersonaCard(
        id="binge-hastings",
        name="Binge Hastings",
        title="Chief Content Officer",
        starting_bonus=StartingBonus(mau_production=1, revenue_production=1),
        product_lock=(_CONSUMER,),
        power_id="binge-drop",
        passive=LeaderPassive.SUBSCRIBER_LOYALTY,
        specialty=Specialty.BACKEND,
        trait=PersonaTrait.CONTENT_ALGORITHM,
    ),
    PersonaCard(
        id="whitney-buzz-herd",
        name="Whitney Buzz Herd",
        title="Founder & Chief Impact Officer",
        starting_bonus=StartingBonus(rating=7, mau_production=1),
        product_lock=(_CONSUMER,),
        power_id="first-move",
        passive=LeaderPassive.TRUST_SAFETY,
        specialty=Specialty.FRONTEND,
        trait=PersonaTrait.COMMUNITY_MANAGER,
    ),
    PersonaCard(
        id="marc-cloudoff",
        name="Marc Cloudoff",
        title="Founder & Chief Hawaiian Shirt Officer",
        starting_bonus=StartingBonus(revenue_production=2, money=20),
        product_lock=(_B2B,),
        power_id="acquisition-spree",
        passive=LeaderPassive.SAAS_COMPOUNDING,
        specialty=Specialty.BACKEND,
        trait=PersonaTrait.ENTERPRISE_SALES,
    ),
    PersonaCard(
        id="gabe-newdeal",
        name="Gabe Newdeal",
        title="President & Flat Hierarchy Philosopher",
        starting_bonus=StartingBonus(money=30, mau_production=1, revenue_production=1),
        product_lock=(_PLATFORM,),
        power_id="steam-sale",
        passive=LeaderPassive.MARKETPLACE_TAX,
        specialty=Specialty.FULLSTACK,
        trait=PersonaTrait.FLAT_HIERARCHY,
    ),
    PersonaCard(
        id="jack-blocksey",
        name="Jack Blocksey",
        title="CEO x 2",
        starting_bonus=StartingBonus(mau_production=1, revenue_production=1),
        product_lock=(_CONSUMER, _PLATFORM),
        power_id="dual-pivot",
        passive=LeaderPassive.DUAL_FOCUS,
        specialty=Specialty.FULLSTACK,
        trait=PersonaTrait.PROTOCOL_PURIST,
    ),
    PersonaCard(
        id="grace-debugger",
        name="Grace Debugger",
        title="Rear Admiral & Chief Compiler",
        starting_bonus=StartingBonus(tech_debt=0, rating=6),
        product_lock=(_B2B, _PLATFORM),
        power_id="compiler-overhaul",
        passive=LeaderPassive.DOUBLE_OPTIMIZE,
        specialty=Specialty.BACKEND,
        trait=PersonaTrait.ADMIRALS_DISCIPLINE,
    ),
    PersonaCard(
        id="brian-spare-key",
        name="Brian Spare-key",
        title="Co-Founder & Chief Belonging Officer",
        starting_bonus=StartingBonus(mau_production=2, money=10),
        product_lock=(_PLATFORM,),
        power_id="surge-pricing",
        passive=LeaderPassive.CRISIS_RESILIENCE,
        specialty=Specialty.DEVOPS,
        trait=PersonaTrait.RESILIENCE_ARCHITECT,
    ),
)

_PERSONAS_BY_ID = {card.id: card for card in PERSONA_CARDS}

PERSONA_BASE_SALARY = 15


def get_persona(persona_id: str) -> PersonaCard:
    """Return the persona card identified by *persona_id*."""
    try:
        return _PERSONAS_BY_ID[persona_id]
    except KeyError as exc:
        msg = f"Unknown persona card '{persona_id}'."
        raise ProgrammerError(msg) from exc


def persona_draw_count(round_number: int) -> int:
    """Return how many persona cards enter the auction in *round_number*."""
    return 3 if round_number >= 3 else 2


__all__ = [
    "PERSONA_BASE_SALARY",
    "PERSONA_CARDS",
    "LeaderPassive",
    "PersonaCard",
    "PersonaTrait",
    "StartingBonus",
    "get_persona",
    "persona_draw_count",
]
