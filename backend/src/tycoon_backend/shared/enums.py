"""Shared enumerations used across the backend."""

from enum import StrEnum


class TokenColor(StrEnum):
    """Colours of code tokens placed on grids and held in debt buffers."""

    GREEN = "green"
    ORANGE = "orange"
    BLUE = "blue"
    PURPLE = "purple"


class EngineerLevel(StrEnum):
    """Seniority levels of hired engineers."""

    INTERN = "intern"
    JUNIOR = "junior"
    SENIOR = "senior"


class Specialty(StrEnum):
    """Engineer specialties driving the specialty power bonus."""

    FRONTEND = "frontend"
    BACKEND = "backend"
    FULLSTACK = "fullstack"
    DEVOPS = "devops"
    AI = "ai"


class EngineerTrait(StrEnum):
    """Generic traits rolled for pool engineers."""

    AI_SKEPTIC = "ai-skeptic"
    EQUITY_HUNGRY = "equity-hungry"
    STARTUP_VETERAN = "startup-veteran"
    NIGHT_OWL = "night-owl"


class ActionType(StrEnum):
    """Action spaces engineers can be assigned to."""

    DEVELOP_FEATURES = "develop-features"
    OPTIMIZE_CODE = "optimize-code"
    PAY_DOWN_DEBT = "pay-down-debt"
    UPGRADE_SERVERS = "upgrade-servers"
    RESEARCH_AI = "research-ai"
    MARKETING = "marketing"
    MONETIZATION = "monetization"
    HIRE_RECRUITER = "hire-recruiter"
    GO_VIRAL = "go-viral"
    IPO_PREP = "ipo-prep"
    ACQUISITION_TARGET = "acquisition-target"


class FundingType(StrEnum):
    """Funding choices made during corporation setup."""

    VC_HEAVY = "vc-heavy"
    BOOTSTRAPPED = "bootstrapped"
    ANGEL_BACKED = "angel-backed"


class TechApproach(StrEnum):
    """Technology approaches made during corporation setup."""

    AI_FIRST = "ai-first"
    QUALITY_FOCUSED = "quality-focused"
    MOVE_FAST = "move-fast"


class ProductType(StrEnum):
    """Product markets a corporation can target."""

    B2B = "b2b"
    CONSUMER = "consumer"
    PLATFORM = "platform"


class CorporationStyle(StrEnum):
    """Permanent scoring mode selected once per game."""

    AGENCY = "agency"
    PRODUCT = "product"


__all__ = [
    "ActionType",
    "CorporationStyle",
    "EngineerLevel",
    "EngineerTrait",
    "FundingType",
    "ProductType",
    "Specialty",
    "TechApproach",
    "TokenColor",
]
