"""Service layer for API-specific business logic."""

from tycoon_backend.api.services.game_session import GameSessionService

__all__ = ["GameSessionService"]
