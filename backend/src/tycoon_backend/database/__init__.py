"""Database connectivity helpers and persistence adapters."""

from tycoon_backend.database.base import BaseSchema
from tycoon_backend.database.dependencies import get_database, get_session
from tycoon_backend.database.repositories import GameSnapshotRepository
from tycoon_backend.database.schemas import GameSnapshotSchema
from tycoon_backend.database.service import DatabaseService
from tycoon_backend.database.store import DatabaseGameStateStore

__all__ = [
    "BaseSchema",
    "DatabaseGameStateStore",
    "DatabaseService",
    "GameSnapshotRepository",
    "GameSnapshotSchema",
    "get_database",
    "get_session",
]
