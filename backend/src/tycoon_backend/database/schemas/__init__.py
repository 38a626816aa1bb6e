"""SQLAlchemy schemas backing the persistence layer."""

from tycoon_backend.database.schemas.game_snapshot import GameSnapshotSchema

__all__ = ["GameSnapshotSchema"]
