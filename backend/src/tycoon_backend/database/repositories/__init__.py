"""Repository layer wrapping SQLAlchemy sessions."""

from tycoon_backend.database.repositories.game_snapshot import GameSnapshotRepository

__all__ = ["GameSnapshotRepository"]
