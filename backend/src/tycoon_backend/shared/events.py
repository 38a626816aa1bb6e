"""Event logging primitives shared across the backend."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict


def _utcnow() -> datetime:
    return datetime.now(UTC)


class LoggedEvent(BaseModel):
    """Represents a single immutable journal entry produced by a transition."""

    model_config = ConfigDict(frozen=True)

    round_index: int = Field(..., ge=0)
    phase: str = Field(..., min_length=1)
    event_type: str = Field(..., min_length=1)
    message: str | None = None
    player_id: str | None = Field(default=None, min_length=1)
    payload: dict[str, Any] = Field(default_factory=dict)
    occurred_at: datetime = Field(default_factory=_utcnow)


class PhaseLog(BaseModel):
    """Container bundling the events emitted by one accepted command."""

    model_config = ConfigDict(frozen=True)

    phase: str = Field(..., min_length=1)
    round_index: int = Field(..., ge=0)
    command: str | None = None
    events: tuple[LoggedEvent, ...] = Field(default_factory=tuple)

    @model_validator(mode="after")
    def _ensure_alignment(self) -> PhaseLog:
        """Ensure every event belongs to the owning round."""
        for event in self.events:
            if event.round_index != self.round_index:
                msg = "Event metadata does not match the owning PhaseLog."
                raise ValueError(msg)
        return self


class RoundLog(BaseModel):
    """Aggregated log output of a single round."""

    model_config = ConfigDict(frozen=True)

    round_index: int = Field(..., ge=0)
    phases: tuple[PhaseLog, ...] = Field(default_factory=tuple)

    def append(self, log: PhaseLog) -> RoundLog:
        """Return a new :class:`RoundLog` with *log* appended."""
        if log.round_index != self.round_index:
            msg = "PhaseLog round index must match RoundLog."
            raise ValueError(msg)
        return RoundLog(round_index=self.round_index, phases=(*self.phases, log))


__all__ = [
    "LoggedEvent",
    "PhaseLog",
    "RoundLog",
]
