"""Exceptions raised by the rules engine for caller mistakes."""

from __future__ import annotations


class ProgrammerError(ValueError):
    """Raised when a command references unknown ids or has a malformed shape.

    Game-rule denials (wrong turn, unaffordable action, full slot) are never
    raised; the engine returns the unchanged state for those instead.
    """


__all__ = ["ProgrammerError"]
