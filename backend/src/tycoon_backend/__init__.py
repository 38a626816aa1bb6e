"""Startup Tycoon backend package wiring and entrypoints."""

from tycoon_backend.settings import BackendSettings, get_settings

__all__ = [
    "BackendSettings",
    "get_settings",
]
