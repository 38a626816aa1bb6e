"""Static game data read by the rules engine.

Modules are imported directly (``catalog.personas``, ``catalog.apps``...) because
some catalogs build on the state models that themselves read persona data.
"""
