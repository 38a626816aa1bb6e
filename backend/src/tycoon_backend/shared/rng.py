"""Deterministic random helpers used across the game logic."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence  # noqa: TC003
from random import Random
from typing import TypeVar

_T = TypeVar("_T")

_STEP_STRIDE = 1_000_003


class DeterministicRandomService:
    """Thin wrapper around :class:`random.Random` providing deterministic utilities."""

    def __init__(self, seed: int | None = None) -> None:
        self._seed = seed
        self._random = Random(seed)  # noqa: S311

    @classmethod
    def for_step(cls, seed: int, step: int) -> DeterministicRandomService:
        """Return a generator derived from a game *seed* and transition *step*."""
        return cls(seed * _STEP_STRIDE + step)

    @property
    def seed(self) -> int | None:
        """Return the base seed for the service."""
        return self._seed

    def choice(self, population: Sequence[_T]) -> _T:
        """Return a deterministic choice from *population*."""
        if not population:
            msg = "Cannot choose from an empty population."
            raise ValueError(msg)
        return population[self._random.randrange(len(population))]

    def weighted_choice(self, weights: Mapping[_T, int]) -> _T:
        """Return a key of *weights* drawn proportionally to its weight."""
        total = sum(weights.values())
        if total <= 0:
            msg = "Cannot choose from weights that sum to zero."
            raise ValueError(msg)
        roll = self._random.randrange(total)
        cumulative = 0
        for item, weight in weights.items():
            cumulative += weight
            if roll < cumulative:
                return item
        msg = "Weighted choice fell outside the cumulative range."
        raise RuntimeError(msg)

    def shuffle(self, items: Iterable[_T]) -> tuple[_T, ...]:
        """Return a shuffled tuple of *items* using the service RNG."""
        mutable = list(items)
        self._random.shuffle(mutable)
        return tuple(mutable)

    def random(self) -> float:
        """Return a float in the half-open range [0.0, 1.0)."""
        return self._random.random()

    def randint(self, lower: int, upper: int) -> int:
        """Return an integer in the inclusive range [*lower*, *upper*]."""
        return self._random.randint(lower, upper)

    def chance(self, probability: float) -> bool:
        """Return ``True`` with the given *probability*."""
        return self._random.random() < probability


__all__ = ["DeterministicRandomService"]
