"""
Read-only views of a generation's fitness values.

A fitness vector owns a private copy of its values; every export is a new
array, so neither the caller's input nor an exported array aliases the
backing storage.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

import numpy as np

from adaptevo.engine.components.kinds import FitnessKind
from adaptevo.foundation.exceptions import FitnessIndexError


class PopulationFitnessVector:
    """Indexed, order-preserving fitness values of a population (higher is better)."""

    kind: FitnessKind

    def __init__(self, values: Iterable[float | int] | np.ndarray) -> None:
        if not isinstance(values, np.ndarray):
            values = list(values)
        data = np.array(values, dtype=self.kind.dtype, copy=True)
        if data.ndim != 1:
            raise ValueError(f"fitness values must be one-dimensional, got shape {data.shape}.")
        data.setflags(write=False)
        self._values = data

    @classmethod
    def of(cls, values: Iterable[float | int] | np.ndarray) -> PopulationFitnessVector:
        return cls(values)

    def size(self) -> int:
        return self._values.shape[0]

    def __len__(self) -> int:
        return self._values.shape[0]

    def get_fitness(self, i: int) -> float | int:
        n = self._values.shape[0]
        if not 0 <= i < n:
            raise FitnessIndexError(i, n)
        return self._values[i].item()

    def __getitem__(self, i: int) -> float | int:
        return self.get_fitness(i)

    def __iter__(self) -> Iterator[float | int]:
        return iter(self._values.tolist())

    def to_float_array(self) -> np.ndarray:
        return self._values.astype(np.float64, copy=True)

    def values(self) -> np.ndarray:
        """Fitness values in their native dtype (a read-only view, not a copy)."""
        return self._values

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._values.tolist()!r})"


class RealFitnessVector(PopulationFitnessVector):
    kind = FitnessKind.REAL


class IntegerFitnessVector(PopulationFitnessVector):
    kind = FitnessKind.INTEGER

    def to_int_array(self) -> np.ndarray:
        return self._values.copy()


def fitness_vector_of(values: Iterable[float | int] | np.ndarray, kind: FitnessKind) -> PopulationFitnessVector:
    """Build the fitness vector class matching ``kind``."""
    if kind is FitnessKind.INTEGER:
        return IntegerFitnessVector(values)
    return RealFitnessVector(values)


__all__ = [
    "PopulationFitnessVector",
    "RealFitnessVector",
    "IntegerFitnessVector",
    "fitness_vector_of",
]
