"""
Numeric kinds of fitness values.

Populations, fitness vectors and fitness functions are parameterized by a
FitnessKind rather than duplicated per numeric type; everything that differs
between real and integer fitness lives here.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

import numpy as np

from adaptevo.foundation.exceptions import FitnessOverflowError

_INT_INFO = np.iinfo(np.int64)


class FitnessKind(str, Enum):
    """Numeric type of fitness values: REAL (float64) or INTEGER (int64)."""

    REAL = "real"
    INTEGER = "integer"

    def __str__(self) -> str:
        return self.value

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(np.float64) if self is FitnessKind.REAL else np.dtype(np.int64)

    @property
    def min_value(self) -> float | int:
        """Lowest representable fitness; the best fitness before anything is evaluated."""
        return float("-inf") if self is FitnessKind.REAL else int(_INT_INFO.min)

    @property
    def max_value(self) -> float | int:
        return float("inf") if self is FitnessKind.REAL else int(_INT_INFO.max)

    def coerce(self, value: Any) -> float | int:
        """Convert a single value to the Python scalar type of this kind."""
        if self is FitnessKind.REAL:
            return float(value)
        if isinstance(value, (float, np.floating)) and not float(value).is_integer():
            raise TypeError(f"integer fitness expected, got {value!r}")
        result = int(value)
        if not _INT_INFO.min <= result <= _INT_INFO.max:
            raise FitnessOverflowError(result)
        return result

    def empty(self, n: int) -> np.ndarray:
        return np.empty(n, dtype=self.dtype)


__all__ = ["FitnessKind"]
