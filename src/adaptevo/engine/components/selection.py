"""
Selection operators.

A selection operator fills a caller-allocated array of indices into the
population, chosen with replacement according to fitness (higher is better).
Operators work with both fitness kinds: rank- and comparison-based operators
order the native values (exact for int64), weight-based operators work on
float64 weights.

Operators are not shared between workers. ``split()`` returns a copy with its
own state and a random generator spawned from the original's.
"""

from __future__ import annotations

import copy
import logging
from abc import ABC, abstractmethod
from typing import Any

import numpy as np

from adaptevo.engine.components.fitness_vector import PopulationFitnessVector
from adaptevo.foundation.exceptions import (
    InvalidBiasError,
    InvalidRateError,
    InvalidSelectionError,
)
from adaptevo.foundation.rng import ensure_rng, spawn_rng


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


class SelectionOperator(ABC):
    """Base class for selection operators."""

    def __init__(self, rng: np.random.Generator | int | None = None) -> None:
        self.rng = ensure_rng(rng)

    @abstractmethod
    def select(self, fitnesses: PopulationFitnessVector, selected: np.ndarray) -> None:
        """
        Choose ``len(selected)`` population indices based on ``fitnesses``.

        ``selected`` is overwritten in place and ends up in random order, so
        consecutive entries can be paired as parents.
        """

    def init(self, generations: int) -> None:
        """Called once per run, before the first generation."""
        return None

    def split(self) -> SelectionOperator:
        clone = copy.copy(self)
        clone.rng = spawn_rng(self.rng)
        return clone

    def __call__(self, fitnesses: PopulationFitnessVector, n_parents: int) -> np.ndarray:
        selected = np.empty(n_parents, dtype=np.intp)
        self.select(fitnesses, selected)
        return selected


def _check(fitnesses: PopulationFitnessVector, selected: np.ndarray) -> int:
    if selected.ndim != 1:
        raise ValueError("selected must be a one-dimensional index array.")
    n = fitnesses.size()
    if n == 0 and selected.shape[0] > 0:
        raise ValueError("population is empty.")
    return n


def linear_rank_weights(n: int, c: float) -> np.ndarray:
    """
    Weights of ranks 1..n (ascending fitness) under linear ranking with bias c.

    The lowest rank gets 2 - c, the highest gets c, consecutive ranks differ by
    2 * (c - 1) / (n - 1), and the weights sum to n.
    """
    if n == 1:
        return np.ones(1)
    r = np.arange(n, dtype=float)
    return 2.0 - c + 2.0 * r * (c - 1.0) / (n - 1.0)


class WeightedSelection(SelectionOperator):
    """
    Roulette-wheel style selection over a running sum of weights.

    With ``sus=True`` the wheel is sampled by stochastic universal sampling:
    one random offset and evenly spaced pointers, then the picks are shuffled.
    """

    def __init__(self, sus: bool = False, rng: np.random.Generator | int | None = None) -> None:
        super().__init__(rng)
        self.sus = bool(sus)

    @abstractmethod
    def weights(self, fitnesses: PopulationFitnessVector) -> tuple[np.ndarray, np.ndarray]:
        """Return (weights, order): ``weights[j]`` is the weight of population index ``order[j]``."""

    def cumulative_weights(self, fitnesses: PopulationFitnessVector) -> tuple[np.ndarray, np.ndarray]:
        weights, order = self.weights(fitnesses)
        return np.cumsum(weights), order

    def select(self, fitnesses: PopulationFitnessVector, selected: np.ndarray) -> None:
        n = _check(fitnesses, selected)
        k = selected.shape[0]
        if k == 0:
            return
        running, order = self.cumulative_weights(fitnesses)
        total = running[-1]
        if self.sus:
            step = total / k
            pointers = self.rng.uniform(0.0, step) + step * np.arange(k)
        else:
            pointers = self.rng.random(k) * total
        # first running-sum entry strictly exceeding each pointer
        positions = np.searchsorted(running, pointers, side="right")
        np.minimum(positions, n - 1, out=positions)
        picks = order[positions]
        if self.sus:
            self.rng.shuffle(picks)
        selected[:] = picks


class LinearRankSelection(WeightedSelection):
    """
    Linear rank selection.

    Members are ranked by ascending fitness (ties keep their population order)
    and weighted linearly from ``2 - c`` (least fit) to ``c`` (most fit), with
    ``c`` in [1.0, 2.0]. ``c = 1`` is uniform selection. The running sum is laid
    out from the fittest member to the least fit, so its last entry is n.
    """

    def __init__(self, c: float = 1.5, sus: bool = False, rng: np.random.Generator | int | None = None) -> None:
        if not 1.0 <= c <= 2.0:
            raise InvalidBiasError(c)
        super().__init__(sus, rng)
        self.c = float(c)

    def weights(self, fitnesses: PopulationFitnessVector) -> tuple[np.ndarray, np.ndarray]:
        ascending = np.argsort(fitnesses.values(), kind="stable")
        w = linear_rank_weights(ascending.shape[0], self.c)
        return w[::-1], ascending[::-1]


class ExponentialRankSelection(WeightedSelection):
    """
    Exponential rank selection.

    The fittest member gets weight 1, the next ``c``, then ``c**2`` and so on
    down to ``c**(n - 1)`` for the least fit, with ``0 < c < 1``; smaller ``c``
    means higher pressure. Ties and the running-sum layout are as in
    LinearRankSelection.
    """

    def __init__(self, c: float, sus: bool = False, rng: np.random.Generator | int | None = None) -> None:
        if not 0.0 < c < 1.0:
            raise InvalidRateError("c", c, "in the open interval (0, 1)")
        super().__init__(sus, rng)
        self.c = float(c)

    def weights(self, fitnesses: PopulationFitnessVector) -> tuple[np.ndarray, np.ndarray]:
        ascending = np.argsort(fitnesses.values(), kind="stable")
        return self.c ** np.arange(ascending.shape[0], dtype=float), ascending[::-1]


class FitnessProportionalSelection(WeightedSelection):
    """
    Fitness proportional (roulette wheel) selection.

    Plain weights require positive fitness. With ``shifted=True`` fitness is
    shifted so the least fit member has weight 1, which handles zero and
    negative fitness such as that of NegativeCostFitness.
    """

    def __init__(self, shifted: bool = False, sus: bool = False, rng: np.random.Generator | int | None = None) -> None:
        super().__init__(sus, rng)
        self.shifted = bool(shifted)

    def weights(self, fitnesses: PopulationFitnessVector) -> tuple[np.ndarray, np.ndarray]:
        w = fitnesses.to_float_array()
        if self.shifted and w.shape[0] > 0:
            w -= w.min() - 1.0
        elif np.any(w < 0.0) or not w.sum() > 0.0:
            raise ValueError(
                "fitness proportional selection requires positive fitness; use shifted=True or InverseCostFitness."
            )
        return w, np.arange(w.shape[0])


class BoltzmannSelection(WeightedSelection):
    """
    Boltzmann selection: weight = exp(fitness / T).

    With ``t_min`` and ``r`` the temperature cools after every selection,
    exponentially (T <- max(t_min, r * T), 0 < r < 1) or linearly
    (T <- max(t_min, T - r)). ``init()`` restarts the schedule at ``t0``.
    """

    def __init__(
        self,
        t0: float = 1.0,
        t_min: float | None = None,
        r: float | None = None,
        cooling: str = "exponential",
        sus: bool = False,
        rng: np.random.Generator | int | None = None,
    ) -> None:
        if not t0 > 0.0:
            raise InvalidRateError("t0", t0, "positive")
        if cooling not in {"exponential", "linear"}:
            raise InvalidRateError("cooling", cooling, "'exponential' or 'linear'")
        if (t_min is None) != (r is None):
            raise InvalidRateError("t_min/r", (t_min, r), "both given or both omitted")
        if t_min is not None and r is not None:
            if not 0.0 < t_min <= t0:
                raise InvalidRateError("t_min", t_min, f"in (0, {t0}]")
            if not r > 0.0 or (cooling == "exponential" and r >= 1.0):
                allowed = "in (0, 1)" if cooling == "exponential" else "positive"
                raise InvalidRateError("r", r, allowed)
        super().__init__(sus, rng)
        self.t0 = float(t0)
        self.t_min = t_min
        self.r = r
        self.cooling = cooling
        self.temperature = self.t0

    def init(self, generations: int) -> None:
        self.temperature = self.t0

    def weights(self, fitnesses: PopulationFitnessVector) -> tuple[np.ndarray, np.ndarray]:
        f = fitnesses.to_float_array()
        if f.shape[0] > 0:
            # shift by the max so exp() cannot overflow; weights are only relative
            f = np.exp((f - f.max()) / self.temperature)
        return f, np.arange(f.shape[0])

    def select(self, fitnesses: PopulationFitnessVector, selected: np.ndarray) -> None:
        super().select(fitnesses, selected)
        self._cool()

    def _cool(self) -> None:
        if self.t_min is None or self.r is None:
            return
        if self.cooling == "exponential":
            self.temperature = max(self.t_min, self.temperature * self.r)
        else:
            self.temperature = max(self.t_min, self.temperature - self.r)


class TournamentSelection(SelectionOperator):
    """Tournament selection: best of ``k`` uniformly drawn members; the earliest contender wins ties."""

    def __init__(self, k: int = 2, rng: np.random.Generator | int | None = None) -> None:
        if k < 2:
            raise InvalidRateError("k", k, "at least 2")
        super().__init__(rng)
        self.k = int(k)

    def select(self, fitnesses: PopulationFitnessVector, selected: np.ndarray) -> None:
        n = _check(fitnesses, selected)
        m = selected.shape[0]
        if m == 0:
            return
        contenders = self.rng.integers(0, n, size=(m, self.k))
        scores = fitnesses.values()[contenders]
        winners = np.argmax(scores, axis=1)
        selected[:] = contenders[np.arange(m), winners]


class TruncationSelection(SelectionOperator):
    """Uniform selection among the ``k`` fittest members (the whole population when k >= n)."""

    def __init__(self, k: int, rng: np.random.Generator | int | None = None) -> None:
        if k < 1:
            raise InvalidRateError("k", k, "positive")
        super().__init__(rng)
        self.k = int(k)

    def select(self, fitnesses: PopulationFitnessVector, selected: np.ndarray) -> None:
        n = _check(fitnesses, selected)
        m = selected.shape[0]
        if m == 0:
            return
        if self.k < n:
            pool = np.argsort(fitnesses.values(), kind="stable")[n - self.k :]
            selected[:] = pool[self.rng.integers(0, self.k, size=m)]
        else:
            selected[:] = self.rng.integers(0, n, size=m)


class RandomSelection(SelectionOperator):
    """Uniform random selection, ignoring fitness."""

    def select(self, fitnesses: PopulationFitnessVector, selected: np.ndarray) -> None:
        n = _check(fitnesses, selected)
        if selected.shape[0]:
            selected[:] = self.rng.integers(0, n, size=selected.shape[0])


SELECTION_OPERATORS: dict[str, type[SelectionOperator]] = {
    "linear_rank": LinearRankSelection,
    "exponential_rank": ExponentialRankSelection,
    "fitness_proportional": FitnessProportionalSelection,
    "boltzmann": BoltzmannSelection,
    "tournament": TournamentSelection,
    "truncation": TruncationSelection,
    "random": RandomSelection,
}


def build_selection(name: str, rng: np.random.Generator | int | None = None, **params: Any) -> SelectionOperator:
    """Instantiate a registered selection operator by name."""
    key = name.lower().replace("-", "_")
    cls = SELECTION_OPERATORS.get(key)
    if cls is None:
        raise InvalidSelectionError(name, sorted(SELECTION_OPERATORS))
    _logger().debug("Building selection operator %s with %s", key, params)
    return cls(rng=rng, **params)


__all__ = [
    "SelectionOperator",
    "WeightedSelection",
    "LinearRankSelection",
    "ExponentialRankSelection",
    "FitnessProportionalSelection",
    "BoltzmannSelection",
    "TournamentSelection",
    "TruncationSelection",
    "RandomSelection",
    "SELECTION_OPERATORS",
    "build_selection",
    "linear_rank_weights",
]
