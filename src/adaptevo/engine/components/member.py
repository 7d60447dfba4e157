"""
Population members and their self-adaptive parameters.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from adaptevo.foundation.exceptions import FitnessIndexError
from adaptevo.foundation.problem import ParameterizedCandidate, duplicate

# parameter slots read by the adaptive generation
CROSSOVER_RATE = 0
MUTATION_RATE = 1

MIN_RATE = 0.1
MAX_RATE = 1.0
SIGMA_RANGE = (0.05, 0.15)
SIGMA_BOUNDS = (0.01, 0.2)
SIGMA_STEP = 0.01


class AdaptiveParameters:
    """
    Per-member operator rates that evolve along with the candidate.

    Rates start uniformly in [min_rate, max_rate] and undergo Gaussian
    mutation clamped to that interval. The mutation step size is itself
    mutated (sigma 0.01, clamped to [0.01, 0.2]), so step sizes adapt too.
    """

    __slots__ = ("rates", "sigma", "min_rate", "max_rate")

    def __init__(self, rates: np.ndarray, sigma: float, min_rate: float = MIN_RATE, max_rate: float = MAX_RATE) -> None:
        self.rates = rates
        self.sigma = sigma
        self.min_rate = min_rate
        self.max_rate = max_rate

    @classmethod
    def random(
        cls,
        num_params: int,
        rng: np.random.Generator,
        min_rate: float = MIN_RATE,
        max_rate: float = MAX_RATE,
    ) -> AdaptiveParameters:
        rates = rng.uniform(min_rate, max_rate, size=num_params)
        sigma = float(rng.uniform(*SIGMA_RANGE))
        return cls(rates, sigma, min_rate, max_rate)

    def mutate(self, rng: np.random.Generator) -> None:
        self.rates = np.clip(
            self.rates + rng.normal(0.0, self.sigma, size=self.rates.shape[0]),
            self.min_rate,
            self.max_rate,
        )
        lo, hi = SIGMA_BOUNDS
        self.sigma = float(min(hi, max(lo, self.sigma + rng.normal(0.0, SIGMA_STEP))))

    def copy(self) -> AdaptiveParameters:
        return AdaptiveParameters(self.rates.copy(), self.sigma, self.min_rate, self.max_rate)

    def __len__(self) -> int:
        return self.rates.shape[0]

    def __getitem__(self, k: int) -> float:
        if not 0 <= k < self.rates.shape[0]:
            raise FitnessIndexError(k, self.rates.shape[0])
        return float(self.rates[k])


class PopulationMember:
    """A candidate, its fitness, and optionally the adaptive parameters carried alongside it."""

    __slots__ = ("candidate", "fitness", "parameters")

    def __init__(self, candidate: Any, fitness: float | int, parameters: AdaptiveParameters | None = None) -> None:
        self.candidate = candidate
        self.fitness = fitness
        self.parameters = parameters

    def copy(self) -> PopulationMember:
        """Deep copy: the new member never aliases this member's candidate or parameters."""
        params = self.parameters.copy() if self.parameters is not None else None
        return PopulationMember(duplicate(self.candidate), self.fitness, params)

    def parameter(self, k: int) -> float:
        if self.parameters is not None:
            return self.parameters[k]
        if isinstance(self.candidate, ParameterizedCandidate):
            values = self.candidate.parameters
            if not 0 <= k < len(values):
                raise FitnessIndexError(k, len(values))
            return float(values[k])
        raise TypeError(
            "population members carry no adaptive parameters; build the population with num_params > 0 "
            "or use candidates exposing a 'parameters' attribute."
        )

    def __repr__(self) -> str:
        return f"PopulationMember(candidate={self.candidate!r}, fitness={self.fitness!r})"


__all__ = [
    "AdaptiveParameters",
    "PopulationMember",
    "CROSSOVER_RATE",
    "MUTATION_RATE",
    "MIN_RATE",
    "MAX_RATE",
]
