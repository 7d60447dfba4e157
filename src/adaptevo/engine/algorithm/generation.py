"""
Generation strategies.

A generation strategy advances a population by one generation: it asks the
population to select parents, applies crossover and mutation to the offspring
in place, has the population re-evaluate exactly the offspring it touched, and
commits. It returns the number of fitness evaluations it caused. Membership
and survival stay with the population and its selection operator.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import numpy as np

from adaptevo.engine.components.member import CROSSOVER_RATE, MUTATION_RATE
from adaptevo.engine.components.population import Population
from adaptevo.foundation.exceptions import ConfigurationError, InvalidRateError, require
from adaptevo.foundation.problem import CrossoverOperatorProtocol, MutationOperatorProtocol
from adaptevo.foundation.rng import ensure_rng, spawn_rng


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


class Generation(ABC):
    """
    Base class: select, vary, commit; the population keeps its last generation if varying fails.

    ``crossover`` may be None for strategies that only mutate.
    """

    def __init__(
        self,
        mutation: MutationOperatorProtocol,
        crossover: CrossoverOperatorProtocol | None = None,
        rng: np.random.Generator | int | None = None,
    ) -> None:
        require(mutation=mutation)
        self.mutation = mutation
        self.crossover = crossover
        self.rng = ensure_rng(rng)

    def apply(self, population: Population) -> int:
        population.select()
        try:
            count = self._vary(population)
        except Exception:
            population.discard()
            raise
        population.replace()
        return count

    @abstractmethod
    def _vary(self, population: Population) -> int:
        """Apply operators to the offspring; return the number of fitness evaluations."""

    @abstractmethod
    def split(self) -> Generation: ...


class AdaptiveGeneration(Generation):
    """
    One generation driven by each offspring's own adaptive rates.

    Offspring are paired as (0, 1), (2, 3), ...; a pair is crossed when a
    uniform draw falls below the first parent's crossover rate. Then every
    offspring is mutated when a draw falls below its own mutation rate. The
    population must carry at least two adaptive parameters per member
    (crossover rate, mutation rate).
    """

    def __init__(
        self,
        mutation: MutationOperatorProtocol,
        crossover: CrossoverOperatorProtocol,
        rng: np.random.Generator | int | None = None,
    ) -> None:
        require(mutation=mutation, crossover=crossover)
        super().__init__(mutation, crossover, rng)

    def split(self) -> AdaptiveGeneration:
        return AdaptiveGeneration(self.mutation.split(), self.crossover.split(), rng=spawn_rng(self.rng))

    def apply(self, population: Population) -> int:
        if population.num_params and population.num_params <= MUTATION_RATE:
            raise ConfigurationError(
                f"adaptive generation needs at least {MUTATION_RATE + 1} parameters per member, "
                f"population has {population.num_params}.",
                suggestion="Build the population with num_params=2",
            )
        return super().apply(population)

    def _vary(self, population: Population) -> int:
        lam = population.mutable_size()
        r = self.rng
        count = 0
        for second in range(1, lam, 2):
            first = second - 1
            if r.random() < population.get_parameter(first, CROSSOVER_RATE):
                self.crossover.cross(population.get(first), population.get(second))
                population.update_fitness(first)
                population.update_fitness(second)
                count += 2
        for j in range(lam):
            if r.random() < population.get_parameter(j, MUTATION_RATE):
                self.mutation.mutate(population.get(j))
                population.update_fitness(j)
                count += 1
        _logger().debug("Adaptive generation performed %d fitness evaluations", count)
        return count


class AdaptiveMutationOnlyGeneration(Generation):
    """
    Mutation-only counterpart of AdaptiveGeneration.

    Each offspring is mutated when a uniform draw falls below its own mutation
    rate, which is adaptive parameter 0; there is no crossover. Populations
    need a single adaptive parameter per member.
    """

    def __init__(self, mutation: MutationOperatorProtocol, rng: np.random.Generator | int | None = None) -> None:
        super().__init__(mutation, None, rng)

    def split(self) -> AdaptiveMutationOnlyGeneration:
        return AdaptiveMutationOnlyGeneration(self.mutation.split(), rng=spawn_rng(self.rng))

    def _vary(self, population: Population) -> int:
        lam = population.mutable_size()
        draws = self.rng.random(lam)
        count = 0
        for j in range(lam):
            if draws[j] < population.get_parameter(j, 0):
                self.mutation.mutate(population.get(j))
                population.update_fitness(j)
                count += 1
        _logger().debug("Adaptive mutation-only generation performed %d fitness evaluations", count)
        return count


class SimpleGeneration(Generation):
    """
    One generation with fixed operator rates.

    The number of crossed pairs is Binomial(lambda // 2, crossover_rate);
    since selection leaves parents in random order, offspring ``i`` is paired
    with ``i + count``. Each offspring is then mutated with probability
    ``mutation_rate``.
    """

    def __init__(
        self,
        mutation: MutationOperatorProtocol,
        crossover: CrossoverOperatorProtocol,
        mutation_rate: float,
        crossover_rate: float,
        rng: np.random.Generator | int | None = None,
    ) -> None:
        if not 0.0 <= mutation_rate <= 1.0:
            raise InvalidRateError("mutation_rate", mutation_rate, "in [0, 1]")
        if not 0.0 <= crossover_rate <= 1.0:
            raise InvalidRateError("crossover_rate", crossover_rate, "in [0, 1]")
        require(mutation=mutation, crossover=crossover)
        super().__init__(mutation, crossover, rng)
        self.mutation_rate = float(mutation_rate)
        self.crossover_rate = float(crossover_rate)

    def split(self) -> SimpleGeneration:
        return SimpleGeneration(
            self.mutation.split(),
            self.crossover.split(),
            self.mutation_rate,
            self.crossover_rate,
            rng=spawn_rng(self.rng),
        )

    def _vary(self, population: Population) -> int:
        lam = population.mutable_size()
        pairs = int(self.rng.binomial(lam // 2, self.crossover_rate))
        for first in range(pairs):
            second = first + pairs
            self.crossover.cross(population.get(first), population.get(second))
            population.update_fitness(first)
            population.update_fitness(second)
        mutate = np.flatnonzero(self.rng.random(lam) < self.mutation_rate)
        for j in mutate:
            self.mutation.mutate(population.get(j))
            population.update_fitness(j)
        return 2 * pairs + mutate.shape[0]


__all__ = ["Generation", "AdaptiveGeneration", "AdaptiveMutationOnlyGeneration", "SimpleGeneration"]
