"""
Adaptive evolutionary algorithm.

Ties a population (plain or elitist) to an AdaptiveGeneration and runs it for
a number of generations, counting fitness evaluations. Every member carries
its own crossover and mutation rates, which evolve with it.
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np

from adaptevo.engine.algorithm.config import EvolutionConfig
from adaptevo.engine.algorithm.generation import AdaptiveGeneration, AdaptiveMutationOnlyGeneration
from adaptevo.engine.components.fitness import FitnessFunction
from adaptevo.engine.components.population import ElitistPopulation, Population
from adaptevo.engine.components.selection import LinearRankSelection, SelectionOperator, build_selection
from adaptevo.foundation.exceptions import require
from adaptevo.foundation.problem import CrossoverOperatorProtocol, InitializerProtocol, MutationOperatorProtocol
from adaptevo.foundation.tracker import ProgressTracker, SolutionCostPair


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


def _build_population(
    size: int,
    initializer: InitializerProtocol,
    fitness: FitnessFunction,
    selection: SelectionOperator | None,
    num_elite: int,
    tracker: ProgressTracker | None,
    reinjection: str,
    num_params: int,
    pop_rng: np.random.Generator,
    sel_rng: np.random.Generator,
) -> Population:
    """Plain population for num_elite == 0, elitist otherwise; linear rank selection with c = 1.5 by default."""
    if selection is None:
        selection = LinearRankSelection(rng=sel_rng)
    if tracker is None:
        tracker = ProgressTracker()
    if num_elite > 0:
        return ElitistPopulation(
            size,
            initializer,
            fitness,
            selection,
            tracker,
            num_elite,
            num_params=num_params,
            reinjection=reinjection,
            rng=pop_rng,
        )
    return Population(size, initializer, fitness, selection, tracker, num_params=num_params, rng=pop_rng)


class AdaptiveEvolutionaryAlgorithm:
    """
    Generational EA with self-adaptive operator rates.

    Use :meth:`create` or :meth:`from_config` to build one; the constructor
    takes an already built population.

    Examples
    --------
    >>> ea = AdaptiveEvolutionaryAlgorithm.create(
    ...     50, mutation, crossover, initializer, InverseCostFitness(problem), num_elite=1, seed=1
    ... )
    >>> best = ea.optimize(200)
    """

    def __init__(
        self,
        population: Population,
        mutation: MutationOperatorProtocol,
        crossover: CrossoverOperatorProtocol,
        rng: np.random.Generator | int | None = None,
    ) -> None:
        require(population=population)
        self._generation = AdaptiveGeneration(mutation, crossover, rng=rng)
        self._population = population
        self._evaluations = 0

    @classmethod
    def create(
        cls,
        size: int,
        mutation: MutationOperatorProtocol,
        crossover: CrossoverOperatorProtocol,
        initializer: InitializerProtocol,
        fitness: FitnessFunction,
        selection: SelectionOperator | None = None,
        num_elite: int = 0,
        tracker: ProgressTracker | None = None,
        *,
        reinjection: str = "every_generation",
        num_params: int = 2,
        seed: int | None = None,
    ) -> AdaptiveEvolutionaryAlgorithm:
        """Build the population and the algorithm; defaults to linear rank selection with c = 1.5."""
        pop_rng, sel_rng, gen_rng = np.random.default_rng(seed).spawn(3)
        population = _build_population(
            size, initializer, fitness, selection, num_elite, tracker, reinjection, num_params, pop_rng, sel_rng
        )
        return cls(population, mutation, crossover, rng=gen_rng)

    @classmethod
    def from_config(
        cls,
        config: EvolutionConfig | dict[str, Any],
        mutation: MutationOperatorProtocol,
        crossover: CrossoverOperatorProtocol,
        initializer: InitializerProtocol,
        fitness: FitnessFunction,
        tracker: ProgressTracker | None = None,
    ) -> AdaptiveEvolutionaryAlgorithm:
        cfg = config if isinstance(config, EvolutionConfig) else EvolutionConfig.from_dict(config)
        pop_cfg = cfg.population
        sel_seed = None if cfg.seed is None else cfg.seed + 1
        selection = build_selection(cfg.selection, rng=sel_seed, **cfg.selection_params)
        return cls.create(
            pop_cfg.size,
            mutation,
            crossover,
            initializer,
            fitness,
            selection,
            pop_cfg.num_elite,
            tracker,
            reinjection=pop_cfg.reinjection,
            num_params=pop_cfg.num_params,
            seed=cfg.seed,
        )

    def split(self) -> AdaptiveEvolutionaryAlgorithm:
        """An independent copy for another worker; shares only the fitness function and tracker."""
        clone = type(self).__new__(type(self))
        clone._population = self._population.split()
        clone._generation = self._generation.split()
        clone._evaluations = 0
        return clone

    @property
    def population(self) -> Population:
        return self._population

    @property
    def problem(self) -> Any:
        return self._population.fitness_function.problem

    @property
    def progress_tracker(self) -> ProgressTracker:
        return self._population.progress_tracker

    @progress_tracker.setter
    def progress_tracker(self, tracker: ProgressTracker) -> None:
        self._population.progress_tracker = tracker

    @property
    def total_run_length(self) -> int:
        """Fitness evaluations performed by this instance across all runs."""
        return self._evaluations

    def optimize(self, generations: int) -> SolutionCostPair | None:
        """
        Start from a fresh random population and evolve for ``generations``.

        Returns the best solution of this run, or None if the progress
        tracker had already been stopped or had found a known optimum.
        """
        pop = self._population
        if pop.evolution_is_paused():
            return None
        _logger().info("Starting adaptive EA for %d generations", generations)
        pop.init()
        pop.init_operators(generations)
        self._evaluations += pop.size()
        self._run(generations)
        return pop.most_fit()

    def reoptimize(self, generations: int) -> SolutionCostPair | None:
        """Continue evolving the current population for ``generations`` more."""
        pop = self._population
        if pop.evolution_is_paused():
            return None
        pop.init_operators(generations)
        self._run(generations)
        return pop.most_fit()

    def _run(self, generations: int) -> None:
        pop = self._population
        done = 0
        while done < generations and not pop.evolution_is_paused():
            self._evaluations += self._generation.apply(pop)
            done += 1
        _logger().info(
            "Adaptive EA finished %d generations, %d evaluations, best fitness %s",
            done,
            self._evaluations,
            pop.fitness_of_most_fit(),
        )


class AdaptiveMutationOnlyEvolutionaryAlgorithm(AdaptiveEvolutionaryAlgorithm):
    """
    Self-adaptive EA without crossover.

    Every member carries a single adaptive parameter, its mutation rate, and
    each generation is an AdaptiveMutationOnlyGeneration. Running, pausing and
    splitting behave as in AdaptiveEvolutionaryAlgorithm.
    """

    def __init__(
        self,
        population: Population,
        mutation: MutationOperatorProtocol,
        rng: np.random.Generator | int | None = None,
    ) -> None:
        require(population=population)
        self._generation = AdaptiveMutationOnlyGeneration(mutation, rng=rng)
        self._population = population
        self._evaluations = 0

    @classmethod
    def create(
        cls,
        size: int,
        mutation: MutationOperatorProtocol,
        initializer: InitializerProtocol,
        fitness: FitnessFunction,
        selection: SelectionOperator | None = None,
        num_elite: int = 0,
        tracker: ProgressTracker | None = None,
        *,
        reinjection: str = "every_generation",
        seed: int | None = None,
    ) -> AdaptiveMutationOnlyEvolutionaryAlgorithm:
        pop_rng, sel_rng, gen_rng = np.random.default_rng(seed).spawn(3)
        population = _build_population(
            size, initializer, fitness, selection, num_elite, tracker, reinjection, 1, pop_rng, sel_rng
        )
        return cls(population, mutation, rng=gen_rng)

    @classmethod
    def from_config(
        cls,
        config: EvolutionConfig | dict[str, Any],
        mutation: MutationOperatorProtocol,
        initializer: InitializerProtocol,
        fitness: FitnessFunction,
        tracker: ProgressTracker | None = None,
    ) -> AdaptiveMutationOnlyEvolutionaryAlgorithm:
        """As AdaptiveEvolutionaryAlgorithm.from_config; ``num_params`` in the config is ignored (always 1)."""
        cfg = config if isinstance(config, EvolutionConfig) else EvolutionConfig.from_dict(config)
        pop_cfg = cfg.population
        sel_seed = None if cfg.seed is None else cfg.seed + 1
        selection = build_selection(cfg.selection, rng=sel_seed, **cfg.selection_params)
        return cls.create(
            pop_cfg.size,
            mutation,
            initializer,
            fitness,
            selection,
            pop_cfg.num_elite,
            tracker,
            reinjection=pop_cfg.reinjection,
            seed=cfg.seed,
        )


__all__ = ["AdaptiveEvolutionaryAlgorithm", "AdaptiveMutationOnlyEvolutionaryAlgorithm"]
