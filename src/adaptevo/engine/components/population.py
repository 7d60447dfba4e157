"""
Generational populations.

A population holds the committed generation (members with fitness in sync)
and, while a generation is being built, the offspring produced by selection.
One generation cycle, driven by a generation strategy, is:

    population.select()                 # copy selected parents into the offspring buffer
    population.get(i) / get_parameter   # operators modify offspring in place
    population.update_fitness(i)        # only for offspring that were modified
    population.replace()                # commit the offspring as the next generation

``discard()`` drops the offspring buffer, leaving the committed generation as
it was. The fitness kind (real or integer) comes from the fitness function.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

import numpy as np

from adaptevo.engine.components.elite import EliteSet
from adaptevo.engine.components.fitness import FitnessFunction
from adaptevo.engine.components.fitness_vector import PopulationFitnessVector, fitness_vector_of
from adaptevo.engine.components.kinds import FitnessKind
from adaptevo.engine.components.member import AdaptiveParameters, PopulationMember
from adaptevo.engine.components.selection import SelectionOperator
from adaptevo.foundation.exceptions import (
    FitnessIndexError,
    InvalidEliteCountError,
    InvalidPopulationSizeError,
    InvalidRateError,
    require,
)
from adaptevo.foundation.problem import InitializerProtocol, duplicate, min_cost_of
from adaptevo.foundation.rng import ensure_rng, spawn_rng
from adaptevo.foundation.tracker import ProgressTracker, SolutionCostPair


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


class ReinjectionPolicy(str, Enum):
    """When an elitist population refreshes its elite slots."""

    EVERY_GENERATION = "every_generation"
    ON_IMPROVEMENT = "on_improvement"

    def __str__(self) -> str:
        return self.value


class Population:
    """
    Generational population without elitism: every slot is offspring.

    Parameters
    ----------
    size : int
        Number of members, at least 1.
    initializer
        Creates random candidates via ``create_candidate_solution()``.
    fitness : FitnessFunction
        Fitness of a candidate; its ``kind`` fixes the population's fitness kind.
    selection : SelectionOperator
        Chooses parents from the committed generation.
    tracker : ProgressTracker
        Informed whenever the population finds a new best candidate.
    num_params : int
        Adaptive parameters created for each member. With 0, ``get_parameter``
        reads the candidate's own ``parameters`` attribute instead.
    rng : numpy.random.Generator or int, optional
        Source of randomness for adaptive parameters.
    """

    def __init__(
        self,
        size: int,
        initializer: InitializerProtocol,
        fitness: FitnessFunction,
        selection: SelectionOperator,
        tracker: ProgressTracker,
        *,
        num_params: int = 0,
        rng: np.random.Generator | int | None = None,
    ) -> None:
        self._validate(size, initializer, fitness, selection, tracker, num_params)
        self._setup(size, size, initializer, fitness, selection, tracker, num_params, ensure_rng(rng))

    @staticmethod
    def _validate(size: int, initializer: Any, fitness: Any, selection: Any, tracker: Any, num_params: int) -> None:
        if size < 1:
            raise InvalidPopulationSizeError(size)
        if num_params < 0:
            raise InvalidRateError("num_params", num_params, "non-negative")
        require(initializer=initializer, fitness=fitness, selection=selection, tracker=tracker)

    def _setup(
        self,
        mu: int,
        lam: int,
        initializer: InitializerProtocol,
        fitness: FitnessFunction,
        selection: SelectionOperator,
        tracker: ProgressTracker,
        num_params: int,
        rng: np.random.Generator,
    ) -> None:
        self._mu = mu
        self._lambda = lam
        self._initializer = initializer
        self._f = fitness
        self._kind = FitnessKind(fitness.kind)
        self._selection = selection
        self._tracker = tracker
        self._num_params = num_params
        self.rng = rng
        self._members: list[PopulationMember] = []
        self._offspring: list[PopulationMember] = []
        self._selected = np.empty(lam, dtype=np.intp)
        self._updated = np.zeros(lam, dtype=bool)
        self._best_fitness: float | int = self._kind.min_value
        self._most_fit: SolutionCostPair | None = None
        self.evaluations = 0

    def split(self) -> Population:
        """
        An empty population with the same configuration, for another worker.

        The initializer, selection operator and random generator are split;
        the fitness function and progress tracker are shared. Call ``init()``
        on the copy before use.
        """
        clone = type(self).__new__(type(self))
        clone._setup(
            self._mu,
            self._lambda,
            self._initializer.split(),
            self._f,
            self._selection.split(),
            self._tracker,
            self._num_params,
            spawn_rng(self.rng),
        )
        return clone

    # ------------------------------------------------------------------
    # Queries

    @property
    def kind(self) -> FitnessKind:
        return self._kind

    @property
    def num_params(self) -> int:
        return self._num_params

    @property
    def fitness_function(self) -> FitnessFunction:
        return self._f

    @property
    def selection(self) -> SelectionOperator:
        return self._selection

    @property
    def progress_tracker(self) -> ProgressTracker:
        return self._tracker

    @progress_tracker.setter
    def progress_tracker(self, tracker: ProgressTracker) -> None:
        require(tracker=tracker)
        self._tracker = tracker

    def size(self) -> int:
        """Number of members in the committed generation."""
        return len(self._members)

    def mutable_size(self) -> int:
        """Number of offspring produced per generation (the slots operators may touch)."""
        return self._lambda

    def get_fitness(self, i: int) -> float | int:
        """Fitness of member i of the committed generation."""
        self._check_index(i, len(self._members))
        return self._members[i].fitness

    def candidate_at(self, i: int) -> Any:
        """Member i of the committed generation. Do not modify it."""
        self._check_index(i, len(self._members))
        return self._members[i].candidate

    def fitness_vector(self) -> PopulationFitnessVector:
        """Snapshot of the committed generation's fitness values."""
        return fitness_vector_of([m.fitness for m in self._members], self._kind)

    def most_fit(self) -> SolutionCostPair | None:
        """The best candidate found since ``init()``, with its cost."""
        return self._most_fit

    def fitness_of_most_fit(self) -> float | int:
        return self._best_fitness

    def evolution_is_paused(self) -> bool:
        return self._tracker.found_best or self._tracker.is_stopped

    # ------------------------------------------------------------------
    # Generation cycle

    def init(self) -> None:
        """Fill a fresh generation from the initializer and evaluate every member."""
        self._offspring = []
        self._updated[:] = False
        self._best_fitness = self._kind.min_value
        self._most_fit = None
        members = []
        best = None
        for _ in range(self._mu):
            c = self._initializer.create_candidate_solution()
            fit = self._evaluate(c)
            params = AdaptiveParameters.random(self._num_params, self.rng) if self._num_params else None
            members.append(PopulationMember(c, fit, params))
            if best is None or fit > self._best_fitness:
                self._best_fitness = fit
                best = c
        self._members = members
        self._set_most_fit(best)
        _logger().debug("Initialized population of %d, best fitness %s", self._mu, self._best_fitness)

    def init_operators(self, generations: int) -> None:
        self._selection.init(generations)

    def select(self) -> None:
        """Select parents from the committed generation into the offspring buffer."""
        self._selection.select(self.fitness_vector(), self._selected)
        self._offspring = [self._members[j].copy() for j in self._selected]
        self._updated[:] = False

    def get(self, i: int) -> Any:
        """Offspring i of the generation being built, for operators to modify in place."""
        self._check_index(i, len(self._offspring))
        return self._offspring[i].candidate

    def get_parameter(self, i: int, k: int) -> float:
        """Adaptive parameter k of offspring i."""
        self._check_index(i, len(self._offspring))
        return self._offspring[i].parameter(k)

    def update_fitness(self, i: int) -> None:
        """Re-evaluate offspring i after an operator modified it."""
        self._check_index(i, len(self._offspring))
        member = self._offspring[i]
        fit = self._evaluate(member.candidate)
        member.fitness = fit
        self._updated[i] = True
        if fit > self._best_fitness:
            self._best_fitness = fit
            self._set_most_fit(member.candidate)

    def replace(self) -> None:
        """Commit the offspring buffer as the next generation."""
        offspring = self._commit_offspring()
        self._members = offspring
        self._offspring = []

    def discard(self) -> None:
        """Drop the offspring buffer; the committed generation is unchanged."""
        self._offspring = []
        self._updated[:] = False

    # ------------------------------------------------------------------
    # Internals

    def _commit_offspring(self) -> list[PopulationMember]:
        if len(self._offspring) != self._lambda:
            raise RuntimeError("replace() called without a matching select().")
        offspring = self._offspring
        for member in offspring:
            if member.parameters is not None:
                member.parameters.mutate(self.rng)
        return offspring

    def _evaluate(self, candidate: Any) -> float | int:
        self.evaluations += 1
        return self._kind.coerce(self._f.fitness(candidate))

    def _set_most_fit(self, candidate: Any) -> None:
        problem = self._f.problem
        cost = problem.cost(candidate)
        pair = SolutionCostPair(duplicate(candidate), cost, cost == min_cost_of(problem))
        self._most_fit = pair
        self._tracker.update_pair(pair)
        _logger().debug("New best fitness %s (cost %s)", self._best_fitness, cost)

    @staticmethod
    def _check_index(i: int, n: int) -> None:
        if not 0 <= i < n:
            raise FitnessIndexError(i, n)


class ElitistPopulation(Population):
    """
    Generational population with elitism.

    The last ``num_elite`` slots of every committed generation hold the elite
    set as it stood when the generation was selected, fittest first; offspring
    of that generation are offered to the elite set only after it is copied
    in. Index ``mutable_size()`` therefore holds the best member known one
    generation earlier, and an offspring that just improved the best fitness
    reaches an elite slot at the next commit (``most_fit()`` reports it at
    once). Operators only see the other ``size - num_elite`` slots, so elite
    members are never modified.

    ``reinjection`` decides when the elite set takes in new offspring:
    ``EVERY_GENERATION`` offers every re-evaluated offspring at each commit;
    ``ON_IMPROVEMENT`` does so only in generations that strictly improved the
    best fitness.
    """

    def __init__(
        self,
        size: int,
        initializer: InitializerProtocol,
        fitness: FitnessFunction,
        selection: SelectionOperator,
        tracker: ProgressTracker,
        num_elite: int = 1,
        *,
        num_params: int = 0,
        reinjection: ReinjectionPolicy | str = ReinjectionPolicy.EVERY_GENERATION,
        rng: np.random.Generator | int | None = None,
    ) -> None:
        self._validate(size, initializer, fitness, selection, tracker, num_params)
        if num_elite < 1 or num_elite >= size:
            raise InvalidEliteCountError(num_elite, size)
        try:
            policy = ReinjectionPolicy(reinjection)
        except ValueError:
            raise InvalidRateError(
                "reinjection", reinjection, " or ".join(repr(p.value) for p in ReinjectionPolicy)
            ) from None
        self._setup(size, size - num_elite, initializer, fitness, selection, tracker, num_params, ensure_rng(rng))
        self._reinjection = policy

    def _setup(self, mu: int, lam: int, *args: Any) -> None:
        super()._setup(mu, lam, *args)
        self._elite = EliteSet(mu - lam)
        self._best_at_select: float | int = self._kind.min_value

    def split(self) -> ElitistPopulation:
        clone = super().split()
        clone._reinjection = self._reinjection
        return clone

    @property
    def num_elite(self) -> int:
        return self._mu - self._lambda

    @property
    def reinjection(self) -> ReinjectionPolicy:
        return self._reinjection

    def init(self) -> None:
        super().init()
        self._elite.clear()
        self._elite.offer_all(self._members)

    def select(self) -> None:
        self._best_at_select = self._best_fitness
        super().select()

    def replace(self) -> None:
        offspring = self._commit_offspring()
        members = list(offspring)
        members.extend(self._elite)
        if self._reinjection is ReinjectionPolicy.EVERY_GENERATION or self._best_fitness > self._best_at_select:
            for i in np.flatnonzero(self._updated):
                self._elite.offer(offspring[i])
        self._updated[:] = False
        self._members = members
        self._offspring = []
        _logger().debug("Committed generation, elite best fitness %s", self._elite.best().fitness)


__all__ = ["Population", "ElitistPopulation", "ReinjectionPolicy"]
