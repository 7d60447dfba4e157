"""
Cost-to-fitness transforms.

Problems are minimization problems with a cost; the evolutionary engine
maximizes fitness. A fitness function wraps a problem, exposes it unchanged
through ``problem``, and maps lower cost to higher fitness.
"""

from __future__ import annotations

import math
from typing import Any, Protocol, runtime_checkable

import numpy as np

from adaptevo.engine.components.kinds import FitnessKind
from adaptevo.foundation.exceptions import InvalidMinCostError, InvalidScaleError, require
from adaptevo.foundation.problem import IntegerCostProblemProtocol, ProblemProtocol, min_cost_of


@runtime_checkable
class FitnessFunction(Protocol):
    """Maps a candidate to a fitness of type ``kind`` (higher is better)."""

    kind: FitnessKind

    @property
    def problem(self) -> Any: ...

    def fitness(self, candidate: Any) -> float | int: ...


class NegativeCostFitness:
    """
    fitness = -cost.

    Defined for any problem, including problems with negative costs or no known
    lower bound. With ``cost_kind=FitnessKind.INTEGER`` the fitness is an int.
    """

    def __init__(
        self,
        problem: ProblemProtocol | IntegerCostProblemProtocol,
        cost_kind: FitnessKind | str = FitnessKind.REAL,
    ) -> None:
        require(problem=problem)
        self._problem = problem
        self.kind = FitnessKind(cost_kind)

    @property
    def problem(self) -> Any:
        return self._problem

    def fitness(self, candidate: Any) -> float | int:
        cost = self._problem.cost(candidate)
        if isinstance(cost, np.integer):
            # negating np.int64 min wraps around silently
            cost = int(cost)
        return self.kind.coerce(-cost)


class InverseCostFitness:
    """
    fitness = scale / (1 + cost - min_cost).

    The best possible candidate (cost == min_cost) has fitness ``scale`` and
    fitness decreases toward 0 as cost grows, so fitness values are always
    positive, which fitness-proportional selection requires.

    Integer-cost problems (``cost_kind=FitnessKind.INTEGER``) subtract in
    Python ints before dividing, so no int64 overflow can occur; their
    ``min_cost`` must not sit at an int64 extreme. Fitness is always REAL.
    """

    kind = FitnessKind.REAL

    def __init__(
        self,
        problem: ProblemProtocol | IntegerCostProblemProtocol,
        scale: float = 1.0,
        cost_kind: FitnessKind | str = FitnessKind.REAL,
    ) -> None:
        require(problem=problem)
        if not scale > 0.0 or not math.isfinite(scale):
            raise InvalidScaleError(scale)
        cost_kind = FitnessKind(cost_kind)
        min_cost = min_cost_of(problem)
        if cost_kind is FitnessKind.INTEGER:
            if isinstance(min_cost, float) and not math.isfinite(min_cost):
                raise InvalidMinCostError(min_cost, "must be finite")
            min_cost = int(min_cost)
            if min_cost <= cost_kind.min_value or min_cost >= cost_kind.max_value:
                raise InvalidMinCostError(min_cost, "must not equal an int64 extreme")
        else:
            min_cost = float(min_cost)
            if not math.isfinite(min_cost):
                raise InvalidMinCostError(min_cost, "must be finite")
        self._problem = problem
        self.scale = float(scale)
        self.cost_kind = cost_kind
        self.min_cost = min_cost

    @property
    def problem(self) -> Any:
        return self._problem

    def fitness(self, candidate: Any) -> float:
        cost = self._problem.cost(candidate)
        if self.cost_kind is FitnessKind.INTEGER:
            return self.scale / (1 + (int(cost) - self.min_cost))
        return self.scale / (1.0 + (float(cost) - self.min_cost))


__all__ = ["FitnessFunction", "NegativeCostFitness", "InverseCostFitness"]
