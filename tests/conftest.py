"""Shared test doubles: tiny problems, candidates and operators for exercising the engine."""

from __future__ import annotations

import itertools

import numpy as np
import pytest

from adaptevo.engine.components.fitness import NegativeCostFitness
from adaptevo.engine.components.kinds import FitnessKind


class IdCandidate:
    """Candidate identified by an integer; equality is identity."""

    def __init__(self, ident: int) -> None:
        self.id = ident

    def copy(self) -> IdCandidate:
        return IdCandidate(self.id)

    def __repr__(self) -> str:
        return f"IdCandidate({self.id})"


class IdProblem:
    """Integer cost -(id + 10), so NegativeCostFitness gives fitness id + 10."""

    def cost(self, candidate: IdCandidate) -> int:
        return -(candidate.id + 10)

    def min_cost(self) -> int:
        return -1_000_000


class TargetProblem:
    """Integer cost max(0, target - id), optimum at id >= target."""

    def __init__(self, target: int) -> None:
        self.target = target

    def cost(self, candidate: IdCandidate) -> int:
        return max(0, self.target - candidate.id)

    def min_cost(self) -> int:
        return 0


class SequentialInitializer:
    """Creates IdCandidate(start), IdCandidate(start + 1), ..."""

    def __init__(self, start: int = 1) -> None:
        self.start = start
        self._ids = itertools.count(start)

    def create_candidate_solution(self) -> IdCandidate:
        return IdCandidate(next(self._ids))

    def split(self) -> SequentialInitializer:
        return SequentialInitializer(self.start + 1000)


class IncrementMutation:
    def __init__(self) -> None:
        self.calls = 0

    def mutate(self, candidate: IdCandidate) -> None:
        self.calls += 1
        candidate.id += 1

    def split(self) -> IncrementMutation:
        return IncrementMutation()


class NoOpMutation:
    def mutate(self, candidate: IdCandidate) -> None:
        return None

    def split(self) -> NoOpMutation:
        return NoOpMutation()


class FailingMutation:
    def mutate(self, candidate: IdCandidate) -> None:
        raise RuntimeError("mutation failed")

    def split(self) -> FailingMutation:
        return FailingMutation()


class SwapCrossover:
    def __init__(self) -> None:
        self.calls = 0

    def cross(self, c1: IdCandidate, c2: IdCandidate) -> None:
        self.calls += 1
        c1.id, c2.id = c2.id, c1.id

    def split(self) -> SwapCrossover:
        return SwapCrossover()


class CountingFitness:
    """Wraps a fitness function and counts evaluations."""

    def __init__(self, inner) -> None:
        self.inner = inner
        self.kind = inner.kind
        self.calls = 0

    @property
    def problem(self):
        return self.inner.problem

    def fitness(self, candidate):
        self.calls += 1
        return self.inner.fitness(candidate)


class ScalarProblem:
    """Real cost equal to the candidate itself (a plain float)."""

    def cost(self, candidate: float) -> float:
        return float(candidate)

    def min_cost(self) -> float:
        return 0.0


@pytest.fixture
def id_fitness() -> CountingFitness:
    return CountingFitness(NegativeCostFitness(IdProblem(), cost_kind=FitnessKind.INTEGER))


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(12345)
