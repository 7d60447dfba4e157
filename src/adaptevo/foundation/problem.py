"""
Capabilities the engine expects from its collaborators.

Problems, candidate representations, initializers and variation operators are
supplied by the caller; these protocols describe the methods the engine calls.
"""

from __future__ import annotations

import copy as _copy
from typing import Any, Protocol, TypeVar, runtime_checkable

import numpy as np

T = TypeVar("T")

_SHALLOW_COPY_TYPES = (list, dict, set, tuple, frozenset)


@runtime_checkable
class Copyable(Protocol):
    def copy(self) -> Any: ...


class ProblemProtocol(Protocol):
    """A minimization problem with real-valued cost."""

    def cost(self, candidate: Any) -> float: ...

    def min_cost(self) -> float: ...


class IntegerCostProblemProtocol(Protocol):
    """A minimization problem whose cost is an integer."""

    def cost(self, candidate: Any) -> int: ...

    def min_cost(self) -> int: ...


class InitializerProtocol(Protocol):
    def create_candidate_solution(self) -> Any: ...

    def split(self) -> InitializerProtocol: ...


class MutationOperatorProtocol(Protocol):
    def mutate(self, candidate: Any) -> None: ...

    def split(self) -> MutationOperatorProtocol: ...


class CrossoverOperatorProtocol(Protocol):
    def cross(self, c1: Any, c2: Any) -> None: ...

    def split(self) -> CrossoverOperatorProtocol: ...


@runtime_checkable
class ParameterizedCandidate(Protocol):
    """A candidate that carries its own self-adaptive parameters (crossover rate, mutation rate, ...)."""

    parameters: np.ndarray


def duplicate(candidate: T) -> T:
    """
    Return an independent copy of a candidate, preferring its own copy() method.

    Builtin containers are deep-copied: their copy() is shallow and would leave
    nested objects shared between the original and the copy.
    """
    if isinstance(candidate, _SHALLOW_COPY_TYPES):
        return _copy.deepcopy(candidate)
    if isinstance(candidate, Copyable):
        return candidate.copy()
    return _copy.deepcopy(candidate)


def min_cost_of(problem: Any) -> Any:
    """Lower bound on cost reported by the problem, or -inf when it reports none."""
    fn = getattr(problem, "min_cost", None)
    if fn is None:
        return float("-inf")
    return fn()


__all__ = [
    "Copyable",
    "ProblemProtocol",
    "IntegerCostProblemProtocol",
    "InitializerProtocol",
    "MutationOperatorProtocol",
    "CrossoverOperatorProtocol",
    "ParameterizedCandidate",
    "duplicate",
    "min_cost_of",
]
