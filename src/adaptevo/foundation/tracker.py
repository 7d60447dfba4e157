"""
Best-so-far recorder shared by every split copy of a search.
"""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Any

from adaptevo.foundation.problem import duplicate


@dataclass(frozen=True)
class SolutionCostPair:
    """A candidate solution together with its cost."""

    solution: Any
    cost: float | int
    is_known_optimal: bool = False


class ProgressTracker:
    """
    Thread-safe record of the lowest-cost solution found by any worker.

    Unlike the other components this object is meant to be shared: split
    populations hold the same tracker. Updates take a lock; reads do not.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._cost: float | int = math.inf
        self._solution: Any = None
        self._found_best = False
        self._stopped = False
        self._origin = time.monotonic()
        self._when = self._origin

    def update(self, cost: float | int, solution: Any, is_known_optimal: bool = False) -> float | int:
        """
        Record solution if its cost beats the current best.

        Returns the best cost after the update, which is lower than cost when
        another worker already reported something better.
        """
        with self._lock:
            if self._solution is None or cost < self._cost:
                self._cost = cost
                self._solution = duplicate(solution)
                self._found_best = is_known_optimal
                self._when = time.monotonic()
            return self._cost

    def update_pair(self, pair: SolutionCostPair) -> float | int:
        return self.update(pair.cost, pair.solution, pair.is_known_optimal)

    @property
    def cost(self) -> float | int:
        return self._cost

    @property
    def solution(self) -> Any:
        return self._solution

    def solution_cost_pair(self) -> SolutionCostPair | None:
        with self._lock:
            if self._solution is None:
                return None
            return SolutionCostPair(duplicate(self._solution), self._cost, self._found_best)

    @property
    def found_best(self) -> bool:
        return self._found_best

    @property
    def elapsed(self) -> float:
        """Seconds from tracker creation to the most recent improvement."""
        return self._when - self._origin

    def stop(self) -> None:
        """Ask every search sharing this tracker to stop at its next check."""
        self._stopped = True

    def start(self) -> None:
        self._stopped = False

    @property
    def is_stopped(self) -> bool:
        return self._stopped


__all__ = ["ProgressTracker", "SolutionCostPair"]
