from __future__ import annotations

import heapq
import itertools
from collections.abc import Iterable, Iterator
from typing import Any

import numpy as np

from adaptevo.engine.components.member import PopulationMember


def _same_candidate(a: Any, b: Any) -> bool:
    if a is b:
        return True
    if isinstance(a, np.ndarray) or isinstance(b, np.ndarray):
        return bool(np.array_equal(a, b))
    try:
        result = a == b
        if isinstance(result, np.ndarray):
            return bool(result.all())
        return bool(result)
    except ValueError:
        # containers of arrays: == compares elementwise and has no truth value
        if isinstance(a, (list, tuple)) and isinstance(b, (list, tuple)):
            return len(a) == len(b) and all(_same_candidate(x, y) for x, y in zip(a, b))
        if isinstance(a, dict) and isinstance(b, dict):
            return a.keys() == b.keys() and all(_same_candidate(a[k], b[k]) for k in a)
        return False


class EliteSet:
    """
    The ``num_elite`` fittest distinct members offered so far.

    A min-heap on fitness; an offer replaces the weakest elite only when it is
    strictly fitter. A candidate equal to one already in the set is ignored,
    so the set never fills up with clones. Iteration yields members from the
    fittest down; ties keep the order in which they entered.
    """

    def __init__(self, num_elite: int) -> None:
        self.num_elite = num_elite
        self._heap: list[tuple[float | int, int, PopulationMember]] = []
        self._counter = itertools.count()

    def clear(self) -> None:
        self._heap.clear()
        self._counter = itertools.count()

    def offer(self, member: PopulationMember) -> bool:
        """Offer a member; returns True if it entered the set."""
        if len(self._heap) >= self.num_elite and not member.fitness > self._heap[0][0]:
            return False
        if any(_same_candidate(member.candidate, e.candidate) for _, _, e in self._heap):
            return False
        # negative counter: among equal fitness the newest sits at the heap root and leaves first
        entry = (member.fitness, -next(self._counter), member)
        if len(self._heap) < self.num_elite:
            heapq.heappush(self._heap, entry)
        else:
            heapq.heapreplace(self._heap, entry)
        return True

    def offer_all(self, members: Iterable[PopulationMember]) -> None:
        for member in members:
            self.offer(member)

    def __len__(self) -> int:
        return len(self._heap)

    def __iter__(self) -> Iterator[PopulationMember]:
        ordered = sorted(self._heap, key=lambda e: (e[0], e[1]), reverse=True)
        return (member for _, _, member in ordered)

    def best(self) -> PopulationMember | None:
        if not self._heap:
            return None
        return next(iter(self))


__all__ = ["EliteSet"]
