"""
OneMax with self-adaptive crossover and mutation rates.

The problem and operators below are plain user code: the engine only needs
``cost``/``min_cost``, ``create_candidate_solution``, ``mutate``, ``cross``
and ``split``.
"""

from __future__ import annotations

import argparse
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from adaptevo import (
    AdaptiveEvolutionaryAlgorithm,
    InverseCostFitness,
    ProgressTracker,
    configure_adaptevo_logging,
)


class OneMax:
    """Cost = number of zero bits; the all-ones vector has cost 0."""

    def __init__(self, n_bits: int) -> None:
        self.n_bits = n_bits

    def cost(self, bits: np.ndarray) -> int:
        return int(self.n_bits - bits.sum())

    def min_cost(self) -> int:
        return 0


class RandomBits:
    def __init__(self, n_bits: int, rng: np.random.Generator) -> None:
        self.n_bits = n_bits
        self.rng = rng

    def create_candidate_solution(self) -> np.ndarray:
        return self.rng.integers(0, 2, size=self.n_bits, dtype=np.int8)

    def split(self) -> RandomBits:
        return RandomBits(self.n_bits, self.rng.spawn(1)[0])


class BitFlipMutation:
    """Flips each bit with probability 1/n (at least one bit)."""

    def __init__(self, rng: np.random.Generator) -> None:
        self.rng = rng

    def mutate(self, bits: np.ndarray) -> None:
        n = bits.shape[0]
        flips = self.rng.random(n) < 1.0 / n
        if not flips.any():
            flips[self.rng.integers(n)] = True
        bits[flips] ^= 1

    def split(self) -> BitFlipMutation:
        return BitFlipMutation(self.rng.spawn(1)[0])


class UniformCrossover:
    def __init__(self, rng: np.random.Generator) -> None:
        self.rng = rng

    def cross(self, a: np.ndarray, b: np.ndarray) -> None:
        mask = self.rng.random(a.shape[0]) < 0.5
        a[mask], b[mask] = b[mask], a[mask].copy()

    def split(self) -> UniformCrossover:
        return UniformCrossover(self.rng.spawn(1)[0])


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--bits", type=int, default=64)
    parser.add_argument("--population", type=int, default=40)
    parser.add_argument("--elite", type=int, default=2)
    parser.add_argument("--generations", type=int, default=400)
    parser.add_argument("--workers", type=int, default=1)
    parser.add_argument("--seed", type=int, default=1)
    args = parser.parse_args()

    configure_adaptevo_logging()
    rng = np.random.default_rng(args.seed)
    problem = OneMax(args.bits)
    tracker = ProgressTracker()
    ea = AdaptiveEvolutionaryAlgorithm.create(
        args.population,
        BitFlipMutation(rng.spawn(1)[0]),
        UniformCrossover(rng.spawn(1)[0]),
        RandomBits(args.bits, rng.spawn(1)[0]),
        InverseCostFitness(problem, cost_kind="integer"),
        num_elite=args.elite,
        tracker=tracker,
        seed=args.seed,
    )
    # one split copy per extra worker; they share only the tracker
    workers = [ea] + [ea.split() for _ in range(args.workers - 1)]
    with ThreadPoolExecutor(max_workers=len(workers)) as pool:
        list(pool.map(lambda w: w.optimize(args.generations), workers))

    best = tracker.solution_cost_pair()
    evaluations = sum(w.total_run_length for w in workers)
    print(f"best cost {best.cost} (optimal: {best.is_known_optimal}) after {evaluations} evaluations")
    print("".join(str(int(b)) for b in best.solution))


if __name__ == "__main__":
    main()
