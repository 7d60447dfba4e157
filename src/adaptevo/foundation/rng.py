from __future__ import annotations

import numpy as np


def ensure_rng(rng: np.random.Generator | int | None = None) -> np.random.Generator:
    """Accept a Generator, a seed, or None and return a Generator."""
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


def spawn_rng(rng: np.random.Generator) -> np.random.Generator:
    """
    Child generator for a split copy.

    Children spawned from the same parent have independent streams, and spawning
    does not consume values from the parent's stream.
    """
    return rng.spawn(1)[0]


__all__ = ["ensure_rng", "spawn_rng"]
