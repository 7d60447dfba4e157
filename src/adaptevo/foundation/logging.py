"""
Opt-in console output for the ``adaptevo`` logger tree.

Modules log through ``logging.getLogger(__name__)`` and never attach handlers.
What they emit:

- INFO from ``adaptevo.engine.algorithm.adaptive``: the start of each run and
  its totals (generations, fitness evaluations, best fitness).
- DEBUG from ``adaptevo.engine.components.population``: initialization, every
  new best fitness, and elite commits.
- DEBUG from ``adaptevo.engine.algorithm.generation``: evaluations per generation.
- DEBUG from ``adaptevo.engine.components.selection``: operators built by name.

Per-generation DEBUG output is verbose for long runs; INFO is the usual level.
"""

from __future__ import annotations

import logging

_FORMAT = "%(levelname)s %(name)s: %(message)s"


def configure_adaptevo_logging(*, level: int = logging.INFO) -> None:
    """
    Send ``adaptevo.*`` records to stderr at ``level``.

    Does nothing when the root logger or the ``adaptevo`` logger already has a
    handler, so an application's own logging setup wins.
    """
    engine_logger = logging.getLogger("adaptevo")
    if logging.getLogger().handlers or engine_logger.handlers:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    engine_logger.addHandler(handler)
    engine_logger.setLevel(level)
    # records would otherwise reach a root handler added later and print twice
    engine_logger.propagate = False


__all__ = ["configure_adaptevo_logging"]
