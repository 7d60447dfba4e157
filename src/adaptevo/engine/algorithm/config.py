"""
Configuration helpers for the adaptive evolutionary algorithm.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any
from collections.abc import Mapping

from adaptevo.foundation.exceptions import ConfigurationError

POPULATION_CONFIG_KEYS = {"size", "num_elite", "num_params", "reinjection"}
EVOLUTION_CONFIG_KEYS = {"population", "selection", "selection_params", "seed"}


def _reject_unknown(raw: Mapping[str, Any], allowed: set[str], where: str) -> None:
    unknown = sorted(set(raw) - allowed)
    if unknown:
        raise ConfigurationError(
            f"Unknown {where} keys: {', '.join(unknown)}.",
            suggestion=f"Allowed keys: {', '.join(sorted(allowed))}",
            details={"unknown": unknown},
        )


@dataclass(frozen=True)
class PopulationConfig:
    """
    Shape of the population.

    ``num_elite = 0`` builds a plain population, anything else an elitist one
    (1 <= num_elite < size, checked when the population is built).
    """

    size: int
    num_elite: int = 0
    num_params: int = 2
    reinjection: str = "every_generation"

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> PopulationConfig:
        _reject_unknown(config, POPULATION_CONFIG_KEYS, "population config")
        if "size" not in config:
            raise ConfigurationError("Missing required configuration: 'size'.", suggestion="Add 'size' to the population config")
        return cls(
            size=int(config["size"]),
            num_elite=int(config.get("num_elite", 0)),
            num_params=int(config.get("num_params", 2)),
            reinjection=str(config.get("reinjection", "every_generation")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class EvolutionConfig:
    """Population shape, selection operator (by registry name) and seed."""

    population: PopulationConfig
    selection: str = "linear_rank"
    selection_params: dict[str, Any] = field(default_factory=dict)
    seed: int | None = None

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> EvolutionConfig:
        _reject_unknown(config, EVOLUTION_CONFIG_KEYS, "evolution config")
        raw_pop = config.get("population")
        if raw_pop is None:
            raise ConfigurationError(
                "Missing required configuration: 'population'.",
                suggestion="Add a 'population' mapping with at least 'size'",
            )
        population = raw_pop if isinstance(raw_pop, PopulationConfig) else PopulationConfig.from_dict(raw_pop)
        seed = config.get("seed")
        return cls(
            population=population,
            selection=str(config.get("selection", "linear_rank")),
            selection_params=dict(config.get("selection_params") or {}),
            seed=int(seed) if seed is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "population": self.population.to_dict(),
            "selection": self.selection,
            "selection_params": dict(self.selection_params),
            "seed": self.seed,
        }


__all__ = ["PopulationConfig", "EvolutionConfig"]
