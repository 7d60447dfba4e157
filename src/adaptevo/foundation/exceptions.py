"""
adaptevo exception hierarchy.

Every error raised by the engine derives from AdaptEvoError. Configuration,
missing-argument and index errors also derive from the matching builtin
(ValueError, TypeError, IndexError) so callers that only know the builtins
can still catch them.

Example:
    try:
        population = ElitistPopulation(20, initializer, fitness, selection, tracker, num_elite=20)
    except ConfigurationError as e:
        print(f"Bad setup: {e.message}")
        print(f"Suggestion: {e.suggestion}")
"""

from __future__ import annotations

from typing import Any


class AdaptEvoError(Exception):
    """
    Base exception for all adaptevo errors.

    Attributes:
        message: Human-readable error description
        suggestion: Optional suggestion for fixing the error
        details: Optional dict with additional context
    """

    def __init__(
        self,
        message: str,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the full error message with suggestion."""
        msg = self.message
        if self.suggestion:
            msg += f"\n\nSuggestion: {self.suggestion}"
        return msg


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(AdaptEvoError, ValueError):
    """Raised when a constructor or config argument is invalid."""

    pass


class InvalidPopulationSizeError(ConfigurationError):
    """Raised when the population size is not positive."""

    def __init__(self, size: int) -> None:
        message = f"Population size must be positive, got {size}."
        super().__init__(message, "Use a population size of at least 1", {"size": size})


class InvalidEliteCountError(ConfigurationError):
    """Raised when the number of elite members is out of range."""

    def __init__(self, num_elite: int, size: int) -> None:
        message = f"Number of elite members must be in [1, {size - 1}], got {num_elite}."
        suggestion = "Elite count must be at least 1 and strictly less than the population size"
        super().__init__(message, suggestion, {"num_elite": num_elite, "size": size})


class InvalidBiasError(ConfigurationError):
    """Raised when a rank-selection bias falls outside [1.0, 2.0]."""

    def __init__(self, c: float) -> None:
        message = f"Rank selection bias must be in the interval [1.0, 2.0], got {c!r}."
        suggestion = "Use c=1.0 for uniform selection and c=2.0 for maximum pressure"
        super().__init__(message, suggestion, {"c": c})


class InvalidMinCostError(ConfigurationError):
    """Raised when a problem's minimum cost cannot anchor a fitness transform."""

    def __init__(self, min_cost: Any, reason: str) -> None:
        message = f"Minimum cost {min_cost!r} is not supported: {reason}."
        suggestion = "Provide a finite lower bound on cost via problem.min_cost(), or use NegativeCostFitness"
        super().__init__(message, suggestion, {"min_cost": min_cost})


class InvalidScaleError(ConfigurationError):
    """Raised when a fitness scale constant is not strictly positive."""

    def __init__(self, scale: float) -> None:
        message = f"Fitness scale must be positive, got {scale!r}."
        super().__init__(message, "Use the default scale=1.0", {"scale": scale})


class InvalidRateError(ConfigurationError):
    """Raised when an operator rate or schedule constant is out of range."""

    def __init__(self, name: str, value: Any, allowed: str) -> None:
        message = f"'{name}' must be {allowed}, got {value!r}."
        super().__init__(message, None, {"name": name, "value": value})


class InvalidSelectionError(ConfigurationError):
    """Raised when an unknown selection operator is requested."""

    def __init__(self, name: str, available: list[str]) -> None:
        message = f"Unknown selection operator '{name}'."
        suggestion = f"Available selection operators: {', '.join(available)}"
        super().__init__(message, suggestion, {"name": name, "available": available})


# =============================================================================
# Missing Arguments
# =============================================================================


class MissingArgumentError(AdaptEvoError, TypeError):
    """Raised when a required collaborator is None."""

    def __init__(self, argument: str) -> None:
        message = f"Required argument '{argument}' is missing."
        super().__init__(message, f"Pass a non-None '{argument}'", {"argument": argument})


# =============================================================================
# Index Errors
# =============================================================================


class FitnessIndexError(AdaptEvoError, IndexError):
    """Raised on out-of-range access to a fitness vector or population."""

    def __init__(self, index: int, size: int) -> None:
        message = f"Index {index} is outside the interval [0, {size})."
        super().__init__(message, None, {"index": index, "size": size})


# =============================================================================
# Range Errors
# =============================================================================


class FitnessOverflowError(AdaptEvoError, OverflowError):
    """Raised when an integer fitness does not fit in int64."""

    def __init__(self, value: int) -> None:
        message = f"Integer fitness {value} is outside the int64 range."
        suggestion = "Keep integer costs within (int64 min, int64 max], or use a REAL cost kind"
        super().__init__(message, suggestion, {"value": value})


def require(**arguments: Any) -> None:
    """Raise MissingArgumentError for the first keyword argument that is None."""
    for name, value in arguments.items():
        if value is None:
            raise MissingArgumentError(name)


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    # Base
    "AdaptEvoError",
    # Configuration
    "ConfigurationError",
    "InvalidPopulationSizeError",
    "InvalidEliteCountError",
    "InvalidBiasError",
    "InvalidMinCostError",
    "InvalidScaleError",
    "InvalidRateError",
    "InvalidSelectionError",
    # Missing arguments
    "MissingArgumentError",
    # Index
    "FitnessIndexError",
    # Range
    "FitnessOverflowError",
    "require",
]
