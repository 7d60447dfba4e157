"""
adaptevo: a self-adaptive evolutionary engine.

Populations of candidate solutions, cost-to-fitness transforms, rank and
fitness based selection, and generations whose crossover and mutation rates
evolve with each candidate. Every stateful component supports ``split()`` for
running independent copies in parallel.
"""

from .engine.algorithm import (
    AdaptiveEvolutionaryAlgorithm,
    AdaptiveGeneration,
    AdaptiveMutationOnlyEvolutionaryAlgorithm,
    AdaptiveMutationOnlyGeneration,
    EvolutionConfig,
    PopulationConfig,
    SimpleGeneration,
)
from .engine.components import (
    BoltzmannSelection,
    ElitistPopulation,
    ExponentialRankSelection,
    FitnessKind,
    FitnessProportionalSelection,
    IntegerFitnessVector,
    InverseCostFitness,
    LinearRankSelection,
    NegativeCostFitness,
    Population,
    PopulationFitnessVector,
    RandomSelection,
    RealFitnessVector,
    ReinjectionPolicy,
    SelectionOperator,
    TournamentSelection,
    TruncationSelection,
    build_selection,
)
from .foundation.logging import configure_adaptevo_logging
from .foundation.tracker import ProgressTracker, SolutionCostPair
from .foundation.version import __version__

__all__ = [
    "AdaptiveEvolutionaryAlgorithm",
    "AdaptiveGeneration",
    "AdaptiveMutationOnlyEvolutionaryAlgorithm",
    "AdaptiveMutationOnlyGeneration",
    "SimpleGeneration",
    "EvolutionConfig",
    "PopulationConfig",
    "Population",
    "ElitistPopulation",
    "ReinjectionPolicy",
    "FitnessKind",
    "NegativeCostFitness",
    "InverseCostFitness",
    "PopulationFitnessVector",
    "RealFitnessVector",
    "IntegerFitnessVector",
    "SelectionOperator",
    "LinearRankSelection",
    "ExponentialRankSelection",
    "FitnessProportionalSelection",
    "BoltzmannSelection",
    "TournamentSelection",
    "TruncationSelection",
    "RandomSelection",
    "build_selection",
    "ProgressTracker",
    "SolutionCostPair",
    "configure_adaptevo_logging",
    "__version__",
]
