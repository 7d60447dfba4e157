"""Building blocks of the evolutionary engine: fitness, selection, members and populations."""

from .elite import EliteSet
from .fitness import FitnessFunction, InverseCostFitness, NegativeCostFitness
from .fitness_vector import IntegerFitnessVector, PopulationFitnessVector, RealFitnessVector, fitness_vector_of
from .kinds import FitnessKind
from .member import AdaptiveParameters, PopulationMember
from .population import ElitistPopulation, Population, ReinjectionPolicy
from .selection import (
    BoltzmannSelection,
    ExponentialRankSelection,
    FitnessProportionalSelection,
    LinearRankSelection,
    RandomSelection,
    SelectionOperator,
    TournamentSelection,
    TruncationSelection,
    WeightedSelection,
    build_selection,
)

__all__ = [
    "EliteSet",
    "FitnessFunction",
    "InverseCostFitness",
    "NegativeCostFitness",
    "PopulationFitnessVector",
    "RealFitnessVector",
    "IntegerFitnessVector",
    "fitness_vector_of",
    "FitnessKind",
    "AdaptiveParameters",
    "PopulationMember",
    "Population",
    "ElitistPopulation",
    "ReinjectionPolicy",
    "SelectionOperator",
    "WeightedSelection",
    "LinearRankSelection",
    "ExponentialRankSelection",
    "FitnessProportionalSelection",
    "BoltzmannSelection",
    "TournamentSelection",
    "TruncationSelection",
    "RandomSelection",
    "build_selection",
]
