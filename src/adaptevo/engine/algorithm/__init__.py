from .adaptive import AdaptiveEvolutionaryAlgorithm, AdaptiveMutationOnlyEvolutionaryAlgorithm
from .config import EvolutionConfig, PopulationConfig
from .generation import AdaptiveGeneration, AdaptiveMutationOnlyGeneration, Generation, SimpleGeneration

__all__ = [
    "AdaptiveEvolutionaryAlgorithm",
    "AdaptiveMutationOnlyEvolutionaryAlgorithm",
    "EvolutionConfig",
    "PopulationConfig",
    "Generation",
    "AdaptiveGeneration",
    "AdaptiveMutationOnlyGeneration",
    "SimpleGeneration",
]
