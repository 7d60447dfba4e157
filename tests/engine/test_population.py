"""Population lifecycle: construction, generation cycle, elitism, split."""

from __future__ import annotations

import numpy as np
import pytest
from conftest import (
    CountingFitness,
    FailingMutation,
    IdCandidate,
    IdProblem,
    IncrementMutation,
    NoOpMutation,
    ScalarProblem,
    SequentialInitializer,
    SwapCrossover,
)

from adaptevo.engine.algorithm.generation import AdaptiveGeneration, SimpleGeneration
from adaptevo.engine.components.fitness import InverseCostFitness, NegativeCostFitness
from adaptevo.engine.components.kinds import FitnessKind
from adaptevo.engine.components.population import ElitistPopulation, Population, ReinjectionPolicy
from adaptevo.engine.components.selection import LinearRankSelection, TruncationSelection
from adaptevo.foundation.exceptions import (
    ConfigurationError,
    FitnessIndexError,
    InvalidEliteCountError,
    InvalidPopulationSizeError,
    MissingArgumentError,
)
from adaptevo.foundation.tracker import ProgressTracker


def _id_fitness():
    return NegativeCostFitness(IdProblem(), cost_kind=FitnessKind.INTEGER)


def _plain(size=10, fitness=None, selection=None, **kwargs):
    return Population(
        size,
        SequentialInitializer(),
        fitness or _id_fitness(),
        selection or LinearRankSelection(rng=0),
        ProgressTracker(),
        rng=1,
        **kwargs,
    )


def _elitist(size=20, num_elite=2, fitness=None, selection=None, **kwargs):
    return ElitistPopulation(
        size,
        SequentialInitializer(),
        fitness or _id_fitness(),
        selection or LinearRankSelection(rng=0),
        ProgressTracker(),
        num_elite,
        rng=1,
        **kwargs,
    )


class _NestedInitializer:
    """Creates [[1]], [[2]], ...: lists whose copy() would share the inner list."""

    def __init__(self) -> None:
        self._next = 1

    def create_candidate_solution(self) -> list[list[int]]:
        candidate = [[self._next]]
        self._next += 1
        return candidate

    def split(self) -> _NestedInitializer:
        return _NestedInitializer()


class _NestedProblem:
    def cost(self, candidate: list[list[int]]) -> int:
        return -candidate[0][0]

    def min_cost(self) -> int:
        return -1_000_000


class _SubtractMutation:
    def mutate(self, candidate: list[list[int]]) -> None:
        candidate[0][0] -= 100

    def split(self) -> _SubtractMutation:
        return _SubtractMutation()


class _NoCrossover:
    def cross(self, c1, c2) -> None:
        return None

    def split(self) -> _NoCrossover:
        return _NoCrossover()


class TestConstruction:
    @pytest.mark.parametrize("size", [0, -3])
    def test_size_must_be_positive(self, size):
        with pytest.raises(InvalidPopulationSizeError):
            _plain(size)

    @pytest.mark.parametrize("num_elite", [0, -1, 20, 21])
    def test_elite_count_range(self, num_elite):
        with pytest.raises(InvalidEliteCountError):
            _elitist(20, num_elite)

    def test_size_one_cannot_be_elitist(self):
        with pytest.raises(InvalidEliteCountError):
            _elitist(1, 1)

    @pytest.mark.parametrize("missing", ["initializer", "fitness", "selection", "tracker"])
    def test_missing_collaborator(self, missing):
        args = {
            "initializer": SequentialInitializer(),
            "fitness": _id_fitness(),
            "selection": LinearRankSelection(rng=0),
            "tracker": ProgressTracker(),
        }
        args[missing] = None
        with pytest.raises(MissingArgumentError):
            Population(10, args["initializer"], args["fitness"], args["selection"], args["tracker"])
        with pytest.raises(MissingArgumentError):
            ElitistPopulation(10, args["initializer"], args["fitness"], args["selection"], args["tracker"], 2)

    def test_unknown_reinjection_policy(self):
        with pytest.raises(ConfigurationError):
            _elitist(reinjection="sometimes")

    def test_sizes(self):
        pop = _elitist(20, 2)
        assert pop.mutable_size() == 18
        assert pop.num_elite == 2
        assert pop.size() == 0
        pop.init()
        assert pop.size() == 20
        assert _plain(7).mutable_size() == 7


class TestGenerationCycle:
    def test_init_evaluates_every_member(self):
        fitness = CountingFitness(_id_fitness())
        pop = _plain(10, fitness=fitness)
        pop.init()
        assert fitness.calls == 10
        assert pop.evaluations == 10
        assert pop.fitness_vector().to_int_array().tolist() == list(range(11, 21))
        assert pop.fitness_of_most_fit() == 20
        assert pop.most_fit().solution.id == 10
        assert pop.most_fit().cost == -20
        assert pop.progress_tracker.cost == -20

    def test_only_modified_offspring_are_reevaluated(self):
        fitness = CountingFitness(_id_fitness())
        pop = _plain(10, fitness=fitness, num_params=2)
        pop.init()
        pop.select()
        pop.get(3).id += 100
        pop.update_fitness(3)
        pop.replace()
        assert fitness.calls == 11
        assert 111 <= max(pop.fitness_vector()) <= 120
        assert pop.fitness_of_most_fit() >= 111

    def test_fitness_vector_is_a_snapshot(self):
        pop = _plain(5)
        pop.init()
        before = pop.fitness_vector()
        pop.select()
        for i in range(pop.mutable_size()):
            pop.get(i).id += 1
            pop.update_fitness(i)
        pop.replace()
        assert list(before) == [11, 12, 13, 14, 15]

    def test_offspring_access_requires_select(self):
        pop = _plain(5, num_params=2)
        pop.init()
        with pytest.raises(FitnessIndexError):
            pop.get(0)
        with pytest.raises(RuntimeError):
            pop.replace()
        pop.select()
        with pytest.raises(FitnessIndexError):
            pop.get(5)
        with pytest.raises(FitnessIndexError):
            pop.get_parameter(0, 2)
        assert 0.1 <= pop.get_parameter(0, 1) <= 1.0

    def test_committed_members_out_of_range(self):
        pop = _plain(3)
        pop.init()
        with pytest.raises(FitnessIndexError):
            pop.get_fitness(3)
        with pytest.raises(FitnessIndexError):
            pop.candidate_at(-1)

    def test_parameters_come_from_candidate_without_num_params(self):
        class Tagged(IdCandidate):
            def __init__(self, ident):
                super().__init__(ident)
                self.parameters = np.array([0.25, 0.75])

            def copy(self):
                return Tagged(self.id)

        class TaggedInitializer(SequentialInitializer):
            def create_candidate_solution(self):
                return Tagged(super().create_candidate_solution().id)

        pop = Population(4, TaggedInitializer(), _id_fitness(), LinearRankSelection(rng=0), ProgressTracker())
        pop.init()
        pop.select()
        assert pop.get_parameter(2, 1) == 0.75

    def test_missing_parameters(self):
        pop = _plain(4)
        pop.init()
        pop.select()
        with pytest.raises(TypeError):
            pop.get_parameter(0, 0)

    def test_failed_generation_leaves_population_unchanged(self):
        pop = _plain(8, num_params=2)
        pop.init()
        before = list(pop.fitness_vector())
        ids = [pop.candidate_at(i).id for i in range(pop.size())]
        failing = SimpleGeneration(FailingMutation(), SwapCrossover(), mutation_rate=1.0, crossover_rate=1.0, rng=0)
        with pytest.raises(RuntimeError, match="mutation failed"):
            failing.apply(pop)
        assert list(pop.fitness_vector()) == before
        assert [pop.candidate_at(i).id for i in range(pop.size())] == ids
        good = SimpleGeneration(IncrementMutation(), SwapCrossover(), mutation_rate=1.0, crossover_rate=0.5, rng=0)
        good.apply(pop)
        assert pop.size() == 8

    def test_real_valued_population(self):
        class Initializer:
            def __init__(self):
                self.rng = np.random.default_rng(3)

            def create_candidate_solution(self):
                return float(self.rng.uniform(1.0, 10.0))

            def split(self):
                return Initializer()

        pop = Population(
            6, Initializer(), InverseCostFitness(ScalarProblem()), LinearRankSelection(rng=0), ProgressTracker()
        )
        pop.init()
        assert pop.kind is FitnessKind.REAL
        values = pop.fitness_vector().to_float_array()
        assert np.all((values > 0.0) & (values < 0.5))

    def test_single_member_population_runs(self):
        pop = _plain(1, num_params=2)
        pop.init()
        AdaptiveGeneration(IncrementMutation(), SwapCrossover(), rng=0).apply(pop)
        assert pop.size() == 1


class TestElitism:
    def test_elite_slots_hold_the_best_members(self):
        pop = _elitist(20, 2, num_params=2)
        pop.init()
        AdaptiveGeneration(IncrementMutation(), SwapCrossover(), rng=2).apply(pop)
        assert pop.size() == 20
        assert pop.get_fitness(18) == 30
        assert pop.get_fitness(19) == 29
        assert pop.candidate_at(18).id == 20
        assert pop.candidate_at(19).id == 19

    def test_best_never_decreases_and_elites_are_untouched(self):
        pop = _elitist(12, 3, num_params=2)
        pop.init()
        gen = AdaptiveGeneration(IncrementMutation(), SwapCrossover(), rng=4)
        lam = pop.mutable_size()
        elite_best = pop.fitness_of_most_fit()
        for _ in range(25):
            snapshot = [(pop.candidate_at(i), pop.candidate_at(i).id) for i in range(lam, pop.size())]
            best_before = pop.fitness_of_most_fit()
            gen.apply(pop)
            assert pop.fitness_of_most_fit() >= best_before
            assert pop.get_fitness(lam) >= elite_best
            elite_best = pop.get_fitness(lam)
            assert pop.get_fitness(lam) <= pop.fitness_of_most_fit()
            assert all(candidate.id == ident for candidate, ident in snapshot)

    def test_elite_slots_lag_one_generation(self):
        pop = _elitist(12, 2, selection=TruncationSelection(1, rng=0))
        pop.init()
        gen = SimpleGeneration(IncrementMutation(), SwapCrossover(), mutation_rate=1.0, crossover_rate=0.0, rng=0)
        lam = pop.mutable_size()
        for _ in range(6):
            best_before = pop.fitness_of_most_fit()
            gen.apply(pop)
            # every offspring copies the best member and improves on it
            assert pop.fitness_of_most_fit() == best_before + 1
            assert pop.get_fitness(lam) == best_before
            assert max(pop.get_fitness(i) for i in range(lam)) == pop.fitness_of_most_fit()

    def test_elite_with_nested_list_candidates_is_not_mutated(self):
        pop = ElitistPopulation(
            6,
            _NestedInitializer(),
            NegativeCostFitness(_NestedProblem(), cost_kind=FitnessKind.INTEGER),
            LinearRankSelection(rng=0),
            ProgressTracker(),
            1,
            rng=1,
        )
        pop.init()
        gen = SimpleGeneration(_SubtractMutation(), _NoCrossover(), mutation_rate=1.0, crossover_rate=0.0, rng=0)
        for _ in range(5):
            gen.apply(pop)
        assert pop.candidate_at(5) == [[6]]
        assert pop.get_fitness(5) == 6
        for i in range(pop.size()):
            assert pop.get_fitness(i) == pop.candidate_at(i)[0][0]
        assert pop.fitness_of_most_fit() == 6
        assert pop.most_fit().solution == [[6]]

    @pytest.mark.parametrize(
        "policy, expected_last_slot",
        [(ReinjectionPolicy.EVERY_GENERATION, 30), (ReinjectionPolicy.ON_IMPROVEMENT, 29)],
    )
    def test_reinjection_policy(self, policy, expected_last_slot):
        pop = _elitist(20, 2, selection=TruncationSelection(1, rng=0), reinjection=policy)
        pop.init()
        gen = SimpleGeneration(NoOpMutation(), SwapCrossover(), mutation_rate=1.0, crossover_rate=0.0, rng=0)
        gen.apply(pop)
        assert (pop.get_fitness(18), pop.get_fitness(19)) == (30, 29)
        gen.apply(pop)
        assert pop.get_fitness(18) == 30
        assert pop.get_fitness(19) == expected_last_slot
        assert pop.reinjection is policy


class TestSplit:
    def test_split_population_is_independent(self):
        pop = _elitist(10, 2, num_params=2)
        pop.init()
        before = list(pop.fitness_vector())
        ids = [pop.candidate_at(i).id for i in range(pop.size())]
        best = pop.fitness_of_most_fit()

        clone = pop.split()
        assert isinstance(clone, ElitistPopulation)
        assert clone.size() == 0
        assert clone.progress_tracker is pop.progress_tracker
        assert clone.fitness_function is pop.fitness_function
        assert clone.selection is not pop.selection
        clone.init()
        gen = AdaptiveGeneration(IncrementMutation(), SwapCrossover(), rng=0)
        for _ in range(10):
            gen.apply(clone)

        assert list(pop.fitness_vector()) == before
        assert [pop.candidate_at(i).id for i in range(pop.size())] == ids
        assert pop.fitness_of_most_fit() == best
        assert clone.fitness_of_most_fit() > best

    def test_evolution_pauses_on_tracker(self):
        pop = _plain(4)
        assert not pop.evolution_is_paused()
        pop.progress_tracker.stop()
        assert pop.evolution_is_paused()
        tracker = ProgressTracker()
        pop.progress_tracker = tracker
        assert not pop.evolution_is_paused()
        with pytest.raises(MissingArgumentError):
            pop.progress_tracker = None
