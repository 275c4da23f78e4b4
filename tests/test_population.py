"""
🧪 Population and generation strategy tests
"""

import pytest

from genetic import (
    FitnessEvaluator,
    Generation,
    PerformanceGenerationStrategy,
    Population,
    PopulationException,
    TrackingGenerationStrategy
)
from tests.conftest import IntegerChromosome, make_evaluated_population, sum_fitness


class TestGeneration:
    """Single generation snapshot"""

    def test_requires_positive_number_and_two_chromosomes(self):
        with pytest.raises(ValueError):
            Generation(0, [IntegerChromosome(), IntegerChromosome()])
        with pytest.raises(ValueError):
            Generation(1, [IntegerChromosome()])

    def test_end_sorts_best_first_and_is_stable(self, chromosome_factory):
        a = chromosome_factory([1, 1], fitness=2.0)
        b = chromosome_factory([5, 5], fitness=10.0)
        c = chromosome_factory([1, 1], fitness=2.0)
        generation = Generation(1, [a, b, c])

        generation.end()

        assert generation.chromosomes == [b, a, c]
        assert generation.best_chromosome is b
        assert generation.is_ended

    def test_end_requires_every_fitness(self, chromosome_factory):
        generation = Generation(1, [chromosome_factory([1, 2], fitness=1.0),
                                    chromosome_factory([3, 4])])
        with pytest.raises(PopulationException, match="without fitness"):
            generation.end()


class TestPopulation:
    """Population lifecycle"""

    @pytest.mark.parametrize("min_size,max_size", [(1, 5), (5, 4)])
    def test_invalid_bounds(self, min_size, max_size):
        with pytest.raises(PopulationException):
            Population(min_size, max_size, IntegerChromosome())

    def test_adam_chromosome_is_required(self):
        with pytest.raises(TypeError):
            Population(2, 2, None)

    def test_initial_generation(self):
        population = Population(5, 10, IntegerChromosome())
        population.create_initial_generation()

        generation = population.current_generation
        assert generation.number == 1
        assert len(generation) == 5
        assert population.generations_number == 0
        assert all(c.fitness is None for c in generation.chromosomes)

    def test_end_current_generation_counts_and_records(self):
        population = make_evaluated_population()

        assert population.generations_number == 1
        assert population.best_chromosome is population.current_generation.chromosomes[0]
        assert population.generations == [population.current_generation]

    def test_best_chromosome_has_maximum_fitness(self):
        population = make_evaluated_population(min_size=10, max_size=10)
        best = population.best_chromosome

        assert best.fitness == max(c.fitness for c in population.current_generation.chromosomes)
        assert best.fitness == sum_fitness(best)

    def test_end_twice_raises(self):
        population = make_evaluated_population()
        with pytest.raises(PopulationException, match="already ended"):
            population.end_current_generation()

    def test_end_without_generation_raises(self):
        with pytest.raises(PopulationException):
            Population(2, 2, IntegerChromosome()).end_current_generation()

    def test_new_generation_outside_bounds_raises(self):
        population = Population(4, 6, IntegerChromosome())
        with pytest.raises(PopulationException, match="between 4 and 6"):
            population.create_new_generation([IntegerChromosome() for _ in range(3)])
        with pytest.raises(PopulationException):
            population.create_new_generation([IntegerChromosome() for _ in range(7)])

    def test_new_generation_numbering_follows_completed_count(self):
        population = make_evaluated_population(min_size=4, max_size=4)
        population.create_new_generation([IntegerChromosome() for _ in range(4)])

        assert population.current_generation.number == 2
        population.end_current_generation(FitnessEvaluator(sum_fitness))
        assert population.generations_number == 2

    def test_adam_returning_none_raises(self):
        class BrokenChromosome(IntegerChromosome):
            def create_new(self):
                return None

        population = Population(2, 2, BrokenChromosome())
        with pytest.raises(PopulationException, match="None chromosome"):
            population.create_initial_generation()

    def test_create_initial_generation_resets(self):
        population = make_evaluated_population()
        population.create_initial_generation()

        assert population.generations_number == 0
        assert population.generations == []
        assert population.best_chromosome is None


class TestGenerationStrategies:
    """History retention policies"""

    def _run_generations(self, strategy, count):
        evaluator = FitnessEvaluator(sum_fitness)
        population = Population(2, 2, IntegerChromosome(), strategy)
        population.create_initial_generation()
        population.end_current_generation(evaluator)
        for _ in range(count - 1):
            population.create_new_generation([IntegerChromosome(), IntegerChromosome()])
            population.end_current_generation(evaluator)
        return population

    def test_performance_keeps_last_generations(self):
        population = self._run_generations(PerformanceGenerationStrategy(3), 10)

        assert population.generations_number == 10
        assert [g.number for g in population.generations] == [8, 9, 10]

    def test_performance_single_generation(self):
        population = self._run_generations(PerformanceGenerationStrategy(1), 5)
        assert population.generations == [population.current_generation]

    def test_performance_needs_at_least_one(self):
        with pytest.raises(ValueError):
            PerformanceGenerationStrategy(0)

    def test_tracking_keeps_everything(self):
        population = self._run_generations(TrackingGenerationStrategy(), 6)
        assert [g.number for g in population.generations] == [1, 2, 3, 4, 5, 6]

    def test_default_strategy_comes_from_settings(self):
        population = Population(2, 2, IntegerChromosome())
        assert isinstance(population.generation_strategy, PerformanceGenerationStrategy)
