"""
🧪 Fitness evaluator tests
Caching, error propagation and parallel evaluation
"""

import threading
from unittest.mock import MagicMock

import pytest

from genetic import FitnessEvaluator, Gene, as_evaluator
from tests.conftest import IntegerChromosome, sum_fitness


class TestFitnessEvaluator:
    """Memoized fitness evaluation"""

    def test_rejects_non_callable(self):
        with pytest.raises(TypeError):
            FitnessEvaluator(None)
        with pytest.raises(ValueError):
            FitnessEvaluator(sum_fitness, max_workers=0)

    def test_evaluate_caches_on_the_chromosome(self, integer_chromosome):
        fitness_function = MagicMock(return_value=4.0)
        evaluator = FitnessEvaluator(fitness_function)

        assert evaluator.evaluate(integer_chromosome) == 4.0
        assert evaluator.evaluate(integer_chromosome) == 4.0

        fitness_function.assert_called_once_with(integer_chromosome)
        assert integer_chromosome.fitness == 4.0
        assert evaluator.cache_hits == 1

    def test_gene_change_forces_reevaluation(self, integer_chromosome):
        fitness_function = MagicMock(side_effect=[1.0, 2.0])
        evaluator = FitnessEvaluator(fitness_function)

        evaluator.evaluate(integer_chromosome)
        integer_chromosome.replace_gene(0, Gene(0))
        assert evaluator.evaluate(integer_chromosome) == 2.0
        assert fitness_function.call_count == 2

    def test_evaluate_none_raises(self, evaluator):
        with pytest.raises(TypeError):
            evaluator.evaluate(None)

    def test_evaluate_all_only_scores_missing_fitness(self):
        chromosomes = [IntegerChromosome() for _ in range(4)]
        chromosomes[0].fitness = 100.0

        fitness_function = MagicMock(return_value=1.0)
        result = FitnessEvaluator(fitness_function).evaluate_all(chromosomes)

        assert result == [100.0, 1.0, 1.0, 1.0]
        assert fitness_function.call_count == 3

    def test_exception_propagates_unmodified(self, integer_chromosome):
        error = RuntimeError("simulation crashed")

        def failing(chromosome):
            raise error

        with pytest.raises(RuntimeError) as exc_info:
            FitnessEvaluator(failing).evaluate(integer_chromosome)

        assert exc_info.value is error
        assert integer_chromosome.fitness is None

    def test_parallel_evaluation_uses_worker_threads(self):
        chromosomes = [IntegerChromosome() for _ in range(8)]
        thread_names = set()
        lock = threading.Lock()

        def recording(chromosome):
            with lock:
                thread_names.add(threading.current_thread().name)
            return sum_fitness(chromosome)

        evaluator = FitnessEvaluator(recording, max_workers=4)
        result = evaluator.evaluate_all(chromosomes)

        assert result == [sum_fitness(c) for c in chromosomes]
        assert threading.current_thread().name not in thread_names
        assert evaluator.evaluation_count == 8

    def test_parallel_evaluation_propagates_errors(self):
        chromosomes = [IntegerChromosome() for _ in range(4)]

        def failing(chromosome):
            raise ValueError("bad chromosome")

        with pytest.raises(ValueError, match="bad chromosome"):
            FitnessEvaluator(failing, max_workers=2).evaluate_all(chromosomes)

    @pytest.mark.parametrize("score", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_score_is_rejected(self, integer_chromosome, score):
        evaluator = FitnessEvaluator(lambda c: score)

        with pytest.raises(ValueError, match="IntegerChromosome.*not a finite number"):
            evaluator.evaluate(integer_chromosome)

        assert integer_chromosome.fitness is None
        assert evaluator.evaluation_count == 0

    def test_nan_in_generation_fails_evaluate_all(self):
        chromosomes = [IntegerChromosome() for _ in range(6)]
        nan_chromosome = chromosomes[3]

        def scoring(chromosome):
            return float("nan") if chromosome is nan_chromosome else sum_fitness(chromosome)

        with pytest.raises(ValueError, match="not a finite number"):
            FitnessEvaluator(scoring).evaluate_all(chromosomes)

        assert nan_chromosome.fitness is None

    def test_stats(self, evaluator):
        evaluator.evaluate_all([IntegerChromosome() for _ in range(3)])
        stats = evaluator.get_evaluation_stats()

        assert stats['total_evaluations'] == 3
        assert stats['max_workers'] == 1
        assert stats['average_evaluation_time'] >= 0

        evaluator.reset_stats()
        assert evaluator.get_evaluation_stats()['total_evaluations'] == 0

    def test_as_evaluator(self, evaluator):
        assert as_evaluator(evaluator) is evaluator

        wrapped = as_evaluator(sum_fitness, max_workers=3)
        assert isinstance(wrapped, FitnessEvaluator)
        assert wrapped.max_workers == 3
