"""
🎯 Fitness Evaluator
Memoized evaluation of chromosomes with an optional thread pool
"""

import concurrent.futures
import threading
import time
from typing import Any, Callable, Dict, Iterable, List, Union

import numpy as np

from core.logger import get_logger
from .chromosome import ChromosomeBase

logger = get_logger(__name__)

FitnessFunction = Callable[[ChromosomeBase], float]


class FitnessEvaluator:
    """
    Wraps a problem supplied fitness function.

    The function is called only for chromosomes whose fitness is absent and
    the score is cached on the chromosome itself, so an unchanged chromosome
    is never evaluated twice. Exceptions raised by the function propagate
    unmodified; a NaN or infinite score raises ValueError.
    """

    def __init__(self, fitness_function: FitnessFunction, max_workers: int = 1):
        """
        Initialize fitness evaluator.

        Args:
            fitness_function: Callable scoring a chromosome (higher is better)
            max_workers: Threads used by evaluate_all, 1 evaluates sequentially
        """
        if fitness_function is None or not callable(fitness_function):
            raise TypeError("fitness_function should be a callable.")
        if max_workers < 1:
            raise ValueError("max_workers should be at least 1.")

        self.fitness_function = fitness_function
        self.max_workers = max_workers
        self.evaluation_count = 0
        self.cache_hits = 0
        self.total_evaluation_time = 0.0
        self._stats_lock = threading.Lock()

    def evaluate(self, chromosome: ChromosomeBase) -> float:
        """
        Evaluate fitness of chromosome.

        Args:
            chromosome: Chromosome to evaluate

        Returns:
            float: Fitness value (cached one when present)
        """
        if chromosome is None:
            raise TypeError("chromosome should not be None.")

        if chromosome.fitness is not None:
            self.cache_hits += 1
            return chromosome.fitness

        return self._evaluate_pending(chromosome)

    def evaluate_all(self, chromosomes: Iterable[ChromosomeBase]) -> List[float]:
        """
        Evaluate every chromosome lacking a fitness.

        Each evaluation only writes the fitness of its own chromosome, so the
        work is spread over a thread pool when max_workers > 1.

        Returns:
            List[float]: Fitness values in input order
        """
        chromosomes = list(chromosomes)
        pending = [c for c in chromosomes if c.fitness is None]
        self.cache_hits += len(chromosomes) - len(pending)

        if pending:
            logger.debug(f"Evaluating {len(pending)} of {len(chromosomes)} chromosomes")

        if len(pending) > 1 and self.max_workers > 1:
            with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = [executor.submit(self._evaluate_pending, c) for c in pending]
                for future in futures:
                    # re-raises the first failure in submission order
                    future.result()
        else:
            for chromosome in pending:
                self._evaluate_pending(chromosome)

        return [c.fitness for c in chromosomes]

    def _evaluate_pending(self, chromosome: ChromosomeBase) -> float:
        start_time = time.perf_counter()
        fitness = float(self.fitness_function(chromosome))
        elapsed = time.perf_counter() - start_time

        if not np.isfinite(fitness):
            raise ValueError(f"Fitness of {chromosome!r} is not a finite number: {fitness}.")

        chromosome.fitness = fitness
        with self._stats_lock:
            self.evaluation_count += 1
            self.total_evaluation_time += elapsed
        return fitness

    def reset_stats(self):
        """Reset evaluation statistics."""
        self.evaluation_count = 0
        self.cache_hits = 0
        self.total_evaluation_time = 0.0

    def get_evaluation_stats(self) -> Dict[str, Any]:
        """
        Get evaluation statistics.

        Returns:
            Dict[str, Any]: Evaluation statistics
        """
        avg_eval_time = (self.total_evaluation_time / self.evaluation_count
                         if self.evaluation_count > 0 else 0)

        return {
            'total_evaluations': self.evaluation_count,
            'cache_hits': self.cache_hits,
            'total_evaluation_time': self.total_evaluation_time,
            'average_evaluation_time': avg_eval_time,
            'max_workers': self.max_workers
        }


def as_evaluator(fitness: Union[FitnessEvaluator, FitnessFunction],
                 max_workers: int = 1) -> FitnessEvaluator:
    """Accept an evaluator or a plain callable."""
    if isinstance(fitness, FitnessEvaluator):
        return fitness
    return FitnessEvaluator(fitness, max_workers=max_workers)
