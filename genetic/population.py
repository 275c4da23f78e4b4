"""
👥 Population
Chromosome collection, generation counter, best chromosome and history
"""

from datetime import datetime, timezone
from typing import List, Optional, Sequence

from core.config import get_settings
from core.logger import get_logger
from .chromosome import ChromosomeBase
from .exceptions import PopulationException
from .fitness_evaluator import FitnessEvaluator
from .generation_strategy import GenerationStrategyBase, PerformanceGenerationStrategy

logger = get_logger(__name__)


class Generation:
    """One population snapshot produced by one loop iteration."""

    def __init__(self, number: int, chromosomes: Sequence[ChromosomeBase]):
        if number < 1:
            raise ValueError("Generation number should be positive.")
        if chromosomes is None or len(chromosomes) < 2:
            raise ValueError("A generation should have at least 2 chromosomes.")

        self.number = number
        self.chromosomes: List[ChromosomeBase] = list(chromosomes)
        self.creation_date = datetime.now(timezone.utc)
        self.best_chromosome: Optional[ChromosomeBase] = None
        self.is_ended = False

    def end(self):
        """
        Sort chromosomes by fitness (best first) and record the best one.

        The sort is stable, so equal fitness keeps first-encountered order.
        """
        missing = sum(1 for c in self.chromosomes if c.fitness is None)
        if missing:
            raise PopulationException(
                f"Generation {self.number} cannot end: {missing} chromosome(s) without fitness."
            )

        self.chromosomes.sort(key=lambda c: c.fitness, reverse=True)
        self.best_chromosome = self.chromosomes[0]
        self.is_ended = True

    def __len__(self) -> int:
        return len(self.chromosomes)

    def __repr__(self) -> str:
        best = self.best_chromosome.fitness if self.best_chromosome else None
        return f"Generation(number={self.number}, size={len(self.chromosomes)}, best={best})"


class Population:
    """
    Population of chromosomes.

    ``generations_number`` counts completed generations: it grows by one each
    time ``end_current_generation`` succeeds. The generation being built is
    numbered ``generations_number + 1``.
    """

    def __init__(
        self,
        min_size: int,
        max_size: int,
        adam_chromosome: ChromosomeBase,
        generation_strategy: Optional[GenerationStrategyBase] = None
    ):
        """
        Initialize population.

        Args:
            min_size: Minimum number of chromosomes of a generation (>= 2)
            max_size: Maximum number of chromosomes of a generation (>= min_size)
            adam_chromosome: Prototype used to create the initial chromosomes
            generation_strategy: History retention policy
        """
        if adam_chromosome is None:
            raise TypeError("adam_chromosome should not be None.")

        self.min_size = min_size
        self.max_size = max_size
        self._validate_sizes()

        self.adam_chromosome = adam_chromosome
        if generation_strategy is None:
            generation_strategy = PerformanceGenerationStrategy(
                get_settings().generation_history_size
            )
        self.generation_strategy = generation_strategy

        self.creation_date = datetime.now(timezone.utc)
        self.generations: List[Generation] = []
        self.current_generation: Optional[Generation] = None
        self.generations_number = 0
        self.best_chromosome: Optional[ChromosomeBase] = None

    def _validate_sizes(self):
        if self.min_size < 2:
            raise PopulationException("The minimum size for a population is 2 chromosomes.")
        if self.max_size < self.min_size:
            raise PopulationException(
                "The maximum size for a population should be equal or greater than minimum size."
            )

    def reset(self):
        """Forget every generation."""
        self.generations = []
        self.current_generation = None
        self.generations_number = 0
        self.best_chromosome = None

    def create_initial_generation(self):
        """Reset the population and fill it with ``min_size`` new chromosomes."""
        self._validate_sizes()
        self.reset()
        self.creation_date = datetime.now(timezone.utc)

        chromosomes = []
        for _ in range(self.min_size):
            chromosome = self.adam_chromosome.create_new()
            if chromosome is None:
                raise PopulationException(
                    "The Adam chromosome's 'create_new' method generated a None chromosome. "
                    "Please check your chromosome code."
                )
            chromosomes.append(chromosome)

        self.create_new_generation(chromosomes)
        logger.debug(f"Initial generation created with {len(chromosomes)} chromosomes")

    def create_new_generation(self, chromosomes: Sequence[ChromosomeBase]):
        """
        Make ``chromosomes`` the active generation.

        Raises:
            PopulationException: If the count is outside [min_size, max_size]
        """
        if chromosomes is None:
            raise TypeError("chromosomes should not be None.")

        count = len(chromosomes)
        if count < self.min_size or count > self.max_size:
            raise PopulationException(
                f"A generation should have between {self.min_size} and {self.max_size} "
                f"chromosomes, but {count} were given."
            )

        self.current_generation = Generation(self.generations_number + 1, chromosomes)

    def end_current_generation(self, evaluator: Optional[FitnessEvaluator] = None):
        """
        Evaluate, sort and record the active generation.

        Args:
            evaluator: Used for any chromosome without fitness
        """
        generation = self.current_generation
        if generation is None:
            raise PopulationException("There is no current generation to end.")
        if generation.is_ended:
            raise PopulationException(f"Generation {generation.number} has already ended.")

        if evaluator is not None:
            evaluator.evaluate_all(generation.chromosomes)

        generation.end()

        self.best_chromosome = generation.best_chromosome
        self.generations.append(generation)
        self.generation_strategy.register_new_generation(self)
        self.generations_number += 1

        logger.debug(
            f"Generation {generation.number} ended: best fitness "
            f"{self.best_chromosome.fitness:.6f}, history size {len(self.generations)}"
        )

    def __repr__(self) -> str:
        return (f"Population(min_size={self.min_size}, max_size={self.max_size}, "
                f"generations_number={self.generations_number})")
