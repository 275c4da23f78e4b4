"""
♻️ Reinsertion Operators
Merge offspring and parents into the next generation under size bounds
"""

from abc import ABC, abstractmethod
from typing import List, Sequence

from core.logger import get_logger
from .chromosome import ChromosomeBase
from .exceptions import ReinsertionException
from .randomization import get_randomization
from .registry import OperatorKind, register_operator

logger = get_logger(__name__)


class ReinsertionBase(ABC):
    """
    Base class for reinsertions.

    ``can_collapse`` allows more offspring than ``max_size``, ``can_expand``
    allows fewer than ``min_size``; the strategy must then bring the result
    back within the population bounds.
    """

    def __init__(self, can_collapse: bool, can_expand: bool):
        self.can_collapse = can_collapse
        self.can_expand = can_expand

    def select_chromosomes(
        self,
        genetic_algorithm,
        offspring: Sequence[ChromosomeBase],
        parents: Sequence[ChromosomeBase]
    ) -> List[ChromosomeBase]:
        """
        Select the chromosomes of the next generation.

        Args:
            genetic_algorithm: Running algorithm (gives population bounds and evaluator)
            offspring: Children produced by crossover and mutation
            parents: Parents selected for this generation

        Returns:
            List[ChromosomeBase]: Between population min_size and max_size chromosomes
        """
        if genetic_algorithm is None:
            raise TypeError("genetic_algorithm should not be None.")
        if offspring is None:
            raise TypeError("offspring should not be None.")
        if parents is None:
            raise TypeError("parents should not be None.")

        population = genetic_algorithm.population
        min_size, max_size = population.min_size, population.max_size

        if len(offspring) < min_size and not self.can_expand:
            raise ReinsertionException(
                self,
                f"Cannot expand the number of chromosome in population. "
                f"Try another one reinsertion. Offspring {len(offspring)}, min size {min_size}."
            )

        if len(offspring) > max_size and not self.can_collapse:
            raise ReinsertionException(
                self,
                f"Cannot collapse the number of chromosome in population. "
                f"Try another one reinsertion. Offspring {len(offspring)}, max size {max_size}."
            )

        selected = self.perform_select_chromosomes(genetic_algorithm, list(offspring),
                                                   list(parents))

        if not min_size <= len(selected) <= max_size:
            raise ReinsertionException(
                self,
                f"Selected {len(selected)} chromosomes, expected between {min_size} and {max_size}."
            )

        logger.debug(
            f"{type(self).__name__} kept {len(selected)} chromosomes "
            f"({len(offspring)} offspring, {len(parents)} parents)"
        )
        return selected

    @abstractmethod
    def perform_select_chromosomes(self, genetic_algorithm, offspring: List[ChromosomeBase],
                                   parents: List[ChromosomeBase]) -> List[ChromosomeBase]:
        """Select the chromosomes once the size constraints are checked."""


@register_operator(OperatorKind.REINSERTION, "pure")
class PureReinsertion(ReinsertionBase):
    """Offspring entirely replace the parents."""

    def __init__(self):
        super().__init__(False, False)

    def perform_select_chromosomes(self, genetic_algorithm, offspring, parents):
        """Return the offspring unchanged, the parents are discarded."""
        return offspring


@register_operator(OperatorKind.REINSERTION, "elitist")
class ElitistReinsertion(ReinsertionBase):
    """
    Elitist reinsertion.

    When offspring are fewer than the minimum size, the best parents fill
    the remaining places.
    """

    def __init__(self):
        super().__init__(False, True)

    def perform_select_chromosomes(self, genetic_algorithm, offspring, parents):
        """
        Complete the offspring with the best parents.

        Args:
            genetic_algorithm: Running algorithm, gives the population bounds
            offspring: Children of this generation
            parents: Selected parents, already evaluated

        Returns:
            List[ChromosomeBase]: At least ``min_size`` chromosomes

        Raises:
            ReinsertionException: If parents are too few to reach the minimum size
        """
        min_size = genetic_algorithm.population.min_size
        missing = min_size - len(offspring)

        if missing > 0:
            if len(parents) < missing:
                raise ReinsertionException(
                    self,
                    f"Not enough parents to fill the generation: {missing} needed, "
                    f"{len(parents)} available."
                )
            best_parents = sorted(parents, key=lambda c: c.fitness, reverse=True)[:missing]
            offspring = offspring + _distinct(best_parents)

        return offspring


@register_operator(OperatorKind.REINSERTION, "uniform")
class UniformReinsertion(ReinsertionBase):
    """Fill missing places with offspring drawn uniformly at random."""

    def __init__(self):
        super().__init__(False, True)

    def perform_select_chromosomes(self, genetic_algorithm, offspring, parents):
        """
        Complete the offspring with clones of random offspring.

        Args:
            genetic_algorithm: Running algorithm, gives the population bounds
            offspring: Children of this generation, at least one
            parents: Ignored

        Returns:
            List[ChromosomeBase]: At least ``min_size`` chromosomes

        Raises:
            ReinsertionException: If there is no offspring
        """
        if not offspring:
            raise ReinsertionException(self, "The number of offspring should be at least 1.")

        min_size = genetic_algorithm.population.min_size
        randomization = get_randomization()

        selected = list(offspring)
        while len(selected) < min_size:
            selected.append(offspring[randomization.get_int(0, len(offspring))].clone())

        return selected


@register_operator(OperatorKind.REINSERTION, "fitness_based")
class FitnessBasedReinsertion(ReinsertionBase):
    """
    Keep the best offspring when they exceed the maximum size.

    Offspring are evaluated through the algorithm's fitness evaluator, so
    they are not evaluated again when the generation ends.
    """

    def __init__(self):
        super().__init__(True, False)

    def perform_select_chromosomes(self, genetic_algorithm, offspring, parents):
        """
        Truncate the offspring to the best ``max_size`` ones.

        Args:
            genetic_algorithm: Running algorithm, gives the bounds and the evaluator
            offspring: Children of this generation
            parents: Ignored

        Returns:
            List[ChromosomeBase]: At most ``max_size`` chromosomes
        """
        max_size = genetic_algorithm.population.max_size

        if len(offspring) > max_size:
            genetic_algorithm.fitness_evaluator.evaluate_all(offspring)
            offspring = sorted(offspring, key=lambda c: c.fitness, reverse=True)[:max_size]

        return offspring


def _distinct(chromosomes: Sequence[ChromosomeBase]) -> List[ChromosomeBase]:
    """Replace repeated instances by clones, keeping order."""
    seen = set()
    result = []
    for chromosome in chromosomes:
        if id(chromosome) in seen:
            chromosome = chromosome.clone()
        seen.add(id(chromosome))
        result.append(chromosome)
    return result
