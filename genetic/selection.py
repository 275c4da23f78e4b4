"""
🎯 Selection Operators
Various selection strategies for genetic algorithms
"""

from abc import ABC, abstractmethod
from typing import List

import numpy as np

from core.logger import get_logger
from .chromosome import ChromosomeBase
from .exceptions import SelectionException
from .randomization import get_randomization
from .registry import OperatorKind, register_operator

logger = get_logger(__name__)


class SelectionBase(ABC):
    """
    Base class for selections.

    ``select_parents`` always returns exactly ``number`` chromosomes drawn
    from the current generation of an evaluated population, repetition allowed.
    """

    def select_parents(self, number: int, population) -> List[ChromosomeBase]:
        """
        Select parents from the current generation.

        Args:
            number: Number of chromosomes to select (>= 2)
            population: Population whose current generation is evaluated

        Returns:
            List[ChromosomeBase]: Selected chromosomes
        """
        if number < 2:
            raise ValueError("The number of selected chromosomes should be at least 2.")
        if population is None:
            raise TypeError("population should not be None.")

        generation = population.current_generation
        if generation is None or not generation.chromosomes:
            raise SelectionException(self, "The population has no current generation.")

        if any(c.fitness is None for c in generation.chromosomes):
            raise SelectionException(
                self, "Every chromosome should be evaluated before selecting parents."
            )

        selected = self.perform_select_parents(number, generation.chromosomes)
        logger.debug(f"{type(self).__name__} selected {len(selected)} parents")
        return selected

    @abstractmethod
    def perform_select_parents(self, number: int,
                               chromosomes: List[ChromosomeBase]) -> List[ChromosomeBase]:
        """Select ``number`` chromosomes from evaluated ``chromosomes``."""


def _wheel_weights(chromosomes: List[ChromosomeBase]) -> np.ndarray:
    """
    Non-negative weights proportional to fitness.

    Negative or zero fitness is shifted so the worst chromosome keeps a small
    chance; all-equal fitness yields uniform weights.
    """
    fitnesses = np.array([c.fitness for c in chromosomes], dtype=float)
    min_fitness = fitnesses.min()

    if min_fitness <= 0:
        fitnesses = fitnesses - min_fitness

    weights = fitnesses + 1e-10
    if np.allclose(weights, weights[0]):
        return np.full(len(chromosomes), 1.0 / len(chromosomes))

    return weights / weights.sum()


@register_operator(OperatorKind.SELECTION, "elite")
class EliteSelection(SelectionBase):
    """Select the best chromosomes, cycling when more are needed than available."""

    def perform_select_parents(self, number, chromosomes):
        """
        Take the chromosomes in fitness order.

        Args:
            number: Number of chromosomes to select
            chromosomes: Evaluated chromosomes of the current generation

        Returns:
            List[ChromosomeBase]: Best chromosomes, repeated from the top when needed
        """
        ordered = sorted(chromosomes, key=lambda c: c.fitness, reverse=True)
        return [ordered[i % len(ordered)] for i in range(number)]


@register_operator(OperatorKind.SELECTION, "roulette")
class RouletteWheelSelection(SelectionBase):
    """
    Roulette wheel selection - probability proportional to fitness.

    Each draw spins the wheel once against the cumulative weights.
    """

    def perform_select_parents(self, number, chromosomes):
        """
        Spin the wheel once per selected chromosome.

        Args:
            number: Number of chromosomes to select
            chromosomes: Evaluated chromosomes of the current generation

        Returns:
            List[ChromosomeBase]: Selected chromosomes
        """
        cumulative = np.cumsum(_wheel_weights(chromosomes))
        randomization = get_randomization()

        selected = []
        for _ in range(number):
            pointer = randomization.get_float()
            index = int(np.searchsorted(cumulative, pointer, side='right'))
            selected.append(chromosomes[min(index, len(chromosomes) - 1)])

        return selected


@register_operator(OperatorKind.SELECTION, "stochastic_universal")
class StochasticUniversalSamplingSelection(SelectionBase):
    """Stochastic Universal Sampling - evenly spaced pointers on one wheel."""

    def perform_select_parents(self, number, chromosomes):
        """
        Place ``number`` evenly spaced pointers after one random offset.

        Args:
            number: Number of chromosomes to select
            chromosomes: Evaluated chromosomes of the current generation

        Returns:
            List[ChromosomeBase]: Selected chromosomes in wheel order
        """
        cumulative = np.cumsum(_wheel_weights(chromosomes))

        spacing = 1.0 / number
        start = get_randomization().get_float(0.0, spacing)
        pointers = start + spacing * np.arange(number)

        indexes = np.searchsorted(cumulative, pointers, side='right')
        return [chromosomes[min(int(i), len(chromosomes) - 1)] for i in indexes]


@register_operator(OperatorKind.SELECTION, "tournament")
class TournamentSelection(SelectionBase):
    """
    Tournament selection - best individual of a random tournament.

    With ``allow_winner_compete_next`` disabled, winners leave the pool until
    it is too small for a tournament, then the pool is refilled.
    """

    def __init__(self, size: int = 2, allow_winner_compete_next: bool = True):
        if size < 2:
            raise ValueError("The tournament size should be at least 2.")
        self.size = size
        self.allow_winner_compete_next = allow_winner_compete_next

    def perform_select_parents(self, number, chromosomes):
        """
        Run one tournament per selected chromosome.

        Args:
            number: Number of chromosomes to select
            chromosomes: Evaluated chromosomes of the current generation

        Returns:
            List[ChromosomeBase]: Tournament winners

        Raises:
            SelectionException: If the tournament is larger than the generation
        """
        if self.size > len(chromosomes):
            raise SelectionException(
                self,
                f"The tournament size is greater than available chromosomes. "
                f"Tournament size is {self.size} and generation has {len(chromosomes)} "
                f"available chromosomes."
            )

        randomization = get_randomization()
        pool = list(chromosomes)
        selected = []

        while len(selected) < number:
            if len(pool) < self.size:
                pool = list(chromosomes)

            indexes = randomization.get_unique_ints(self.size, 0, len(pool))
            winner = max((pool[i] for i in indexes), key=lambda c: c.fitness)
            selected.append(winner)

            if not self.allow_winner_compete_next:
                pool.remove(winner)

        return selected


@register_operator(OperatorKind.SELECTION, "rank")
class RankSelection(SelectionBase):
    """
    Rank-based selection - probability based on rank, not fitness value.

    Linear ranking: ``selection_pressure`` 1.0 is uniform, 2.0 is the
    strongest bias toward the best.
    """

    def __init__(self, selection_pressure: float = 1.5):
        if not 1.0 <= selection_pressure <= 2.0:
            raise ValueError("selection_pressure should be between 1.0 and 2.0.")
        self.selection_pressure = selection_pressure

    def perform_select_parents(self, number, chromosomes):
        """
        Draw chromosomes with linear rank probabilities.

        Args:
            number: Number of chromosomes to select
            chromosomes: Evaluated chromosomes of the current generation

        Returns:
            List[ChromosomeBase]: Selected chromosomes
        """
        # worst first, so the rank grows with fitness
        ordered = sorted(chromosomes, key=lambda c: c.fitness)
        n = len(ordered)
        sp = self.selection_pressure

        ranks = np.arange(n)
        probabilities = (2 - sp) / n + (2 * ranks * (sp - 1)) / (n * (n - 1))
        cumulative = np.cumsum(probabilities)

        randomization = get_randomization()
        selected = []
        for _ in range(number):
            index = int(np.searchsorted(cumulative, randomization.get_float(), side='right'))
            selected.append(ordered[min(index, n - 1)])

        return selected


@register_operator(OperatorKind.SELECTION, "uniform")
class UniformSelection(SelectionBase):
    """Every chromosome has the same chance, regardless of fitness."""

    def perform_select_parents(self, number, chromosomes):
        """Draw ``number`` indexes uniformly, repetition allowed."""
        indexes = get_randomization().get_ints(number, 0, len(chromosomes))
        return [chromosomes[i] for i in indexes]
