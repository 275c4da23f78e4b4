"""
🏁 Termination Criteria
Predicates deciding when the evolutionary loop stops
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional

from core.logger import get_logger
from .registry import OperatorKind, register_operator

logger = get_logger(__name__)


class TerminationBase(ABC):
    """Base class for terminations."""

    def has_reached(self, genetic_algorithm) -> bool:
        """
        Check whether the termination has been reached.

        Args:
            genetic_algorithm: Algorithm whose state is inspected
        """
        if genetic_algorithm is None:
            raise TypeError("genetic_algorithm should not be None.")

        return self.perform_has_reached(genetic_algorithm)

    @abstractmethod
    def perform_has_reached(self, genetic_algorithm) -> bool:
        """Evaluate the criterion."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


@register_operator(OperatorKind.TERMINATION, "generation_number")
class GenerationNumberTermination(TerminationBase):
    """Reached once ``expected_generation_number`` generations are completed."""

    def __init__(self, expected_generation_number: int = 100):
        if expected_generation_number < 1:
            raise ValueError("expected_generation_number should be at least 1.")
        self.expected_generation_number = expected_generation_number

    def perform_has_reached(self, genetic_algorithm):
        return genetic_algorithm.generations_number >= self.expected_generation_number

    def __repr__(self):
        return f"GenerationNumberTermination(expected_generation_number={self.expected_generation_number})"


@register_operator(OperatorKind.TERMINATION, "fitness_threshold")
class FitnessThresholdTermination(TerminationBase):
    """Reached when the best chromosome's fitness is at least ``expected_fitness``."""

    def __init__(self, expected_fitness: float = 1.0):
        self.expected_fitness = expected_fitness

    def perform_has_reached(self, genetic_algorithm):
        best = genetic_algorithm.best_chromosome
        return best is not None and best.fitness is not None and best.fitness >= self.expected_fitness

    def __repr__(self):
        return f"FitnessThresholdTermination(expected_fitness={self.expected_fitness})"


@register_operator(OperatorKind.TERMINATION, "fitness_stagnation")
class FitnessStagnationTermination(TerminationBase):
    """
    Reached when the best fitness has not changed for N generations.

    Tracks the last best fitness seen, so one instance should serve one run.
    """

    def __init__(self, expected_stagnant_generations_number: int = 100):
        if expected_stagnant_generations_number < 1:
            raise ValueError("expected_stagnant_generations_number should be at least 1.")
        self.expected_stagnant_generations_number = expected_stagnant_generations_number
        self._last_fitness: Optional[float] = None
        self._last_generation: Optional[int] = None
        self._stagnant_generations_number = 0

    def perform_has_reached(self, genetic_algorithm):
        generation = genetic_algorithm.generations_number
        best = genetic_algorithm.best_chromosome
        fitness = best.fitness if best is not None else None

        # the same generation may be checked more than once (e.g. on resume)
        if generation != self._last_generation:
            if generation < (self._last_generation or 0):
                self._last_fitness = None
                self._stagnant_generations_number = 0

            if fitness is not None and fitness == self._last_fitness:
                self._stagnant_generations_number += 1
            else:
                self._stagnant_generations_number = 1

            self._last_fitness = fitness
            self._last_generation = generation

        return self._stagnant_generations_number >= self.expected_stagnant_generations_number

    def __repr__(self):
        return (f"FitnessStagnationTermination(expected_stagnant_generations_number="
                f"{self.expected_stagnant_generations_number})")


@register_operator(OperatorKind.TERMINATION, "time_evolving")
class TimeEvolvingTermination(TerminationBase):
    """Reached when the algorithm has evolved for ``max_time`` seconds."""

    def __init__(self, max_time: float = 60.0):
        if max_time <= 0:
            raise ValueError("max_time should be positive.")
        self.max_time = max_time

    def perform_has_reached(self, genetic_algorithm):
        return genetic_algorithm.time_evolving >= self.max_time

    def __repr__(self):
        return f"TimeEvolvingTermination(max_time={self.max_time})"


class LogicalOperatorTermination(TerminationBase):
    """Base for terminations combining other terminations."""

    def __init__(self, *terminations: TerminationBase):
        if len(terminations) < 2:
            raise ValueError(f"{type(self).__name__} needs at least 2 terminations.")
        if any(t is None for t in terminations):
            raise TypeError("terminations should not contain None.")
        self.terminations = list(terminations)

    def add_termination(self, termination: TerminationBase):
        if termination is None:
            raise TypeError("termination should not be None.")
        self.terminations.append(termination)

    def __repr__(self):
        inner = ", ".join(repr(t) for t in self.terminations)
        return f"{type(self).__name__}({inner})"


@register_operator(OperatorKind.TERMINATION, "and")
class AndTermination(LogicalOperatorTermination):
    """Reached when every member termination is reached."""

    def perform_has_reached(self, genetic_algorithm):
        # evaluate all members so stateful ones see every generation
        results = [t.has_reached(genetic_algorithm) for t in self.terminations]
        return all(results)


@register_operator(OperatorKind.TERMINATION, "or")
class OrTermination(LogicalOperatorTermination):
    """Reached when any member termination is reached."""

    def perform_has_reached(self, genetic_algorithm):
        results = [t.has_reached(genetic_algorithm) for t in self.terminations]
        return any(results)


@register_operator(OperatorKind.TERMINATION, "function")
class FuncTermination(TerminationBase):
    """Custom predicate over the genetic algorithm."""

    def __init__(self, predicate: Callable[[object], bool]):
        if predicate is None or not callable(predicate):
            raise TypeError("predicate should be a callable.")
        self.predicate = predicate

    def perform_has_reached(self, genetic_algorithm):
        return bool(self.predicate(genetic_algorithm))
