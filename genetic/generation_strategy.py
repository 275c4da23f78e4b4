"""
🗃️ Generation Strategies
Policies deciding how much generation history a population keeps
"""

from abc import ABC, abstractmethod

from core.logger import get_logger
from .registry import OperatorKind, register_operator

logger = get_logger(__name__)


class GenerationStrategyBase(ABC):
    """Consulted by the population each time a generation ends."""

    @abstractmethod
    def register_new_generation(self, population):
        """Prune ``population.generations`` according to the policy."""


@register_operator(OperatorKind.GENERATION_STRATEGY, "performance")
class PerformanceGenerationStrategy(GenerationStrategyBase):
    """
    Keep only the last N generations.

    Bounds memory for long runs at the cost of history introspection.
    """

    def __init__(self, generations_number: int = 10):
        if generations_number < 1:
            raise ValueError("generations_number should be at least 1.")
        self.generations_number = generations_number

    def register_new_generation(self, population):
        excess = len(population.generations) - self.generations_number
        if excess > 0:
            del population.generations[:excess]
            logger.debug(f"Pruned {excess} old generation(s) from history")


@register_operator(OperatorKind.GENERATION_STRATEGY, "tracking")
class TrackingGenerationStrategy(GenerationStrategyBase):
    """Keep every generation, for analysis or replay."""

    def register_new_generation(self, population):
        pass
