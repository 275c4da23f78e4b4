"""
🎲 Randomization Provider
Shared, lock-protected random source used by every stochastic operator
"""

import threading
from typing import List, Optional, Sequence, TypeVar

import numpy as np

T = TypeVar("T")


class RandomizationProvider:
    """
    Random source backed by numpy's Generator.

    Draws are serialized by a lock so operators may be used from several
    threads. A run is reproducible under a fixed seed as long as the draws
    happen in the same order, which holds when the generation loop is the
    only consumer.
    """

    def __init__(self, seed: Optional[int] = None):
        self._lock = threading.Lock()
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def reseed(self, seed: Optional[int]):
        with self._lock:
            self.seed = seed
            self._rng = np.random.default_rng(seed)

    def get_int(self, min_value: int, max_value: int) -> int:
        """Random integer in [min_value, max_value)."""
        with self._lock:
            return int(self._rng.integers(min_value, max_value))

    def get_ints(self, count: int, min_value: int, max_value: int) -> List[int]:
        """``count`` random integers in [min_value, max_value), repetition allowed."""
        with self._lock:
            return [int(v) for v in self._rng.integers(min_value, max_value, size=count)]

    def get_unique_ints(self, count: int, min_value: int, max_value: int) -> List[int]:
        """``count`` distinct random integers in [min_value, max_value)."""
        if max_value - min_value < count:
            raise ValueError(
                f"The interval [{min_value}, {max_value}) should have at least {count} values."
            )

        with self._lock:
            values = self._rng.choice(
                np.arange(min_value, max_value), size=count, replace=False
            )
        return [int(v) for v in values]

    def get_float(self, min_value: float = 0.0, max_value: float = 1.0) -> float:
        """Random float in [min_value, max_value)."""
        with self._lock:
            return float(self._rng.uniform(min_value, max_value))

    def get_floats(self, count: int, min_value: float = 0.0, max_value: float = 1.0) -> List[float]:
        with self._lock:
            return [float(v) for v in self._rng.uniform(min_value, max_value, size=count)]

    def choice(self, items: Sequence[T]) -> T:
        if not items:
            raise ValueError("Cannot choose from an empty sequence.")
        return items[self.get_int(0, len(items))]

    def shuffle(self, items: list) -> None:
        """Shuffle a list in place."""
        with self._lock:
            order = self._rng.permutation(len(items))
        items[:] = [items[i] for i in order]


_current = RandomizationProvider()


def get_randomization() -> RandomizationProvider:
    """Return the provider used by the operators."""
    return _current


def set_randomization(provider: RandomizationProvider):
    global _current
    _current = provider


def seed(value: Optional[int]):
    """Reseed the current provider."""
    _current.reseed(value)
