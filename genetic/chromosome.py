"""
🧬 Chromosome Class
Representation contract implemented by every candidate solution
"""

import copy
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Tuple


@dataclass(frozen=True)
class Gene:
    """Smallest unit of a chromosome encoding."""

    value: Any = None

    def __str__(self) -> str:
        return str(self.value)


class ChromosomeBase(ABC):
    """
    Base class for chromosomes.

    A chromosome is an ordered sequence of genes of fixed length with an
    optional cached fitness. Any gene write clears the fitness, so a cached
    value always reflects the current genes.

    Concrete encodings implement ``generate_gene`` and ``create_new`` and
    usually call ``create_genes`` from their constructor.
    """

    def __init__(self, length: int):
        """
        Initialize chromosome.

        Args:
            length: Number of genes, at least 2
        """
        self._validate_length(length)
        self._length = length
        self._genes: List[Gene] = [Gene()] * length
        self.fitness: Optional[float] = None

    @staticmethod
    def _validate_length(length: int):
        if length < 2:
            raise ValueError("The minimum length for a chromosome is 2 genes.")

    @property
    def length(self) -> int:
        """Number of genes."""
        return self._length

    @abstractmethod
    def generate_gene(self, gene_index: int) -> Gene:
        """Generate a random gene for the given locus."""

    @abstractmethod
    def create_new(self) -> 'ChromosomeBase':
        """Create a fresh random chromosome with the same shape."""

    def create_genes(self):
        """Fill every locus with a generated gene."""
        for index in range(self._length):
            self.replace_gene(index, self.generate_gene(index))

    def clone(self) -> 'ChromosomeBase':
        """Create a deep copy with a new identity, keeping the fitness."""
        return copy.deepcopy(self)

    def get_gene(self, index: int) -> Gene:
        self._validate_index(index)
        return self._genes[index]

    def get_genes(self) -> Tuple[Gene, ...]:
        return tuple(self._genes)

    def get_values(self) -> List[Any]:
        """Return the raw gene values."""
        return [gene.value for gene in self._genes]

    def replace_gene(self, index: int, gene: Gene):
        """Replace the gene at ``index`` and invalidate the fitness."""
        self._validate_index(index)
        self._genes[index] = gene
        self.fitness = None

    def replace_genes(self, start_index: int, genes: Iterable[Gene]):
        """
        Replace consecutive genes starting at ``start_index``.

        Raises:
            IndexError: If the genes do not fit in the chromosome
        """
        genes = list(genes)
        if not genes:
            return

        self._validate_index(start_index)
        if start_index + len(genes) > self._length:
            raise IndexError(
                f"The number of genes to be replaced is greater than available space, "
                f"there is {self._length - start_index} genes between the index "
                f"{start_index} and the end of chromosome, but there is {len(genes)} "
                f"genes to be replaced."
            )

        self._genes[start_index:start_index + len(genes)] = genes
        self.fitness = None

    def _validate_index(self, index: int):
        if index < 0 or index >= self._length:
            raise IndexError(
                f"There is no Gene on index {index} to be replaced."
                if index >= 0 else f"Invalid gene index {index}."
            )

    def has_same_genes(self, other: 'ChromosomeBase') -> bool:
        """Check whether two chromosomes carry the same gene values."""
        return type(self) is type(other) and self._genes == other._genes

    def _fitness_key(self) -> float:
        return self.fitness if self.fitness is not None else -float('inf')

    def __lt__(self, other: 'ChromosomeBase') -> bool:
        """Order by fitness: a lower (or absent) fitness is a worse chromosome."""
        if not isinstance(other, ChromosomeBase):
            return NotImplemented
        return self._fitness_key() < other._fitness_key()

    def __gt__(self, other: 'ChromosomeBase') -> bool:
        if not isinstance(other, ChromosomeBase):
            return NotImplemented
        return self._fitness_key() > other._fitness_key()

    def __repr__(self) -> str:
        fitness_str = f"{self.fitness:.6f}" if self.fitness is not None else "None"
        return f"{type(self).__name__}(length={self._length}, fitness={fitness_str})"
