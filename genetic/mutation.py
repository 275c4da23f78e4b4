"""
🧬 Mutation Operators
Various mutation strategies for genetic algorithms
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from core.logger import get_logger
from .chromosome import ChromosomeBase
from .exceptions import MutationException
from .randomization import get_randomization
from .registry import OperatorKind, register_operator

logger = get_logger(__name__)


class MutationBase(ABC):
    """
    Base class for mutations.

    Mutations change chromosomes in place through ``replace_gene(s)``, which
    clears any cached fitness.
    """

    is_ordered = False

    def mutate(self, chromosome: ChromosomeBase, probability: float):
        """
        Mutate the chromosome.

        Args:
            chromosome: Chromosome to mutate in place
            probability: Per-locus or per-chromosome mutation rate in [0, 1]
        """
        if chromosome is None:
            raise TypeError("chromosome should not be None.")
        if not 0.0 <= probability <= 1.0:
            raise ValueError("The mutation probability should be between 0 and 1.")

        self.perform_mutate(chromosome, probability)

    @abstractmethod
    def perform_mutate(self, chromosome: ChromosomeBase, probability: float):
        """Mutate a validated chromosome."""


@register_operator(OperatorKind.MUTATION, "uniform")
class UniformMutation(MutationBase):
    """
    Uniform mutation - replace genes with new random values.

    Each mutable locus is drawn independently against the probability.
    Without ``mutable_genes_indexes`` every locus is mutable.
    """

    def __init__(self, mutable_genes_indexes: Optional[Iterable[int]] = None):
        self.mutable_genes_indexes = (
            None if mutable_genes_indexes is None else sorted(set(mutable_genes_indexes))
        )

    def perform_mutate(self, chromosome, probability):
        """
        Replace each mutable gene with a new one, drawing per gene.

        Args:
            chromosome: Chromosome changed in place
            probability: Chance of each mutable gene being replaced

        Raises:
            MutationException: If a mutable gene index is outside the chromosome
        """
        indexes = self.mutable_genes_indexes
        if indexes is None:
            indexes = range(chromosome.length)
        elif indexes and indexes[-1] >= chromosome.length:
            raise MutationException(
                self,
                f"The chromosome has no gene on index {indexes[-1]}. "
                f"The chromosome genes length is {chromosome.length}."
            )

        randomization = get_randomization()
        for index in indexes:
            if randomization.get_float() < probability:
                chromosome.replace_gene(index, chromosome.generate_gene(index))


@register_operator(OperatorKind.MUTATION, "twors")
class TworsMutation(MutationBase):
    """Twors mutation - swap two random genes (per chromosome)."""

    is_ordered = True

    def perform_mutate(self, chromosome, probability):
        """
        Swap two random genes.

        Args:
            chromosome: Chromosome changed in place
            probability: Chance of the swap happening
        """
        randomization = get_randomization()
        if randomization.get_float() >= probability:
            return

        first, second = randomization.get_unique_ints(2, 0, chromosome.length)
        first_gene = chromosome.get_gene(first)
        chromosome.replace_gene(first, chromosome.get_gene(second))
        chromosome.replace_gene(second, first_gene)


class SequenceMutationBase(MutationBase):
    """Mutations rearranging a random sub-sequence of at least 2 genes."""

    is_ordered = True

    def perform_mutate(self, chromosome, probability):
        """
        Pick a random sub-sequence and rearrange it.

        Args:
            chromosome: Chromosome changed in place, at least 3 genes long
            probability: Chance of the rearrangement happening

        Raises:
            MutationException: If the chromosome has fewer than 3 genes
        """
        if chromosome.length < 3:
            raise MutationException(
                self,
                f"A chromosome should have, at least, 3 genes. "
                f"{type(chromosome).__name__} has only {chromosome.length} gene(s)."
            )

        randomization = get_randomization()
        if randomization.get_float() >= probability:
            return

        start, end = sorted(randomization.get_unique_ints(2, 0, chromosome.length))
        self.mutate_sequence(chromosome, start, end)

    @abstractmethod
    def mutate_sequence(self, chromosome: ChromosomeBase, start: int, end: int):
        """Rearrange the genes between ``start`` and ``end`` (inclusive)."""


@register_operator(OperatorKind.MUTATION, "reverse_sequence")
class ReverseSequenceMutation(SequenceMutationBase):
    """Reverse sequence mutation (RSM) - reverse a random sub-sequence."""

    def mutate_sequence(self, chromosome, start, end):
        """Reverse the genes between ``start`` and ``end``."""
        genes = chromosome.get_genes()[start:end + 1]
        chromosome.replace_genes(start, reversed(genes))


@register_operator(OperatorKind.MUTATION, "displacement")
class DisplacementMutation(SequenceMutationBase):
    """Displacement mutation - move a random sub-sequence to another position."""

    def mutate_sequence(self, chromosome, start, end):
        """
        Remove the sub-sequence and insert it back at a random position.

        Args:
            chromosome: Chromosome changed in place
            start: First index of the sub-sequence
            end: Last index of the sub-sequence (inclusive)
        """
        genes = list(chromosome.get_genes())
        segment = genes[start:end + 1]
        rest = genes[:start] + genes[end + 1:]

        insert_at = get_randomization().get_int(0, len(rest) + 1)
        chromosome.replace_genes(0, rest[:insert_at] + segment + rest[insert_at:])
