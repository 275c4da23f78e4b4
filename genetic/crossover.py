"""
🔀 Crossover Operators
Various crossover strategies for genetic algorithms
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from core.logger import get_logger
from .chromosome import ChromosomeBase, Gene
from .exceptions import CrossoverException
from .randomization import get_randomization
from .registry import OperatorKind, register_operator

logger = get_logger(__name__)


class CrossoverBase(ABC):
    """
    Base class for crossovers.

    Declares how many parents it needs, how many children it produces and
    the minimum chromosome length it supports. ``is_ordered`` marks
    crossovers that keep the gene set of a permutation.
    """

    is_ordered = False

    def __init__(self, parents_number: int, children_number: int, min_chromosome_length: int = 2):
        """
        Initialize crossover.

        Args:
            parents_number: Number of parents needed for cross
            children_number: Number of children generated by cross
            min_chromosome_length: Minimum length of the chromosome supported
        """
        self.parents_number = parents_number
        self.children_number = children_number
        self.min_chromosome_length = min_chromosome_length

    def cross(self, parents: Sequence[ChromosomeBase]) -> List[ChromosomeBase]:
        """
        Cross the specified parents generating the children.

        Args:
            parents: Exactly ``parents_number`` chromosomes

        Returns:
            List[ChromosomeBase]: ``children_number`` new chromosomes without fitness

        Raises:
            TypeError: If parents is None
            ValueError: If the number of parents differs from parents_number
            CrossoverException: If the first parent is shorter than min_chromosome_length
        """
        if parents is None:
            raise TypeError("parents should not be None.")

        if len(parents) != self.parents_number:
            raise ValueError(
                f"The number of parents should be the same of parents_number "
                f"({self.parents_number}), but {len(parents)} were given."
            )

        first_parent = parents[0]
        if first_parent.length < self.min_chromosome_length:
            raise CrossoverException(
                self,
                f"A chromosome should have, at least, {self.min_chromosome_length} genes. "
                f"{type(first_parent).__name__} has only {first_parent.length} gene(s)."
            )

        children = self.perform_cross(list(parents))

        if len(children) != self.children_number:
            raise CrossoverException(
                self,
                f"Expected {self.children_number} children, but {len(children)} were generated."
            )

        return children

    @abstractmethod
    def perform_cross(self, parents: List[ChromosomeBase]) -> List[ChromosomeBase]:
        """Perform the cross with validated parents."""


def _child_from_genes(parent: ChromosomeBase, genes: Sequence[Gene]) -> ChromosomeBase:
    child = parent.create_new()
    child.replace_genes(0, genes)
    return child


def _validate_unique_genes(crossover: CrossoverBase, parents: Sequence[ChromosomeBase]):
    for parent in parents:
        values = parent.get_values()
        if len(set(map(repr, values))) != len(values):
            raise CrossoverException(
                crossover,
                f"{type(crossover).__name__} can be only used with ordered chromosomes. "
                f"The specified chromosome has repeated genes."
            )


@register_operator(OperatorKind.CROSSOVER, "one_point")
class OnePointCrossover(CrossoverBase):
    """
    Single-point crossover.

    Genes after the swap point are exchanged between the two parents. A
    random point is drawn for each cross when ``swap_point_index`` is None.
    """

    def __init__(self, swap_point_index: Optional[int] = None):
        super().__init__(2, 2)
        self.swap_point_index = swap_point_index

    def perform_cross(self, parents):
        """
        Exchange the tail of the two parents after the swap point.

        Args:
            parents: Two parents of the same length

        Returns:
            List[ChromosomeBase]: Two children
        """
        parent1, parent2 = parents
        length = parent1.length

        swap_point = self.swap_point_index
        if swap_point is None:
            swap_point = get_randomization().get_int(0, length - 1)
        elif swap_point >= length - 1:
            raise CrossoverException(
                self,
                f"The swap point index is {swap_point}, but there is only {length} genes. "
                f"The swap should result at least one gene to each side."
            )

        genes1, genes2 = parent1.get_genes(), parent2.get_genes()
        cut = swap_point + 1
        return [
            _child_from_genes(parent1, genes1[:cut] + genes2[cut:]),
            _child_from_genes(parent1, genes2[:cut] + genes1[cut:])
        ]


@register_operator(OperatorKind.CROSSOVER, "two_point")
class TwoPointCrossover(CrossoverBase):
    """Two-point crossover - genes between the two points are exchanged."""

    def __init__(self, swap_point_one: Optional[int] = None, swap_point_two: Optional[int] = None):
        super().__init__(2, 2, 3)
        if (swap_point_one is None) != (swap_point_two is None):
            raise ValueError("Both swap points should be given, or none of them.")
        if swap_point_one is not None and swap_point_two <= swap_point_one:
            raise ValueError("swap_point_two should be greater than swap_point_one.")
        self.swap_point_one = swap_point_one
        self.swap_point_two = swap_point_two

    def perform_cross(self, parents):
        """
        Exchange the genes between the two swap points.

        Args:
            parents: Two parents of the same length

        Returns:
            List[ChromosomeBase]: Two children
        """
        parent1, parent2 = parents
        length = parent1.length

        if self.swap_point_one is None:
            point_one, point_two = sorted(get_randomization().get_unique_ints(2, 0, length - 1))
        else:
            point_one, point_two = self.swap_point_one, self.swap_point_two
            if point_two >= length - 1:
                raise CrossoverException(
                    self,
                    f"The swap point two index is {point_two}, but there is only {length} genes. "
                    f"The swap should result at least one gene to each side."
                )

        genes1, genes2 = parent1.get_genes(), parent2.get_genes()
        a, b = point_one + 1, point_two + 1
        return [
            _child_from_genes(parent1, genes1[:a] + genes2[a:b] + genes1[b:]),
            _child_from_genes(parent1, genes2[:a] + genes1[a:b] + genes2[b:])
        ]


@register_operator(OperatorKind.CROSSOVER, "uniform")
class UniformCrossover(CrossoverBase):
    """Uniform crossover - each gene independently chosen from either parent."""

    def __init__(self, mix_probability: float = 0.5):
        super().__init__(2, 2)
        if not 0.0 <= mix_probability <= 1.0:
            raise ValueError("mix_probability should be between 0 and 1.")
        self.mix_probability = mix_probability

    def perform_cross(self, parents):
        """
        Draw, for each locus, which parent gives its gene to the first child.

        Args:
            parents: Two parents of the same length

        Returns:
            List[ChromosomeBase]: Two complementary children
        """
        parent1, parent2 = parents
        draws = get_randomization().get_floats(parent1.length)

        genes1, genes2 = [], []
        for gene1, gene2, draw in zip(parent1.get_genes(), parent2.get_genes(), draws):
            if draw < self.mix_probability:
                genes1.append(gene1)
                genes2.append(gene2)
            else:
                genes1.append(gene2)
                genes2.append(gene1)

        return [_child_from_genes(parent1, genes1), _child_from_genes(parent1, genes2)]


@register_operator(OperatorKind.CROSSOVER, "three_parent")
class ThreeParentCrossover(CrossoverBase):
    """
    Three parent crossover.

    Where the first two parents agree the gene is kept, otherwise the third
    parent's gene is used.
    """

    def __init__(self):
        super().__init__(3, 1)

    def perform_cross(self, parents):
        """
        Build one child from the agreement of the first two parents.

        Args:
            parents: Three parents of the same length

        Returns:
            List[ChromosomeBase]: A single child
        """
        parent1, parent2, parent3 = parents
        genes = [
            gene1 if gene1 == gene2 else gene3
            for gene1, gene2, gene3 in zip(parent1.get_genes(), parent2.get_genes(),
                                           parent3.get_genes())
        ]
        return [_child_from_genes(parent1, genes)]


@register_operator(OperatorKind.CROSSOVER, "ordered")
class OrderedCrossover(CrossoverBase):
    """
    Ordered crossover (OX1).

    A random segment of one parent is copied in place, the remaining loci
    are filled with the other parent's genes in their order. Requires
    chromosomes without repeated genes.
    """

    is_ordered = True

    def __init__(self):
        super().__init__(2, 2)

    def perform_cross(self, parents):
        """
        Copy a segment of each parent and fill the rest in the other's order.

        Args:
            parents: Two permutations of the same genes

        Returns:
            List[ChromosomeBase]: Two children keeping the gene set

        Raises:
            CrossoverException: If a parent has repeated genes
        """
        _validate_unique_genes(self, parents)

        parent1, parent2 = parents
        start, end = sorted(get_randomization().get_unique_ints(2, 0, parent1.length))

        return [
            self._create_child(parent1, parent2, start, end),
            self._create_child(parent2, parent1, start, end)
        ]

    @staticmethod
    def _create_child(first_parent, second_parent, start, end):
        segment = list(first_parent.get_genes()[start:end + 1])
        remaining = iter(g for g in second_parent.get_genes() if g not in segment)

        genes = []
        for index in range(first_parent.length):
            if start <= index <= end:
                genes.append(segment[index - start])
            else:
                genes.append(next(remaining))

        return _child_from_genes(first_parent, genes)


@register_operator(OperatorKind.CROSSOVER, "partially_mapped")
class PartiallyMappedCrossover(CrossoverBase):
    """
    Partially mapped crossover (PMX).

    The mapping section is exchanged between parents and conflicting genes
    outside it are resolved through the section's mapping.
    """

    is_ordered = True

    def __init__(self):
        super().__init__(2, 2, 3)

    def perform_cross(self, parents):
        """
        Exchange the mapping section and repair duplicates through the mapping.

        Args:
            parents: Two permutations of the same genes

        Returns:
            List[ChromosomeBase]: Two children keeping the gene set

        Raises:
            CrossoverException: If a parent has repeated genes
        """
        _validate_unique_genes(self, parents)

        parent1, parent2 = parents
        start, end = sorted(get_randomization().get_unique_ints(2, 0, parent1.length))

        genes1, genes2 = list(parent1.get_genes()), list(parent2.get_genes())
        return [
            _child_from_genes(parent1, self._map_genes(genes1, genes2, start, end)),
            _child_from_genes(parent2, self._map_genes(genes2, genes1, start, end))
        ]

    @staticmethod
    def _map_genes(receiver, donor, start, end):
        section = donor[start:end + 1]
        mapping = dict(zip(donor[start:end + 1], receiver[start:end + 1]))

        genes = []
        for index, gene in enumerate(receiver):
            if start <= index <= end:
                genes.append(donor[index])
                continue
            while gene in section:
                gene = mapping[gene]
            genes.append(gene)

        return genes
