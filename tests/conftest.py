"""
🧪 Shared fixtures for the genetic engine tests
Test chromosome encodings, fitness functions and evaluated populations
"""

import pytest

from genetic import (
    ChromosomeBase,
    FitnessEvaluator,
    Gene,
    Population,
    TrackingGenerationStrategy,
    get_randomization,
    seed
)


class IntegerChromosome(ChromosomeBase):
    """Genes are integers in [0, max_value)."""

    def __init__(self, length: int = 8, max_value: int = 10):
        super().__init__(length)
        self.max_value = max_value
        self.create_genes()

    def generate_gene(self, gene_index):
        return Gene(get_randomization().get_int(0, self.max_value))

    def create_new(self):
        return IntegerChromosome(self.length, self.max_value)


class PermutationChromosome(ChromosomeBase):
    """Genes are a permutation of range(length)."""

    def __init__(self, length: int = 8):
        super().__init__(length)
        values = get_randomization().get_unique_ints(length, 0, length)
        self.replace_genes(0, [Gene(v) for v in values])

    def generate_gene(self, gene_index):
        return Gene(get_randomization().get_int(0, self.length))

    def create_new(self):
        return PermutationChromosome(self.length)


def sum_fitness(chromosome):
    """Higher sum of gene values is better."""
    return float(sum(chromosome.get_values()))


def make_chromosome(values, fitness=None):
    chromosome = IntegerChromosome(len(values), max(values) + 1)
    chromosome.replace_genes(0, [Gene(v) for v in values])
    chromosome.fitness = fitness
    return chromosome


def make_evaluated_population(min_size=6, max_size=6, length=8, fitness_function=sum_fitness):
    population = Population(min_size, max_size, IntegerChromosome(length),
                            TrackingGenerationStrategy())
    population.create_initial_generation()
    population.end_current_generation(FitnessEvaluator(fitness_function))
    return population


@pytest.fixture(autouse=True)
def seeded_randomization():
    """Every test starts from the same random state"""
    seed(42)
    yield
    seed(None)


@pytest.fixture
def integer_chromosome():
    return IntegerChromosome()


@pytest.fixture
def permutation_chromosome():
    return PermutationChromosome()


@pytest.fixture
def evaluator():
    return FitnessEvaluator(sum_fitness)


@pytest.fixture
def evaluated_population():
    return make_evaluated_population()


@pytest.fixture
def chromosome_factory():
    """Build chromosomes with explicit gene values and fitness"""
    return make_chromosome
