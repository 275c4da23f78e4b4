"""
🧪 Run configuration tests
Validation and construction of a run from named operators
"""

import pytest
from pydantic import ValidationError

from genetic import (
    EliteSelection,
    ElitistReinsertion,
    GeneticAlgorithmState,
    OperatorSpec,
    OrTermination,
    PartiallyMappedCrossover,
    RunConfig,
    TournamentSelection,
    TrackingGenerationStrategy,
    TworsMutation,
    UniformCrossover,
    UniformMutation
)
from tests.conftest import IntegerChromosome, PermutationChromosome, sum_fitness


class TestRunConfigValidation:
    """Configuration surface"""

    def test_defaults_come_from_settings(self):
        config = RunConfig()

        assert config.crossover_probability == 0.75
        assert config.mutation_probability == 0.1
        assert config.min_size == 50
        assert config.max_size == 100
        assert config.selection.name == "elite"
        assert config.termination.params == {"expected_generation_number": 100}
        assert config.generation_strategy.params == {"generations_number": 10}

    @pytest.mark.parametrize("field,value", [
        ("crossover_probability", 1.2),
        ("mutation_probability", -0.1),
        ("min_size", 1),
        ("evaluation_workers", 0),
    ])
    def test_out_of_range_values(self, field, value):
        with pytest.raises(ValidationError):
            RunConfig(**{field: value})

    def test_max_size_below_min_size(self):
        with pytest.raises(ValidationError, match="max_size"):
            RunConfig(min_size=10, max_size=5)

    def test_unknown_operator_name(self):
        with pytest.raises(ValidationError, match="Unknown crossover operator 'four_point'"):
            RunConfig(crossover="four_point")

    def test_unknown_nested_operator_name(self):
        with pytest.raises(ValidationError, match="Unknown termination operator"):
            RunConfig(termination={"name": "or", "operands": [
                {"name": "generation_number"}, {"name": "never"}
            ]})

    def test_plain_names_are_accepted(self):
        config = RunConfig(selection="tournament", mutation="twors")

        assert config.selection == OperatorSpec(name="tournament")
        assert config.mutation.name == "twors"

    def test_default_specs_are_independent(self):
        first, second = RunConfig(), RunConfig()
        first.termination.params["expected_generation_number"] = 5

        assert second.termination.params["expected_generation_number"] == 100


class TestRunConfigBuild:
    """Construction of population and genetic algorithm"""

    def test_build_default_operators(self):
        ga = RunConfig(min_size=4, max_size=6).build(IntegerChromosome(), sum_fitness)

        assert isinstance(ga.selection, EliteSelection)
        assert isinstance(ga.crossover, UniformCrossover)
        assert isinstance(ga.mutation, UniformMutation)
        assert isinstance(ga.reinsertion, ElitistReinsertion)
        assert ga.population.min_size == 4
        assert ga.population.max_size == 6
        assert ga.termination.expected_generation_number == 100

    def test_build_named_operators_with_params(self):
        config = RunConfig(
            crossover_probability=0.9,
            mutation_probability=0.2,
            min_size=6,
            max_size=6,
            selection={"name": "tournament", "params": {"size": 3}},
            crossover="partially_mapped",
            mutation="twors",
            termination={"name": "or", "operands": [
                {"name": "generation_number", "params": {"expected_generation_number": 5}},
                {"name": "fitness_threshold", "params": {"expected_fitness": 1000.0}}
            ]},
            generation_strategy="tracking",
            evaluation_workers=2
        )

        ga = config.build(PermutationChromosome(), sum_fitness)

        assert isinstance(ga.selection, TournamentSelection)
        assert ga.selection.size == 3
        assert isinstance(ga.crossover, PartiallyMappedCrossover)
        assert isinstance(ga.mutation, TworsMutation)
        assert isinstance(ga.termination, OrTermination)
        assert isinstance(ga.population.generation_strategy, TrackingGenerationStrategy)
        assert ga.crossover_probability == 0.9
        assert ga.mutation_probability == 0.2
        assert ga.fitness_evaluator.max_workers == 2

        ga.start()

        assert ga.state == GeneticAlgorithmState.TERMINATION_REACHED
        assert ga.generations_number == 5
        assert len(ga.population.generations) == 5

    def test_random_seed_makes_runs_reproducible(self):
        config = RunConfig(min_size=6, max_size=6, random_seed=123,
                           termination={"name": "generation_number",
                                        "params": {"expected_generation_number": 5}})

        results = []
        for _ in range(2):
            ga = config.build(IntegerChromosome(), sum_fitness)
            ga.start()
            results.append([c.get_values() for c in ga.population.current_generation.chromosomes])

        assert results[0] == results[1]
