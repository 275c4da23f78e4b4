"""
⚙️ Run Configuration
Typed, validated description of a genetic algorithm run
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from core.config import get_settings
from core.logger import get_logger
from .chromosome import ChromosomeBase
from .fitness_evaluator import FitnessEvaluator, FitnessFunction, as_evaluator
from .genetic_algorithm import GeneticAlgorithm
from .population import Population
from .randomization import seed
from .registry import OperatorKind, create_operator, get_registry

logger = get_logger(__name__)


class OperatorSpec(BaseModel):
    """
    Operator chosen by registry name.

    ``operands`` are built with the same kind and passed positionally, which
    is how composite terminations ("and", "or") receive their members.
    """

    name: str
    params: Dict[str, Any] = Field(default_factory=dict)
    operands: List["OperatorSpec"] = Field(default_factory=list)

    def check(self, kind: OperatorKind):
        registry = get_registry(kind)
        if self.name not in registry:
            raise ValueError(
                f"Unknown {kind.value} operator '{self.name}'. "
                f"Available: {', '.join(registry.names())}"
            )
        for operand in self.operands:
            operand.check(kind)

    def create(self, kind: OperatorKind):
        args = [operand.create(kind) for operand in self.operands]
        return create_operator(kind, self.name, *args, **self.params)


OperatorSpec.model_rebuild()


def _spec_field(name: str, **params: Any):
    return Field(default_factory=lambda: OperatorSpec(name=name, params=dict(params)))


class RunConfig(BaseModel):
    """Configuration of a run; numeric defaults come from the settings."""

    crossover_probability: float = Field(
        default_factory=lambda: get_settings().crossover_probability, ge=0.0, le=1.0
    )
    mutation_probability: float = Field(
        default_factory=lambda: get_settings().mutation_probability, ge=0.0, le=1.0
    )
    min_size: int = Field(default_factory=lambda: get_settings().population_min_size, ge=2)
    max_size: int = Field(default_factory=lambda: get_settings().population_max_size, ge=2)

    selection: OperatorSpec = _spec_field("elite")
    crossover: OperatorSpec = _spec_field("uniform")
    mutation: OperatorSpec = _spec_field("uniform")
    reinsertion: OperatorSpec = _spec_field("elitist")
    termination: OperatorSpec = _spec_field("generation_number", expected_generation_number=100)
    generation_strategy: OperatorSpec = Field(
        default_factory=lambda: OperatorSpec(
            name="performance",
            params={"generations_number": get_settings().generation_history_size}
        )
    )

    evaluation_workers: int = Field(default_factory=lambda: get_settings().evaluation_workers, ge=1)
    random_seed: Optional[int] = Field(default_factory=lambda: get_settings().random_seed)

    @field_validator("selection", "crossover", "mutation", "reinsertion", "termination",
                     "generation_strategy", mode="before")
    @classmethod
    def accept_plain_name(cls, v):
        if isinstance(v, str):
            return {"name": v}
        return v

    @model_validator(mode="after")
    def validate_run(self):
        if self.max_size < self.min_size:
            raise ValueError("max_size should be equal or greater than min_size")

        for field_name, kind in _OPERATOR_FIELDS.items():
            getattr(self, field_name).check(kind)

        return self

    def build(self, adam_chromosome: ChromosomeBase,
              fitness: Union[FitnessEvaluator, FitnessFunction]) -> GeneticAlgorithm:
        """
        Create the population and the genetic algorithm described by this config.

        Args:
            adam_chromosome: Prototype of the problem's chromosomes
            fitness: Fitness evaluator, or a plain fitness function
        """
        if self.random_seed is not None:
            seed(self.random_seed)

        population = Population(
            self.min_size,
            self.max_size,
            adam_chromosome,
            self.generation_strategy.create(OperatorKind.GENERATION_STRATEGY)
        )

        genetic_algorithm = GeneticAlgorithm(
            population,
            as_evaluator(fitness, self.evaluation_workers),
            self.selection.create(OperatorKind.SELECTION),
            self.crossover.create(OperatorKind.CROSSOVER),
            self.mutation.create(OperatorKind.MUTATION),
            self.reinsertion.create(OperatorKind.REINSERTION),
            self.termination.create(OperatorKind.TERMINATION)
        )
        genetic_algorithm.crossover_probability = self.crossover_probability
        genetic_algorithm.mutation_probability = self.mutation_probability

        logger.info(
            f"Built genetic algorithm {genetic_algorithm.run_id}: selection={self.selection.name}, "
            f"crossover={self.crossover.name}, mutation={self.mutation.name}, "
            f"reinsertion={self.reinsertion.name}, termination={self.termination.name}"
        )
        return genetic_algorithm


_OPERATOR_FIELDS = {
    "selection": OperatorKind.SELECTION,
    "crossover": OperatorKind.CROSSOVER,
    "mutation": OperatorKind.MUTATION,
    "reinsertion": OperatorKind.REINSERTION,
    "termination": OperatorKind.TERMINATION,
    "generation_strategy": OperatorKind.GENERATION_STRATEGY,
}
