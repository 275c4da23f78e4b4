"""
🧬 Genetic Engine
Generic evolutionary computation: chromosomes, population, pluggable
operators and the genetic algorithm orchestrator
"""

from .chromosome import Gene, ChromosomeBase
from .exceptions import (
    GeneticError,
    OperatorError,
    CrossoverException,
    MutationException,
    SelectionException,
    ReinsertionException,
    PopulationException,
    GeneticAlgorithmException,
    UnknownOperatorError
)
from .randomization import RandomizationProvider, get_randomization, set_randomization, seed
from .fitness_evaluator import FitnessEvaluator, as_evaluator
from .registry import (
    OperatorKind,
    register_operator,
    list_operator_names,
    get_operator_type,
    create_operator
)
from .generation_strategy import (
    GenerationStrategyBase,
    PerformanceGenerationStrategy,
    TrackingGenerationStrategy
)
from .population import Generation, Population
from .selection import (
    SelectionBase,
    EliteSelection,
    RouletteWheelSelection,
    StochasticUniversalSamplingSelection,
    TournamentSelection,
    RankSelection,
    UniformSelection
)
from .crossover import (
    CrossoverBase,
    OnePointCrossover,
    TwoPointCrossover,
    UniformCrossover,
    ThreeParentCrossover,
    OrderedCrossover,
    PartiallyMappedCrossover
)
from .mutation import (
    MutationBase,
    UniformMutation,
    TworsMutation,
    ReverseSequenceMutation,
    DisplacementMutation
)
from .reinsertion import (
    ReinsertionBase,
    PureReinsertion,
    ElitistReinsertion,
    UniformReinsertion,
    FitnessBasedReinsertion
)
from .termination import (
    TerminationBase,
    GenerationNumberTermination,
    FitnessThresholdTermination,
    FitnessStagnationTermination,
    TimeEvolvingTermination,
    AndTermination,
    OrTermination,
    FuncTermination
)
from .genetic_algorithm import (
    GeneticAlgorithm,
    GeneticAlgorithmState,
    GeneticAlgorithmObserver,
    GenerationEvent,
    CallbackObserver
)
from .run_config import OperatorSpec, RunConfig

__all__ = [
    'Gene',
    'ChromosomeBase',
    'GeneticError',
    'OperatorError',
    'CrossoverException',
    'MutationException',
    'SelectionException',
    'ReinsertionException',
    'PopulationException',
    'GeneticAlgorithmException',
    'UnknownOperatorError',
    'RandomizationProvider',
    'get_randomization',
    'set_randomization',
    'seed',
    'FitnessEvaluator',
    'as_evaluator',
    'OperatorKind',
    'register_operator',
    'list_operator_names',
    'get_operator_type',
    'create_operator',
    'GenerationStrategyBase',
    'PerformanceGenerationStrategy',
    'TrackingGenerationStrategy',
    'Generation',
    'Population',
    'SelectionBase',
    'EliteSelection',
    'RouletteWheelSelection',
    'StochasticUniversalSamplingSelection',
    'TournamentSelection',
    'RankSelection',
    'UniformSelection',
    'CrossoverBase',
    'OnePointCrossover',
    'TwoPointCrossover',
    'UniformCrossover',
    'ThreeParentCrossover',
    'OrderedCrossover',
    'PartiallyMappedCrossover',
    'MutationBase',
    'UniformMutation',
    'TworsMutation',
    'ReverseSequenceMutation',
    'DisplacementMutation',
    'ReinsertionBase',
    'PureReinsertion',
    'ElitistReinsertion',
    'UniformReinsertion',
    'FitnessBasedReinsertion',
    'TerminationBase',
    'GenerationNumberTermination',
    'FitnessThresholdTermination',
    'FitnessStagnationTermination',
    'TimeEvolvingTermination',
    'AndTermination',
    'OrTermination',
    'FuncTermination',
    'GeneticAlgorithm',
    'GeneticAlgorithmState',
    'GeneticAlgorithmObserver',
    'GenerationEvent',
    'CallbackObserver',
    'OperatorSpec',
    'RunConfig'
]
