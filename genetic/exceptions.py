"""
⚠️ Genetic Exceptions
Errors raised by operators, populations and the genetic algorithm
"""


class GeneticError(Exception):
    """Base exception for the genetic engine"""
    pass


class OperatorError(GeneticError):
    """Error raised by an operator, keeping a reference to it"""

    def __init__(self, operator, message: str):
        super().__init__(f"{type(operator).__name__}: {message}")
        self.operator = operator


class CrossoverException(OperatorError):
    """Crossover constraint violation (e.g. chromosome too short)"""

    @property
    def crossover(self):
        return self.operator


class MutationException(OperatorError):
    """Mutation constraint violation"""

    @property
    def mutation(self):
        return self.operator


class SelectionException(OperatorError):
    """Selection over an unusable population"""

    @property
    def selection(self):
        return self.operator


class ReinsertionException(OperatorError):
    """Reinsertion unable to honour the population size bounds"""

    @property
    def reinsertion(self):
        return self.operator


class PopulationException(GeneticError):
    """Invalid population bounds or generation content"""
    pass


class GeneticAlgorithmException(GeneticError):
    """Invalid genetic algorithm state transition"""
    pass


class UnknownOperatorError(GeneticError, KeyError):
    """Operator name not found in a registry"""

    def __init__(self, kind: str, name: str, available=None):
        self.kind = kind
        self.name = name
        self.available = list(available or [])
        super().__init__(
            f"Unknown {kind} operator '{name}'. Available: {', '.join(self.available) or 'none'}"
        )

    def __str__(self) -> str:
        return self.args[0]
