"""
🗂️ Operator Registry
Name based discovery and construction of genetic operators
"""

from enum import Enum
from typing import Any, Callable, Dict, List, Type

from core.logger import get_logger
from .exceptions import UnknownOperatorError

logger = get_logger(__name__)


class OperatorKind(Enum):
    """Families of pluggable operators"""
    SELECTION = "selection"
    CROSSOVER = "crossover"
    MUTATION = "mutation"
    REINSERTION = "reinsertion"
    TERMINATION = "termination"
    GENERATION_STRATEGY = "generation_strategy"


class OperatorRegistry:
    """Registry of the operator classes of one kind, keyed by name."""

    def __init__(self, kind: OperatorKind):
        self.kind = kind
        self._operators: Dict[str, Type] = {}

    def register(self, name: str) -> Callable[[Type], Type]:
        """
        Decorator to register an operator class under ``name``.

        Args:
            name: Registry key (e.g. "tournament", "one_point")
        """
        def decorator(operator_class: Type) -> Type:
            if name in self._operators:
                raise ValueError(
                    f"A {self.kind.value} operator named '{name}' is already registered "
                    f"({self._operators[name].__name__})."
                )
            self._operators[name] = operator_class
            operator_class.registry_name = name
            return operator_class
        return decorator

    def names(self) -> List[str]:
        return sorted(self._operators)

    def get_type(self, name: str) -> Type:
        try:
            return self._operators[name]
        except KeyError:
            raise UnknownOperatorError(self.kind.value, name, self.names()) from None

    def create(self, name: str, *args: Any, **kwargs: Any):
        """Instantiate the operator registered under ``name``."""
        operator_class = self.get_type(name)
        logger.debug(f"Creating {self.kind.value} '{name}' with args={args} kwargs={kwargs}")
        return operator_class(*args, **kwargs)

    def __contains__(self, name: str) -> bool:
        return name in self._operators


_registries: Dict[OperatorKind, OperatorRegistry] = {
    kind: OperatorRegistry(kind) for kind in OperatorKind
}


def _coerce_kind(kind) -> OperatorKind:
    if isinstance(kind, OperatorKind):
        return kind
    try:
        return OperatorKind(kind)
    except ValueError:
        raise UnknownOperatorError("operator kind", str(kind),
                                   [k.value for k in OperatorKind]) from None


def get_registry(kind) -> OperatorRegistry:
    return _registries[_coerce_kind(kind)]


def register_operator(kind, name: str):
    """Class decorator registering an operator of ``kind`` under ``name``."""
    return get_registry(kind).register(name)


def list_operator_names(kind) -> List[str]:
    """List available implementation names for an operator kind."""
    return get_registry(kind).names()


def get_operator_type(kind, name: str) -> Type:
    return get_registry(kind).get_type(name)


def create_operator(kind, name: str, *args: Any, **kwargs: Any):
    """Construct an operator instance by name with constructor arguments."""
    return get_registry(kind).create(name, *args, **kwargs)
