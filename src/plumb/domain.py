"""Domain models used throughout the package."""

from dataclasses import dataclass
from typing import Any, Callable, Optional

from plumb.constants import AUTO


@dataclass(frozen=True)
class Entry:
    """
    A named value held by a container.

    The value is shared, never copied: the container and every field injected
    with the entry refer to the same object.

    Attributes:
        name: The name the value is registered under.
        value: The registered object.
        value_type: The runtime type of the value.
        factory: The factory function that produced the value, if any.
    """

    name: str
    value: Any
    value_type: type
    factory: Optional[Callable] = None

    @staticmethod
    def of(name: str, value: Any, factory: Optional[Callable] = None) -> "Entry":
        return Entry(name, value, type(value), factory)


@dataclass(frozen=True)
class InjectionPoint:
    """A field or factory parameter that receives a registered value.

    Attributes:
        name: The field or parameter name.
        declared_type: The type declared for the field or parameter.
        dependency_name: The registered name to inject, or ``AUTO`` to resolve by type.
        positional_only: Whether a factory parameter must be passed positionally.
    """

    name: str
    declared_type: Any
    dependency_name: str
    positional_only: bool = False

    @property
    def by_type(self) -> bool:
        return self.dependency_name == AUTO


@dataclass(frozen=True)
class FactorySignature:
    """The validated shape of a factory function.

    Attributes:
        factory: The factory callable.
        parameters: Injection points for each parameter, in declaration order.
        returns_error: True if the factory returns a ``(value, error)`` pair.
    """

    factory: Callable
    parameters: list[InjectionPoint]
    returns_error: bool
