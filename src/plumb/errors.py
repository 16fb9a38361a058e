"""Exceptions raised by the container.

Every failure of the core operations is a :class:`DependencyError`. The
subclasses keep each condition distinguishable, and mix in the closest builtin
exception so callers can also catch them as ``LookupError`` or ``TypeError``.

A factory's own failure is not wrapped: whatever exception the factory returns
or raises reaches the caller of ``register`` unchanged.
"""

from typing import Any, Optional

from plumb.assignability import describe_type

__all__ = [
    "DependencyError",
    "DuplicateNameError",
    "ReservedNameError",
    "NotFoundError",
    "NotRegisteredError",
    "NotAssignableError",
    "NotInjectableError",
    "NoMatchingTypeError",
    "AmbiguousTypeError",
    "UnsupportedFactorySignatureError",
    "SecondReturnMustBeError",
]


class DependencyError(Exception):
    """Raised when a dependency cannot be registered, resolved or injected."""

    pass


class DuplicateNameError(DependencyError):
    def __init__(self, name: str):
        super().__init__(f"plumb: {name} is already registered")
        self.name = name


class ReservedNameError(DependencyError):
    def __init__(self, name: str):
        super().__init__(f"plumb: {name} is a reserved name and cannot be registered")
        self.name = name


class NotFoundError(DependencyError, LookupError):
    """Raised by ``get`` when nothing is registered under the requested name."""

    def __init__(self, name: str):
        super().__init__(f"plumb: the requested dependency {name} couldn't be found")
        self.name = name


class NotRegisteredError(DependencyError, LookupError):
    """Raised when an annotation names a dependency that is not registered."""

    def __init__(self, name: str, target: Optional[str] = None):
        location = f" (required by {target})" if target else ""
        super().__init__(f"plumb: {name} is not registered{location}")
        self.name = name
        self.target = target


class NotAssignableError(DependencyError, TypeError):
    """Raised when a resolved dependency does not fit the declared type.

    Attributes:
        name: The name of the resolved dependency.
        declared_type: The type declared by the field or parameter.
        actual_type: The runtime type of the resolved value.
        target: A description of the field or parameter being populated.
    """

    def __init__(self, name: str, declared_type: Any, actual_type: type, target: str):
        super().__init__(
            f"plumb: {name} is not assignable to {target} "
            f"(declared {describe_type(declared_type)}, got {describe_type(actual_type)})"
        )
        self.name = name
        self.declared_type = declared_type
        self.actual_type = actual_type
        self.target = target


class NotInjectableError(DependencyError, TypeError):
    """Raised when annotated fields cannot be populated in place."""

    def __init__(self, value_type: type, reason: str):
        super().__init__(f"plumb: {describe_type(value_type)} is not injectable: {reason}")
        self.value_type = value_type


class NoMatchingTypeError(DependencyError, LookupError):
    def __init__(self, requested_type: Any):
        super().__init__(
            f"plumb: couldn't find the dependency for {describe_type(requested_type)}"
        )
        self.requested_type = requested_type


class AmbiguousTypeError(DependencyError, LookupError):
    def __init__(self, requested_type: Any, candidates: list[str]):
        super().__init__(
            "plumb: there is a conflict when finding the dependency for "
            f"{describe_type(requested_type)}: candidates {candidates}"
        )
        self.requested_type = requested_type
        self.candidates = candidates


class UnsupportedFactorySignatureError(DependencyError, TypeError):
    def __init__(self, factory: Any, reason: str):
        super().__init__(
            f"plumb: unsupported factory function {_factory_name(factory)}: {reason}"
        )
        self.factory = factory


class SecondReturnMustBeError(DependencyError, TypeError):
    def __init__(self, factory: Any, declared: Any):
        super().__init__(
            f"plumb: 2nd return value of factory function {_factory_name(factory)} "
            f"must be an exception type, not {describe_type(declared)}"
        )
        self.factory = factory


def _factory_name(factory: Any) -> str:
    return getattr(factory, "__qualname__", None) or repr(factory)
