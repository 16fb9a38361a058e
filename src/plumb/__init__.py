"""Plumb: runtime wiring of named components.

Plumb is a small registry for assembling an application's object graph during
start-up. Values are registered under unique names; objects registered or
injected have their annotated fields populated from values registered earlier,
and factory functions are called with parameters resolved by type.

Key Features:
    - Registration by explicit or generated name
    - Field injection by name or by type, declared with ``typing.Annotated``
    - Factory functions returning a value, or a ``(value, error)`` pair
    - Type-based resolution that never guesses between several candidates
    - No proxies, scopes or lazy resolution: everything is wired when registered

Basic Usage:
    >>> from typing import Annotated
    >>> import plumb
    >>>
    >>> class Service:
    ...     greeting: Annotated[str, "greeting"]
    >>>
    >>> container = plumb.new()
    >>> container.register("greeting", "Hello")
    >>> container.register("service", Service())
    >>> container.get("service").greeting
    'Hello'

The package consists of:
    - container: The ``Container`` and its operations
    - populator: Field injection
    - factory: Factory invocation
    - resolver: Resolution by name and by type
    - introspection: Reading annotations and factory signatures
    - assignability: Runtime checks of values against declared types
    - errors: Exceptions raised by the container
"""

from plumb.constants import AUTO
from plumb.container import Container, new
from plumb.domain import Entry
from plumb.errors import (
    AmbiguousTypeError,
    DependencyError,
    DuplicateNameError,
    NoMatchingTypeError,
    NotAssignableError,
    NotFoundError,
    NotInjectableError,
    NotRegisteredError,
    ReservedNameError,
    SecondReturnMustBeError,
    UnsupportedFactorySignatureError,
)

__all__ = [
    "AUTO",
    "Container",
    "Entry",
    "new",
    "AmbiguousTypeError",
    "DependencyError",
    "DuplicateNameError",
    "NoMatchingTypeError",
    "NotAssignableError",
    "NotFoundError",
    "NotInjectableError",
    "NotRegisteredError",
    "ReservedNameError",
    "SecondReturnMustBeError",
    "UnsupportedFactorySignatureError",
]
