"""Invocation of factory functions registered in place of values.

A factory's parameters are resolved from the container when it is registered,
it is called exactly once, and what it returns becomes the registered entry.
Factories declaring a ``(value, error)`` return pair report failure by
returning an exception, which is raised to the caller of ``register`` as-is.
"""

import logging
from typing import Any, Callable

from plumb.domain import Entry
from plumb.errors import UnsupportedFactorySignatureError
from plumb.introspection import factory_signature
from plumb.resolver import TypeResolver

__all__ = ["FactoryInvoker"]

logger = logging.getLogger(__name__)


class FactoryInvoker:
    """Build :class:`Entry` instances from factories."""

    def __init__(self, resolver: TypeResolver):
        self._resolver = resolver

    def invoke(self, name: str, factory: Callable) -> Entry:
        """Resolve a factory's parameters, call it and capture its result.

        Args:
            name: The name the produced value will be registered under.
            factory: The factory function.

        Returns:
            The resulting :class:`Entry`, not yet stored.

        Raises:
            UnsupportedFactorySignatureError: If the factory's signature or
                result does not follow the factory convention.
            SecondReturnMustBeError: If a declared second return value is not
                an exception type.
            DependencyError: If a parameter cannot be resolved.
            Exception: Whatever error the factory returns or raises.
        """
        signature = factory_signature(factory)

        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        for point in signature.parameters:
            target = f"parameter {point.name} of {_describe(factory)}"
            value = self._resolver.resolve_point(point, target).value
            if point.positional_only:
                args.append(value)
            else:
                kwargs[point.name] = value

        logger.debug("Invoking factory %s for %s", _describe(factory), name)
        result = factory(*args, **kwargs)

        if signature.returns_error:
            result, error = _split_result(factory, result)
            if error is not None:
                raise error

        return Entry.of(name, result, factory)


def _split_result(factory: Callable, result: Any) -> tuple[Any, Any]:
    if not (isinstance(result, tuple) and len(result) == 2):
        raise UnsupportedFactorySignatureError(
            factory, f"it returned {result!r} instead of a (value, error) pair"
        )

    value, error = result
    if error is not None and not isinstance(error, BaseException):
        raise UnsupportedFactorySignatureError(
            factory, f"it returned {error!r} as its error"
        )
    return value, error


def _describe(factory: Callable) -> str:
    return getattr(factory, "__qualname__", None) or repr(factory)
