"""Reading injection metadata from type hints and function signatures."""

import functools
import inspect
import types
import typing
from typing import Annotated, Any, Callable, Optional, Union, get_args, get_origin, get_type_hints

from plumb.constants import AUTO
from plumb.domain import FactorySignature, InjectionPoint
from plumb.errors import (
    NotInjectableError,
    SecondReturnMustBeError,
    UnsupportedFactorySignatureError,
)

__all__ = ["is_factory", "injection_points", "factory_signature"]

_NONE_TYPE = type(None)
_NO_HINT = object()


def is_factory(value: Any) -> bool:
    """Whether a registered value is a factory rather than a value in its own right.

    Functions, bound methods, builtins and ``functools.partial`` objects are
    factories. Classes are registered as values: constructors are never
    discovered or called implicitly.
    """
    return inspect.isroutine(value) or isinstance(value, functools.partial)


def injection_points(cls: type) -> list[InjectionPoint]:
    """List the fields of a class annotated for injection, base class fields first.

    A field is an injection point when its type hint is ``Annotated`` and
    carries a string: either the name of a registered dependency or ``AUTO``.

    Example:
        >>> class Service:
        ...     config: Annotated[Config, "config"]
        ...     repository: Annotated[Repository, AUTO]
        ...     label: str
        >>> injection_points(Service)
        >>> # [InjectionPoint("config", Config, "config"),
        >>> #  InjectionPoint("repository", Repository, "auto")]

    String annotations are evaluated too, so ``Annotated`` may be imported
    under another name. Unresolvable string annotations are only an error
    when their text mentions ``Annotated``; otherwise the class is taken to
    declare no injection points.

    Raises:
        NotInjectableError: If annotations that declare injection points
            cannot be resolved.
    """
    annotations = [
        annotation
        for klass in cls.__mro__
        for annotation in inspect.get_annotations(klass).values()
    ]
    if not any(isinstance(a, str) or get_origin(a) is Annotated for a in annotations):
        return []

    try:
        hints = get_type_hints(cls, include_extras=True)
    except (NameError, TypeError) as err:
        if not any(_mentions_annotated(a) for a in annotations):
            return []
        raise NotInjectableError(cls, "annotations cannot be resolved") from err

    points = []
    for field_name, hint in hints.items():
        declared_type, dependency_name = _split_annotated(hint)
        if dependency_name is not None:
            points.append(InjectionPoint(field_name, declared_type, dependency_name))
    return points


def factory_signature(factory: Callable) -> FactorySignature:
    """Validate a factory and describe how to call it.

    The return annotation declares what the factory produces. A fixed two
    element tuple ``tuple[T, E]`` means the factory returns a value and an
    error, and ``E`` must then be an exception type, optionally unioned with
    ``None``. Any other annotation, or none, means a single value. ``None`` and
    ``tuple[()]`` declare no value, and longer fixed tuples declare too many.

    Each parameter must be annotated: by default it is resolved by type, or by
    name when annotated ``Annotated[T, "name"]``. Keywords already bound by a
    ``functools.partial`` are kept and not resolved.

    Raises:
        UnsupportedFactorySignatureError: If the factory declares zero or more
            than two return values, has unannotated or variadic parameters, or
            has annotations that cannot be resolved.
        SecondReturnMustBeError: If the second declared return value is not an
            exception type.
    """
    try:
        signature = inspect.signature(factory)
    except (TypeError, ValueError) as err:
        raise UnsupportedFactorySignatureError(factory, "signature cannot be inspected") from err

    hints = _type_hints_of(factory)
    returns_error = _returns_error(factory, hints.get("return", _NO_HINT))
    bound = factory.keywords if isinstance(factory, functools.partial) else {}
    parameters = [
        _make_parameter_point(factory, parameter, hints)
        for parameter in signature.parameters.values()
        if parameter.name not in bound
    ]

    return FactorySignature(factory, parameters, returns_error)


def _type_hints_of(factory: Callable) -> dict[str, Any]:
    target = factory.func if isinstance(factory, functools.partial) else factory
    try:
        return get_type_hints(target, include_extras=True)
    except (NameError, TypeError) as err:
        raise UnsupportedFactorySignatureError(factory, "annotations cannot be resolved") from err


def _returns_error(factory: Callable, hint: Any) -> bool:
    if hint is _NO_HINT:
        return False
    if hint is _NONE_TYPE:
        raise UnsupportedFactorySignatureError(factory, "it declares no return value")

    hint, _ = _split_annotated(hint)
    if get_origin(hint) is not tuple or hint is typing.Tuple:
        return False

    returned = get_args(hint)
    if returned in ((), ((),)):
        raise UnsupportedFactorySignatureError(factory, "it declares no return value")
    if len(returned) == 1 or (len(returned) == 2 and returned[1] is Ellipsis):
        return False
    if len(returned) > 2:
        raise UnsupportedFactorySignatureError(
            factory, f"it declares {len(returned)} return values"
        )
    if not _is_error_type(returned[1]):
        raise SecondReturnMustBeError(factory, returned[1])
    return True


def _is_error_type(hint: Any) -> bool:
    hint, _ = _split_annotated(hint)
    if isinstance(hint, type) and get_origin(hint) is None:
        return issubclass(hint, Exception)
    if get_origin(hint) in (Union, types.UnionType):
        errors = [arm for arm in get_args(hint) if arm is not _NONE_TYPE]
        return len(errors) > 0 and all(_is_error_type(arm) for arm in errors)
    return False


def _make_parameter_point(
    factory: Callable, parameter: inspect.Parameter, hints: dict[str, Any]
) -> InjectionPoint:
    if parameter.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
        raise UnsupportedFactorySignatureError(
            factory, f"variadic parameter {parameter.name} cannot be resolved"
        )
    if parameter.name not in hints:
        raise UnsupportedFactorySignatureError(
            factory, f"parameter {parameter.name} is not annotated"
        )

    declared_type, dependency_name = _split_annotated(hints[parameter.name])
    return InjectionPoint(
        parameter.name,
        declared_type,
        dependency_name or AUTO,
        parameter.kind is inspect.Parameter.POSITIONAL_ONLY,
    )


def _split_annotated(hint: Any) -> tuple[Any, Optional[str]]:
    if get_origin(hint) is not Annotated:
        return hint, None

    base_type, *metadata = get_args(hint)
    return base_type, next((m for m in metadata if isinstance(m, str)), None)


def _mentions_annotated(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return "Annotated" in annotation
    return get_origin(annotation) is Annotated
