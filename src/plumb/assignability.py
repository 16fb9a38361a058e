"""Runtime checks of values against declared types.

Injection needs to know whether a registered value may be stored in a field or
passed as a parameter of a given declared type. The checks follow the runtime
meaning of ``typing`` constructs: unions accept any member, ``Annotated`` and
``NewType`` are checked as the type they wrap, and parametrised generics are
checked against their origin only, since type arguments are erased at runtime.
"""

import types
import typing
from typing import Annotated, Any, Literal, Union, get_args, get_origin

__all__ = ["is_assignable", "describe_type"]

_UNION_ORIGINS = (Union, types.UnionType)
_NONE_TYPE = type(None)


def is_assignable(value: Any, declared_type: Any) -> bool:
    """Check whether ``value`` can be stored where ``declared_type`` is declared.

    Args:
        value: The candidate value.
        declared_type: A class or ``typing`` construct taken from a type hint.

    Returns:
        True if the value satisfies the declared type.

    Example:
        >>> is_assignable(10, int)                  # True
        >>> is_assignable("10", int)                # False
        >>> is_assignable(None, Optional[int])      # True
        >>> is_assignable([1], list[str])           # True, arguments are not checked
    """
    if declared_type is Any or declared_type is object:
        return True
    if declared_type is None or declared_type is _NONE_TYPE:
        return value is None
    if isinstance(declared_type, typing.TypeVar):
        return _satisfies_type_var(value, declared_type)
    if isinstance(declared_type, typing.NewType):
        return is_assignable(value, declared_type.__supertype__)

    origin = get_origin(declared_type)
    if origin is Annotated:
        return is_assignable(value, get_args(declared_type)[0])
    if origin in _UNION_ORIGINS:
        return any(is_assignable(value, arm) for arm in get_args(declared_type))
    if origin is Literal:
        return any(
            type(value) is type(literal) and value == literal
            for literal in get_args(declared_type)
        )
    if origin is type:
        return isinstance(value, type) and _is_subclass_of_any(
            value, get_args(declared_type)
        )
    if origin is not None:
        if not isinstance(origin, type) or _is_static_protocol(origin):
            return False
        return isinstance(value, origin)

    if isinstance(declared_type, type):
        if _is_static_protocol(declared_type):
            return False
        return isinstance(value, declared_type)

    return False


def describe_type(declared_type: Any) -> str:
    """Render a type for error messages: ``int``, ``list[str]``, ``app.Service``."""
    if declared_type is None or declared_type is _NONE_TYPE:
        return "None"
    if isinstance(declared_type, type) and get_origin(declared_type) is None:
        if declared_type.__module__ == "builtins":
            return declared_type.__qualname__
        return f"{declared_type.__module__}.{declared_type.__qualname__}"
    return repr(declared_type)


def _satisfies_type_var(value: Any, type_var: typing.TypeVar) -> bool:
    if type_var.__bound__ is not None:
        return is_assignable(value, type_var.__bound__)
    if type_var.__constraints__:
        return any(is_assignable(value, c) for c in type_var.__constraints__)
    return True


def _is_subclass_of_any(cls: type, bounds: tuple) -> bool:
    if not bounds:
        return True

    bound = bounds[0]
    if bound is Any or bound is object:
        return True
    if get_origin(bound) in _UNION_ORIGINS:
        return any(_is_subclass_of_any(cls, (arm,)) for arm in get_args(bound))
    bound = get_origin(bound) or bound
    if not isinstance(bound, type) or _is_static_protocol(bound):
        return False
    return issubclass(cls, bound)


def _is_static_protocol(declared_type: type) -> bool:
    # isinstance() refuses protocols that are not @runtime_checkable
    return getattr(declared_type, "_is_protocol", False) and not getattr(
        declared_type, "_is_runtime_protocol", False
    )
