"""Population of annotated fields with registered values.

Fields are declared for injection with ``Annotated`` type hints on the class::

    class Service:
        config: Annotated[Config, "config"]      # injected by name
        repository: Annotated[Repository, AUTO]  # injected by type

Fields are populated in declaration order and the first failure stops
population. Fields populated before the failure keep their new values.
"""

import dataclasses
import inspect
import logging
from typing import Any

from plumb.errors import NotInjectableError
from plumb.introspection import injection_points
from plumb.resolver import TypeResolver

__all__ = ["FieldPopulator"]

logger = logging.getLogger(__name__)


class FieldPopulator:
    """Write registered values into the annotated fields of an object."""

    def __init__(self, resolver: TypeResolver):
        self._resolver = resolver

    def populate(self, target: Any) -> None:
        """Inject every annotated field of ``target``.

        Values without injection annotations are left untouched.

        Raises:
            NotInjectableError: If annotated fields cannot be set on ``target``.
            NotRegisteredError: If a named dependency is not registered.
            NotAssignableError: If a dependency does not fit its field.
            NoMatchingTypeError: If no entry fits an ``AUTO`` field.
            AmbiguousTypeError: If several entries fit an ``AUTO`` field.
        """
        cls = target if inspect.isclass(target) else type(target)
        points = injection_points(cls)
        if not points:
            return

        _validate_injectable(target)

        for point in points:
            field = f"field {cls.__qualname__}.{point.name}"
            entry = self._resolver.resolve_point(point, field)
            try:
                setattr(target, point.name, entry.value)
            except (AttributeError, TypeError) as err:
                raise NotInjectableError(cls, f"{field} cannot be set") from err
            logger.debug("Injected %s into %s", entry.name, field)


def _validate_injectable(target: Any) -> None:
    if inspect.isclass(target):
        raise NotInjectableError(
            target, "annotated fields are populated on instances, not on the class"
        )
    if dataclasses.is_dataclass(target) and target.__dataclass_params__.frozen:
        raise NotInjectableError(type(target), "frozen dataclass fields cannot be set")
    if isinstance(target, tuple):
        raise NotInjectableError(type(target), "tuple fields cannot be set")
