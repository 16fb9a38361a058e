"""Resolution of dependencies against the entries of a container."""

from typing import Any, Mapping

from plumb.assignability import is_assignable
from plumb.domain import Entry, InjectionPoint
from plumb.errors import (
    AmbiguousTypeError,
    NoMatchingTypeError,
    NotAssignableError,
    NotRegisteredError,
)

__all__ = ["TypeResolver"]


class TypeResolver:
    """Find the registered entry that satisfies a declared type or injection point.

    The resolver reads the container's live entry mapping, so entries
    registered after the resolver was created are visible to it.
    """

    def __init__(self, entries: Mapping[str, Entry]):
        self._entries = entries

    def resolve(self, requested_type: Any) -> Entry:
        """Return the unique entry whose value is assignable to ``requested_type``.

        There is no tie-break: two or more candidates are always an error.

        Raises:
            NoMatchingTypeError: If no entry is assignable.
            AmbiguousTypeError: If more than one entry is assignable.
        """
        candidates = self.candidates(requested_type)
        if len(candidates) == 0:
            raise NoMatchingTypeError(requested_type)
        if len(candidates) > 1:
            raise AmbiguousTypeError(requested_type, [c.name for c in candidates])
        return candidates[0]

    def candidates(self, requested_type: Any) -> list[Entry]:
        return [
            entry
            for entry in self._entries.values()
            if is_assignable(entry.value, requested_type)
        ]

    def resolve_point(self, point: InjectionPoint, target: str) -> Entry:
        """Resolve a field or parameter, by type for ``AUTO`` and by name otherwise.

        Args:
            point: The injection point to satisfy.
            target: Description of the field or parameter, used in error messages.

        Raises:
            NotRegisteredError: If the named dependency is not registered.
            NotAssignableError: If the named dependency does not fit the declared type.
            NoMatchingTypeError: If no entry fits an ``AUTO`` point.
            AmbiguousTypeError: If several entries fit an ``AUTO`` point.
        """
        if point.by_type:
            return self.resolve(point.declared_type)

        entry = self._entries.get(point.dependency_name)
        if entry is None:
            raise NotRegisteredError(point.dependency_name, target)
        if not is_assignable(entry.value, point.declared_type):
            raise NotAssignableError(
                point.dependency_name, point.declared_type, entry.value_type, target
            )
        return entry
