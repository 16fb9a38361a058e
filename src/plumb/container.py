"""The container: a registry of named values wired together at start-up.

Values are registered under unique names. Registering an object populates its
annotated fields from values registered before it, and registering a factory
function calls it with parameters resolved by type and stores what it returns::

    container = new()
    container.register("config", Config(url="sqlite://"))
    container.register("repository", make_repository)   # make_repository(config: Config)
    container.register("service", Service())            # fields annotated for injection

The container is meant to be filled during a single-threaded initialisation
phase. Once filled, it may be read concurrently with ``get``.

Every operation raises a :class:`~plumb.errors.DependencyError` on misuse. The
``must_`` variants instead abort the process, for start-up code that treats a
wiring mistake as fatal.
"""

import logging
from typing import Any, Callable, Iterator, TypeVar

from plumb.constants import ANONYMOUS_PREFIX, AUTO
from plumb.domain import Entry
from plumb.errors import DuplicateNameError, NotFoundError, ReservedNameError
from plumb.factory import FactoryInvoker
from plumb.introspection import is_factory
from plumb.populator import FieldPopulator
from plumb.resolver import TypeResolver

__all__ = ["Container", "new"]

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Container:
    """Registry of named values, supporting injection by name or by type.

    Values are shared, not copied: ``get`` returns the registered object itself,
    and every field injected with it refers to that same object.
    """

    def __init__(self):
        self._entries: dict[str, Entry] = {}
        self._anonymous_counter = 0
        self._resolver = TypeResolver(self._entries)
        self._factory_invoker = FactoryInvoker(self._resolver)
        self._populator = FieldPopulator(self._resolver)

    def register(self, name: str, value: Any) -> None:
        """Register a value, or the value produced by a factory, under ``name``.

        If ``value`` is a factory function it is called first, with its
        parameters resolved from the container. The registered object then has
        its annotated fields populated. Nothing is stored unless both steps
        succeed.

        Args:
            name: A unique name other than ``"auto"``.
            value: The value to register, or a factory producing it.

        Raises:
            ReservedNameError: If ``name`` is ``"auto"``.
            DuplicateNameError: If ``name`` is already registered.
            DependencyError: If the factory or the fields cannot be resolved.
            Exception: Whatever error a factory returns or raises.
        """
        if name == AUTO:
            raise ReservedNameError(name)
        if name in self._entries:
            raise DuplicateNameError(name)

        if is_factory(value):
            entry = self._factory_invoker.invoke(name, value)
        else:
            entry = Entry.of(name, value)

        self._populator.populate(entry.value)

        self._entries[name] = entry
        logger.debug("Registered %s (%s)", name, entry.value_type.__qualname__)

    def get(self, name: str) -> Any:
        """Retrieve the value registered under ``name``.

        Raises:
            NotFoundError: If nothing is registered under ``name``.
        """
        entry = self._entries.get(name)
        if entry is None:
            raise NotFoundError(name)
        return entry.value

    def inject(self, target: Any) -> None:
        """Populate the annotated fields of ``target`` without registering it.

        Raises:
            DependencyError: If a field cannot be resolved or set.
        """
        self._populator.populate(target)

    def register_anonymous(self, value: Any) -> str:
        """Register a value under a generated ``unnamed.<n>`` name.

        The counter starts at zero and only moves past names that are already
        taken, so the first free name is used.

        Returns:
            The generated name.

        Raises:
            DependencyError: As for :meth:`register`.
        """
        name = self._anonymous_name()
        while name in self._entries:
            self._anonymous_counter += 1
            name = self._anonymous_name()

        logger.debug("Registering anonymous value as %s", name)
        self.register(name, value)
        return name

    def must_register(self, name: str, value: Any) -> None:
        """Like :meth:`register`, but aborts the process on failure."""
        _must(self.register, name, value)

    def must_get(self, name: str) -> Any:
        """Like :meth:`get`, but aborts the process on failure."""
        return _must(self.get, name)

    def must_inject(self, target: Any) -> None:
        """Like :meth:`inject`, but aborts the process on failure."""
        _must(self.inject, target)

    def must_register_anonymous(self, value: Any) -> str:
        """Like :meth:`register_anonymous`, but aborts the process on failure."""
        return _must(self.register_anonymous, value)

    def names(self) -> list[str]:
        """Registered names, in registration order."""
        return list(self._entries)

    def entries(self) -> list[Entry]:
        return list(self._entries.values())

    def _anonymous_name(self) -> str:
        return f"{ANONYMOUS_PREFIX}.{self._anonymous_counter}"

    def __getitem__(self, name: str) -> Any:
        return self.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)


def new() -> Container:
    """Create an empty :class:`Container`."""
    return Container()


def _must(operation: Callable[..., T], *args: Any) -> T:
    try:
        return operation(*args)
    except Exception as err:
        logger.critical("Aborting: %s", err)
        raise SystemExit(str(err)) from err
