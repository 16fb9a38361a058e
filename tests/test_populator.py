from dataclasses import dataclass, field
from typing import Annotated, ClassVar, NamedTuple, Optional
from typing import Annotated as Tagged

import pytest

from plumb import (
    AUTO,
    AmbiguousTypeError,
    Container,
    NoMatchingTypeError,
    NotAssignableError,
    NotInjectableError,
    NotRegisteredError,
    new,
)


class Printer:
    def print(self, line):
        pass


class MockPrinter(Printer):
    def __init__(self):
        self.printed = []

    def print(self, line):
        self.printed.append(line)


class Service:
    printer: Annotated[Printer, AUTO]
    prefix: Annotated[str, "prefix"]
    label: str = "service"

    def print(self, line):
        self.printer.print(f"{self.prefix}{line}")


class BaseService:
    prefix: Annotated[str, "prefix"]


class DerivedService(BaseService):
    count: Annotated[int, "count"]


@dataclass
class DataService:
    prefix: Annotated[Optional[str], "prefix"] = None
    tags: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class FrozenService:
    prefix: Annotated[str, "prefix"] = ""


class SlottedService:
    __slots__ = ("other",)
    prefix: Annotated[str, "prefix"]


class ForwardService:
    prefix: "Annotated[str, 'prefix']"


class ClassLevelService:
    registry: ClassVar[Annotated[dict, "registry"]] = {}
    tagged: Annotated[int, 42]


class AliasedService:
    prefix: "Tagged[str, 'prefix']"


class UnresolvableService:
    prefix: "Annotated[Missing, 'prefix']"


class LooselyAnnotated:
    note: "Missing"


class LockedService:
    prefix: Annotated[str, "prefix"]

    def __setattr__(self, name, value):
        raise TypeError(f"{name} is read-only")


@pytest.fixture
def container() -> Container:
    return new()


def test_auto_field_resolved_by_type(container):
    printer = MockPrinter()
    service = Service()
    container.register("printer", printer)
    container.register("prefix", "> ")

    container.register("service", service)
    service.print("hello")

    assert service.printer is printer
    assert printer.printed == ["> hello"]
    assert service.label == "service"


def test_auto_field_with_several_candidates(container):
    container.register("printer-1", MockPrinter())
    container.register("printer-2", Printer())
    container.register("prefix", "> ")

    with pytest.raises(AmbiguousTypeError, match="Printer") as excinfo:
        container.register("service", Service())

    assert excinfo.value.requested_type is Printer
    assert excinfo.value.candidates == ["printer-1", "printer-2"]


def test_auto_field_without_candidate(container):
    container.register("prefix", "> ")

    with pytest.raises(NoMatchingTypeError, match="Printer"):
        container.register("service", Service())


def test_named_field_of_supertype_accepts_subtype(container):
    class Consumer:
        printer: Annotated[Printer, "printer"]

    printer = MockPrinter()
    consumer = Consumer()
    container.register("printer", printer)

    container.inject(consumer)

    assert consumer.printer is printer


def test_named_field_rejects_unrelated_type(container):
    class Consumer:
        printer: Annotated[MockPrinter, "printer"]

    container.register("printer", Printer())

    with pytest.raises(NotAssignableError, match="printer is not assignable to field"):
        container.inject(Consumer())


def test_base_class_fields_are_populated(container):
    service = DerivedService()
    container.register("prefix", "> ")
    container.register("count", 3)

    container.inject(service)

    assert service.prefix == "> "
    assert service.count == 3


def test_base_class_fields_are_populated_first(container):
    service = DerivedService()
    container.register("count", 3)

    with pytest.raises(NotRegisteredError, match="prefix is not registered"):
        container.inject(service)

    assert not hasattr(service, "count")


def test_dataclass_fields_are_populated(container):
    service = DataService()
    container.register("prefix", "> ")

    container.register("service", service)

    assert service.prefix == "> "
    assert service.tags == []


def test_frozen_dataclass_is_not_injectable(container):
    container.register("prefix", "> ")

    with pytest.raises(NotInjectableError, match="frozen dataclass"):
        container.register("service", FrozenService())

    assert "service" not in container


def test_named_tuple_is_not_injectable(container):
    class Pair(NamedTuple):
        prefix: Annotated[str, "prefix"]

    container.register("prefix", "> ")

    with pytest.raises(NotInjectableError, match="tuple"):
        container.inject(Pair("x"))


def test_annotated_class_is_not_injectable(container):
    container.register("prefix", "> ")

    with pytest.raises(NotInjectableError, match="not on the class"):
        container.register("service-class", BaseService)


def test_slot_that_cannot_be_set_is_not_injectable(container):
    container.register("prefix", "> ")

    with pytest.raises(NotInjectableError, match="SlottedService.prefix cannot be set"):
        container.inject(SlottedService())


def test_string_annotations_are_resolved(container):
    service = ForwardService()
    container.register("prefix", "> ")

    container.inject(service)

    assert service.prefix == "> "


def test_class_variables_and_non_string_metadata_are_ignored(container):
    service = ClassLevelService()

    container.inject(service)

    assert ClassLevelService.registry == {}
    assert not hasattr(service, "tagged")


def test_plain_values_are_not_populated(container):
    container.register("number", 10)
    container.register("text", "plain")
    container.register("list", [1, 2])

    assert container.get("list") == [1, 2]


def test_aliased_annotated_in_string_annotation(container):
    service = AliasedService()
    container.register("prefix", "> ")

    container.inject(service)

    assert service.prefix == "> "


def test_unresolvable_injection_annotation_is_not_injectable(container):
    container.register("prefix", "> ")

    with pytest.raises(NotInjectableError, match="annotations cannot be resolved"):
        container.register("service", UnresolvableService())

    assert "service" not in container


def test_unresolvable_plain_annotation_is_ignored(container):
    container.register("loose", LooselyAnnotated())

    assert isinstance(container.get("loose"), LooselyAnnotated)


def test_field_refusing_assignment_is_not_injectable(container):
    container.register("prefix", "> ")

    with pytest.raises(NotInjectableError, match="LockedService.prefix cannot be set"):
        container.inject(LockedService())
