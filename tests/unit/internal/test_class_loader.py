"""Tests for resolving class names to classes."""

import collections

import pytest

from classwire._internal.class_loader import ClassLoader
from classwire.exceptions import ClassWireClassResolutionError, ClassWireCompositionError


class Gadget:
    pass


@pytest.fixture()
def class_loader() -> ClassLoader:
    return ClassLoader()


def test_class_is_returned_unchanged(class_loader: ClassLoader) -> None:
    assert class_loader.resolve(Gadget, owner="Test") is Gadget


def test_registered_names_resolve(class_loader: ClassLoader) -> None:
    class_loader.register(Gadget, "Gadget", "gadgets.Gadget")

    assert class_loader.resolve("Gadget", owner="Test") is Gadget
    assert class_loader.resolve("gadgets::Gadget", owner="Test") is Gadget


def test_later_registration_wins(class_loader: ClassLoader) -> None:
    class Other:
        pass

    class_loader.register(Gadget, "Gadget")
    class_loader.register(Other, "Gadget")

    assert class_loader.resolve("Gadget", owner="Test") is Other


def test_dotted_name_is_imported(class_loader: ClassLoader) -> None:
    assert class_loader.resolve("collections.OrderedDict", owner="Test") is collections.OrderedDict


def test_nested_attribute_path_is_imported(class_loader: ClassLoader) -> None:
    resolved = class_loader.resolve(f"{__name__}.Gadget", owner="Test")

    assert resolved is Gadget


def test_unknown_module(class_loader: ClassLoader) -> None:
    with pytest.raises(ClassWireClassResolutionError, match="Original import error"):
        class_loader.resolve("no_such_module_xyz.Thing", owner="Test")


def test_unknown_attribute(class_loader: ClassLoader) -> None:
    with pytest.raises(ClassWireClassResolutionError, match="Unable to resolve class 'collections.Nope'"):
        class_loader.resolve("collections.Nope", owner="Test")


def test_bare_unknown_name(class_loader: ClassLoader) -> None:
    with pytest.raises(ClassWireClassResolutionError, match="requested by 'Owner'"):
        class_loader.resolve("Nothing", owner="Owner")


def test_name_of_non_class(class_loader: ClassLoader) -> None:
    with pytest.raises(ClassWireClassResolutionError, match="not a class"):
        class_loader.resolve("collections.namedtuple", owner="Test")


@pytest.mark.parametrize("name", ["", "has space", "semi;colon", "dash-ed"])
def test_malformed_names(class_loader: ClassLoader, name: str) -> None:
    with pytest.raises(ClassWireCompositionError, match="Invalid class name"):
        class_loader.resolve(name, owner="Test")


def test_non_string_target(class_loader: ClassLoader) -> None:
    with pytest.raises(ClassWireCompositionError, match="Expected a class or class name"):
        class_loader.resolve(42, owner="Test")  # type: ignore[arg-type]
