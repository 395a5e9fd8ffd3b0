"""Tests for the construction depth guard."""

import pytest

from classwire._internal.construction_stack import constructing, get_construction_stack
from classwire.composable import Composable
from classwire.exceptions import (
    ClassWireCompositionError,
    ClassWireRecursionError,
    ClassWireValidationError,
)
from classwire.registry import SpecRegistry


def test_nesting_within_limit_is_allowed(shallow_registry: SpecRegistry) -> None:
    class Inner(Composable, registry=shallow_registry):
        pass

    class Middle(Composable, registry=shallow_registry):
        contained_objects = {"inner": Inner}

    class Outer(Composable, registry=shallow_registry):
        contained_objects = {"middle": Middle}

    assert isinstance(Outer().middle.inner, Inner)


def test_nesting_beyond_limit_fails(shallow_registry: SpecRegistry) -> None:
    class Core(Composable, registry=shallow_registry):
        pass

    class Inner(Composable, registry=shallow_registry):
        contained_objects = {"core": Core}

    class Middle(Composable, registry=shallow_registry):
        contained_objects = {"inner": Inner}

    class Outer(Composable, registry=shallow_registry):
        contained_objects = {"middle": Middle}

    with pytest.raises(ClassWireRecursionError, match="maximum nesting depth of 3"):
        Outer()


def test_runaway_construction_is_stopped(shallow_registry: SpecRegistry) -> None:
    class Seed:
        def __init__(self) -> None:
            self.tree = Tree()

    class Tree(Composable, registry=shallow_registry):
        contained_objects = {"seed": Seed}

    with pytest.raises(ClassWireRecursionError) as exc_info:
        Tree()

    assert isinstance(exc_info.value, ClassWireCompositionError)
    assert get_construction_stack() == ()


def test_construction_stack_tracks_classes_in_progress() -> None:
    class First:
        pass

    class Second:
        pass

    with constructing(First, max_depth=5):
        with constructing(Second, max_depth=5):
            assert get_construction_stack() == (First, Second)
        assert get_construction_stack() == (First,)

    assert get_construction_stack() == ()


def test_stack_is_released_after_failed_construction(registry: SpecRegistry) -> None:
    class Broken(Composable, registry=registry):
        valid_params = {"needed": True}

    with pytest.raises(ClassWireValidationError):
        Broken()

    assert get_construction_stack() == ()
