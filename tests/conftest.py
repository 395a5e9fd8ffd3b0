"""Shared pytest fixtures for classwire tests."""

import pytest

from classwire.lock_mode import LockMode
from classwire.registry import SpecRegistry


@pytest.fixture()
def registry() -> SpecRegistry:
    """Fresh registry so declarations made by one test never leak into another."""
    return SpecRegistry()


@pytest.fixture()
def unlocked_registry() -> SpecRegistry:
    """Registry with locking disabled."""
    return SpecRegistry(lock_mode=LockMode.NONE)


@pytest.fixture()
def shallow_registry() -> SpecRegistry:
    """Registry allowing only three levels of nested construction."""
    return SpecRegistry(max_depth=3)
