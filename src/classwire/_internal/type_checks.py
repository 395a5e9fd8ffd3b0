from __future__ import annotations

import types
from typing import Any, TypeGuard

COMPOSABLE_MARKER = "__classwire_composable__"
REGISTRY_ATTR = "__classwire_registry__"


def is_runtime_class(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when candidate is a plain class, not a parameterized generic alias.

    Args:
        candidate: Slot target, override value, or resolved name being checked.

    """
    return isinstance(candidate, type) and not isinstance(candidate, types.GenericAlias)


def is_composable_class(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when candidate is a class that takes part in composition.

    Only such classes report ``allowed_params`` and build contained objects;
    any other class is constructed with no pass-through arguments.

    Args:
        candidate: Value being checked.

    """
    return is_runtime_class(candidate) and bool(getattr(candidate, COMPOSABLE_MARKER, False))


def class_name(candidate: object) -> str:
    """Return a readable name for a class, class name string, or instance."""
    if isinstance(candidate, str):
        return candidate
    if is_runtime_class(candidate):
        return candidate.__qualname__
    return type(candidate).__qualname__


__all__ = [
    "COMPOSABLE_MARKER",
    "REGISTRY_ATTR",
    "class_name",
    "is_composable_class",
    "is_runtime_class",
]
