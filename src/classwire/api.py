"""Functional counterparts of the ``Composable`` methods."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from classwire._internal.type_checks import REGISTRY_ATTR, is_composable_class
from classwire.composable import Composable
from classwire.exceptions import ClassWireCompositionError
from classwire.params import Param
from classwire.registry import SpecRegistry, default_registry


def new(
    cls: type[Any] | str,
    args: Mapping[str, Any] | None = None,
    /,
    *,
    registry: SpecRegistry = default_registry,
) -> Any:
    """Construct ``cls`` from a flat argument bag.

    Args:
        cls: ``Composable`` subclass, or its name as known to ``registry``.
        args: Keyword arguments for the whole object graph.
        registry: Registry used to resolve ``cls`` when it is a name.

    Raises:
        ClassWireValidationError: If any class in the graph rejects its arguments.
        ClassWireCompositionError: On structural misuse of contained objects.
        ClassWireClassResolutionError: If a class name cannot be resolved.

    """
    target = _composable(registry.class_loader.resolve(cls, owner="new()"))
    return target(**dict(args or {}))


def declare_params(cls: type[Any], spec: Mapping[str, Any]) -> None:
    """Replace the parameters ``cls`` declares itself; pass ``CLEAR`` to empty them."""
    _registry_of(cls).declare_params(cls, spec)


def declare_contained(cls: type[Any], spec: Mapping[str, Any]) -> None:
    """Replace the contained objects ``cls`` declares itself; pass ``CLEAR`` to empty them."""
    _registry_of(cls).declare_contained(cls, spec)


def allowed_params(cls: type[Any], args: Mapping[str, Any] | None = None) -> dict[str, Param]:
    """Return every parameter the constructor of ``cls`` accepts, given ``args``."""
    return _registry_of(cls).allowed_params(cls, args)


def create_delayed_object(
    instance: Composable,
    slot: str,
    overrides: Mapping[str, Any] | None = None,
) -> Any:
    """Build a new object for a delayed slot of ``instance``."""
    return instance.create_delayed_object(slot, **dict(overrides or {}))


def delayed_object_params(
    instance: Composable,
    slot: str,
    patch: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Return, after applying ``patch``, the arguments stored for a delayed slot."""
    return instance.delayed_object_params(slot, **dict(patch or {}))


def delayed_object_class(instance: Composable, slot: str) -> type[Any]:
    return instance.delayed_object_class(slot)


def contained_class(instance: Composable, slot: str) -> type[Any]:
    return instance.contained_class(slot)


def container(instance: Composable) -> Any | None:
    """Return the object that created ``instance`` through a delayed slot, if any."""
    return instance.container()


def _composable(cls: type[Any]) -> type[Any]:
    if not is_composable_class(cls):
        msg = f"'{cls.__qualname__}' is not a Composable class."
        raise ClassWireCompositionError(msg)
    return cls


def _registry_of(cls: type[Any]) -> SpecRegistry:
    return getattr(_composable(cls), REGISTRY_ATTR)


__all__ = [
    "allowed_params",
    "contained_class",
    "container",
    "create_delayed_object",
    "declare_contained",
    "declare_params",
    "delayed_object_class",
    "delayed_object_params",
    "new",
]
