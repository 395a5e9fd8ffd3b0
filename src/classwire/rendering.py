"""Diagnostic tree rendering of composed objects and classes."""

from __future__ import annotations

from typing import Any

from classwire._internal.type_checks import REGISTRY_ATTR, is_composable_class
from classwire.container_record import ContainerRecord
from classwire.exceptions import ClassWireClassResolutionError

_INDENT = "  "


def show_containers(target: Any, name: str | None = None) -> str:
    """Render ``target`` and its contained objects as an indented tree.

    ``target`` may be a composed instance, rendered from the classes it was
    actually built with, or a ``Composable`` class, rendered from its
    declared contained objects. Each line is ``slot -> Class``, indented two
    spaces per level; delayed slots are marked ``(delayed)``.

    Example::

        Parent
          son -> Son
            toy -> Slingshot
          daughter -> Daughter (delayed)

    Args:
        target: Composed instance or ``Composable`` class.
        name: Optional slot name shown on the first line.

    Returns:
        The rendered tree, without a trailing newline.

    """
    lines: list[str] = []
    if is_composable_class(target):
        _render_class(target, name, 0, lines, ancestors=())
    else:
        _render_instance(target, name, 0, lines, ancestors=())
    return "\n".join(lines)


def _line(name: str | None, cls_name: str, depth: int, *, delayed: bool = False) -> str:
    label = cls_name if name is None else f"{name} -> {cls_name}"
    suffix = " (delayed)" if delayed else ""
    return f"{_INDENT * depth}{label}{suffix}"


def _render_instance(
    instance: Any,
    name: str | None,
    depth: int,
    lines: list[str],
    *,
    ancestors: tuple[type[Any], ...],
) -> None:
    cls = type(instance)
    lines.append(_line(name, cls.__qualname__, depth))
    record: ContainerRecord | None = getattr(instance, "_classwire_record", None)
    if record is None:
        return

    params: dict[str, Any] = getattr(instance, "_classwire_params", {})
    for slot, entry in record.contained.items():
        child = params.get(slot)
        if entry.delayed or child is None:
            _render_slot_class(entry.cls, slot, depth + 1, lines, entry.delayed, (*ancestors, cls))
        else:
            _render_instance(child, slot, depth + 1, lines, ancestors=(*ancestors, cls))


def _render_class(
    cls: type[Any],
    name: str | None,
    depth: int,
    lines: list[str],
    *,
    ancestors: tuple[type[Any], ...],
    delayed: bool = False,
) -> None:
    lines.append(_line(name, cls.__qualname__, depth, delayed=delayed))
    if cls in ancestors:
        return

    registry = getattr(cls, REGISTRY_ATTR)
    for slot, contained in registry.merged_contained(cls).items():
        try:
            target = registry.class_loader.resolve(contained.target, owner=cls.__qualname__)
        except ClassWireClassResolutionError:
            lines.append(_line(slot, contained.target_name, depth + 1, delayed=contained.delayed))
            continue
        _render_slot_class(target, slot, depth + 1, lines, contained.delayed, (*ancestors, cls))


def _render_slot_class(
    cls: type[Any],
    slot: str,
    depth: int,
    lines: list[str],
    delayed: bool,  # noqa: FBT001
    ancestors: tuple[type[Any], ...],
) -> None:
    if is_composable_class(cls):
        _render_class(cls, slot, depth, lines, ancestors=ancestors, delayed=delayed)
    else:
        lines.append(_line(slot, cls.__qualname__, depth, delayed=delayed))


__all__ = ["show_containers"]
