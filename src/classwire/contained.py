from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from classwire._internal.type_checks import is_runtime_class
from classwire.exceptions import ClassWireInvalidDeclarationError


@dataclass(frozen=True, kw_only=True, slots=True)
class Contained:
    """Declaration of one contained-object slot.

    The container builds an instance of ``target`` for the slot, either
    while it is constructed or, for ``delayed`` slots, on every
    ``create_delayed_object`` call. Passing ``<slot>_class`` to the
    container's constructor replaces ``target`` for that construction.
    """

    target: type[Any] | str
    """Default class (or class name) built for the slot."""
    delayed: bool = False
    """Build on demand instead of at container construction."""
    descr: str | None = None

    @property
    def target_name(self) -> str:
        if isinstance(self.target, str):
            return self.target
        return self.target.__qualname__


def coerce_contained(spec: Any, *, owner: str, slot: str) -> Contained:
    """Turn a declared slot value into a ``Contained``.

    Accepts a ``Contained``, a class, a class name, or a mapping with a
    ``class`` key and optional ``delayed`` and ``descr``/``description`` keys.
    """
    if isinstance(spec, Contained):
        contained = spec
    elif is_runtime_class(spec) or isinstance(spec, str):
        contained = Contained(target=spec)
    elif isinstance(spec, Mapping):
        unexpected = set(spec) - {"class", "delayed", "descr", "description"}
        if "class" not in spec or unexpected:
            msg = (
                f"Invalid contained object '{slot}' in '{owner}': expected keys 'class', "
                f"'delayed', 'descr', got {sorted(spec)}."
            )
            raise ClassWireInvalidDeclarationError(msg)
        contained = Contained(
            target=spec["class"],
            delayed=bool(spec.get("delayed", False)),
            descr=spec.get("descr", spec.get("description")),
        )
    else:
        msg = f"Invalid contained object '{slot}' in '{owner}': {spec!r}."
        raise ClassWireInvalidDeclarationError(msg)

    if not (is_runtime_class(contained.target) or isinstance(contained.target, str)):
        msg = (
            f"Contained object '{slot}' in '{owner}' must target a class or class name, "
            f"got {contained.target!r}."
        )
        raise ClassWireInvalidDeclarationError(msg)
    return contained


__all__ = ["Contained", "coerce_contained"]
