from __future__ import annotations

import weakref
from dataclasses import dataclass, field
from typing import Any

from typing_extensions import Self

CONTAINER_KEY = "container"
"""Reserved constructor keyword carrying a ``BackReference``."""


@dataclass(frozen=True, slots=True)
class BackReference:
    """Non-owning link from a delayed object to the object that created it."""

    ref: weakref.ReferenceType[Any] | None
    supported: bool = True

    @classmethod
    def to(cls, parent: Any) -> Self:
        """Wrap ``parent`` in a weak reference.

        Objects that cannot be weakly referenced produce an unsupported
        back-reference instead of a strong one.
        """
        try:
            return cls(weakref.ref(parent))
        except TypeError:
            return cls(None, supported=False)

    def resolve(self) -> Any | None:
        """Return the parent, or ``None`` once it has been garbage collected."""
        if self.ref is None:
            return None
        return self.ref()


@dataclass(slots=True)
class ContainedEntry:
    """What an instance knows about one of its contained-object slots."""

    cls: type[Any]
    delayed: bool = False
    args: dict[str, Any] = field(default_factory=dict)
    """Stored constructor arguments; only used for delayed slots."""


@dataclass(slots=True)
class ContainerRecord:
    """Per-instance composition metadata."""

    contained: dict[str, ContainedEntry] = field(default_factory=dict)
    back_reference: BackReference | None = None


__all__ = ["CONTAINER_KEY", "BackReference", "ContainedEntry", "ContainerRecord"]
