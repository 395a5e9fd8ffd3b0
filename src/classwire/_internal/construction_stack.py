from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

from classwire.exceptions import ClassWireRecursionError

# Classes currently being constructed in this context, outermost first.
# A ContextVar keeps threads and async tasks from seeing each other's stacks.
_construction_stack: ContextVar[tuple[type[Any], ...]] = ContextVar(
    "classwire_construction_stack",
    default=(),
)

_SHOWN_CHAIN_LENGTH = 6


def get_construction_stack() -> tuple[type[Any], ...]:
    """Return the classes being constructed in the current context, outermost first."""
    return _construction_stack.get()


@contextmanager
def constructing(cls: type[Any], *, max_depth: int) -> Generator[None, None, None]:
    """Track construction of ``cls`` for the duration of the block.

    Raises:
        ClassWireRecursionError: If ``max_depth`` constructions are already
            in progress in this context.

    """
    stack = _construction_stack.get()
    if len(stack) >= max_depth:
        tail = " -> ".join(klass.__qualname__ for klass in (*stack, cls)[-_SHOWN_CHAIN_LENGTH:])
        msg = (
            f"Construction of '{cls.__qualname__}' exceeds the maximum nesting depth of "
            f"{max_depth} contained objects (... -> {tail})."
        )
        raise ClassWireRecursionError(msg)

    token = _construction_stack.set((*stack, cls))
    try:
        yield
    finally:
        _construction_stack.reset(token)


__all__ = ["constructing", "get_construction_stack"]
