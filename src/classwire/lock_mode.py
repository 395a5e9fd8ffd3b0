from __future__ import annotations

from enum import Enum


class LockMode(Enum):
    """Select locking behavior for ``SpecRegistry`` access.

    Use these values for the ``lock_mode`` keyword of ``SpecRegistry``.
    Declarations and merged-spec cache reads share a single lock, so a
    declaration is never observed half applied.
    """

    THREAD = "thread"
    """Guard declarations and cache reads with ``threading.RLock``."""

    NONE = "none"
    """Disable locking for single-threaded programs."""
