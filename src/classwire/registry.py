from __future__ import annotations

import inspect
import logging
import threading
from collections.abc import Generator, Mapping
from contextlib import AbstractContextManager, contextmanager, nullcontext
from typing import Any

from classwire._internal.class_loader import ClassLoader
from classwire._internal.resolver import ParameterResolver
from classwire.contained import Contained, coerce_contained
from classwire.container_record import CONTAINER_KEY
from classwire.exceptions import ClassWireInvalidDeclarationError
from classwire.lock_mode import LockMode
from classwire.params import SLOT_PARAM, Param, coerce_param

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 100


class _Clear:
    def __repr__(self) -> str:
        return "CLEAR"


CLEAR: Any = _Clear()
"""Pass to ``declare_params``/``declare_contained`` to reset a class's own spec to empty."""


class SpecRegistry:
    """Hold parameter and contained-object declarations for a family of classes.

    Each class owns the specs it declared itself; the effective ("merged")
    spec of a class combines its own declarations with those of every
    registered ancestor, the class closest to itself winning on name
    collisions. Merged specs and ``allowed_params`` results are cached, and
    any declaration anywhere drops every cached value.

    ``Composable`` subclasses use the process-wide ``default_registry`` unless
    they pass ``registry=...`` in their class statement.
    """

    def __init__(
        self,
        *,
        lock_mode: LockMode = LockMode.THREAD,
        max_depth: int = DEFAULT_MAX_DEPTH,
        class_loader: ClassLoader | None = None,
    ) -> None:
        """Initialize an empty registry.

        Args:
            lock_mode: ``LockMode.THREAD`` guards declarations and cache reads
                with a re-entrant lock; ``LockMode.NONE`` disables locking.
            max_depth: Maximum nesting depth of contained-object construction
                before ``ClassWireRecursionError`` is raised.
            class_loader: Resolver for class names. A fresh ``ClassLoader`` is
                created when omitted.

        """
        self.lock_mode = lock_mode
        self.max_depth = max_depth
        self.class_loader = class_loader or ClassLoader()

        self._lock: AbstractContextManager[Any] = (
            threading.RLock() if lock_mode is LockMode.THREAD else nullcontext()
        )
        self._known_classes: set[type[Any]] = set()
        self._declared_params: dict[type[Any], dict[str, Param]] = {}
        self._declared_contained: dict[type[Any], dict[str, Contained]] = {}

        self._merged_params: dict[type[Any], dict[str, Param]] = {}
        self._merged_contained: dict[type[Any], dict[str, Contained]] = {}
        self._validation_specs: dict[type[Any], dict[str, Param]] = {}
        self._allowed_params: dict[type[Any], tuple[dict[str, Param], frozenset[str]]] = {}
        self._revision = 0

        self._resolver = ParameterResolver(self)

    @property
    def revision(self) -> int:
        """Counter bumped by every declaration; useful to detect stale snapshots."""
        return self._revision

    @property
    def lock(self) -> AbstractContextManager[Any]:
        return self._lock

    # region Declarations
    def register_class(self, cls: type[Any]) -> None:
        """Make ``cls`` part of this registry's class hierarchy and name lookup."""
        with self._declaration_mutation():
            self._known_classes.add(cls)
            self.class_loader.register(cls, cls.__name__, f"{cls.__module__}.{cls.__qualname__}")
            logger.debug("Registered class %s.%s", cls.__module__, cls.__qualname__)

    def declare_params(self, cls: type[Any], spec: Mapping[str, Any] | _Clear) -> None:
        """Replace the parameters ``cls`` itself declares.

        Args:
            cls: Class whose own parameter spec is replaced.
            spec: Mapping of parameter name to ``Param`` (or a mapping of
                ``Param`` keywords, or a bool meaning required), or ``CLEAR``.

        Raises:
            ClassWireInvalidDeclarationError: If a rule or name is invalid.
                Previous declarations stay in effect.

        """
        with self._declaration_mutation():
            self._known_classes.add(cls)
            owner = cls.__qualname__
            params: dict[str, Param] = {}
            if not isinstance(spec, _Clear):
                for name, rule in spec.items():
                    self._validate_declared_name(cls, name, kind="parameter")
                    params[name] = coerce_param(rule, owner=owner, name=name)
            self._declared_params[cls] = params
            logger.debug("Declared parameters of %s: %s", owner, sorted(params))

    def declare_contained(self, cls: type[Any], spec: Mapping[str, Any] | _Clear) -> None:
        """Replace the contained objects ``cls`` itself declares.

        Args:
            cls: Class whose own containment spec is replaced.
            spec: Mapping of slot name to a class, a class name, a
                ``Contained`` or a ``{"class": ..., "delayed": ...}`` mapping,
                or ``CLEAR``.

        Raises:
            ClassWireInvalidDeclarationError: If a slot is invalid or targets
                ``cls`` itself. Previous declarations stay in effect.

        """
        with self._declaration_mutation():
            self._known_classes.add(cls)
            owner = cls.__qualname__
            slots: dict[str, Contained] = {}
            if not isinstance(spec, _Clear):
                for slot, value in spec.items():
                    self._validate_declared_name(cls, slot, kind="contained object")
                    contained = coerce_contained(value, owner=owner, slot=slot)
                    if self._targets_itself(cls, contained):
                        msg = (
                            f"Contained object '{slot}' of '{owner}' targets '{owner}' itself; "
                            "a class cannot contain itself."
                        )
                        raise ClassWireInvalidDeclarationError(msg)
                    slots[slot] = contained
            self._declared_contained[cls] = slots
            logger.debug("Declared contained objects of %s: %s", owner, sorted(slots))

    def declared_params(self, cls: type[Any]) -> dict[str, Param] | None:
        """Return the parameters ``cls`` declared itself, or ``None`` if it never did."""
        with self._lock:
            params = self._declared_params.get(cls)
            return None if params is None else dict(params)

    def declared_contained(self, cls: type[Any]) -> dict[str, Contained] | None:
        """Return the slots ``cls`` declared itself, or ``None`` if it never did."""
        with self._lock:
            slots = self._declared_contained.get(cls)
            return None if slots is None else dict(slots)

    def declared_classes(self) -> list[type[Any]]:
        """Return every class that declared parameters or contained objects."""
        with self._lock:
            classes = set(self._declared_params) | set(self._declared_contained)
        return sorted(classes, key=lambda cls: (cls.__qualname__, cls.__module__))

    # endregion Declarations

    # region Merged specs
    def merged_params(self, cls: type[Any]) -> dict[str, Param]:
        """Return the parameters of ``cls`` combined with those of its ancestors."""
        with self._lock:
            merged = self._merged_params.get(cls)
            if merged is None:
                merged = {}
                for ancestor in self._lineage(cls):
                    merged.update(self._declared_params.get(ancestor, {}))
                self._merged_params[cls] = merged
            return dict(merged)

    def merged_contained(self, cls: type[Any]) -> dict[str, Contained]:
        """Return the slots of ``cls`` combined with those of its ancestors."""
        with self._lock:
            merged = self._merged_contained.get(cls)
            if merged is None:
                merged = {}
                for ancestor in self._lineage(cls):
                    merged.update(self._declared_contained.get(ancestor, {}))
                self._merged_contained[cls] = merged
            return dict(merged)

    def validation_spec(self, cls: type[Any]) -> dict[str, Param]:
        """Return the rules used to validate the constructor arguments of ``cls``.

        These are the merged parameters plus an optional entry for every
        eager contained slot that is not itself declared as a parameter, so
        built or caller-supplied slot objects pass validation.
        """
        with self._lock:
            spec = self._validation_specs.get(cls)
            if spec is None:
                spec = {
                    slot: SLOT_PARAM
                    for slot, contained in self.merged_contained(cls).items()
                    if not contained.delayed
                }
                spec.update(self.merged_params(cls))
                self._validation_specs[cls] = spec
            return dict(spec)

    def allowed_params(
        self,
        cls: type[Any],
        args: Mapping[str, Any] | None = None,
    ) -> dict[str, Param]:
        """Return every parameter the constructor of ``cls`` accepts.

        This includes the parameters it passes on to its contained objects,
        at any depth. ``args`` matters because ``<slot>_class`` overrides and
        pre-built slot objects change which contained classes take part.
        """
        return self._resolver.allowed_params(cls, args or {})

    def cached_allowed_params(
        self,
        cls: type[Any],
    ) -> tuple[dict[str, Param], frozenset[str]] | None:
        """Return the memoized ``allowed_params`` of ``cls`` and the argument keys it ignored."""
        with self._lock:
            cached = self._allowed_params.get(cls)
            return None if cached is None else (dict(cached[0]), cached[1])

    def store_allowed_params(
        self,
        cls: type[Any],
        params: Mapping[str, Param],
        sensitive_keys: frozenset[str],
        revision: int,
    ) -> None:
        """Memoize an argument-independent ``allowed_params`` result.

        The result is reused only for argument bags containing none of
        ``sensitive_keys`` (slot names and ``<slot>_class`` keys of the graph).
        """
        with self._lock:
            # A declaration that happened meanwhile makes this result stale.
            if revision == self._revision:
                self._allowed_params[cls] = (dict(params), sensitive_keys)

    # endregion Merged specs

    def _lineage(self, cls: type[Any]) -> list[type[Any]]:
        """Return registered ancestors of ``cls``, farthest first, ``cls`` last."""
        return [klass for klass in reversed(cls.__mro__) if klass in self._known_classes]

    def _targets_itself(self, cls: type[Any], contained: Contained) -> bool:
        if isinstance(contained.target, str):
            name = contained.target.replace("::", ".")
            return name in {cls.__name__, f"{cls.__module__}.{cls.__qualname__}"}
        return contained.target is cls

    def _validate_declared_name(self, cls: type[Any], name: object, *, kind: str) -> None:
        owner = cls.__qualname__
        if not isinstance(name, str) or not name.isidentifier():
            msg = f"Invalid {kind} name {name!r} in '{owner}'."
            raise ClassWireInvalidDeclarationError(msg)
        if name == CONTAINER_KEY:
            msg = f"The {kind} name '{CONTAINER_KEY}' in '{owner}' is reserved for back-references."
            raise ClassWireInvalidDeclarationError(msg)
        attribute = inspect.getattr_static(cls, name, None)
        if inspect.isroutine(attribute) or isinstance(
            attribute,
            (classmethod, staticmethod, property),
        ):
            msg = f"The {kind} name '{name}' in '{owner}' shadows an attribute of the class."
            raise ClassWireInvalidDeclarationError(msg)

    @contextmanager
    def _declaration_mutation(self) -> Generator[None, None, None]:
        with self._lock:
            snapshot = (
                set(self._known_classes),
                dict(self._declared_params),
                dict(self._declared_contained),
            )
            try:
                yield
            except ClassWireInvalidDeclarationError:
                self._known_classes, self._declared_params, self._declared_contained = snapshot
                raise
            finally:
                self._invalidate()

    def _invalidate(self) -> None:
        self._merged_params.clear()
        self._merged_contained.clear()
        self._validation_specs.clear()
        self._allowed_params.clear()
        self._revision += 1
        logger.debug("Invalidated merged specs (revision %d)", self._revision)


default_registry = SpecRegistry()
"""Process-wide registry used by ``Composable`` subclasses by default."""


__all__ = ["CLEAR", "DEFAULT_MAX_DEPTH", "SpecRegistry", "default_registry"]
