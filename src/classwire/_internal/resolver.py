from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from classwire._internal.type_checks import REGISTRY_ATTR, is_composable_class
from classwire.exceptions import ClassWireClassResolutionError, ClassWireCompositionError
from classwire.params import CLASS_OVERRIDE_PARAM, Param

if TYPE_CHECKING:
    from classwire.registry import SpecRegistry


@dataclass(slots=True)
class _Resolution:
    params: dict[str, Param]
    depends_on_args: bool
    sensitive_keys: frozenset[str]
    """Argument keys that would have changed this result had they been present."""


class ParameterResolver:
    """Compute the transitive set of parameters a class accepts.

    Results that did not depend on the supplied arguments are memoized in
    the registry until the next declaration.
    """

    def __init__(self, registry: SpecRegistry) -> None:
        self._registry = registry

    def allowed_params(self, cls: type[Any], args: Mapping[str, Any]) -> dict[str, Param]:
        """Return every parameter ``cls`` accepts given ``args``.

        Args:
            cls: Class being constructed.
            args: Constructor arguments; only their keys and ``<slot>_class``
                values are inspected, ``args`` is never modified.

        Raises:
            ClassWireCompositionError: If contained objects form a cycle or a
                target class name is malformed.
            ClassWireClassResolutionError: If a target class cannot be resolved.

        """
        with self._registry.lock:
            return self._resolve(cls, args, resolving=()).params

    def _resolve(
        self,
        cls: type[Any],
        args: Mapping[str, Any],
        *,
        resolving: tuple[type[Any], ...],
    ) -> _Resolution:
        cached = self._registry.cached_allowed_params(cls)
        if cached is not None and cached[1].isdisjoint(args):
            return _Resolution(cached[0], depends_on_args=False, sensitive_keys=cached[1])

        if cls in resolving:
            chain = " -> ".join(klass.__qualname__ for klass in (*resolving, cls))
            msg = f"Contained objects of '{cls.__qualname__}' form a cycle: {chain}."
            raise ClassWireCompositionError(msg)

        revision = self._registry.revision
        owner = cls.__qualname__
        class_loader = self._registry.class_loader
        params = self._registry.validation_spec(cls)
        own_names = set(params)
        depends_on_args = False
        sensitive_keys: set[str] = set()

        for slot, spec in self._registry.merged_contained(cls).items():
            override_key = f"{slot}_class"
            sensitive_keys.update((slot, override_key))

            # A supplied object needs none of its constructor parameters.
            if slot in args:
                depends_on_args = True
                continue

            if override_key in args:
                depends_on_args = True
                params.pop(slot, None)
                own_names.discard(slot)
                params[override_key] = CLASS_OVERRIDE_PARAM
                own_names.add(override_key)
                target_spec = args[override_key]
            else:
                target_spec = spec.target

            target = class_loader.resolve(target_spec, owner=owner)
            if not is_composable_class(target):
                continue
            if getattr(target, REGISTRY_ATTR) is not self._registry:
                msg = (
                    f"Contained class '{target.__qualname__}' of '{owner}' is declared in a "
                    "different registry."
                )
                raise ClassWireCompositionError(msg)

            sub = self._resolve(target, args, resolving=(*resolving, cls))
            depends_on_args = depends_on_args or sub.depends_on_args
            sensitive_keys.update(sub.sensitive_keys)

            for name, rule in sub.params.items():
                if name in own_names:
                    continue
                # A contained object expecting its container as a parameter
                # must not make the container accept itself.
                if rule.isa is not None and self._satisfies_isa(cls, rule.isa, owner=target):
                    continue
                params[name] = rule

        frozen_keys = frozenset(sensitive_keys)
        if not depends_on_args:
            self._registry.store_allowed_params(cls, params, frozen_keys, revision)
        return _Resolution(params, depends_on_args=depends_on_args, sensitive_keys=frozen_keys)

    def _satisfies_isa(self, cls: type[Any], isa: type[Any] | str, *, owner: type[Any]) -> bool:
        # An isa name nothing resolves to cannot be satisfied by cls.
        try:
            expected = self._registry.class_loader.resolve(isa, owner=owner.__qualname__)
        except ClassWireClassResolutionError:
            return False
        return issubclass(cls, expected)


__all__ = ["ParameterResolver"]
