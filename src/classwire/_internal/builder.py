from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from classwire._internal.type_checks import REGISTRY_ATTR, is_composable_class
from classwire.container_record import (
    CONTAINER_KEY,
    BackReference,
    ContainedEntry,
    ContainerRecord,
)
from classwire.exceptions import ClassWireCompositionError

if TYPE_CHECKING:
    from classwire.params import Param
    from classwire.registry import SpecRegistry

logger = logging.getLogger(__name__)


class GraphBuilder:
    """Partition constructor arguments among a class and its contained objects."""

    def __init__(self, registry: SpecRegistry) -> None:
        self._registry = registry

    def create_contained_objects(
        self,
        cls: type[Any],
        args: Mapping[str, Any],
    ) -> tuple[dict[str, Any], ContainerRecord]:
        """Build eager contained objects and stash delayed ones.

        Each contained class takes the arguments it accepts (see
        ``allowed_params``). An argument accepted only by contained objects is
        consumed; one that ``cls`` declares too keeps flowing to ``cls`` and to
        later slots.

        Args:
            cls: Class being constructed.
            args: Constructor arguments; not modified.

        Returns:
            The arguments left for ``cls`` itself, including built eager slot
            objects, and the container record of the new instance.

        Raises:
            ClassWireCompositionError: If an object is supplied for a delayed
                slot or a target class name is malformed.
            ClassWireClassResolutionError: If a target class cannot be resolved.

        """
        remaining = dict(args)
        record = ContainerRecord(back_reference=_pop_back_reference(remaining))
        owner = cls.__qualname__
        own_spec = self._registry.validation_spec(cls)

        for slot, contained in self._registry.merged_contained(cls).items():
            if slot in remaining:
                if contained.delayed:
                    msg = f"Cannot provide a '{slot}' object to '{owner}', its creation is delayed."
                    raise ClassWireCompositionError(msg)
                # Arguments meant for the object's constructor are not for us either.
                supplied_cls = type(remaining[slot])
                if getattr(supplied_cls, REGISTRY_ATTR, None) is self._registry:
                    self._contained_args(owner, supplied_cls, remaining, own_spec)
                record.contained[slot] = ContainedEntry(cls=supplied_cls)
                continue

            target_spec = remaining.pop(f"{slot}_class", None) or contained.target
            target = self._registry.class_loader.resolve(target_spec, owner=owner)
            slot_args = self._contained_args(owner, target, remaining, own_spec)

            if contained.delayed:
                logger.debug(
                    "Stored arguments %s for delayed %s.%s (%s)",
                    sorted(slot_args),
                    owner,
                    slot,
                    target.__qualname__,
                )
                record.contained[slot] = ContainedEntry(cls=target, delayed=True, args=slot_args)
                continue

            logger.debug(
                "Building %s.%s as %s with %s",
                owner,
                slot,
                target.__qualname__,
                sorted(slot_args),
            )
            built = target(**slot_args)
            record.contained[slot] = ContainedEntry(cls=type(built))
            remaining.setdefault(slot, built)

        return remaining, record

    def _contained_args(
        self,
        owner: str,
        target: type[Any],
        args: dict[str, Any],
        own_spec: Mapping[str, Param],
    ) -> dict[str, Any]:
        if not is_composable_class(target):
            return {}
        if getattr(target, REGISTRY_ATTR) is not self._registry:
            msg = (
                f"Contained class '{target.__qualname__}' of '{owner}' is declared in a "
                "different registry."
            )
            raise ClassWireCompositionError(msg)

        contained_args: dict[str, Any] = {}
        for name in self._registry.allowed_params(target, args):
            if name not in args:
                continue
            contained_args[name] = args[name]
            if name not in own_spec:
                del args[name]
        return contained_args


def _pop_back_reference(args: dict[str, Any]) -> BackReference | None:
    parent = args.pop(CONTAINER_KEY, None)
    if parent is None or isinstance(parent, BackReference):
        return parent
    return BackReference.to(parent)


__all__ = ["GraphBuilder"]
