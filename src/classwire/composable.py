from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, ClassVar

from classwire._internal.builder import GraphBuilder
from classwire._internal.construction_stack import constructing
from classwire._internal.type_checks import is_composable_class
from classwire.container_record import CONTAINER_KEY, BackReference, ContainedEntry, ContainerRecord
from classwire.contained import Contained
from classwire.exceptions import ClassWireUnknownSlotError, ClassWireUnsupportedOperationError
from classwire.params import Param, validate_params
from classwire.registry import SpecRegistry, default_registry
from classwire.rendering import show_containers

logger = logging.getLogger(__name__)


class Composable:
    """Base class for objects that build their own contained objects.

    Subclasses declare the parameters their constructor accepts and the
    objects they contain, either as class attributes::

        class Compiler(Composable):
            valid_params = {
                "allow_globals": Param(type=list, default_factory=list),
                "lexer": Param(isa="Lexer"),
            }
            contained_objects = {
                "lexer": "Lexer",
                "component": Contained(target="Component", delayed=True),
            }

    or later with ``declare_params`` / ``declare_contained``, which replace
    the class's own declarations.

    ``Compiler(**kwargs)`` routes every keyword to the class that declared
    it: the ``Lexer`` is built from the keywords ``Lexer`` accepts, then the
    remaining keywords are validated against ``Compiler``'s own parameters
    and set as attributes. Passing ``lexer_class="OtherLexer"`` builds an
    ``OtherLexer`` instead; passing ``lexer=some_lexer`` uses that object.

    Pass ``registry=...`` in the class statement to keep a family of classes
    apart from the process-wide ``default_registry``; subclasses inherit it.
    """

    __classwire_composable__: ClassVar[bool] = True
    __classwire_registry__: ClassVar[SpecRegistry] = default_registry

    _classwire_params: dict[str, Any]
    _classwire_record: ContainerRecord

    def __init_subclass__(cls, *, registry: SpecRegistry | None = None, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if registry is not None:
            cls.__classwire_registry__ = registry

        cls_registry = cls.__classwire_registry__
        cls_registry.register_class(cls)
        if "valid_params" in cls.__dict__:
            cls_registry.declare_params(cls, cls.__dict__["valid_params"])
        if "contained_objects" in cls.__dict__:
            cls_registry.declare_contained(cls, cls.__dict__["contained_objects"])

    def __init__(self, **kwargs: Any) -> None:
        cls = type(self)
        registry = cls.__classwire_registry__
        with constructing(cls, max_depth=registry.max_depth):
            own_args, record = GraphBuilder(registry).create_contained_objects(cls, kwargs)
            values = validate_params(
                cls.__qualname__,
                registry.validation_spec(cls),
                own_args,
                class_loader=registry.class_loader,
            )

        for name, value in values.items():
            setattr(self, name, value)
        self._classwire_params = values
        self._classwire_record = record

    def __repr__(self) -> str:
        params = ", ".join(f"{name}={value!r}" for name, value in self._classwire_params.items())
        return f"{type(self).__qualname__}({params})"

    # region Class-level API
    @classmethod
    def declare_params(cls, spec: Mapping[str, Any]) -> None:
        """Replace the parameters this class declares itself (``CLEAR`` empties them)."""
        cls.__classwire_registry__.declare_params(cls, spec)

    @classmethod
    def declare_contained(cls, spec: Mapping[str, Any]) -> None:
        """Replace the contained objects this class declares itself (``CLEAR`` empties them)."""
        cls.__classwire_registry__.declare_contained(cls, spec)

    @classmethod
    def allowed_params(cls, args: Mapping[str, Any] | None = None) -> dict[str, Param]:
        """Return every parameter the constructor accepts, including pass-through ones."""
        return cls.__classwire_registry__.allowed_params(cls, args)

    @classmethod
    def validation_spec(cls) -> dict[str, Param]:
        """Return the rules the constructor validates its own arguments with."""
        return cls.__classwire_registry__.validation_spec(cls)

    @classmethod
    def get_contained_objects(cls) -> dict[str, Contained]:
        """Return the contained-object slots of this class, inherited ones included."""
        return cls.__classwire_registry__.merged_contained(cls)

    @classmethod
    def create_contained_objects(
        cls,
        args: Mapping[str, Any],
    ) -> tuple[dict[str, Any], ContainerRecord]:
        """Split ``args`` as the constructor does, building eager contained objects."""
        return GraphBuilder(cls.__classwire_registry__).create_contained_objects(cls, args)

    # endregion Class-level API

    # region Instance API
    @property
    def params(self) -> dict[str, Any]:
        """Validated constructor values, built eager slot objects included."""
        return dict(self._classwire_params)

    def create_delayed_object(self, slot: str, /, **overrides: Any) -> Any:
        """Build a new object for the delayed ``slot``.

        The stored slot arguments are used, updated with ``overrides``.
        Every call returns an independent object whose ``container()`` is
        this instance.

        Raises:
            ClassWireUnknownSlotError: If ``slot`` is not a delayed slot.

        """
        entry = self._delayed_entry(slot)
        args = {**entry.args, **overrides}
        if is_composable_class(entry.cls):
            args[CONTAINER_KEY] = BackReference.to(self)
        logger.debug(
            "Creating delayed %s.%s as %s",
            type(self).__qualname__,
            slot,
            entry.cls.__qualname__,
        )
        return entry.cls(**args)

    def delayed_object_params(self, slot: str, /, **patch: Any) -> dict[str, Any]:
        """Return the arguments stored for the delayed ``slot``, after applying ``patch``.

        ``patch`` is merged into the stored arguments and affects every
        later ``create_delayed_object`` call for the slot.

        Raises:
            ClassWireUnknownSlotError: If ``slot`` is not a delayed slot.

        """
        entry = self._delayed_entry(slot)
        entry.args.update(patch)
        return dict(entry.args)

    def delayed_object_class(self, slot: str) -> type[Any]:
        """Return the class the delayed ``slot`` builds."""
        return self._delayed_entry(slot).cls

    def contained_class(self, slot: str) -> type[Any]:
        """Return the class of the object in ``slot`` (or the class it builds, if delayed)."""
        return self._entry(slot).cls

    def container(self) -> Any | None:
        """Return the object that created this one through a delayed slot.

        Returns ``None`` for objects built any other way and once the
        creator has been garbage collected.

        Raises:
            ClassWireUnsupportedOperationError: If the creator could not be
                weakly referenced.

        """
        back_reference = self._classwire_record.back_reference
        if back_reference is None:
            return None
        if not back_reference.supported:
            msg = (
                f"The container of this '{type(self).__qualname__}' cannot be weakly "
                "referenced, so it was not recorded."
            )
            raise ClassWireUnsupportedOperationError(msg)
        return back_reference.resolve()

    def show_containers(self) -> str:
        """Render this object and its contained objects as an indented tree."""
        return show_containers(self)

    # endregion Instance API

    def _entry(self, slot: str) -> ContainedEntry:
        entry = self._classwire_record.contained.get(slot)
        if entry is None:
            owner = type(self).__qualname__
            msg = f"Unknown contained object '{slot}' in '{owner}'."
            raise ClassWireUnknownSlotError(msg, class_name=owner, slot=slot)
        return entry

    def _delayed_entry(self, slot: str) -> ContainedEntry:
        entry = self._classwire_record.contained.get(slot)
        if entry is None or not entry.delayed:
            owner = type(self).__qualname__
            msg = f"Unknown delayed object '{slot}' in '{owner}'."
            raise ClassWireUnknownSlotError(msg, class_name=owner, slot=slot)
        return entry


__all__ = ["Composable"]
