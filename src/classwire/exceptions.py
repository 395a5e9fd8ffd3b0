from __future__ import annotations


class ClassWireError(Exception):
    """Represent a base class for all classwire-specific failures.

    Catch this type when you want to handle any classwire error path without
    matching each concrete exception class individually.
    """


class ClassWireValidationError(ClassWireError):
    """Signal that an argument bag does not satisfy a class's parameter spec.

    Raised by ``Composable`` constructors (and ``classwire.new``) when a
    required parameter is missing, a value has the wrong type or class, or a
    parameter is not accepted by any class in the composed graph.

    Typical fixes include passing the missing parameter, correcting its type,
    or declaring it in ``valid_params`` of the class that should own it.
    """

    def __init__(self, message: str, *, class_name: str, param: str | None = None) -> None:
        super().__init__(message)
        self.class_name = class_name
        """Name of the class whose parameter spec rejected the arguments."""
        self.param = param
        """Name of the offending parameter, when a single one is at fault."""


class ClassWireCompositionError(ClassWireError):
    """Signal structural misuse of contained objects.

    Raised when a pre-built object is supplied for a delayed slot, when a
    target class name is malformed, or when a containment cycle is found
    while computing accepted parameters.

    Typical fixes include letting delayed slots build their own objects via
    ``create_delayed_object`` and breaking containment cycles with delayed
    slots.
    """


class ClassWireUnknownSlotError(ClassWireCompositionError):
    """Signal a reference to a contained-object slot that does not exist.

    Raised by ``create_delayed_object``, ``delayed_object_params``,
    ``delayed_object_class`` and ``contained_class`` when the slot was never
    declared on the instance's class or is not delayed where a delayed slot is
    required.
    """

    def __init__(self, message: str, *, class_name: str, slot: str) -> None:
        super().__init__(message)
        self.class_name = class_name
        self.slot = slot


class ClassWireInvalidDeclarationError(ClassWireCompositionError):
    """Signal an invalid ``valid_params`` or ``contained_objects`` declaration.

    Raised at declaration time for rules that cannot be coerced into ``Param``,
    parameter names that shadow ``Composable`` attributes or the reserved
    ``container`` key, malformed slot targets, and slots whose target is the
    declaring class itself. The registry keeps its previous declarations.
    """


class ClassWireRecursionError(ClassWireCompositionError):
    """Signal that contained-object construction nested deeper than allowed.

    Raised when the construction depth exceeds ``SpecRegistry.max_depth``,
    which usually means a containment cycle that could not be detected at
    declaration time.
    """


class ClassWireClassResolutionError(ClassWireError):
    """Signal that a class name cannot be resolved to a class.

    Raised when a ``<slot>_class`` override, a slot target, or an ``isa``
    constraint names a class that is neither registered with the class loader
    nor importable as ``module.attribute``.

    Typical fixes include defining the class before use, registering it with
    ``ClassLoader.register``, or using its fully qualified dotted name.
    """


class ClassWireUnsupportedOperationError(ClassWireError):
    """Signal an operation that the composed object cannot support.

    Raised by ``Composable.container()`` when the creating parent could not be
    weakly referenced, so no back-reference was recorded.
    """
