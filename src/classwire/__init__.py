from classwire._internal.class_loader import ClassLoader
from classwire.api import (
    allowed_params,
    contained_class,
    container,
    create_delayed_object,
    declare_contained,
    declare_params,
    delayed_object_class,
    delayed_object_params,
    new,
)
from classwire.composable import Composable
from classwire.contained import Contained
from classwire.container_record import BackReference, ContainedEntry, ContainerRecord
from classwire.exceptions import (
    ClassWireClassResolutionError,
    ClassWireCompositionError,
    ClassWireError,
    ClassWireInvalidDeclarationError,
    ClassWireRecursionError,
    ClassWireUnknownSlotError,
    ClassWireUnsupportedOperationError,
    ClassWireValidationError,
)
from classwire.lock_mode import LockMode
from classwire.params import Param
from classwire.reflection import all_specs
from classwire.registry import CLEAR, SpecRegistry, default_registry
from classwire.rendering import show_containers

__all__ = [
    "CLEAR",
    "BackReference",
    "ClassLoader",
    "ClassWireClassResolutionError",
    "ClassWireCompositionError",
    "ClassWireError",
    "ClassWireInvalidDeclarationError",
    "ClassWireRecursionError",
    "ClassWireUnknownSlotError",
    "ClassWireUnsupportedOperationError",
    "ClassWireValidationError",
    "Composable",
    "ContainedEntry",
    "Contained",
    "ContainerRecord",
    "LockMode",
    "Param",
    "SpecRegistry",
    "all_specs",
    "allowed_params",
    "contained_class",
    "container",
    "create_delayed_object",
    "declare_contained",
    "declare_params",
    "default_registry",
    "delayed_object_class",
    "delayed_object_params",
    "new",
    "show_containers",
]
