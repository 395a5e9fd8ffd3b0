from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from classwire._internal.type_checks import class_name
from classwire.exceptions import ClassWireInvalidDeclarationError, ClassWireValidationError

if TYPE_CHECKING:
    from classwire._internal.class_loader import ClassLoader

MISSING: Any = object()
"""Marker for a ``Param`` without a default value."""


@dataclass(frozen=True, kw_only=True, slots=True)
class Param:
    """Validation rule for one constructor parameter.

    A parameter is required unless it is ``optional`` or has a default.
    ``type`` and ``isa`` are both checked with ``isinstance``; ``isa`` may
    name the class instead of referencing it, and also marks the parameter
    as an object slot for ``allowed_params`` (a contained object never
    receives an ``isa`` parameter that its container itself satisfies).

    ``descr``, ``parse`` and ``public`` are documentation metadata used by
    ``all_specs`` only.
    """

    type: type[Any] | tuple[type[Any], ...] | None = None
    """Accepted Python type or tuple of types."""
    isa: type[Any] | str | None = None
    """Class (or class name) the value must be an instance of."""
    default: Any = MISSING
    """Value used when the parameter is omitted."""
    default_factory: Callable[[], Any] | None = None
    """Zero-argument callable producing the value when the parameter is omitted."""
    optional: bool = False
    """Allow omitting the parameter; the value then defaults to ``None``."""
    descr: str | None = None
    parse: str | None = None
    public: bool = True

    def __post_init__(self) -> None:
        if self.default is not MISSING and self.default_factory is not None:
            msg = "Param cannot declare both 'default' and 'default_factory'."
            raise ClassWireInvalidDeclarationError(msg)

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING or self.default_factory is not None

    @property
    def required(self) -> bool:
        return not (self.optional or self.has_default)

    def default_value(self) -> Any:
        """Return the value to use when the parameter is omitted."""
        if self.default_factory is not None:
            return self.default_factory()
        if self.default is not MISSING:
            return self.default
        return None

    def check(self, value: Any, *, owner: str, name: str, class_loader: ClassLoader) -> None:
        """Raise ``ClassWireValidationError`` when ``value`` breaks this rule."""
        if self.type is not None and not isinstance(value, self.type):
            msg = (
                f"The '{name}' parameter ({value!r}) to {owner} was a '{class_name(value)}', "
                f"which is not one of the allowed types: {_type_names(self.type)}."
            )
            raise ClassWireValidationError(msg, class_name=owner, param=name)

        if self.isa is not None:
            expected = class_loader.resolve(self.isa, owner=owner)
            if not isinstance(value, expected):
                msg = (
                    f"The '{name}' parameter ({value!r}) to {owner} was not a "
                    f"'{expected.__qualname__}' (it is a '{class_name(value)}')."
                )
                raise ClassWireValidationError(msg, class_name=owner, param=name)


CLASS_OVERRIDE_PARAM = Param(type=(str, type), parse="string")
"""Loose rule accepted for ``<slot>_class`` override parameters."""

SLOT_PARAM = Param(optional=True)
"""Implicit rule for contained-object slot names not declared as parameters."""


def coerce_param(rule: Any, *, owner: str, name: str) -> Param:
    """Turn a declared rule into a ``Param``.

    Accepts a ``Param``, a mapping of ``Param`` keywords, or a bool where
    ``True`` means required and ``False`` means optional.
    """
    if isinstance(rule, Param):
        return rule
    if isinstance(rule, bool):
        return Param(optional=not rule)
    if isinstance(rule, Mapping):
        try:
            return Param(**rule)
        except TypeError as error:
            msg = f"Invalid rule for parameter '{name}' in '{owner}': {error}."
            raise ClassWireInvalidDeclarationError(msg) from error
    msg = f"Invalid rule for parameter '{name}' in '{owner}': {rule!r}."
    raise ClassWireInvalidDeclarationError(msg)


def validate_params(
    owner: str,
    spec: Mapping[str, Param],
    args: Mapping[str, Any],
    *,
    class_loader: ClassLoader,
) -> dict[str, Any]:
    """Validate ``args`` against ``spec`` and return the complete values.

    Args:
        owner: Name of the class being constructed, used in error messages.
        spec: Merged parameter rules of that class.
        args: Residual arguments after contained objects took theirs.
        class_loader: Loader used for ``isa`` constraints given by name.

    Returns:
        Every declared parameter mapped to its supplied or default value.

    Raises:
        ClassWireValidationError: On an unknown parameter, a missing required
            parameter, or a value failing its rule.

    """
    unknown = sorted(name for name in args if name not in spec)
    if unknown:
        listed = ", ".join(unknown)
        msg = (
            f"The following parameter{'s' if len(unknown) > 1 else ''} "
            f"{'were' if len(unknown) > 1 else 'was'} passed in the call to {owner} "
            f"but {'were' if len(unknown) > 1 else 'was'} not listed in the validation "
            f"options: {listed}"
        )
        raise ClassWireValidationError(msg, class_name=owner, param=unknown[0])

    values: dict[str, Any] = {}
    for name, rule in spec.items():
        if name in args:
            rule.check(args[name], owner=owner, name=name, class_loader=class_loader)
            values[name] = args[name]
        elif rule.required:
            msg = f"Mandatory parameter '{name}' missing in call to {owner}."
            raise ClassWireValidationError(msg, class_name=owner, param=name)
        else:
            values[name] = rule.default_value()
    return values


def _type_names(expected: type[Any] | tuple[type[Any], ...]) -> str:
    if isinstance(expected, tuple):
        return ", ".join(item.__qualname__ for item in expected)
    return expected.__qualname__


__all__ = [
    "CLASS_OVERRIDE_PARAM",
    "MISSING",
    "SLOT_PARAM",
    "Param",
    "coerce_param",
    "validate_params",
]
