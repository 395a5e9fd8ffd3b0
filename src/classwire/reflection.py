"""Reflection dump of every declaration, for documentation and tooling."""

from __future__ import annotations

import collections.abc
import re
from typing import Any

from classwire.contained import Contained
from classwire.params import MISSING, Param
from classwire.registry import SpecRegistry, default_registry

NO_DESCRIPTION = "(No description available)"

_REGEX_FLAGS = ((re.IGNORECASE, "i"), (re.MULTILINE, "m"), (re.DOTALL, "s"), (re.VERBOSE, "x"))
_TYPE_NAMES: tuple[tuple[type[Any], str], ...] = (
    (str, "string"),
    (list, "list"),
    (tuple, "list"),
    (dict, "hash"),
    (collections.abc.Mapping, "hash"),
    (collections.abc.Callable, "code"),  # type: ignore[arg-type]
)


def all_specs(registry: SpecRegistry = default_registry) -> dict[str, dict[str, Any]]:
    """Describe every class that declared parameters or contained objects.

    Returns:
        ``{class_name: {"valid_params": {...}, "contained_objects": {...}}}``
        sorted by class name. Each parameter is described by ``type``,
        ``default``, ``descr``, ``required`` and ``public``; each contained
        object by ``class``, ``delayed`` and ``descr``. Defaults are rendered
        for reading, not for parsing back.

    """
    out: dict[str, dict[str, Any]] = {}
    for cls in registry.declared_classes():
        params = registry.declared_params(cls) or {}
        contained = registry.declared_contained(cls) or {}
        out[cls.__name__] = {
            "valid_params": {
                name: describe_param(params[name], contained.get(name)) for name in sorted(params)
            },
            "contained_objects": {
                slot: describe_contained(contained[slot]) for slot in sorted(contained)
            },
        }
    return dict(sorted(out.items()))


def describe_param(rule: Param, slot: Contained | None = None) -> dict[str, Any]:
    """Return a readable description of one parameter rule.

    ``slot`` is the same-named contained object of the declaring class, if
    any; an object parameter built by such a slot defaults to that class.
    """
    type_name = rule.parse
    default: Any = None

    if rule.isa is not None:
        type_name = "object"
        if slot is not None:
            default = f"{slot.target_name}()"
    elif rule.default_factory is not None:
        default = f"{getattr(rule.default_factory, '__qualname__', repr(rule.default_factory))}()"
    elif rule.default is not MISSING:
        default = rule.default
        if isinstance(default, re.Pattern):
            type_name = "regex"
            default = _render_pattern(default)
        elif isinstance(default, (list, tuple)):
            default = "[" + ", ".join(f"'{item}'" for item in default) + "]"
        elif callable(default):
            default = f"{getattr(default, '__qualname__', repr(default))}"

    if not type_name and rule.type is not None:
        type_name = _guess_type_name(rule.type)

    return {
        "type": type_name,
        "default": default,
        "descr": rule.descr or NO_DESCRIPTION,
        "required": default is None and rule.required,
        "public": rule.public,
    }


def describe_contained(contained: Contained) -> dict[str, Any]:
    return {
        "class": contained.target_name,
        "delayed": contained.delayed,
        "descr": contained.descr or NO_DESCRIPTION,
    }


def _render_pattern(pattern: re.Pattern[Any]) -> str:
    flags = "".join(letter for flag, letter in _REGEX_FLAGS if pattern.flags & flag)
    return f"/{pattern.pattern}/{flags}"


def _guess_type_name(expected: type[Any] | tuple[type[Any], ...]) -> str | None:
    candidates = expected if isinstance(expected, tuple) else (expected,)
    for candidate in candidates:
        for base, name in _TYPE_NAMES:
            if issubclass(candidate, base):
                return name
    return None


__all__ = ["NO_DESCRIPTION", "all_specs", "describe_contained", "describe_param"]
