from __future__ import annotations

import importlib
import logging
import re
from typing import Any

from classwire._internal.type_checks import class_name, is_runtime_class
from classwire.exceptions import ClassWireClassResolutionError, ClassWireCompositionError

logger = logging.getLogger(__name__)

_CLASS_NAME_PATTERN = re.compile(r"^[\w.:]+$")


class ClassLoader:
    """Resolve class names to classes for ``<slot>_class`` overrides and slot targets.

    Names are looked up in explicit registrations first (every ``Composable``
    subclass registers its ``__name__`` and ``module.qualname``), then imported
    as ``module.attribute`` paths. Successful lookups are cached.
    """

    def __init__(self) -> None:
        self._classes_by_name: dict[str, type[Any]] = {}
        self._imported_by_name: dict[str, type[Any]] = {}

    def register(self, cls: type[Any], *names: str) -> None:
        """Make ``cls`` resolvable under each of ``names``."""
        for name in names:
            previous = self._classes_by_name.get(name)
            if previous is not None and previous is not cls:
                logger.debug(
                    "Class name '%s' now resolves to %s.%s instead of %s.%s",
                    name,
                    cls.__module__,
                    cls.__qualname__,
                    previous.__module__,
                    previous.__qualname__,
                )
            self._classes_by_name[name] = cls

    def validate_name(self, name: str, *, owner: str) -> None:
        """Reject class names that cannot possibly denote a class."""
        if not _CLASS_NAME_PATTERN.match(name):
            msg = f"Invalid class name '{name}' requested by '{owner}'."
            raise ClassWireCompositionError(msg)

    def resolve(self, target: type[Any] | str, *, owner: str) -> type[Any]:
        """Return the class denoted by ``target``.

        Args:
            target: A class (returned unchanged) or a class name.
            owner: Name of the class on whose behalf the lookup happens, used
                in error messages.

        Raises:
            ClassWireCompositionError: If ``target`` is not a well-formed name.
            ClassWireClassResolutionError: If no class matches the name.

        """
        if is_runtime_class(target):
            return target
        if not isinstance(target, str):
            msg = f"Expected a class or class name in '{owner}', got {target!r}."
            raise ClassWireCompositionError(msg)

        self.validate_name(target, owner=owner)
        name = target.replace("::", ".")

        registered = self._classes_by_name.get(name)
        if registered is not None:
            return registered
        imported = self._imported_by_name.get(name)
        if imported is not None:
            return imported

        imported = self._import(name, owner=owner)
        self._imported_by_name[name] = imported
        return imported

    def _import(self, name: str, *, owner: str) -> type[Any]:
        parts = name.split(".")
        import_error: ImportError | None = None

        for split_at in range(len(parts) - 1, 0, -1):
            module_name = ".".join(parts[:split_at])
            try:
                module = importlib.import_module(module_name)
            except ImportError as error:
                import_error = import_error or error
                continue

            candidate: Any = module
            for attribute in parts[split_at:]:
                candidate = getattr(candidate, attribute, None)
                if candidate is None:
                    break
            if is_runtime_class(candidate):
                logger.debug("Imported class '%s' for '%s'", name, owner)
                return candidate
            if candidate is not None:
                msg = f"Name '{name}' requested by '{owner}' is {class_name(candidate)}, not a class."
                raise ClassWireClassResolutionError(msg)

        msg = f"Unable to resolve class '{name}' requested by '{owner}'."
        if import_error is not None:
            msg = f"{msg} Original import error: {import_error}"
            raise ClassWireClassResolutionError(msg) from import_error
        raise ClassWireClassResolutionError(msg)


__all__ = ["ClassLoader"]
