"""
Placeholder resolution against call-time arguments.

Members are looked up by name, segment by segment. A member is first looked up
as a field (a mapping key, or an attribute that is not a method: instance
attributes, slots, dataclass fields, properties). When no field exists an
accessor method is tried, named by the AccessorConvention: with the default
convention segment 'username' tries getUsername(), isUsername(),
get_username() and is_username(), in that order.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Sequence, Tuple

from querybind.errors import BindingError
from querybind.template.parser import Placeholder

logger = logging.getLogger(__name__)

_MISSING = object()


@dataclass(frozen=True, slots=True)
class AccessorConvention:
    """Derives accessor method names from a member name."""

    prefixes: Tuple[str, ...] = ('get', 'is')
    snake_case: bool = True

    def accessor_names(self, name: str) -> Tuple[str, ...]:
        capitalized = name[:1].upper() + name[1:]
        names = [prefix + capitalized for prefix in self.prefixes]
        if self.snake_case:
            names.extend(f"{prefix}_{name}" for prefix in self.prefixes)
        return tuple(names)


DEFAULT_CONVENTION = AccessorConvention()


def _field(target: Any, name: str) -> Any:
    if isinstance(target, Mapping):
        return target[name] if name in target else _MISSING
    try:
        value = getattr(target, name)
    except AttributeError:
        return _MISSING
    # bound methods are accessors, not fields
    if inspect.ismethod(value) or inspect.isbuiltin(value):
        return _MISSING
    return value


def _accessor(target: Any, name: str, convention: AccessorConvention) -> Any:
    for accessor_name in convention.accessor_names(name):
        reader = getattr(target, accessor_name, None)
        if reader is None or not callable(reader):
            continue
        try:
            return reader()
        except Exception as e:
            raise BindingError(
                f"Accessor {type(target).__name__}.{accessor_name}() failed: {e}") from e
    return _MISSING


def get_member(target: Any, name: str, convention: AccessorConvention = DEFAULT_CONVENTION) -> Any:
    """
    Look up a single named member, field first, then accessor.

    Raises:
        BindingError: if neither a field nor an accessor named after name exists
    """
    value = _field(target, name)
    if value is not _MISSING:
        return value

    value = _accessor(target, name, convention)
    if value is not _MISSING:
        return value

    raise BindingError(
        f"No field or accessor named '{name}' on type {type(target).__name__} "
        f"(tried {', '.join(convention.accessor_names(name))})")


class PathResolver:
    """Resolves Placeholders against an argument sequence."""

    def __init__(self, convention: AccessorConvention | None = None):
        self.convention = convention or DEFAULT_CONVENTION

    def resolve(self, placeholder: Placeholder, arguments: Sequence[Any]) -> Any:
        """
        Resolve a placeholder to a concrete value.

        Args:
            placeholder: parsed placeholder (1-based argument index plus path)
            arguments: live call arguments, in declaration order

        Returns:
            The argument itself for an empty path, otherwise the value reached by
            descending the path. A None value part-way through yields None.

        Raises:
            BindingError: on an out-of-range index or a missing member
        """
        index = placeholder.arg_index
        if index < 1 or index > len(arguments):
            raise BindingError(
                f"Placeholder {placeholder.describe()} refers to argument {index}, "
                f"but {len(arguments)} argument(s) were given")

        value = arguments[index - 1]
        for name in placeholder.path:
            if value is None:
                return None
            try:
                value = get_member(value, name, self.convention)
            except BindingError as e:
                logger.error(f"Failed to resolve {placeholder.describe()}: {e}")
                raise
        return value


def resolve(placeholder: Placeholder, arguments: Sequence[Any],
            convention: AccessorConvention | None = None) -> Any:
    return PathResolver(convention).resolve(placeholder, arguments)
