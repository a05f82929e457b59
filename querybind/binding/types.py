"""
Type mappers convert resolved values into the representation handed to the
driver.

A query's parameter_bindings list pairs bind positions with mappers. Each
entry may be None or the TypeMapper base class (use the default mapping), a
TypeMapper subclass (instantiated once at declaration), a TypeMapper
instance, or any one-argument callable.
"""

import json
import logging
from enum import Enum
from typing import Any, Callable, Optional

from querybind.errors import QueryConfigurationError

logger = logging.getLogger(__name__)


def default_convert(value: Any) -> Any:
    """
    Default structural conversion. None, scalars, dates and bytes pass through
    to the driver; dicts and lists of dicts become JSON text; enums bind their
    value.
    """
    if value is None:
        return None
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, (list, tuple)) and value and isinstance(value[0], dict):
        return json.dumps(list(value), ensure_ascii=False)
    return value


class TypeMapper:
    """Base converter; subclasses override convert()."""

    def convert(self, value: Any) -> Any:
        return default_convert(value)

    def __repr__(self):
        return f"{type(self).__name__}()"


class CallableMapper(TypeMapper):
    """Adapts a plain function to the TypeMapper interface."""

    def __init__(self, func: Callable[[Any], Any]):
        self.func = func

    def convert(self, value):
        return self.func(value)

    def __repr__(self):
        return f"CallableMapper({getattr(self.func, '__name__', self.func)!r})"


def as_mapper(entry: Any) -> Optional[TypeMapper]:
    """
    Normalize a parameter_bindings entry.

    Returns:
        None when the default mapping applies, otherwise a TypeMapper

    Raises:
        QueryConfigurationError: if the entry cannot act as a converter
    """
    if entry is None or entry is TypeMapper or type(entry) is TypeMapper:
        return None
    if isinstance(entry, type):
        if not issubclass(entry, TypeMapper):
            raise QueryConfigurationError(f"{entry.__name__} is not a TypeMapper subclass")
        try:
            return entry()
        except TypeError as e:
            raise QueryConfigurationError(
                f"TypeMapper {entry.__name__} must be constructible without arguments: {e}") from e
    if isinstance(entry, TypeMapper):
        return entry
    if hasattr(entry, 'convert') and callable(entry.convert):
        return CallableMapper(entry.convert)
    if callable(entry):
        return CallableMapper(entry)
    raise QueryConfigurationError(f"Invalid parameter binding: {entry!r}")
