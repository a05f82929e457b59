from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional, Tuple

from querybind.binding.types import TypeMapper, as_mapper
from querybind.errors import QueryConfigurationError
from querybind.template.cache import get_template
from querybind.template.parser import Template

logger = logging.getLogger(__name__)


class GeneratedKeys(str, Enum):
    """How auto-generated keys are returned by an update."""
    NO_KEYS_RETURNED = "no_keys_returned"
    RETURNED_KEYS_FIRST_COLUMN = "returned_keys_first_column"
    RETURNED_KEYS_DRIVER_DEFINED = "returned_keys_driver_defined"
    RETURNED_KEYS_COLUMNS_SPECIFIED = "returned_keys_columns_specified"


class ReturnShape(str, Enum):
    COUNT = "count"
    COUNTS = "counts"
    VOID = "void"
    KEY = "key"
    KEYS = "keys"


@dataclass(frozen=True, slots=True)
class BindingSpec:
    """
    Per-method binding metadata. Built once when the query is declared and
    shared read-only by every invocation.
    """
    template: Template
    batch: bool = False
    keys: GeneratedKeys = GeneratedKeys.NO_KEYS_RETURNED
    returns: ReturnShape = ReturnShape.COUNT
    converters: Tuple[Optional[TypeMapper], ...] = ()
    key_columns: Tuple[str, ...] = ()
    arity: Optional[int] = None
    name: str = '<query>'

    @property
    def wants_keys(self) -> bool:
        return self.keys is not GeneratedKeys.NO_KEYS_RETURNED

    def converter_for(self, position: int) -> Optional[TypeMapper]:
        """Converter bound to a 1-based bind position, or None for the default."""
        if 1 <= position <= len(self.converters):
            return self.converters[position - 1]
        return None

    @classmethod
    def build(cls, sql: str, *,
              batch: bool = False,
              keys: GeneratedKeys = GeneratedKeys.NO_KEYS_RETURNED,
              returns: ReturnShape = ReturnShape.COUNT,
              parameter_bindings: Iterable[Any] = (),
              key_columns: Iterable[str] = (),
              arity: Optional[int] = None,
              name: Optional[str] = None) -> "BindingSpec":
        """
        Parse the template and validate the declaration.

        Raises:
            TemplateSyntaxError: malformed placeholder in sql
            QueryConfigurationError: invalid mode combination
        """
        name = name or '<query>'
        if not sql or not sql.strip():
            raise QueryConfigurationError(f"{name}: no SQL statement given")

        template = get_template(sql)
        keys = GeneratedKeys(keys)
        returns = ReturnShape(returns)
        key_columns = tuple(key_columns)

        validate_modes(name, batch, keys, returns, key_columns)

        converters = tuple(as_mapper(entry) for entry in parameter_bindings)
        placeholder_count = len(template.placeholders)
        if len(converters) > placeholder_count:
            logger.warning(f"{name}: {len(converters)} parameter bindings for "
                           f"{placeholder_count} placeholders; extra bindings are ignored")

        if arity is not None and template.max_index > arity:
            logger.warning(f"{name}: template references argument {template.max_index} "
                           f"but the method takes {arity}; every call will fail")

        return cls(template=template, batch=batch, keys=keys, returns=returns,
                   converters=converters, key_columns=key_columns, arity=arity, name=name)


def validate_modes(name, batch, keys, returns, key_columns):
    wants_keys = keys is not GeneratedKeys.NO_KEYS_RETURNED

    if batch and wants_keys:
        raise QueryConfigurationError(f"{name}: generated keys cannot be returned from a batch update")
    if returns is ReturnShape.VOID and wants_keys:
        raise QueryConfigurationError(f"{name}: a void query cannot request generated keys")
    if returns in (ReturnShape.KEY, ReturnShape.KEYS) and not wants_keys:
        raise QueryConfigurationError(
            f"{name}: returning keys requires keys other than {GeneratedKeys.NO_KEYS_RETURNED.name}")
    if returns in (ReturnShape.COUNT, ReturnShape.COUNTS) and wants_keys:
        raise QueryConfigurationError(f"{name}: a query requesting generated keys must return keys")
    if returns is ReturnShape.COUNTS and not batch:
        raise QueryConfigurationError(f"{name}: per-row counts are only available for batch updates")
    if keys is GeneratedKeys.RETURNED_KEYS_COLUMNS_SPECIFIED and not key_columns:
        raise QueryConfigurationError(f"{name}: {keys.name} requires key_columns")
