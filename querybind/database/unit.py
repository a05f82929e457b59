"""
Execution unit protocol.

The core talks to the database only through these four operations:

- prepare(template, keys, key_columns) -> Statement
- bind_parameter(statement, position, value)
- execute_single(statement) -> UnitResult
- execute_batch(statement, parameter_sets) -> UnitResult

Implementations must not keep cursors or statements alive past the call that
used them. The connection belongs to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Sequence, Tuple

from querybind.binding.spec import GeneratedKeys
from querybind.template.parser import Template


@dataclass(frozen=True, slots=True)
class UnitResult:
    rows_affected: int = 0
    rows_affected_per_row: Tuple[int, ...] = ()
    generated_keys: Tuple[Tuple[Any, ...], ...] = ()


@dataclass(slots=True)
class Statement:
    """A prepared statement owned by a single invocation."""
    template: Template
    sql: str
    keys: GeneratedKeys = GeneratedKeys.NO_KEYS_RETURNED
    key_columns: Tuple[str, ...] = ()
    returning: bool = False
    parameters: List[Any] = field(default_factory=list)

    @property
    def wants_keys(self) -> bool:
        return self.keys is not GeneratedKeys.NO_KEYS_RETURNED

    @property
    def parameter_count(self) -> int:
        return len(self.template.placeholders)


class ExecutionUnit:

    def prepare(self, template: Template,
                keys: GeneratedKeys = GeneratedKeys.NO_KEYS_RETURNED,
                key_columns: Sequence[str] = ()) -> Statement:
        raise NotImplementedError

    def bind_parameter(self, statement: Statement, position: int, value: Any) -> None:
        """Set the value of a 1-based bind slot."""
        if position < 1 or position > statement.parameter_count:
            raise IndexError(f"Bind position {position} out of range 1..{statement.parameter_count}")
        if len(statement.parameters) < statement.parameter_count:
            statement.parameters.extend([None] * (statement.parameter_count - len(statement.parameters)))
        statement.parameters[position - 1] = value

    def execute_single(self, statement: Statement) -> UnitResult:
        raise NotImplementedError

    def execute_batch(self, statement: Statement, parameter_sets: Sequence[Sequence[Any]]) -> UnitResult:
        raise NotImplementedError
