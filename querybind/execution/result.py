from dataclasses import dataclass
from typing import Any, Tuple, Union


@dataclass(frozen=True, slots=True)
class RowsAffected:
    count: int
    per_row: Tuple[int, ...] = ()


@dataclass(frozen=True, slots=True)
class ReturnedKeys:
    """Generated key tuples in the order the execution unit returned them."""
    keys: Tuple[Tuple[Any, ...], ...]
    count: int = 0


@dataclass(frozen=True, slots=True)
class Void:
    pass


ExecutionResult = Union[RowsAffected, ReturnedKeys, Void]
