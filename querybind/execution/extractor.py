import logging
from typing import Any

from querybind.binding.spec import GeneratedKeys, ReturnShape
from querybind.execution.result import ExecutionResult, ReturnedKeys, RowsAffected, Void

logger = logging.getLogger(__name__)


def extract(result: ExecutionResult, shape: ReturnShape,
            keys: GeneratedKeys = GeneratedKeys.NO_KEYS_RETURNED) -> Any:
    """
    Convert an execution result into the declared return value.

    COUNT  -> total affected rows (batch: sum of the per-row counts)
    COUNTS -> list of per-row counts
    VOID   -> None, whatever was reported
    KEY    -> first column of the first key row, None if no row
    KEYS   -> list of key tuples; list of scalars for RETURNED_KEYS_FIRST_COLUMN
    """
    shape = ReturnShape(shape)
    if shape is ReturnShape.VOID:
        return None

    if shape in (ReturnShape.COUNT, ReturnShape.COUNTS):
        if not isinstance(result, RowsAffected):
            raise TypeError(f"Cannot extract {shape.value} from {type(result).__name__}")
        if shape is ReturnShape.COUNTS:
            return list(result.per_row)
        return result.count

    if isinstance(result, Void):
        return None if shape is ReturnShape.KEY else []
    if not isinstance(result, ReturnedKeys):
        raise TypeError(f"Cannot extract {shape.value} from {type(result).__name__}")

    if shape is ReturnShape.KEY:
        if not result.keys:
            logger.warning("No generated keys were returned")
            return None
        return result.keys[0][0]

    if keys is GeneratedKeys.RETURNED_KEYS_FIRST_COLUMN:
        return [row[0] for row in result.keys]
    return [tuple(row) for row in result.keys]
