"""
Single and batch execution of a bound statement.

Every placeholder is resolved and bound before the execution unit is asked to
prepare anything, so a binding failure never reaches the database.

    UNBOUND -> SINGLE_BOUND -> EXECUTED
    UNBOUND -> BATCH_BOUND  -> EXECUTED

A context that fails or is interrupted ends DISCARDED and is never reused.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple

from querybind.binding.binder import bind_all
from querybind.binding.resolver import PathResolver
from querybind.binding.spec import BindingSpec, ReturnShape
from querybind.database.unit import ExecutionUnit, UnitResult
from querybind.errors import BatchShapeError, ExecutionError, QuerybindError
from querybind.execution.result import ExecutionResult, ReturnedKeys, RowsAffected, Void

logger = logging.getLogger(__name__)


class ExecutionState(str, Enum):
    UNBOUND = "unbound"
    SINGLE_BOUND = "single_bound"
    BATCH_BOUND = "batch_bound"
    EXECUTED = "executed"
    DISCARDED = "discarded"


@dataclass
class InvocationContext:
    """Per-call state. Owned by one caller and dropped after execution."""
    arguments: Tuple[Any, ...]
    parameter_sets: List[List[Any]] = field(default_factory=list)
    batch_length: Optional[int] = None
    state: ExecutionState = ExecutionState.UNBOUND


def batch_length(arguments: Sequence[Any]) -> int:
    """
    Common length of the batch arguments.

    Raises:
        BatchShapeError: if there are no arguments, an argument is not a list
            or tuple, or the lengths differ
    """
    if not arguments:
        raise BatchShapeError("A batch update needs at least one list or tuple argument")

    lengths = []
    for position, argument in enumerate(arguments, start=1):
        if not isinstance(argument, (list, tuple)):
            raise BatchShapeError(
                f"Batch argument {position} must be a list or tuple, got {type(argument).__name__}")
        lengths.append(len(argument))

    if len(set(lengths)) > 1:
        raise BatchShapeError(f"Batch arguments have differing lengths: {lengths}")
    return lengths[0]


class ExecutionStrategy:

    def __init__(self, spec: BindingSpec, resolver: PathResolver | None = None):
        self.spec = spec
        self.resolver = resolver or PathResolver()

    def bind(self, arguments: Sequence[Any]) -> InvocationContext:
        context = InvocationContext(arguments=tuple(arguments))
        try:
            if self.spec.batch:
                n = batch_length(context.arguments)
                context.batch_length = n
                for i in range(n):
                    row = [argument[i] for argument in context.arguments]
                    context.parameter_sets.append(bind_all(self.spec, row, self.resolver))
                context.state = ExecutionState.BATCH_BOUND
            else:
                context.parameter_sets.append(bind_all(self.spec, context.arguments, self.resolver))
                context.state = ExecutionState.SINGLE_BOUND
        except BaseException:
            context.state = ExecutionState.DISCARDED
            context.parameter_sets = []
            raise
        return context

    def execute(self, unit: ExecutionUnit, context: InvocationContext) -> ExecutionResult:
        if context.state not in (ExecutionState.SINGLE_BOUND, ExecutionState.BATCH_BOUND):
            raise RuntimeError(f"Cannot execute an invocation in state {context.state.value}")

        spec = self.spec
        try:
            if context.state is ExecutionState.BATCH_BOUND and not context.parameter_sets:
                logger.info(f"{spec.name}: empty batch, nothing executed")
                outcome = UnitResult()
            else:
                statement = unit.prepare(spec.template, spec.keys, spec.key_columns)
                if context.state is ExecutionState.BATCH_BOUND:
                    outcome = unit.execute_batch(statement, context.parameter_sets)
                else:
                    for position, value in enumerate(context.parameter_sets[0], start=1):
                        unit.bind_parameter(statement, position, value)
                    outcome = unit.execute_single(statement)
        except QuerybindError:
            context.state = ExecutionState.DISCARDED
            raise
        except Exception as e:
            context.state = ExecutionState.DISCARDED
            message = f"{spec.name}: failed to execute statement: {e}"
            logger.error(message)
            raise ExecutionError(message, sql=spec.template.source) from e
        except BaseException:
            context.state = ExecutionState.DISCARDED
            raise

        context.state = ExecutionState.EXECUTED
        if spec.returns is ReturnShape.VOID:
            return Void()
        if spec.wants_keys:
            return ReturnedKeys(keys=tuple(outcome.generated_keys), count=outcome.rows_affected)
        return RowsAffected(count=outcome.rows_affected, per_row=tuple(outcome.rows_affected_per_row))

    def run(self, unit: ExecutionUnit, arguments: Sequence[Any]) -> ExecutionResult:
        return self.execute(unit, self.bind(arguments))
