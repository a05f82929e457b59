from querybind.execution.extractor import extract
from querybind.execution.result import ExecutionResult, ReturnedKeys, RowsAffected, Void
from querybind.execution.strategy import (
    ExecutionState,
    ExecutionStrategy,
    InvocationContext,
    batch_length,
)

__all__ = [
    'ExecutionResult',
    'ExecutionState',
    'ExecutionStrategy',
    'InvocationContext',
    'ReturnedKeys',
    'RowsAffected',
    'Void',
    'batch_length',
    'extract',
]
