"""
Exception hierarchy for querybind.

Registration-time errors (TemplateSyntaxError, QueryConfigurationError) make a
declared query unusable until fixed. Call-time errors (BindingError,
BatchShapeError, ExecutionError) are fatal for that call only.
"""


class QuerybindError(Exception):
    """Base error for the library."""


class TemplateSyntaxError(QuerybindError, ValueError):
    """Raised when a statement template contains a malformed placeholder."""

    def __init__(self, message, template=None, column=None):
        if column is not None:
            message = f"{message} (column {column})"
        super().__init__(message)
        self.template = template
        self.column = column


class QueryConfigurationError(QuerybindError, ValueError):
    """Raised for invalid query declarations or unusable configuration."""


class BindingError(QuerybindError):
    """Raised when a placeholder cannot be resolved or converted."""


class BatchShapeError(BindingError):
    """Raised when batch arguments are not sequences of one common length."""


class ExecutionError(QuerybindError):
    """Raised when the underlying execution unit fails. The driver error is chained."""

    def __init__(self, message, sql=None):
        super().__init__(message)
        self.sql = sql


class QuerybindConnectionError(QuerybindError):
    """Raise exception when a connection failed."""

    def __init__(self, message, extra_info=''):
        super().__init__(message)
        self.extra_info = extra_info
