# querybind/__init__.py
import logging
logging.getLogger(__name__).addHandler(logging.NullHandler())

from .errors import (
    BatchShapeError,
    BindingError,
    ExecutionError,
    QueryConfigurationError,
    QuerybindConnectionError,
    QuerybindError,
    TemplateSyntaxError,
)
from .template import Literal, Placeholder, Template, get_template, parse
from .binding import (
    AccessorConvention,
    BindingSpec,
    GeneratedKeys,
    PathResolver,
    ReturnShape,
    TypeMapper,
    bind,
    resolve,
)
from .execution import ExecutionStrategy, extract
from .database import get_unit
from .query import BaseQuery, execute_update, get_query, update

__all__ = [
    'AccessorConvention',
    'BaseQuery',
    'BatchShapeError',
    'BindingError',
    'BindingSpec',
    'ExecutionError',
    'ExecutionStrategy',
    'GeneratedKeys',
    'Literal',
    'PathResolver',
    'Placeholder',
    'QueryConfigurationError',
    'QuerybindConnectionError',
    'QuerybindError',
    'ReturnShape',
    'Template',
    'TemplateSyntaxError',
    'TypeMapper',
    'bind',
    'execute_update',
    'extract',
    'get_query',
    'get_template',
    'get_unit',
    'parse',
    'resolve',
    'update',
]
