"""
Declarative update queries.

    class UserQuery(BaseQuery):

        @update("UPDATE user SET username = ?1 WHERE id = ?2")
        def update_user(self, username: str, id: int) -> int: ...

        @update("UPDATE user SET username = ?{1.username} WHERE id = ?{1.id}")
        def update_user_object(self, user) -> int: ...

        @update("INSERT INTO user (username) VALUES (?1)", batch=True)
        def insert_users(self, usernames: list) -> list[int]: ...

        @update("INSERT INTO user (username) VALUES (?1)",
                keys=GeneratedKeys.RETURNED_KEYS_FIRST_COLUMN)
        def insert_user(self, username: str) -> int: ...

    with client("main") as c:
        UserQuery(c).update_user("jason", 1)

The decorated body is never run; the statement, modes and converters are
validated when the class is defined.
"""

from __future__ import annotations

import functools
import inspect
import logging
import typing
from collections import abc
from typing import Any, Callable, Iterable, Optional, Sequence

from querybind.binding.resolver import PathResolver
from querybind.binding.spec import BindingSpec, GeneratedKeys, ReturnShape
from querybind.config.runtime import get_config
from querybind.database import get_unit
from querybind.database.unit import ExecutionUnit
from querybind.errors import QueryConfigurationError
from querybind.execution.extractor import extract
from querybind.execution.strategy import ExecutionStrategy

logger = logging.getLogger(__name__)

_SEQUENCE_ORIGINS = (list, tuple, abc.Sequence, abc.Collection, abc.Iterable)
_SEQUENCE_NAMES = ('list', 'List', 'tuple', 'Tuple', 'Sequence', 'Collection', 'Iterable')


def execute_update(unit: ExecutionUnit, spec: BindingSpec, arguments: Sequence[Any],
                   resolver: PathResolver | None = None) -> Any:
    """
    Bind, execute and extract one invocation of spec.

    Without a resolver, members are looked up with the default accessor
    convention.
    """
    result = ExecutionStrategy(spec, resolver).run(unit, arguments)
    return extract(result, spec.returns, spec.keys)


def _is_sequence_annotation(annotation) -> bool:
    if isinstance(annotation, str):
        return annotation.split('[', 1)[0].split('.')[-1] in _SEQUENCE_NAMES
    origin = typing.get_origin(annotation) or annotation
    if not isinstance(origin, type) or issubclass(origin, (str, bytes, abc.Mapping, abc.Set)):
        return False
    return issubclass(origin, _SEQUENCE_ORIGINS)


def _return_annotation(func):
    try:
        hints = typing.get_type_hints(func)
    except (NameError, TypeError):
        hints = getattr(func, '__annotations__', {})
    return hints.get('return', inspect.Signature.empty)


def infer_return_shape(func: Callable, batch: bool, keys: GeneratedKeys) -> ReturnShape:
    """
    Derive the return shape from the return annotation.

    None -> VOID; sequences -> KEYS with keys, COUNTS in batch mode;
    anything else -> KEY with keys, otherwise COUNT.
    """
    annotation = _return_annotation(func)
    wants_keys = keys is not GeneratedKeys.NO_KEYS_RETURNED

    if annotation is inspect.Signature.empty:
        return ReturnShape.KEYS if wants_keys else ReturnShape.COUNT
    if annotation is None or annotation is type(None) or annotation == 'None':
        return ReturnShape.VOID
    if _is_sequence_annotation(annotation):
        if wants_keys:
            return ReturnShape.KEYS
        return ReturnShape.COUNTS if batch else ReturnShape.COUNT
    return ReturnShape.KEY if wants_keys else ReturnShape.COUNT


def _arity(signature: inspect.Signature) -> Optional[int]:
    params = list(signature.parameters.values())[1:]  # drop self
    if any(p.kind in (p.VAR_POSITIONAL, p.VAR_KEYWORD) for p in params):
        return None
    return len(params)


def update(sql: str | None = None, *,
           batch: bool = False,
           keys: GeneratedKeys = GeneratedKeys.NO_KEYS_RETURNED,
           parameter_bindings: Iterable[Any] = (),
           key_columns: Iterable[str] = (),
           returns: ReturnShape | str | None = None):
    """
    Declare a BaseQuery method as an update statement.

    Args:
        sql: statement template (?1, ?{1}, ?{1.member.member})
        batch: run once per element; every argument must be a list or tuple of
            the same length
        keys: how generated keys are returned; not allowed with batch
        parameter_bindings: converters matched by bind position; None or
            TypeMapper keeps the default conversion
        key_columns: key column names for RETURNED_KEYS_COLUMNS_SPECIFIED
        returns: explicit ReturnShape; inferred from the return annotation when omitted

    Raises:
        TemplateSyntaxError, QueryConfigurationError: at decoration time
    """
    def decorator(func):
        name = func.__qualname__
        signature = inspect.signature(func)
        key_mode = GeneratedKeys(keys)
        shape = ReturnShape(returns) if returns is not None else infer_return_shape(func, batch, key_mode)

        spec = BindingSpec.build(
            sql or '',
            batch=batch,
            keys=key_mode,
            returns=shape,
            parameter_bindings=tuple(parameter_bindings),
            key_columns=tuple(key_columns),
            arity=_arity(signature),
            name=name,
        )
        logger.debug(f"Registered update query {name}: {spec.template.source}")

        @functools.wraps(func)
        def wrapper(self, *args, **kwargs):
            bound = signature.bind(self, *args, **kwargs)
            bound.apply_defaults()
            arguments = []
            for param, value in list(bound.arguments.items())[1:]:
                kind = signature.parameters[param].kind
                if kind is inspect.Parameter.VAR_POSITIONAL:
                    arguments.extend(value)
                elif kind is not inspect.Parameter.VAR_KEYWORD:
                    arguments.append(value)
            return execute_update(self.unit, spec, arguments, self.resolver)

        wrapper.spec = spec
        wrapper.invoke = lambda unit, arguments, resolver=None: execute_update(unit, spec, arguments, resolver)
        return wrapper

    return decorator


class BaseQuery:
    """
    Holder of the connection used by @update methods.

    Args:
        client: client dict with 'conn', 'database_type', 'database_name', 'db_lib'
        unit: an ExecutionUnit to use instead of one built from client
        resolver: PathResolver for member lookup; built once from the active
            configuration when omitted
    """

    def __init__(self, client: dict | None = None, unit: ExecutionUnit | None = None,
                 resolver: PathResolver | None = None):
        if client is None and unit is None:
            raise QueryConfigurationError("BaseQuery needs a client or an execution unit")
        self.client = client
        self._unit = unit
        self._resolver = resolver
        self.closed = False

    @property
    def unit(self) -> ExecutionUnit:
        if self.closed:
            raise QueryConfigurationError(f"{type(self).__name__} is closed")
        if self._unit is None:
            self._unit = get_unit(self.client)
        return self._unit

    @property
    def resolver(self) -> PathResolver:
        if self._resolver is None:
            self._resolver = PathResolver(get_config().accessor_convention())
        return self._resolver

    def close(self):
        """Close the underlying connection, if this query holds one."""
        if self.closed:
            return
        self.closed = True
        if self.client and self.client.get('conn') is not None:
            try:
                self.client['conn'].close()
                logger.info(f"Closed {self.client.get('database_type')} connection to '{self.client.get('database_name')}'")
            except Exception as e:
                logger.warning(f"Failed to close connection: {e}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


def get_query(query_class, client=None, unit=None, resolver=None):
    """Instantiate a BaseQuery subclass for client."""
    if not (isinstance(query_class, type) and issubclass(query_class, BaseQuery)):
        raise QueryConfigurationError(f"{query_class!r} is not a BaseQuery subclass")
    return query_class(client, unit=unit, resolver=resolver)
