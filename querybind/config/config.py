from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Mapping, Dict
from pathlib import Path
import os, json, re
from types import MappingProxyType

from querybind.binding.resolver import AccessorConvention
from querybind.connection.dsn_parts_helper import dsn_to_parts, type_from_dsn
from querybind.errors import QueryConfigurationError

_ENV_RE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def _expand_env_str(v: str) -> str:
    # Expand ${VAR} from os.environ; missing vars become ""
    return _ENV_RE.sub(lambda m: os.environ.get(m.group(1), ""), v)

def _expand_env(obj: Any) -> Any:
    if isinstance(obj, str): return _expand_env_str(obj)
    if isinstance(obj, dict): return {k: _expand_env(v) for k, v in obj.items()}
    if isinstance(obj, list): return [_expand_env(x) for x in obj]
    return obj

def _read_json(path: str | os.PathLike[str]) -> dict[str, Any]:
    p = Path(path).expanduser()
    if not p.exists():
        raise QueryConfigurationError(f"Config file not found: {p}")
    try:
        return json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise QueryConfigurationError(f"Invalid JSON in {p}: {e}") from e

def _to_bool(v: Any, name: str) -> bool:
    if isinstance(v, bool):
        return v
    s = str(v).strip().lower()
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    raise QueryConfigurationError(f"Invalid boolean for {name}: {v!r}")

def _to_int(v: Any, name: str) -> int:
    try:
        return int(v)
    except (TypeError, ValueError) as e:
        raise QueryConfigurationError(f"Invalid integer for {name}: {v!r}") from e

def _to_prefixes(v: Any) -> tuple[str, ...]:
    # "get,is" or ["get", "is"]
    if isinstance(v, str):
        v = [p for p in (s.strip() for s in v.split(",")) if p]
    prefixes = tuple(v)
    if not prefixes or not all(isinstance(p, str) and p.isidentifier() for p in prefixes):
        raise QueryConfigurationError(f"Invalid accessor prefixes: {v!r}")
    return prefixes


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    # DSN-first; parts are optional
    type: str
    dsn: str | None = None
    host: str | None = None
    user: str | None = None
    password: str | None = field(default=None, repr=False)
    port: int | None = None
    database: str | None = None
    options: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DatabaseConfig":
        d = _expand_env(dict(data))  # expand ${ENV} inside JSON strings
        dsn = d.get("dsn")
        if dsn:
            t = (d.get("type") or type_from_dsn(dsn) or "")
            if not t:
                raise QueryConfigurationError("Could not infer database type from DSN; set 'type'.")

            parts = dsn_to_parts(dsn)
            # explicit options take precedence over DSN query parameters
            merged_options = {**parts.get("query", {}), **(d.get("options", {}) or {})}

            return cls(
                type=t.split("+", 1)[0],
                dsn=dsn,
                host=parts.get("host"),
                user=parts.get("user"),
                password=parts.get("password"),
                port=parts.get("port"),
                database=parts.get("database"),
                options=merged_options,
            )

        db_type = d.get("type")
        if not db_type:
            raise QueryConfigurationError("Either 'dsn' or 'type' is required for a database entry.")

        return cls(
            type=db_type,
            dsn=dsn,
            host=d.get("host"),
            user=d.get("user"),
            password=d.get("password"),
            port=d.get("port"),
            database=d.get("database"),
            options=d.get("options", {}) or {},
        )


@dataclass(frozen=True, slots=True)
class QuerybindConfig:
    _databases: Dict[str, DatabaseConfig] = field(default_factory=dict)
    default_db: str | None = None
    connect_timeout: int = 40
    accessor_prefixes: tuple[str, ...] = ("get", "is")
    accessor_snake_case: bool = True
    log_bound_values: bool = False

    def require(self, name: str | None = None) -> DatabaseConfig:
        dbmap = self._databases
        if not dbmap:
            raise QueryConfigurationError("No databases configured")
        key = name or self.default_db or next(iter(dbmap))
        try:
            return dbmap[key]
        except KeyError as e:
            raise QueryConfigurationError(f"Unknown database key: {key!r}") from e

    def databases(self) -> Mapping[str, DatabaseConfig]:
        """Read-only view of all configured databases."""
        return MappingProxyType(self._databases)

    def accessor_convention(self) -> AccessorConvention:
        return AccessorConvention(prefixes=self.accessor_prefixes, snake_case=self.accessor_snake_case)

    @classmethod
    def from_files(cls, config_path: str | None = None, dbinfos_path: str | None = None) -> "QuerybindConfig":
        """
        Reads:
          - config_path JSON: may contain {"default_db": "...", "databases": {...}, tuning fields}
          - dbinfos_path JSON: plain {"name": {...}} map of databases
        Merge rule: dbinfos first, then config['databases'] overrides on key conflicts.
        Supports per-entry 'dsn' OR 'type'+parts in both files. Expands ${ENV_VAR}.
        """
        cfg: dict[str, Any] = {}
        if config_path:
            cfg = _read_json(config_path)

        dbs_map: dict[str, Any] = {}
        if dbinfos_path:
            dbs_map = _read_json(dbinfos_path)

        merged = {}
        merged.update(dbs_map or {})
        merged.update((cfg.get("databases") or {}))
        if not isinstance(merged, dict):
            raise QueryConfigurationError("Database configurations must be a JSON object")

        parsed = {name: DatabaseConfig.from_dict(d) for name, d in merged.items()}

        return cls(
            _databases=parsed,
            default_db=cfg.get("default_db"),
            connect_timeout=_to_int(cfg.get("connect_timeout", 40), "connect_timeout"),
            accessor_prefixes=_to_prefixes(cfg.get("accessor_prefixes", ("get", "is"))),
            accessor_snake_case=_to_bool(cfg.get("accessor_snake_case", True), "accessor_snake_case"),
            log_bound_values=_to_bool(cfg.get("log_bound_values", False), "log_bound_values"),
        )

    @classmethod
    def from_env(cls, prefix: str = "QB_") -> "QuerybindConfig":
        """
        Env contract (all optional):
          - {P}DATABASES_JSON : inline JSON object of databases (supports ${VAR} inside)
          - {P}DBINFOS_PATH   : path to JSON file with databases
          - Single-DB (flat): {P}DB_KEY plus {P}DB_DSN
          - Tuning: {P}DB_DEFAULT, {P}CONNECT_TIMEOUT, {P}ACCESSOR_PREFIXES ("get,is"),
            {P}ACCESSOR_SNAKE_CASE, {P}LOG_BOUND_VALUES
        Precedence: DATABASES_JSON > DBINFOS_PATH; the single DB is merged on top.
        """
        get = os.getenv

        dbs_map: dict[str, Any] = {}
        inline = get(prefix + "DATABASES_JSON")
        if inline:
            try:
                dbs_map = _expand_env(json.loads(inline))
            except json.JSONDecodeError as e:
                raise QueryConfigurationError(f"{prefix}DATABASES_JSON is not valid JSON: {e}") from e

        if not dbs_map:
            dbinfos_path = get(prefix + "DBINFOS_PATH")
            if dbinfos_path:
                dbs_map = _expand_env(_read_json(dbinfos_path))

        key = get(prefix + "DB_KEY")
        dsn = get(prefix + "DB_DSN")
        if key and dsn:
            dbs_map = {**dbs_map, key: {"dsn": _expand_env_str(dsn)}}

        parsed = {name: DatabaseConfig.from_dict(cfg) for name, cfg in dbs_map.items()}

        return cls(
            _databases=parsed,
            default_db=get(prefix + "DB_DEFAULT") or (key if key in parsed else None),
            connect_timeout=_to_int(get(prefix + "CONNECT_TIMEOUT", "40"), prefix + "CONNECT_TIMEOUT"),
            accessor_prefixes=_to_prefixes(get(prefix + "ACCESSOR_PREFIXES", "get,is")),
            accessor_snake_case=_to_bool(get(prefix + "ACCESSOR_SNAKE_CASE", "true"), prefix + "ACCESSOR_SNAKE_CASE"),
            log_bound_values=_to_bool(get(prefix + "LOG_BOUND_VALUES", "false"), prefix + "LOG_BOUND_VALUES"),
        )
