# =============================================================================
# querybind Runtime Config Loader
#
# - Config in the environment: read OS env (QB_*) directly. This library never
#   loads .env files; the application may do that if it wants.
# - No I/O at import time: everything is lazy via get_config().
# - ContextVar keeps per-context overrides (configure / using_config / using_db).
# - reload_default() clears caches to re-read env/files.
#
# Default precedence (QB_SOURCE=auto):
#   1) If QB_CONFIG_PATH or QB_DBINFOS_PATH is set -> load from files
#   2) Else if any QB_* vars exist -> load from environment
#   3) Else if ./config/querybind.config.json exists -> load it
#   4) Else -> built-in defaults, no databases
#
# QB_SOURCE=files / QB_SOURCE=env force one source.
# =============================================================================
from __future__ import annotations
import os
from contextlib import contextmanager
from contextvars import ContextVar
from functools import lru_cache
from pathlib import Path
from typing import Optional, Tuple

from .config import QuerybindConfig, DatabaseConfig

# Allow overriding the env prefix if you embed multiple copies/configs
_PREFIX = os.getenv("QB_PREFIX", "QB_")

# Context-scoped overrides (thread/async safe)
_current_cfg: ContextVar[Optional[QuerybindConfig]] = ContextVar("querybind_config", default=None)
_current_dbkey: ContextVar[Optional[str]] = ContextVar("querybind_dbkey", default=None)

def _env_fingerprint(prefix: str = _PREFIX) -> Tuple[Tuple[str, str], ...]:
    """Stable key for caching: all QB_* envs sorted."""
    return tuple(sorted(
        (k, os.environ.get(k, ""))
        for k in os.environ.keys()
        if k.startswith(prefix)
    ))

def _has_any_env(prefix: str = _PREFIX) -> bool:
    return any(k.startswith(prefix) and k != f"{prefix}SOURCE" for k in os.environ.keys())


@lru_cache(maxsize=8)
def _load_default_cached(_fp: Tuple[Tuple[str, str], ...]) -> QuerybindConfig:
    source = os.getenv(f"{_PREFIX}SOURCE", "auto").lower()
    cfg_path = os.getenv(f"{_PREFIX}CONFIG_PATH")
    dbinfos_path = os.getenv(f"{_PREFIX}DBINFOS_PATH")

    # Forced modes
    if source == "env":
        return QuerybindConfig.from_env(prefix=_PREFIX)
    if source == "files":
        return QuerybindConfig.from_files(cfg_path, dbinfos_path)

    # --- auto mode ---
    if cfg_path or dbinfos_path:
        return QuerybindConfig.from_files(cfg_path, dbinfos_path)

    if _has_any_env(_PREFIX):
        return QuerybindConfig.from_env(prefix=_PREFIX)

    default_cfg = Path.cwd() / "config" / "querybind.config.json"
    if default_cfg.exists():
        return QuerybindConfig.from_files(str(default_cfg))

    return QuerybindConfig()

def _load_default() -> QuerybindConfig:
    # include env fingerprint as cache key to auto-refresh when env changes
    return _load_default_cached(_env_fingerprint())

def get_config() -> QuerybindConfig:
    """Active config (context override > lazily loaded default)."""
    return _current_cfg.get() or _load_default()

def require_db(name: str | None = None) -> DatabaseConfig:
    """Resolve a DatabaseConfig by name or current context default."""
    key = name or _current_dbkey.get()
    return get_config().require(key)

def configure(cfg: QuerybindConfig | None) -> None:
    """Set an override for this context (tests/embedded apps). None clears it."""
    _current_cfg.set(cfg)

def use_db(key: str | None) -> None:
    """Set a context default DB key (per async task/request)."""
    _current_dbkey.set(key)

def reload_default() -> None:
    """Drop cached auto-loaded config (e.g., after mutating os.environ)."""
    _load_default_cached.cache_clear()

@contextmanager
def using_config(cfg: QuerybindConfig):
    tok = _current_cfg.set(cfg)
    try:
        yield
    finally:
        _current_cfg.reset(tok)

@contextmanager
def using_db(key: str):
    tok = _current_dbkey.set(key)
    try:
        yield
    finally:
        _current_dbkey.reset(tok)
