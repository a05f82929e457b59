from __future__ import annotations
from typing import Any, Dict, List
from urllib.parse import urlparse, parse_qs, unquote

def _scheme_base(s: str) -> str:
    # e.g., "postgresql+psycopg2" -> "postgresql"
    return s.split("+", 1)[0].lower()

def _flatten_qs(qs: Dict[str, List[str]]) -> Dict[str, Any]:
    # Turn {"a": ["1"], "b": ["x","y"]} -> {"a": "1", "b": ["x","y"]}
    return {k: (v[0] if len(v) == 1 else v) for k, v in qs.items()}


def dsn_to_parts(dsn: str) -> Dict[str, Any]:
    """
    Parse a DSN string into parts. Returns a dict with keys:
      type, user?, password?, host?, port?, database?, query? (dict)
    Handles: generic SQL DSNs and sqlite.
    """
    if not isinstance(dsn, str) or "://" not in dsn:
        # Treat bare path as sqlite database
        return {"type": "sqlite", "database": dsn, "query": {}}

    u = urlparse(dsn)
    scheme = _scheme_base(u.scheme)
    out: Dict[str, Any] = {"type": scheme}
    out["query"] = _flatten_qs(parse_qs(u.query)) if u.query else {}

    if u.username is not None:
        out["user"] = unquote(u.username)
    if u.password is not None:
        out["password"] = unquote(u.password)

    if scheme == "sqlite":
        # sqlite:///relative.db -> "relative.db", sqlite:////abs/x.db -> "/abs/x.db"
        path = u.path[1:] if u.path.startswith("/") else u.path
        out["database"] = path or ":memory:"
        return out

    out["host"] = u.hostname or None
    out["port"] = int(u.port) if u.port is not None else None
    out["database"] = u.path.lstrip("/") or None
    return out


def type_from_dsn(dsn: str) -> str | None:
    if "://" not in (dsn or ""):
        return None
    scheme = urlparse(dsn).scheme
    return _scheme_base(scheme) if scheme else None
