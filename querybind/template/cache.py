"""
Process-wide template cache.

Templates are immutable, so entries are never invalidated; they live until the
process exits. clear_templates() exists for tests.
"""
from functools import lru_cache

from querybind.template.parser import Template, parse


@lru_cache(maxsize=None)
def get_template(sql: str) -> Template:
    """Return the parsed Template for sql, parsing it on first use."""
    return parse(sql)


def clear_templates() -> None:
    get_template.cache_clear()
