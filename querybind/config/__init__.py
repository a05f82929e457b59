from querybind.config.config import DatabaseConfig, QuerybindConfig
from querybind.config.runtime import (
    configure,
    get_config,
    reload_default,
    require_db,
    use_db,
    using_config,
    using_db,
)

__all__ = [
    'DatabaseConfig',
    'QuerybindConfig',
    'configure',
    'get_config',
    'reload_default',
    'require_db',
    'use_db',
    'using_config',
    'using_db',
]
