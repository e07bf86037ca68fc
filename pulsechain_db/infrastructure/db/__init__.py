from .config import (DEFAULT_ADMIN_DB_NAME, DEFAULT_DB_NAME, ConfigurationError,
                     DatabaseSettings, load_config, load_env_file,
                     load_settings, resolve_database_name)
from .connection import (DatabaseClient, DatabaseError, QueryResult,
                         create_database_statement, get_client)

__all__ = [
    "DEFAULT_ADMIN_DB_NAME",
    "DEFAULT_DB_NAME",
    "ConfigurationError",
    "DatabaseClient",
    "DatabaseError",
    "DatabaseSettings",
    "QueryResult",
    "create_database_statement",
    "get_client",
    "load_config",
    "load_env_file",
    "load_settings",
    "resolve_database_name",
]
