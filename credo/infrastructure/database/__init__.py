from .async_db import (
    check_database_health,
    create_async_db_and_tables,
    dispose_engine,
    get_async_db,
    get_engine,
    get_session_factory,
)

__all__ = [
    "check_database_health",
    "create_async_db_and_tables",
    "dispose_engine",
    "get_async_db",
    "get_engine",
    "get_session_factory",
]
