"""
Database module for socialgraph
"""

from .connection import (
    check_database_connection,
    dispose_database,
    get_async_engine,
    get_async_session,
    init_database,
)

__all__ = [
    "check_database_connection",
    "dispose_database",
    "get_async_engine",
    "get_async_session",
    "init_database",
]
