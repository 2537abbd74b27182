"""
Database access layer for bungeesuite.

Owns the connection pool and exposes the parameterized query/update API.
Keep this layer focused on I/O and resource management, decoupled from the
plugin's command and messaging logic.
"""

from bungeesuite.database.bootstrap import create_manager, wait_for_manager
from bungeesuite.database.errors import (
    ConnectionFailure,
    DatabaseError,
    DependencyUnavailable,
    OperationFailure,
    QueryFailure,
)
from bungeesuite.database.manager import SQL_NULL, ConnectionManager
from bungeesuite.database.models import PoolConfiguration

__all__ = [
    "ConnectionManager",
    "PoolConfiguration",
    "SQL_NULL",
    "create_manager",
    "wait_for_manager",
    "DatabaseError",
    "DependencyUnavailable",
    "OperationFailure",
    "ConnectionFailure",
    "QueryFailure",
]
