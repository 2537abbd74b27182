"""
bungeesuite - pooled database access for the BungeeSuite proxy plugin.

This package provides the plugin's database layer:

- A connection pool created and validated once at startup (fail-fast)
- Parameterized updates and queries with positional `?` placeholders
- Scoped and caller-managed connection leases
- Typed errors carrying the underlying driver exception

Configuration comes from environment variables through pydantic-settings, and
a small Typer CLI is available for connectivity checks and ad-hoc statements.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from bungeesuite.channels import PROXY_TO_SERVER_CHANNEL, SERVER_TO_PROXY_CHANNEL
from bungeesuite.config import Settings, get_settings
from bungeesuite.database import (
    SQL_NULL,
    ConnectionFailure,
    ConnectionManager,
    DatabaseError,
    DependencyUnavailable,
    OperationFailure,
    QueryFailure,
    create_manager,
    wait_for_manager,
)
from bungeesuite.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Database
    "ConnectionManager",
    "SQL_NULL",
    "create_manager",
    "wait_for_manager",
    # Errors
    "DatabaseError",
    "DependencyUnavailable",
    "OperationFailure",
    "ConnectionFailure",
    "QueryFailure",
    # Channels
    "PROXY_TO_SERVER_CHANNEL",
    "SERVER_TO_PROXY_CHANNEL",
    # Logging
    "configure_logging",
    "get_logger",
]
