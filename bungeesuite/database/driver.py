"""
Driver resolution for the database access layer.

The driver modules are imported when a manager is constructed rather than when
this package is imported, so that a missing driver surfaces as a typed
DependencyUnavailable error at startup, before any network I/O.
"""

from __future__ import annotations

import importlib
from typing import Any, NamedTuple, Tuple, Type

from bungeesuite.database.errors import DependencyUnavailable
from bungeesuite.utils.logging import get_logger

log = get_logger(__name__)

DRIVER_MODULES: Tuple[str, str] = ("psycopg", "psycopg_pool")


class Driver(NamedTuple):
    """Handles onto the loaded driver that the manager needs."""

    error: Type[BaseException]
    pool_class: Any


def load_driver() -> Driver:
    """
    Import the PostgreSQL driver and its pool implementation.

    Returns
    -------
    Driver
        The driver's base error class and the pool class.

    Raises
    ------
    DependencyUnavailable
        If either module cannot be imported.
    """
    driver_name, pool_name = DRIVER_MODULES
    try:
        driver = importlib.import_module(driver_name)
        pool = importlib.import_module(pool_name)
    except ImportError as exc:
        log.error("Database driver is unavailable", extra={"modules": list(DRIVER_MODULES)})
        raise DependencyUnavailable(
            f"Could not load database driver modules {', '.join(DRIVER_MODULES)}", exc
        ) from exc
    return Driver(error=driver.Error, pool_class=pool.ConnectionPool)


__all__ = ["DRIVER_MODULES", "Driver", "load_driver"]
