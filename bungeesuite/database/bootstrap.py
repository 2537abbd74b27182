"""
Settings-driven construction of a ConnectionManager.

The manager itself never retries. Applications that start alongside their
database server (containers, CI) can use `wait_for_manager`, which retries
construction with exponential backoff using tenacity. A missing driver is not a
transient condition and is never retried.
"""

from __future__ import annotations

import logging
from typing import Optional

from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from bungeesuite.config import Settings, get_settings
from bungeesuite.database.errors import ConnectionFailure
from bungeesuite.database.manager import ConnectionManager
from bungeesuite.utils.logging import get_logger

log = get_logger(__name__)


def create_manager(settings: Optional[Settings] = None) -> ConnectionManager:
    """
    Construct a manager for the configured database target.

    Parameters
    ----------
    settings : Optional[Settings]
        Settings to use. Defaults to the cached application settings.
    """
    return ConnectionManager.from_settings(settings or get_settings())


def wait_for_manager(
    settings: Optional[Settings] = None,
    attempts: int = 5,
    min_wait: float = 1.0,
    max_wait: float = 10.0,
) -> ConnectionManager:
    """
    Construct a manager, retrying while the server cannot be reached.

    Parameters
    ----------
    settings : Optional[Settings]
        Settings to use. Defaults to the cached application settings.
    attempts : int
        Total number of construction attempts.
    min_wait, max_wait : float
        Bounds, in seconds, of the exponential backoff between attempts.

    Returns
    -------
    ConnectionManager
        A validated manager.

    Raises
    ------
    ConnectionFailure
        If the last attempt still cannot reach the server.
    DependencyUnavailable
        Immediately, if the driver cannot be loaded.
    """
    retrying = Retrying(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=1, min=min_wait, max=max_wait),
        retry=retry_if_exception_type(ConnectionFailure),
        before_sleep=before_sleep_log(log, logging.WARNING),
        reraise=True,
    )
    return retrying(create_manager, settings)


__all__ = ["create_manager", "wait_for_manager"]
