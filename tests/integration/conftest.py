"""
Fixtures for tests that run against a real PostgreSQL server.
"""

from __future__ import annotations

from typing import Generator

import pytest

from bungeesuite.config import Settings
from bungeesuite.database import ConnectionManager


@pytest.fixture(scope="session")
def manager(test_settings: Settings, db_connection_available: bool) -> ConnectionManager:
    """
    Session-wide manager. Skips tests if the database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")
    return ConnectionManager.from_settings(test_settings)


@pytest.fixture(scope="function")
def players_table(manager: ConnectionManager) -> Generator[str, None, None]:
    """
    Create an empty `bs_test_players` table for the duration of one test.
    """
    manager.update("DROP TABLE IF EXISTS bs_test_players")
    manager.update(
        "CREATE TABLE bs_test_players ("
        " id INTEGER PRIMARY KEY,"
        " name TEXT,"
        " online BOOLEAN NOT NULL DEFAULT FALSE)"
    )
    yield "bs_test_players"
    manager.update("DROP TABLE IF EXISTS bs_test_players")
