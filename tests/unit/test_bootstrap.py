from __future__ import annotations

from typing import Any, ClassVar

import pytest

from bungeesuite.config import Settings
from bungeesuite.database import bootstrap
from bungeesuite.database.errors import ConnectionFailure, DependencyUnavailable


class _FlakyManager:
    failures_left: ClassVar[int] = 0
    error: ClassVar[Exception] = ConnectionFailure("server not up yet")
    attempts: ClassVar[list[Settings]] = []

    @classmethod
    def from_settings(cls, settings: Settings) -> Any:
        cls.attempts.append(settings)
        if cls.failures_left > 0:
            cls.failures_left -= 1
            raise cls.error
        return cls()


@pytest.fixture
def flaky(monkeypatch: pytest.MonkeyPatch) -> type[_FlakyManager]:
    _FlakyManager.failures_left = 0
    _FlakyManager.error = ConnectionFailure("server not up yet")
    _FlakyManager.attempts = []
    monkeypatch.setattr(bootstrap, "ConnectionManager", _FlakyManager)
    return _FlakyManager


def test_create_manager_uses_given_settings(flaky: type[_FlakyManager]) -> None:
    settings = Settings(db_host="proxy-db")

    manager = bootstrap.create_manager(settings)

    assert isinstance(manager, _FlakyManager)
    assert flaky.attempts == [settings]


def test_wait_for_manager_retries_connection_failures(flaky: type[_FlakyManager]) -> None:
    flaky.failures_left = 2

    manager = bootstrap.wait_for_manager(Settings(), attempts=3, min_wait=0, max_wait=0)

    assert isinstance(manager, _FlakyManager)
    assert len(flaky.attempts) == 3


def test_wait_for_manager_gives_up_after_attempts(flaky: type[_FlakyManager]) -> None:
    flaky.failures_left = 5

    with pytest.raises(ConnectionFailure):
        bootstrap.wait_for_manager(Settings(), attempts=2, min_wait=0, max_wait=0)

    assert len(flaky.attempts) == 2


def test_wait_for_manager_does_not_retry_missing_driver(flaky: type[_FlakyManager]) -> None:
    flaky.failures_left = 5
    flaky.error = DependencyUnavailable("no driver")

    with pytest.raises(DependencyUnavailable):
        bootstrap.wait_for_manager(Settings(), attempts=5, min_wait=0, max_wait=0)

    assert len(flaky.attempts) == 1
