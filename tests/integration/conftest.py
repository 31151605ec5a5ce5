"""Fixtures for CLI integration tests."""

from __future__ import annotations

import pytest

from wp_manager.config.constants import ENV_LOG_LEVEL


@pytest.fixture(autouse=True)
def quiet_logs(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep warning logs off the captured output so JSON stays parseable."""
    monkeypatch.setenv(ENV_LOG_LEVEL, "ERROR")
