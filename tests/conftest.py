"""Shared test fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from sui_cli_proxy.config import AppConfig, LoggingConfig, RunnerConfig, SessionConfig, ToolsConfig
from sui_cli_proxy.storage.models import CommandResult


@pytest.fixture
def app_config(tmp_path):
    """Create a test configuration."""
    return AppConfig(
        tools=ToolsConfig(sui="sui", walrus="walrus", extra_paths=[]),
        runner=RunnerConfig(timeout=0, max_output=4096),
        session=SessionConfig(cache_size=8),
        logging=LoggingConfig(level="DEBUG", file=str(tmp_path / "test.log")),
    )


@pytest.fixture
def fake_runner():
    """A ProcessRunner double whose run() returns an empty successful result."""
    runner = MagicMock()
    runner.run = AsyncMock(return_value=CommandResult(stdout="", stderr="", exit_code=0, duration_ms=5))
    return runner
