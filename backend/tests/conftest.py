"""Root conftest — shared test configuration."""

import os

import pytest

from userhub.config import Settings

# Ensure tests never reach the real board API or pick up a deployment key
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.pop("MONDAY_API_KEY", None)


@pytest.fixture
def settings() -> Settings:
    """Fast, isolated settings: no store latency, no notifier delay."""
    return Settings(
        _env_file=None,
        environment="test",
        api_key=None,
        require_api_key=False,
        store_latency_min_ms=0,
        store_latency_max_ms=0,
        notifier_delay_ms=0,
        log_format="text",
    )
