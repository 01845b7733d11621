"""
Shared fixtures.

Every test runs with a clean environment (no ILLUSIONIST_* / LOG_* values)
inside a temporary working directory, and with the config and logger
singletons reset, so .env files and earlier tests never leak in.
"""

import os
from datetime import datetime, timezone

import pytest

from illusionist.config.config import Config
from illusionist.core.schedule import DefaultEquitiesScheduleFactory
from illusionist.core.types import BarAnchor, BarInterval
from illusionist.utils import logger as logger_module


_ENV_PREFIXES = ("ILLUSIONIST_", "LOG_")


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Clear config env vars, chdir to tmp_path and reset singletons."""
    saved_env = dict(os.environ)
    for name in list(os.environ):
        if name.startswith(_ENV_PREFIXES):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    Config._instance = None

    yield

    Config._instance = None
    logger_module._logger = None
    logger_module.IllusionistLogger._instance = None
    logger_module.IllusionistLogger._initialized = False
    # load_dotenv writes straight to os.environ
    os.environ.clear()
    os.environ.update(saved_env)


@pytest.fixture
def hourly():
    return BarInterval.hours(1)


@pytest.fixture
def equities_hourly_schedule(hourly):
    return DefaultEquitiesScheduleFactory().get_schedule(hourly)


@pytest.fixture
def new_year_anchor():
    """Anchor at 100 on 2025-01-01 09:00 UTC."""
    return BarAnchor(datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc), 100)
