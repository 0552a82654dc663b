"""Tests for the process entry point's configuration handling."""

import pytest
from loguru import logger

import main
from config.settings import get_settings
from exceptions.base import ConfigurationError
from conftest import TARGET, TOKEN


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("BOT_TOKEN", TOKEN)
    monkeypatch.setenv("MONITOR_TARGET_HOST", TARGET)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def error_lines():
    lines = []
    sink_id = logger.add(lambda message: lines.append(str(message)), level="ERROR", format="{message}")
    yield lines
    try:
        logger.remove(sink_id)
    except ValueError:
        pass  # setup_logging() already removed it


def test_invalid_setting_becomes_configuration_error(monkeypatch):
    monkeypatch.setenv("MONITOR_INTERVAL", "-1")

    with pytest.raises(ConfigurationError) as exc_info:
        main.load_settings()

    assert any("interval" in field for field in exc_info.value.details["fields"])


async def test_invalid_log_level_exits_cleanly(monkeypatch, error_lines):
    monkeypatch.setenv("LOG_LEVEL", "bogus")

    assert await main.main() == 1
    assert any("ConfigurationError" in line for line in error_lines)
