"""Tests for formatting helpers and the exception formatting."""

from datetime import datetime, timezone

import pytest

from exceptions.base import ConfigurationError
from exceptions.delivery import DeliveryError
from exceptions.monitoring import HostResolutionError
from utils.helpers import StringHelper, TimeHelper


@pytest.mark.parametrize("seconds, expected", [
    (0, "0s"),
    (-5, "0s"),
    (59, "59s"),
    (3600, "1h"),
    (93784, "1d 2h 3m 4s"),
])
def test_seconds_to_human_readable(seconds, expected):
    assert TimeHelper.seconds_to_human_readable(seconds) == expected


def test_format_datetime():
    assert TimeHelper.format_datetime(None) is None
    moment = datetime(2024, 5, 1, 12, 30, 0, tzinfo=timezone.utc)
    assert TimeHelper.format_datetime(moment) == "2024-05-01 12:30:00"


def test_truncate_and_escape():
    assert StringHelper.truncate("abcdef", 5) == "ab..."
    assert StringHelper.truncate("abc", 5) == "abc"
    assert StringHelper.escape_html("<b>&") == "&lt;b&gt;&amp;"


def test_delivery_error_wraps_platform_error():
    error = DeliveryError.from_exception(RuntimeError("Forbidden"), recipient_id="7")

    assert error.error_code == 5000
    assert error.recipient_id == "7"
    assert isinstance(error.cause, RuntimeError)
    assert "recipient_id=7" in error.log_format()
    assert str(error) == "[5000] Forbidden"


def test_probe_error_details():
    error = HostResolutionError("Cannot resolve x", host="x", method="icmp")
    assert error.details == {"host": "x", "method": "icmp"}
    assert error.recoverable is True


def test_configuration_error_lists_fields():
    error = ConfigurationError("bad config", fields=["bot.token"])
    assert error.details["fields"] == ["bot.token"]
    assert error.recoverable is False
