"""Tests for the pydantic-settings configuration layer."""

import pytest
from pydantic import ValidationError

from config.constants import ProbeMethod, RecipientMode
from config.settings import BotSettings, MonitorSettings, Settings, get_settings
from conftest import TARGET, TOKEN


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Run every test from an empty directory so no .env file leaks in."""
    monkeypatch.chdir(tmp_path)
    for name in ("BOT_TOKEN", "MONITOR_TARGET_HOST", "MONITOR_INTERVAL",
                 "MONITOR_PROBE_METHOD", "MONITOR_RECIPIENT_MODE"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestBotSettings:
    def test_valid_token(self):
        settings = BotSettings(token=TOKEN)
        assert settings.token.get_secret_value() == TOKEN
        assert settings.parse_mode == "HTML"

    def test_token_is_stripped(self):
        assert BotSettings(token=f"  {TOKEN} ").token.get_secret_value() == TOKEN

    @pytest.mark.parametrize("token", ["", "not-a-token", "123:short", "abc:" + "x" * 30])
    def test_malformed_token_is_rejected(self, token):
        with pytest.raises(ValidationError):
            BotSettings(token=token)

    def test_token_is_required(self):
        with pytest.raises(ValidationError):
            BotSettings()


class TestMonitorSettings:
    def test_defaults(self):
        settings = MonitorSettings(target_host=TARGET)
        assert settings.interval == 5.0
        assert settings.probe_timeout_ms == 5000
        assert settings.probe_timeout == 5.0
        assert settings.probe_method is ProbeMethod.ICMP
        assert settings.recipient_mode is RecipientMode.MULTI

    def test_target_is_stripped(self):
        assert MonitorSettings(target_host="  10.0.0.1 ").target_host == "10.0.0.1"

    @pytest.mark.parametrize("host", ["", "   ", "http://example.org", "example.org/path", "a b"])
    def test_invalid_target_is_rejected(self, host):
        with pytest.raises(ValidationError):
            MonitorSettings(target_host=host)

    @pytest.mark.parametrize("field, value", [
        ("interval", 0),
        ("probe_timeout_ms", 10),
        ("tcp_port", 70000),
    ])
    def test_out_of_range_values(self, field, value):
        with pytest.raises(ValidationError):
            MonitorSettings(target_host=TARGET, **{field: value})

    def test_settings_are_frozen(self):
        settings = MonitorSettings(target_host=TARGET)
        with pytest.raises(ValidationError):
            settings.interval = 1


class TestEnvironmentLoading:
    def test_settings_come_from_environment(self, monkeypatch):
        monkeypatch.setenv("BOT_TOKEN", TOKEN)
        monkeypatch.setenv("MONITOR_TARGET_HOST", TARGET)
        monkeypatch.setenv("MONITOR_INTERVAL", "2.5")
        monkeypatch.setenv("MONITOR_PROBE_METHOD", "tcp")
        monkeypatch.setenv("MONITOR_RECIPIENT_MODE", "single")

        settings = get_settings()

        assert settings.monitor.target_host == TARGET
        assert settings.monitor.interval == 2.5
        assert settings.monitor.probe_method is ProbeMethod.TCP
        assert settings.monitor.recipient_mode is RecipientMode.SINGLE
        assert get_settings() is settings

    def test_env_file_is_read(self, tmp_path):
        (tmp_path / ".env").write_text(
            f"BOT_TOKEN={TOKEN}\nMONITOR_TARGET_HOST={TARGET}\n",
            encoding="utf-8",
        )
        assert Settings().monitor.target_host == TARGET

    def test_missing_target_fails(self, monkeypatch):
        monkeypatch.setenv("BOT_TOKEN", TOKEN)
        with pytest.raises(ValidationError):
            Settings()

    def test_to_dict_hides_token(self, monkeypatch):
        monkeypatch.setenv("BOT_TOKEN", TOKEN)
        monkeypatch.setenv("MONITOR_TARGET_HOST", TARGET)
        data = Settings().to_dict()
        assert "token" not in data["bot"]
        assert data["monitor"]["target_host"] == TARGET
