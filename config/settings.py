"""
Settings Module for Host Watch Bot

All configuration comes from environment variables or a .env file and is
validated once at startup. Each section has its own prefix:

    BOT_      Telegram token and polling
    MONITOR_  target host, probe method, interval, recipients
    LOG_      loguru sinks
    HEALTH_   optional aiohttp health endpoint
"""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict
from enum import Enum

from pydantic import (
    Field,
    SecretStr,
    field_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from config.constants import Defaults, ProbeMethod, RecipientMode


class LogLevel(str, Enum):
    """Levels accepted by LOG_LEVEL."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class BaseSettingsConfig(BaseSettings):
    """Shared model config: .env support, unknown keys ignored, immutable."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
        frozen=True
    )


class BotSettings(BaseSettingsConfig):
    """
    Telegram side of the bot (BOT_*)

    Only the token is required.
    """

    model_config = SettingsConfigDict(
        env_prefix="BOT_",
        env_file=".env",
        extra="ignore",
        frozen=True
    )

    token: SecretStr = Field(
        ...,  # Required
        description="Telegram Bot API token from @BotFather"
    )
    name: str = Field(
        default="Host Watch Bot",
        min_length=1,
        max_length=64,
        description="Name shown in the startup banner and logs"
    )

    # Message settings
    parse_mode: str = Field(
        default="HTML",
        description="parse_mode applied to every outgoing message"
    )

    # Polling settings
    polling_timeout: int = Field(
        default=30,
        ge=1,
        le=60,
        description="Long polling timeout in seconds"
    )
    drop_pending_updates: bool = Field(
        default=True,
        description="Skip commands that arrived while the bot was offline"
    )

    @field_validator("token")
    @classmethod
    def validate_token(cls, v: SecretStr) -> SecretStr:
        """Validate the shape of a Telegram bot token."""
        token = v.get_secret_value().strip()

        if not re.fullmatch(r"\d+:[A-Za-z0-9_-]{20,}", token):
            raise ValueError(
                "Invalid bot token format. Expected '<bot_id>:<secret>'"
            )

        return SecretStr(token)


class MonitorSettings(BaseSettingsConfig):
    """
    Reachability Monitoring Settings

    Describes the single target host, how it is probed and who hears
    about changes in its reachability.
    """

    model_config = SettingsConfigDict(
        env_prefix="MONITOR_",
        env_file=".env",
        extra="ignore",
        frozen=True
    )

    target_host: str = Field(
        ...,  # Required
        min_length=1,
        max_length=253,
        description="Host name or IP address to watch"
    )

    # Timing
    interval: float = Field(
        default=Defaults.CHECK_INTERVAL,
        gt=0,
        le=3600,
        description="Seconds between periodic probes"
    )
    probe_timeout_ms: int = Field(
        default=Defaults.PROBE_TIMEOUT_MS,
        ge=100,
        le=60000,
        description="Timeout of a single probe in milliseconds"
    )

    # Probe method
    probe_method: ProbeMethod = Field(
        default=ProbeMethod.ICMP,
        description="How reachability is checked: icmp or tcp"
    )
    tcp_port: int = Field(
        default=Defaults.TCP_PORT,
        ge=1,
        le=65535,
        description="Port used by the tcp probe method"
    )
    ping_binary: str = Field(
        default="ping",
        min_length=1,
        description="Executable used by the icmp probe method"
    )

    # Addressing
    recipient_mode: RecipientMode = Field(
        default=RecipientMode.MULTI,
        description="multi: every sender gets alerts; single: last sender only"
    )

    @field_validator("target_host")
    @classmethod
    def validate_target_host(cls, v: str) -> str:
        """Normalize the target host and reject values with a scheme or path."""
        v = v.strip()
        if not v:
            raise ValueError("Target host must not be empty")
        if "://" in v or "/" in v or " " in v:
            raise ValueError(
                f"Target host must be a bare host name or IP address, got {v!r}"
            )
        return v

    @property
    def probe_timeout(self) -> float:
        """Probe timeout in seconds."""
        return self.probe_timeout_ms / 1000


class LoggingSettings(BaseSettingsConfig):
    """
    Logging sinks (LOG_*)

    Controls the loguru sinks installed by utils.logger.setup_logging.
    """

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        extra="ignore",
        frozen=True
    )

    level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Minimum log level"
    )

    # Console
    console_enabled: bool = Field(
        default=True,
        description="Log to stdout"
    )
    colorize: bool = Field(
        default=True,
        description="Colorize console output"
    )

    # Files
    file_enabled: bool = Field(
        default=False,
        description="Also log to a rotating file"
    )
    file_path: Path = Field(
        default=Path("logs/host_watch.log"),
        description="Path of the main log file"
    )
    error_file_path: Path = Field(
        default=Path("logs/errors.log"),
        description="Path of the error-only log file"
    )
    file_rotation: str = Field(
        default="10 MB",
        description="Rotate the log file when it reaches this size"
    )
    file_retention: str = Field(
        default="7 days",
        description="How long rotated files are kept"
    )
    json_enabled: bool = Field(
        default=False,
        description="Serialize file records as JSON"
    )


class HealthSettings(BaseSettingsConfig):
    """
    Health Endpoint Settings

    An optional aiohttp endpoint that reports whether the process is alive
    and what the monitor currently believes about the target.
    """

    model_config = SettingsConfigDict(
        env_prefix="HEALTH_",
        env_file=".env",
        extra="ignore",
        frozen=True
    )

    enabled: bool = Field(
        default=False,
        description="Serve the health endpoint"
    )
    host: str = Field(
        default="0.0.0.0",
        description="Interface to bind"
    )
    port: int = Field(
        default=8080,
        ge=1,
        le=65535,
        description="Port to bind"
    )


class Settings(BaseSettingsConfig):
    """
    Root settings object.

    Every section reads its own env prefix; this class only adds the
    process-wide switches.
    """

    debug: bool = Field(
        default=False,
        description="Force DEBUG logging regardless of LOG_LEVEL"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Reported in the banner and by the health endpoint"
    )

    bot: BotSettings = Field(default_factory=BotSettings)
    monitor: MonitorSettings = Field(default_factory=MonitorSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    health: HealthSettings = Field(default_factory=HealthSettings)

    @property
    def effective_log_level(self) -> LogLevel:
        return LogLevel.DEBUG if self.debug else self.logging.level

    def to_dict(self, *, exclude_secrets: bool = True) -> Dict[str, Any]:
        """Plain dict of every section, with token-like keys dropped."""
        data = self.model_dump(mode="json")
        if not exclude_secrets:
            return data

        def strip(obj: Any) -> Any:
            if isinstance(obj, dict):
                return {
                    key: strip(value)
                    for key, value in obj.items()
                    if "token" not in key.lower() and "secret" not in key.lower()
                }
            return obj

        return strip(data)


@lru_cache()
def get_settings() -> Settings:
    """Load settings from the environment and .env once per process."""
    return Settings()
