"""
Configuration Package for Host Watch Bot

This package contains all configuration-related modules including:
- Settings management with environment variable support
- Constants, enums and message templates used throughout the application
"""

from config.settings import (
    Settings,
    BotSettings,
    MonitorSettings,
    LoggingSettings,
    HealthSettings,
    get_settings,
)

from config.constants import (
    BotCommands,
    ProbeMethod,
    RecipientMode,
    MessageTemplates,
    Defaults,
)

__all__ = [
    # Settings
    "Settings",
    "BotSettings",
    "MonitorSettings",
    "LoggingSettings",
    "HealthSettings",
    "get_settings",

    # Constants
    "BotCommands",
    "ProbeMethod",
    "RecipientMode",
    "MessageTemplates",
    "Defaults",
]
