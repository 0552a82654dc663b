"""
Utilities Package for Host Watch Bot

Logging setup and small formatting helpers.
"""

from utils.logger import get_logger, setup_logging, MonitorLogger, BotLogger
from utils.helpers import TimeHelper, StringHelper

__all__ = [
    "get_logger",
    "setup_logging",
    "MonitorLogger",
    "BotLogger",
    "TimeHelper",
    "StringHelper",
]
