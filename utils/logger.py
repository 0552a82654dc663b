"""
============================================================================
HOST WATCH BOT - LOGGING UTILITY
============================================================================
Loguru based logging with console, rotating file and error-only sinks.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

import sys
from typing import Optional

from loguru import logger

from config.settings import LoggingSettings


CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | "
    "{extra[name]}:{function}:{line} - {message}"
)


# ============================================================================
# LOGGER CONFIGURATION
# ============================================================================

def setup_logging(log_settings: Optional[LoggingSettings] = None, level: Optional[str] = None) -> None:
    """
    Replace loguru's default sink with the configured ones.

    Args:
        log_settings: Logging section of the application settings.
            Defaults are used when omitted.
        level: Overrides LOG_LEVEL (used by DEBUG=true).
    """
    log_settings = log_settings or LoggingSettings()

    logger.remove()
    logger.configure(extra={"name": "root"})

    log_level = level or log_settings.level.value

    # Console Handler
    if log_settings.console_enabled:
        logger.add(
            sys.stdout,
            format=CONSOLE_FORMAT,
            level=log_level,
            colorize=log_settings.colorize,
            backtrace=True,
            diagnose=False,
        )

    # File Handlers
    if log_settings.file_enabled:
        log_settings.file_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_settings.file_path,
            format=FILE_FORMAT,
            level=log_level,
            rotation=log_settings.file_rotation,
            retention=log_settings.file_retention,
            compression="zip",
            serialize=log_settings.json_enabled,
            backtrace=True,
            diagnose=False,
        )

        # Errors only, rotated daily
        log_settings.error_file_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_settings.error_file_path,
            format=FILE_FORMAT,
            level="ERROR",
            rotation="1 day",
            retention=log_settings.file_retention,
            compression="zip",
            backtrace=True,
            diagnose=False,
        )

    logger.debug(
        f"Logging configured: level={log_level}, console={log_settings.console_enabled}, "
        f"file={log_settings.file_path if log_settings.file_enabled else 'off'}"
    )


def get_logger(name: Optional[str] = None):
    """
    Logger bound to a component name, shown in the {extra[name]} column.
    """
    if name:
        return logger.bind(name=name)
    return logger.bind(name="root")


# ============================================================================
# SPECIALIZED LOGGERS
# ============================================================================

class MonitorLogger:
    """
    Probe outcomes and reachability transitions.
    """

    def __init__(self):
        self.logger = get_logger("Monitor")

    def log_probe(self, host: str, reachable: bool, latency: Optional[float] = None):
        """Log a single probe outcome."""
        if reachable:
            suffix = f" in {latency:.3f}s" if latency is not None else ""
            self.logger.debug(f"Probe of {host} succeeded{suffix}")
        else:
            self.logger.debug(f"Probe of {host} failed")

    def log_transition(self, host: str, reachable: bool):
        """Log a reachability transition."""
        if reachable:
            self.logger.info(f"🟢 {host} became reachable")
        else:
            self.logger.warning(f"🔴 {host} became unreachable")

    def log_probe_error(self, host: str, error: Exception):
        """Log a probe that failed with an error."""
        self.logger.error(f"Connection check of {host} failed: {error}")


class BotLogger:
    """
    Commands received and messages that could not be delivered.
    """

    def __init__(self):
        self.logger = get_logger("Bot")

    def log_command(self, sender_id: str, command: str):
        """Log a handled bot command."""
        self.logger.info(f"Command {command} executed for chat {sender_id}")

    def log_delivery_error(self, recipient_id: str, error: Exception):
        """Log a message that could not be delivered."""
        self.logger.error(f"Message delivery to chat {recipient_id} failed: {error}")
