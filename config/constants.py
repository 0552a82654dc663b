"""
Constants Module for Host Watch Bot

Contains all constant values, enumerations, templates, and
static configuration used throughout the application.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Final


class BotCommands(str, Enum):
    """
    Bot Commands Enumeration

    The complete command surface of the bot. Matching is done on the
    full message text, so the values carry the leading slash.
    """

    HELP = "/help"
    START = "/start"
    STOP = "/stop"
    STATUS = "/status"

    @classmethod
    def all(cls) -> List["BotCommands"]:
        """Commands in the order they are listed to users."""
        return [cls.START, cls.STOP, cls.STATUS, cls.HELP]

    @classmethod
    def from_text(cls, text: str) -> "BotCommands | None":
        """Exact, case-sensitive lookup of a full message text."""
        for command in cls:
            if command.value == text:
                return command
        return None

    @classmethod
    def get_description(cls, command: "BotCommands") -> str:
        """Get command description."""
        descriptions = {
            cls.START: "start monitoring the connection",
            cls.STOP: "stop monitoring",
            cls.STATUS: "current connection status",
            cls.HELP: "this help",
        }
        return descriptions.get(command, "No description available")


class ProbeMethod(str, Enum):
    """How a reachability probe is carried out."""
    ICMP = "icmp"
    TCP = "tcp"


class RecipientMode(str, Enum):
    """
    Who receives monitoring notifications.

    MULTI remembers every sender and broadcasts to all of them.
    SINGLE only keeps the most recent sender (last writer wins).
    """
    MULTI = "multi"
    SINGLE = "single"


class MessageTemplates:
    """
    Message Templates for Bot Responses

    Contains all message templates used by the bot.
    HTML formatting is used; ``{target}`` is always HTML-escaped by the
    caller before formatting.
    """

    HELP: Final[str] = (
        "🤖 <b>Bot help:</b>\n"
        "{commands}\n"
        "\n"
        "Host being monitored: <code>{target}</code>"
    )

    UNKNOWN_COMMAND: Final[str] = "Unknown command. Available commands: {commands}"

    # Monitor lifecycle
    MONITORING_STARTED: Final[str] = "🚀 Connection monitoring started. Host: <code>{target}</code>"
    MONITORING_ALREADY_RUNNING: Final[str] = "Monitoring is already running"
    MONITORING_STOPPED: Final[str] = "🛑 Monitoring stopped"
    MONITORING_NOT_RUNNING: Final[str] = "Monitoring was not running"

    # One-shot status
    STATUS_REACHABLE: Final[str] = "🟢 Host <code>{target}</code> is reachable"
    STATUS_UNREACHABLE: Final[str] = "🔴 Host <code>{target}</code> is unreachable"

    # Transitions
    BECAME_REACHABLE: Final[str] = "✅ Connection to <code>{target}</code> restored!"
    BECAME_UNREACHABLE: Final[str] = "⚠️ Host <code>{target}</code> became unreachable!"


class Defaults:
    """
    Default Values

    Provides default values for various settings.
    """

    # Probe defaults
    CHECK_INTERVAL: Final[float] = 5.0
    PROBE_TIMEOUT_MS: Final[int] = 5000
    TCP_PORT: Final[int] = 7  # echo

    # Display defaults
    DATETIME_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"
