"""
Base Exception Classes for Host Watch Bot

Every error raised by the bot carries a numeric code, a details dict and
the exception it wraps, so a single log line says what failed and why.

Code ranges:
    1xxx  process level (configuration, startup)
    4xxx  probing the target host
    5xxx  delivering chat messages
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional


class HostWatchException(Exception):
    """
    Root of the Host Watch Bot exception tree.

    Attributes:
        message: Human-readable error message
        error_code: Numeric code, see the ranges above
        details: Context such as the host or the chat id
        cause: The wrapped exception, if any
        recoverable: False when the process cannot continue
        timestamp: UTC time the error was created
    """

    default_error_code: int = 1000
    default_recoverable: bool = True

    def __init__(
        self,
        message: str = "An error occurred",
        error_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
        recoverable: Optional[bool] = None,
    ) -> None:
        super().__init__(message)

        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = dict(details or {})
        self.cause = cause
        self.recoverable = self.default_recoverable if recoverable is None else recoverable
        self.timestamp = datetime.now(timezone.utc)

    @classmethod
    def from_exception(
        cls,
        exception: BaseException,
        message: Optional[str] = None,
        **kwargs: Any
    ) -> "HostWatchException":
        """Wrap a foreign exception, reusing its text when no message is given."""
        text = message or str(exception) or exception.__class__.__name__
        return cls(text, cause=exception, **kwargs)

    def log_format(self) -> str:
        """One-line description for the log: type, code, message, details, cause."""
        line = f"{self.__class__.__name__}[{self.error_code}] {self.message}"
        if self.details:
            context = ", ".join(f"{key}={value}" for key, value in self.details.items())
            line += f" ({context})"
        if self.cause is not None:
            line += f" <- {self.cause!r}"
        return line

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code}, "
            f"details={self.details})"
        )


class ConfigurationError(HostWatchException):
    """
    Settings are missing or invalid.

    Raised before anything else starts, so it is never recoverable.
    """

    default_error_code = 1100
    default_recoverable = False

    def __init__(
        self,
        message: str,
        fields: Optional[Iterable[str]] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, **kwargs)

        if fields:
            self.details["fields"] = list(fields)


class InitializationError(HostWatchException):
    """A component (bot, health endpoint) could not be created."""

    default_error_code = 1200
    default_recoverable = False

    def __init__(
        self,
        message: str,
        component: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, **kwargs)

        if component:
            self.details["component"] = component
