"""
Monitoring Exception Classes for Host Watch Bot

Errors raised while probing the target host. They never escape the
prober's public ``probe()`` call; they exist so the failure reason can be
logged with a code and details.
"""

from __future__ import annotations

from typing import Any, Optional

from exceptions.base import HostWatchException


class ProbeError(HostWatchException):
    """
    Base Probe Error

    Raised when a reachability probe could not produce an answer.
    """

    default_error_code = 4000
    default_recoverable = True

    def __init__(
        self,
        message: str,
        host: Optional[str] = None,
        method: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        """
        Initialize probe error.

        Args:
            message: Error message
            host: The host being probed
            method: The probe method (icmp / tcp)
            **kwargs: Additional arguments
        """
        super().__init__(message, **kwargs)

        self.host = host

        if host:
            self.details["host"] = host

        if method:
            self.details["method"] = method


class HostResolutionError(ProbeError):
    """The target host name could not be resolved."""

    default_error_code = 4002


class ProbeUnavailableError(ProbeError):
    """
    The probe itself could not run, e.g. the ping executable is missing
    or the process is not allowed to start it.
    """

    default_error_code = 4003
