"""
Delivery Exception Classes for Host Watch Bot

Errors raised when a chat message cannot be delivered.
"""

from __future__ import annotations

from typing import Any, Optional

from exceptions.base import HostWatchException


class DeliveryError(HostWatchException):
    """
    Delivery Error

    Raised when a message could not be sent to one recipient.
    Recovered per recipient by the notifier; a broadcast continues with
    the remaining recipients.
    """

    default_error_code = 5000
    default_recoverable = True

    def __init__(
        self,
        message: str = "Message delivery failed",
        recipient_id: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        """
        Initialize delivery error.

        Args:
            message: Error message
            recipient_id: The chat the message was addressed to
            **kwargs: Additional arguments
        """
        super().__init__(message, **kwargs)

        self.recipient_id = recipient_id

        if recipient_id is not None:
            self.details["recipient_id"] = recipient_id
