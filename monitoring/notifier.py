"""
============================================================================
HOST WATCH BOT - NOTIFIER
============================================================================
Delivers text messages to chat recipients through the chat platform.

The notifier does not know about Telegram. It talks to a ``MessageSender``
(anything with ``async send_text(recipient_id, text)``); the aiogram
adapter lives in bot/manager.py.

Recipients
----------
RecipientRegistry remembers who hears about reachability changes. It has
two addressing modes, chosen by MONITOR_RECIPIENT_MODE:

    multi   every distinct sender ever seen receives broadcasts; the set
            only grows and identifiers are unique (the default)
    single  only the most recent sender receives broadcasts (last writer
            wins); a second user issuing any command takes the
            notifications over

Failure isolation
-----------------
A failed send is logged as a DeliveryError for that recipient and the
broadcast continues with the next one.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

from typing import Dict, List, Optional, Protocol, runtime_checkable

from config.constants import RecipientMode
from exceptions.delivery import DeliveryError
from utils.logger import get_logger, BotLogger


logger = get_logger("Notifier")
bot_logger = BotLogger()


@runtime_checkable
class MessageSender(Protocol):
    """Outbound side of the chat platform."""

    async def send_text(self, recipient_id: str, text: str) -> None:
        ...


# ============================================================================
# RECIPIENT REGISTRY
# ============================================================================

class RecipientRegistry:
    """
    Set of chat identifiers that receive broadcast notifications.

    Insertion order is kept so broadcasts go out in the order users
    first talked to the bot. Not thread-safe on its own: the monitor
    loop's lock guards every mutation.
    """

    def __init__(self, mode: RecipientMode = RecipientMode.MULTI):
        self.mode = mode
        self._recipients: Dict[str, None] = {}

    def add(self, recipient_id) -> bool:
        """
        Register a sender. Returns True if the registry changed.
        """
        recipient_id = str(recipient_id)

        if self.mode == RecipientMode.SINGLE:
            if list(self._recipients) == [recipient_id]:
                return False
            self._recipients = {recipient_id: None}
            logger.debug(f"Notifications now go to chat {recipient_id} only")
            return True

        if recipient_id in self._recipients:
            return False
        self._recipients[recipient_id] = None
        logger.info(f"New recipient registered: chat {recipient_id} (total {len(self)})")
        return True

    def snapshot(self) -> List[str]:
        """Current recipients, in registration order."""
        return list(self._recipients)

    def __contains__(self, recipient_id) -> bool:
        return str(recipient_id) in self._recipients

    def __len__(self) -> int:
        return len(self._recipients)


# ============================================================================
# NOTIFIER
# ============================================================================

class Notifier:
    """
    Sends replies to one recipient and broadcasts to all registered ones.

    Parameters
    ----------
    sender : MessageSender
        The chat platform adapter.
    recipients : RecipientRegistry | None
        Registry used by ``broadcast``; a multi-mode registry is created
        when omitted.
    """

    def __init__(self, sender: MessageSender, recipients: Optional[RecipientRegistry] = None):
        self.sender = sender
        self.recipients = recipients if recipients is not None else RecipientRegistry()

        # --- counters ---
        self._sent = 0
        self._failed = 0

    async def send(self, recipient_id, text: str) -> bool:
        """
        Send *text* to one recipient. Failures are logged, never raised.

        Returns
        -------
        bool
            True if the platform accepted the message.
        """
        recipient_id = str(recipient_id)
        try:
            await self.sender.send_text(recipient_id, text)
        except Exception as e:
            self._failed += 1
            error = DeliveryError.from_exception(e, recipient_id=recipient_id)
            bot_logger.log_delivery_error(recipient_id, error)
            logger.debug(error.log_format())
            return False

        self._sent += 1
        return True

    async def broadcast(self, text: str, recipients: Optional[List[str]] = None) -> int:
        """
        Send *text* to every registered recipient, or to *recipients*
        when the caller already took a copy of the registry.

        Returns
        -------
        int
            Number of recipients the message reached.
        """
        if recipients is None:
            recipients = self.recipients.snapshot()
        if not recipients:
            logger.warning("Broadcast requested but no recipients are registered")
            return 0

        delivered = 0
        for recipient_id in recipients:
            if await self.send(recipient_id, text):
                delivered += 1

        if delivered < len(recipients):
            logger.warning(
                f"Broadcast reached {delivered}/{len(recipients)} recipients"
            )
        else:
            logger.info(f"Broadcast delivered to {delivered} recipients")
        return delivered

    def get_stats(self) -> Dict[str, int]:
        """Delivery counters for diagnostics."""
        return {
            "recipients": len(self.recipients),
            "sent": self._sent,
            "failed": self._failed,
        }
