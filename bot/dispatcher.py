"""
============================================================================
HOST WATCH BOT - COMMAND DISPATCHER
============================================================================
Maps the full text of an incoming message to an action.

    /help    help text listing the commands and the monitored host
    /start   start monitoring
    /stop    stop monitoring
    /status  probe right now and reply reachable / unreachable
    other    "unknown command" with the list of commands

Matching is exact and case-sensitive on the whole text: no prefixes, no
arguments, no "/START". Every message registers its sender as a
recipient before it is dispatched.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

from typing import Awaitable, Callable, Dict, Optional

from config.constants import BotCommands, MessageTemplates
from monitoring.monitor import MonitorLoop
from monitoring.notifier import Notifier
from utils.helpers import StringHelper
from utils.logger import get_logger, BotLogger


logger = get_logger("Dispatcher")
bot_logger = BotLogger()


def build_help_text(target_host: str) -> str:
    """Help text listing every command and the monitored host."""
    commands = "\n".join(
        f"{command.value} - {BotCommands.get_description(command)}"
        for command in BotCommands.all()
    )
    return MessageTemplates.HELP.format(
        commands=commands,
        target=StringHelper.escape_html(target_host),
    )


def build_unknown_command_text() -> str:
    """Reply to anything that is not one of the four commands."""
    return MessageTemplates.UNKNOWN_COMMAND.format(
        commands=", ".join(command.value for command in BotCommands.all())
    )


class CommandDispatcher:
    """
    Entry point for inbound chat messages.

    Parameters
    ----------
    monitor : MonitorLoop
        Owns the monitoring state and the recipient registry.
    notifier : Notifier
        Used for replies that do not touch the monitor.
    """

    def __init__(self, monitor: MonitorLoop, notifier: Notifier):
        self.monitor = monitor
        self.notifier = notifier
        self.help_text = build_help_text(monitor.target_host)
        self.unknown_text = build_unknown_command_text()

        self._handlers: Dict[BotCommands, Callable[[str], Awaitable[object]]] = {
            BotCommands.HELP: self._help,
            BotCommands.START: self.monitor.start,
            BotCommands.STOP: self.monitor.stop,
            BotCommands.STATUS: self.monitor.status,
        }

    async def handle(self, sender_id, text: str) -> Optional[BotCommands]:
        """
        Register *sender_id* and run the command named by *text*.

        Returns
        -------
        BotCommands | None
            The command that ran, or None for an unknown command.
        """
        sender_id = str(sender_id)
        await self.monitor.register_recipient(sender_id)

        command = BotCommands.from_text(text)
        if command is None:
            logger.debug(f"Unknown command from chat {sender_id}: {StringHelper.truncate(text, 50)!r}")
            await self.notifier.send(sender_id, self.unknown_text)
            return None

        await self._handlers[command](sender_id)
        bot_logger.log_command(sender_id, command.value)
        return command

    async def _help(self, sender_id: str) -> None:
        await self.notifier.send(sender_id, self.help_text)
