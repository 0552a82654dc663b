"""
============================================================================
HOST WATCH BOT - BOT HANDLERS
============================================================================
aiogram router that feeds every text message into the CommandDispatcher
and logs errors raised while handling updates.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

from aiogram import Router, F
from aiogram.exceptions import TelegramAPIError
from aiogram.types import ErrorEvent, Message

from bot.dispatcher import CommandDispatcher
from utils.logger import get_logger


logger = get_logger("BotHandlers")

# Create router for handlers
router = Router(name="host_watch")


@router.message(F.text)
async def on_text_message(message: Message, command_dispatcher: CommandDispatcher):
    """Every text message is a command candidate; the chat is its sender."""
    await command_dispatcher.handle(str(message.chat.id), message.text)


@router.errors()
async def on_error(event: ErrorEvent) -> bool:
    """Log errors raised while handling an update; none of them are fatal."""
    exception = event.exception
    if isinstance(exception, TelegramAPIError):
        logger.error(f"Telegram API Error: {exception}")
    else:
        logger.opt(exception=exception).error(f"Error while handling update: {exception}")
    return True
