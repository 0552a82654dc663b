"""Tests for the aiogram handlers."""

from unittest.mock import AsyncMock, MagicMock

from aiogram.exceptions import TelegramAPIError

from bot.handlers import on_error, on_text_message


async def test_text_message_goes_to_dispatcher():
    message = MagicMock()
    message.chat.id = 42
    message.text = "/status"
    command_dispatcher = MagicMock()
    command_dispatcher.handle = AsyncMock()

    await on_text_message(message, command_dispatcher)

    command_dispatcher.handle.assert_awaited_once_with("42", "/status")


async def test_errors_are_handled():
    event = MagicMock()
    event.exception = RuntimeError("boom")
    assert await on_error(event) is True


async def test_telegram_errors_are_handled():
    event = MagicMock()
    event.exception = TelegramAPIError(method=MagicMock(), message="Forbidden: bot was blocked")
    assert await on_error(event) is True
