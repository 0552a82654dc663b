"""
============================================================================
HOST WATCH BOT - BOT MANAGER
============================================================================
Owns the aiogram Bot and Dispatcher, runs long polling and implements the
outbound ``send_text`` used by the Notifier.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

from typing import Optional

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties

from bot.handlers import router
from config.settings import BotSettings
from exceptions.base import InitializationError
from utils.logger import get_logger


logger = get_logger("BotManager")


class BotManager:
    """
    Thin wrapper around aiogram.

    Usage
    -----
        manager = BotManager(settings.bot)
        manager.initialize()
        manager.dp.workflow_data["command_dispatcher"] = dispatcher
        await manager.start_polling()   # blocks
        ...
        await manager.stop_polling()
        await manager.close()
    """

    def __init__(self, bot_settings: BotSettings):
        self.settings = bot_settings
        self.bot: Optional[Bot] = None
        self.dp: Optional[Dispatcher] = None
        self._polling = False

    def initialize(self) -> None:
        """Create the Bot and Dispatcher and register the router."""
        try:
            self.bot = Bot(
                token=self.settings.token.get_secret_value(),
                default=DefaultBotProperties(
                    parse_mode=self.settings.parse_mode,
                    link_preview_is_disabled=True,
                ),
            )
            self.dp = Dispatcher()
            self.dp.include_router(router)
        except Exception as e:
            raise InitializationError(
                f"Cannot create Telegram bot: {e}",
                component="bot",
                cause=e,
            ) from e

        logger.info(f"✓ Bot '{self.settings.name}' initialized")

    # ------------------------------------------------------------------
    # OUTBOUND
    # ------------------------------------------------------------------

    async def send_text(self, recipient_id: str, text: str) -> None:
        """Send one message; Telegram errors propagate to the caller."""
        if self.bot is None:
            raise RuntimeError("BotManager is not initialized")
        await self.bot.send_message(chat_id=recipient_id, text=text)

    # ------------------------------------------------------------------
    # POLLING
    # ------------------------------------------------------------------

    async def start_polling(self) -> None:
        """Run long polling until stop_polling() is called."""
        if self.bot is None or self.dp is None:
            raise RuntimeError("BotManager is not initialized")

        if self.settings.drop_pending_updates:
            await self.bot.delete_webhook(drop_pending_updates=True)

        me = await self.bot.get_me()
        logger.info(f"Polling as @{me.username} ({self.settings.name})")

        self._polling = True
        try:
            await self.dp.start_polling(
                self.bot,
                polling_timeout=self.settings.polling_timeout,
                allowed_updates=["message"],
                handle_signals=False,
                close_bot_session=False,
            )
        finally:
            self._polling = False

    async def stop_polling(self) -> None:
        if self.dp is not None and self._polling:
            await self.dp.stop_polling()

    async def close(self) -> None:
        """Close the HTTP session used by the bot."""
        if self.bot is not None:
            await self.bot.session.close()
            logger.info("✓ Bot session closed")
