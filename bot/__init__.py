"""
============================================================================
HOST WATCH BOT - BOT PACKAGE
============================================================================
Command dispatch, aiogram handlers and bot management.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

from bot.dispatcher import CommandDispatcher, build_help_text
from bot.manager import BotManager

__all__ = ["CommandDispatcher", "BotManager", "build_help_text"]
