"""
============================================================================
HOST WATCH BOT - HELPERS UTILITY
============================================================================
Formatting helpers shared by the monitor, the dispatcher and the health
endpoint.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

import html
from datetime import datetime, timezone
from typing import Optional

from config.constants import Defaults


# ============================================================================
# TIME UTILITIES
# ============================================================================

class TimeHelper:
    """Timestamps in UTC and their display forms."""

    @staticmethod
    def get_utc_now() -> datetime:
        """Timezone-aware current time in UTC."""
        return datetime.now(timezone.utc)

    @staticmethod
    def format_datetime(dt: Optional[datetime], fmt: str = Defaults.DATETIME_FORMAT) -> Optional[str]:
        """
        Render *dt* with *fmt*.

        Returns None for None so never-set timestamps stay null in JSON.
        """
        if dt is None:
            return None
        return dt.strftime(fmt)

    @staticmethod
    def seconds_to_human_readable(seconds: int) -> str:
        """
        Compact duration, e.g. 93784 -> "1d 2h 3m 4s".

        Zero-valued units are skipped; anything below one second is "0s".
        """
        if seconds <= 0:
            return "0s"

        units = (("d", 86400), ("h", 3600), ("m", 60), ("s", 1))
        parts = []
        for suffix, size in units:
            amount, seconds = divmod(seconds, size)
            if amount:
                parts.append(f"{amount}{suffix}")
        return " ".join(parts)


# ============================================================================
# STRING UTILITIES
# ============================================================================

class StringHelper:
    """Text preparation for Telegram messages and log lines."""

    @staticmethod
    def truncate(text: str, max_length: int = 100, suffix: str = "...") -> str:
        """Cut *text* to at most *max_length* characters, marking the cut."""
        if len(text) <= max_length:
            return text
        return text[:max_length - len(suffix)] + suffix

    @staticmethod
    def escape_html(text: str) -> str:
        """Escape &, < and > (and quotes) for Telegram's HTML parse mode."""
        return html.escape(text)
