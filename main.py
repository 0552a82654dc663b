"""
============================================================================
HOST WATCH BOT - MAIN APPLICATION
============================================================================
Wires every layer of the bot together:

    • Settings (Pydantic) and logging (loguru)
    • ReachabilityProber, Notifier, MonitorLoop
    • CommandDispatcher + aiogram Bot/Dispatcher
    • optional HealthServer (aiohttp)

Startup Order
-------------
1.  Load settings & configure logging
2.  Create aiogram Bot + Dispatcher
3.  Create Notifier (needs the bot for sending), Prober, MonitorLoop
4.  Create CommandDispatcher and inject it into the aiogram workflow data
5.  Start HealthServer if enabled
6.  Start aiogram polling (this blocks until shutdown)

Shutdown Order (reverse)
-------------------------
On KeyboardInterrupt or SIGTERM:
    cancel monitor loop → stop health server → stop polling → close bot

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

import asyncio
import signal
import sys
from pathlib import Path
from typing import Optional

# ---------------------------------------------------------------------------
# Path setup: the project root must be importable from any CWD
# ---------------------------------------------------------------------------
sys.path.insert(0, str(Path(__file__).parent))

from pydantic import ValidationError

from bot.dispatcher import CommandDispatcher
from bot.manager import BotManager
from config.settings import Settings, get_settings
from exceptions.base import ConfigurationError, HostWatchException
from monitoring.health import HealthServer
from monitoring.monitor import MonitorLoop
from monitoring.notifier import Notifier, RecipientRegistry
from monitoring.prober import ReachabilityProber
from utils.logger import get_logger, setup_logging


logger = get_logger("Main")


# ============================================================================
# APPLICATION CLASS
# ============================================================================

class HostWatchApplication:
    """
    Top-level application orchestrator.

    Owns every subsystem and is the single place that knows the startup /
    shutdown order.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

        # --- subsystems (populated during startup) ---
        self.bot_manager: Optional[BotManager] = None
        self.notifier: Optional[Notifier] = None
        self.prober: Optional[ReachabilityProber] = None
        self.monitor: Optional[MonitorLoop] = None
        self.command_dispatcher: Optional[CommandDispatcher] = None
        self.health_server: Optional[HealthServer] = None

        # --- lifecycle flag ---
        self._is_shut_down = False

        self._print_banner()

    # ------------------------------------------------------------------
    # BANNER
    # ------------------------------------------------------------------

    def _print_banner(self) -> None:
        monitor = self.settings.monitor
        logger.info("=" * 74)
        logger.info(f"  🛰  {self.settings.bot.name} v{self.settings.app_version}")
        logger.info(f"  Target   : {monitor.target_host}")
        logger.info(
            f"  Probe    : {monitor.probe_method.value}, timeout {monitor.probe_timeout_ms}ms, "
            f"every {monitor.interval}s"
        )
        logger.info(f"  Recipients: {monitor.recipient_mode.value} mode")
        logger.info("=" * 74)
        logger.debug(f"Effective settings: {self.settings.to_dict()}")

    # ==================================================================
    # STARTUP
    # ==================================================================

    def _init_bot(self) -> None:
        logger.info("── Phase 1: Telegram Bot ─────────────────────────")
        self.bot_manager = BotManager(self.settings.bot)
        self.bot_manager.initialize()

    def _init_monitoring(self) -> None:
        logger.info("── Phase 2: Monitoring ───────────────────────────")
        monitor_settings = self.settings.monitor

        self.notifier = Notifier(
            sender=self.bot_manager,
            recipients=RecipientRegistry(monitor_settings.recipient_mode),
        )
        self.prober = ReachabilityProber(monitor_settings)
        self.monitor = MonitorLoop(self.prober, self.notifier, monitor_settings)
        self.command_dispatcher = CommandDispatcher(self.monitor, self.notifier)

        # Handlers receive the dispatcher as a keyword argument
        self.bot_manager.dp.workflow_data.update({
            "command_dispatcher": self.command_dispatcher,
        })
        logger.info("  ✓ Prober, Notifier, MonitorLoop and CommandDispatcher created")

    async def _init_health(self) -> None:
        if not self.settings.health.enabled:
            return
        logger.info("── Phase 3: Health endpoint ──────────────────────")
        try:
            self.health_server = HealthServer(
                self.settings.health, self.monitor, self.settings.app_version
            )
            await self.health_server.start()
        except OSError as e:
            logger.warning(f"  ⚠ Health endpoint unavailable — continuing without it: {e}")
            self.health_server = None

    async def startup(self) -> None:
        """
        Execute the complete startup sequence.
        Raises HostWatchException if a critical phase fails.
        """
        logger.info("  STARTING UP …")
        self._init_bot()
        self._init_monitoring()
        await self._init_health()
        logger.info("  ✓ ALL SYSTEMS OPERATIONAL — send /start to the bot")

    # ==================================================================
    # SHUTDOWN SEQUENCE
    # ==================================================================

    async def shutdown(self) -> None:
        """
        Tear down in reverse startup order. Safe to call more than once
        and after a failed startup; a failing step is logged and the
        remaining steps still run.
        """
        if self._is_shut_down:
            return
        self._is_shut_down = True
        logger.info("  SHUTTING DOWN …")

        if self.monitor:
            try:
                await self.monitor.shutdown()
            except Exception as e:
                logger.error(f"  ✗ MonitorLoop shutdown error: {e}")

        if self.health_server:
            try:
                await self.health_server.stop()
            except Exception as e:
                logger.error(f"  ✗ HealthServer stop error: {e}")

        if self.bot_manager:
            try:
                await self.bot_manager.stop_polling()
                await self.bot_manager.close()
            except Exception as e:
                logger.error(f"  ✗ Bot stop error: {e}")

        logger.info("  ✓ SHUTDOWN COMPLETE")

    # ==================================================================
    # RUN
    # ==================================================================

    async def run(self) -> None:
        """Start aiogram polling, which blocks until the bot is stopped."""
        logger.info("  Starting aiogram polling…")
        await self.bot_manager.start_polling()


# ============================================================================
# SIGNAL HANDLER SETUP
# ============================================================================

def _install_signal_handlers(app: HostWatchApplication) -> None:
    """
    Install SIGTERM / SIGINT handlers that stop polling, which lets
    main() fall through to the shutdown sequence.
    """
    loop = asyncio.get_running_loop()

    def _handle_signal(sig: signal.Signals) -> None:
        logger.info(f"  ⚡ {sig.name} received — initiating shutdown…")
        if app.bot_manager:
            asyncio.ensure_future(app.bot_manager.stop_polling())

    for sig in (signal.SIGTERM, signal.SIGINT):
        try:
            loop.add_signal_handler(sig, _handle_signal, sig)
        except (NotImplementedError, OSError):
            # Not supported on Windows; Ctrl+C still raises KeyboardInterrupt
            pass


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

def load_settings() -> Settings:
    """Load settings once, turning validation problems into ConfigurationError."""
    try:
        return get_settings()
    except ValidationError as e:
        fields = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
        raise ConfigurationError(
            "Invalid or missing configuration",
            fields=fields,
            cause=e,
        ) from e


async def main() -> int:
    """
    Load settings, start every subsystem and poll until stopped.
    Returns the process exit code.
    """
    try:
        settings = load_settings()
    except ConfigurationError as e:
        try:
            setup_logging()
        except ValidationError:
            # LOG_* itself is invalid: report through loguru's default sink
            pass
        logger.error(e.log_format())
        return 1

    setup_logging(settings.logging, level=settings.effective_log_level.value)

    app = HostWatchApplication(settings)
    try:
        await app.startup()
    except HostWatchException as e:
        logger.error(f"  ✗ Startup failed — {e.log_format()}")
        await app.shutdown()
        return 1

    _install_signal_handlers(app)

    try:
        await app.run()
    except Exception as e:
        logger.exception(f"  ✗ Unhandled error in run: {e}")
    finally:
        await app.shutdown()
    return 0


# ============================================================================
# SCRIPT ENTRY POINT
# ============================================================================

def cli() -> None:
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    cli()
