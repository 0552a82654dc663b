"""
============================================================================
HOST WATCH BOT - HEALTH ENDPOINT
============================================================================
Optional aiohttp server for container orchestrators and uptime checkers.

    GET /        200 "OK" while the process runs
    GET /health  200 JSON: process uptime, delivery counters and what the
                 monitor currently believes about the target host

The "status" field is "monitoring" while periodic probing is enabled and
"idle" otherwise; the endpoint itself never reports the process as down.

Enabled with HEALTH_ENABLED=true.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

import time
from typing import Optional

from aiohttp import web

from config.settings import HealthSettings
from monitoring.monitor import MonitorLoop
from utils.helpers import TimeHelper
from utils.logger import get_logger


logger = get_logger("HealthServer")


class HealthServer:
    """
    Serves liveness and monitor state over HTTP.

    ``app`` can be handed to aiohttp's test client without binding a port;
    ``start``/``stop`` bind and release HEALTH_HOST:HEALTH_PORT.
    """

    def __init__(self, health_settings: HealthSettings, monitor: MonitorLoop, app_version: str = "1.0.0"):
        self.settings = health_settings
        self.monitor = monitor
        self.app_version = app_version

        self._started = time.monotonic()
        self._requests = 0
        self._runner: Optional[web.AppRunner] = None
        self._app = self._build_app()

    def _build_app(self) -> web.Application:
        app = web.Application(middlewares=[self._count_requests])
        app.add_routes([
            web.get("/", self._liveness),
            web.get("/health", self._health),
        ])
        return app

    @property
    def app(self) -> web.Application:
        return self._app

    async def start(self) -> None:
        """Bind the listening socket. Raises OSError if the port is taken."""
        runner = web.AppRunner(self._app, access_log=None)
        await runner.setup()
        try:
            await web.TCPSite(runner, self.settings.host, self.settings.port).start()
        except OSError:
            await runner.cleanup()
            raise
        self._runner = runner
        self._started = time.monotonic()
        logger.info(f"✓ HealthServer listening on {self.settings.host}:{self.settings.port}")

    async def stop(self) -> None:
        if self._runner is None:
            return
        await self._runner.cleanup()
        self._runner = None
        logger.info("✓ HealthServer stopped")

    # ------------------------------------------------------------------
    # HANDLERS
    # ------------------------------------------------------------------

    @web.middleware
    async def _count_requests(self, request: web.Request, handler):
        self._requests += 1
        return await handler(request)

    async def _liveness(self, request: web.Request) -> web.Response:
        return web.Response(text="OK")

    async def _health(self, request: web.Request) -> web.Response:
        uptime = time.monotonic() - self._started
        snapshot = await self.monitor.snapshot()

        return web.json_response({
            "status": "monitoring" if snapshot["enabled"] else "idle",
            "version": self.app_version,
            "uptime_seconds": round(uptime, 1),
            "uptime_human": TimeHelper.seconds_to_human_readable(int(uptime)),
            "requests_served": self._requests,
            "timestamp": TimeHelper.get_utc_now().isoformat(),
            "delivery": self.monitor.notifier.get_stats(),
            "monitor": snapshot,
        })
