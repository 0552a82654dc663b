"""
============================================================================
HOST WATCH BOT - MONITOR LOOP
============================================================================
Watches the target host while monitoring is enabled and broadcasts a
message whenever its reachability flips.

States
------
    Stopped --start--> Running   enable, confirm to the sender, probe now
                                 and then every MONITOR_INTERVAL seconds
    Running --start--> Running   "already running", nothing rescheduled
    Running --stop---> Stopped   disable, cancel the periodic task
    Stopped --stop---> Stopped   "not running"

Notifications are edge-triggered: a tick only broadcasts when the probe
result differs from the last known reachability. The last known value
starts as "unreachable" and survives stop/start cycles.

Concurrency
-----------
The command handlers and the periodic task share one event loop. Every
read and write of MonitorState and of the recipient registry happens
under ``self._lock``. The lock never spans network I/O: it is released
while a probe runs and while replies or broadcasts are sent.

A /stop that lands during a probe wins, because the tick re-checks
``enabled`` before comparing. A transition broadcast runs as its own
task over a copy of the recipient list; /stop cancels it before the
"stopped" reply is sent, so no transition message follows that reply.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Dict, Any, List

from config.constants import MessageTemplates
from config.settings import MonitorSettings
from exceptions.monitoring import ProbeError
from monitoring.notifier import Notifier
from monitoring.prober import ReachabilityProber
from utils.helpers import TimeHelper, StringHelper
from utils.logger import get_logger, MonitorLogger


logger = get_logger("MonitorLoop")
monitor_logger = MonitorLogger()


# ============================================================================
# MONITOR STATE
# ============================================================================

@dataclass
class MonitorState:
    """Mutable monitoring state; lives for the process lifetime."""
    enabled: bool = False
    last_known_reachable: bool = False
    tick_count: int = 0
    last_tick_at: Optional[datetime] = None
    last_change_at: Optional[datetime] = None


# ============================================================================
# MONITOR LOOP
# ============================================================================

class MonitorLoop:
    """
    Periodic reachability monitor for a single host.

    Parameters
    ----------
    prober : ReachabilityProber
        Performs the probes.
    notifier : Notifier
        Sends replies and broadcasts; its recipient registry is guarded
        by this loop's lock.
    monitor_settings : MonitorSettings
        Supplies the target host and the check interval.
    """

    def __init__(
        self,
        prober: ReachabilityProber,
        notifier: Notifier,
        monitor_settings: MonitorSettings,
    ):
        self.prober = prober
        self.notifier = notifier
        self.target_host = monitor_settings.target_host
        self.interval = monitor_settings.interval

        self.state = MonitorState()
        self._lock = asyncio.Lock()
        self._task: Optional[asyncio.Task] = None
        self._broadcast: Optional[asyncio.Task] = None

        logger.info(
            f"MonitorLoop created — target={self.target_host}, "
            f"interval={self.interval}s, method={prober.method.value}"
        )

    # ------------------------------------------------------------------
    # PROPERTIES
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self.state.enabled

    @property
    def _target(self) -> str:
        return StringHelper.escape_html(self.target_host)

    # ------------------------------------------------------------------
    # COMMANDS
    # ------------------------------------------------------------------

    async def register_recipient(self, recipient_id) -> bool:
        """Remember a sender for broadcast notifications."""
        async with self._lock:
            return self.notifier.recipients.add(recipient_id)

    async def start(self, recipient_id) -> bool:
        """
        Enable monitoring and schedule the periodic probe.

        The confirmation goes out before the first tick is scheduled, so
        it always precedes any transition message.

        Returns
        -------
        bool
            True if monitoring was started, False if it was already running.
        """
        async with self._lock:
            already_running = self.state.enabled
            self.state.enabled = True

        if already_running:
            await self.notifier.send(recipient_id, MessageTemplates.MONITORING_ALREADY_RUNNING)
            return False

        await self.notifier.send(
            recipient_id,
            MessageTemplates.MONITORING_STARTED.format(target=self._target),
        )

        async with self._lock:
            # A /stop may have landed while the confirmation was in flight
            if self.state.enabled and self._task is None:
                self._task = asyncio.create_task(self._run_loop(), name="monitor-loop")

        logger.info(f"✓ Monitoring of {self.target_host} started by chat {recipient_id}")
        return True

    async def stop(self, recipient_id) -> bool:
        """
        Disable monitoring, cancel the periodic probe and any transition
        broadcast still being delivered, then confirm.

        Returns
        -------
        bool
            True if monitoring was stopped, False if it was not running.
        """
        async with self._lock:
            was_running = self.state.enabled
            self.state.enabled = False
            tasks = self._detach_tasks()

        if not was_running:
            await self.notifier.send(recipient_id, MessageTemplates.MONITORING_NOT_RUNNING)
            return False

        for task in tasks:
            await self._cancel(task)
        await self.notifier.send(recipient_id, MessageTemplates.MONITORING_STOPPED)

        logger.info(f"✓ Monitoring of {self.target_host} stopped by chat {recipient_id}")
        return True

    async def status(self, recipient_id) -> bool:
        """
        Probe the target right now and reply with the result.

        The cached reachability is neither consulted nor updated.
        """
        reachable = await self.prober.probe(self.target_host)
        template = (
            MessageTemplates.STATUS_REACHABLE if reachable
            else MessageTemplates.STATUS_UNREACHABLE
        )
        await self.notifier.send(recipient_id, template.format(target=self._target))
        return reachable

    # ------------------------------------------------------------------
    # PERIODIC TICK
    # ------------------------------------------------------------------

    async def tick(self) -> Optional[bool]:
        """
        One scheduled check.

        Returns
        -------
        bool | None
            The new reachability if it changed (and was broadcast),
            otherwise None.
        """
        async with self._lock:
            if not self.state.enabled:
                return None

        try:
            result = await self.prober.check(self.target_host)
        except ProbeError as e:
            monitor_logger.log_probe_error(self.target_host, e)
            return None
        except Exception as e:
            logger.exception(f"[Monitor] Unexpected probe failure: {e}")
            return None

        async with self._lock:
            # Stopped while the probe was in flight
            if not self.state.enabled:
                return None

            now = TimeHelper.get_utc_now()
            self.state.tick_count += 1
            self.state.last_tick_at = now

            if result.reachable == self.state.last_known_reachable:
                return None

            self.state.last_known_reachable = result.reachable
            self.state.last_change_at = now
            monitor_logger.log_transition(self.target_host, result.reachable)

            template = (
                MessageTemplates.BECAME_REACHABLE if result.reachable
                else MessageTemplates.BECAME_UNREACHABLE
            )
            broadcast = asyncio.create_task(
                self.notifier.broadcast(
                    template.format(target=self._target),
                    self.notifier.recipients.snapshot(),
                ),
                name="monitor-broadcast",
            )
            self._broadcast = broadcast

        # Delivered outside the lock; stop() and shutdown() cancel it
        await asyncio.wait({broadcast})
        async with self._lock:
            if self._broadcast is broadcast:
                self._broadcast = None
        return result.reachable

    async def _run_loop(self) -> None:
        """
        Fixed-rate schedule: first tick immediately, then one tick every
        ``interval`` seconds measured from the previous scheduled start.
        A tick that overruns its slot delays the next one instead of
        causing a burst.
        """
        loop = asyncio.get_running_loop()
        next_run = loop.time()
        logger.info("[Monitor] Probe loop started")

        while True:
            try:
                await self.tick()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.exception(f"[Monitor] Unhandled error in tick: {e}")

            next_run += self.interval
            now = loop.time()
            if next_run < now:
                next_run = now
            await asyncio.sleep(next_run - now)

    # ------------------------------------------------------------------
    # LIFECYCLE
    # ------------------------------------------------------------------

    async def shutdown(self) -> None:
        """
        Cancel the periodic task and any transition broadcast without
        waiting for an in-flight probe or send to finish. Nothing is sent.
        """
        async with self._lock:
            self.state.enabled = False
            tasks = self._detach_tasks()
        for task in tasks:
            await self._cancel(task)
        logger.info("✓ MonitorLoop shut down")

    def _detach_tasks(self) -> List[asyncio.Task]:
        """Take ownership of the loop and broadcast tasks. Call with the lock held."""
        tasks = [t for t in (self._task, self._broadcast) if t is not None]
        self._task = None
        self._broadcast = None
        return tasks

    @staticmethod
    async def _cancel(task: Optional[asyncio.Task]) -> None:
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug(f"[Monitor] Task {task.get_name()} cancelled")

    # ------------------------------------------------------------------
    # DIAGNOSTIC
    # ------------------------------------------------------------------

    async def snapshot(self) -> Dict[str, Any]:
        """Return current state of the monitor for diagnostics."""
        async with self._lock:
            return {
                "target": self.target_host,
                "enabled": self.state.enabled,
                "last_known_reachable": self.state.last_known_reachable,
                "tick_count": self.state.tick_count,
                "last_tick_at": TimeHelper.format_datetime(self.state.last_tick_at),
                "last_change_at": TimeHelper.format_datetime(self.state.last_change_at),
                "interval_seconds": self.interval,
                "recipients": len(self.notifier.recipients),
            }
