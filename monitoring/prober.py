"""
============================================================================
HOST WATCH BOT - REACHABILITY PROBER
============================================================================
Answers one question: does the target host respond right now?

Two probe methods are available:

    icmp  one ICMP echo sent by the system ``ping`` executable, run as an
          asyncio subprocess so the event loop never blocks
    tcp   a TCP connect to host:port; a refused connection still proves
          the host is up (it answered with a reset)

Both resolve the host name first, then probe the resolved address. The
whole probe, resolution included, is bounded by one timeout. A probe that
runs out of time is simply "unreachable"; only failures that prevent a
probe from happening at all (unresolvable name, missing ping executable)
are raised as ProbeError by ``check()``.

``probe()`` is the public, never-raising entry point: every failure is
logged and reported as ``False``.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

import asyncio
import math
import socket
import time
from dataclasses import dataclass
from typing import Optional, Tuple

from config.constants import ProbeMethod
from config.settings import MonitorSettings
from exceptions.monitoring import (
    ProbeError,
    HostResolutionError,
    ProbeUnavailableError,
)
from utils.logger import get_logger, MonitorLogger


logger = get_logger("Prober")
monitor_logger = MonitorLogger()


# ============================================================================
# PROBE RESULT
# ============================================================================

@dataclass(frozen=True)
class ProbeResult:
    """Outcome of a single probe."""
    host: str
    reachable: bool
    latency: Optional[float] = None
    ip_address: Optional[str] = None
    detail: Optional[str] = None


# ============================================================================
# PROBER
# ============================================================================

class ReachabilityProber:
    """
    Probes a host with a fixed timeout.

    Parameters
    ----------
    monitor_settings : MonitorSettings
        Supplies the default target, timeout, method, TCP port and the
        ping executable.
    """

    def __init__(self, monitor_settings: MonitorSettings):
        self.settings = monitor_settings
        self.target_host = monitor_settings.target_host
        self.method = monitor_settings.probe_method
        self.default_timeout_ms = monitor_settings.probe_timeout_ms

    # ------------------------------------------------------------------
    # PUBLIC API
    # ------------------------------------------------------------------

    async def probe(self, host: Optional[str] = None, timeout_ms: Optional[int] = None) -> bool:
        """
        Probe *host* (default: the configured target) and return whether it
        answered. Never raises; errors are logged and count as unreachable.
        """
        host = host or self.target_host
        try:
            result = await self.check(host, timeout_ms)
        except ProbeError as e:
            logger.warning(f"Probe of {host} failed: {e.log_format()}")
            return False
        except Exception as e:
            logger.exception(f"Unexpected error probing {host}: {e}")
            return False
        return result.reachable

    async def check(self, host: Optional[str] = None, timeout_ms: Optional[int] = None) -> ProbeResult:
        """
        Probe *host* and return the full result.

        Raises
        ------
        HostResolutionError
            The host name could not be resolved.
        ProbeUnavailableError
            The probe could not be started at all.
        """
        host = host or self.target_host
        timeout = (timeout_ms or self.default_timeout_ms) / 1000
        deadline = time.monotonic() + timeout
        start_time = time.perf_counter()

        try:
            result = await asyncio.wait_for(
                self._resolve_and_probe(host, deadline),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            elapsed = time.perf_counter() - start_time
            logger.debug(f"[{self.method.value}] {host} → no answer within {timeout}s")
            result = ProbeResult(
                host=host,
                reachable=False,
                latency=round(elapsed, 4),
                detail=f"no answer within {timeout}s",
            )

        monitor_logger.log_probe(host, result.reachable, result.latency)
        return result

    # ------------------------------------------------------------------
    # INTERNALS
    # ------------------------------------------------------------------

    async def _resolve_and_probe(self, host: str, deadline: float) -> ProbeResult:
        family, address = await self._resolve(host)

        if self.method == ProbeMethod.TCP:
            return await self._probe_tcp(host, address)
        return await self._probe_icmp(host, address, family, deadline)

    async def _resolve(self, host: str) -> Tuple[int, str]:
        """Resolve *host* to (address family, address)."""
        loop = asyncio.get_running_loop()
        try:
            infos = await loop.getaddrinfo(host, None, type=socket.SOCK_STREAM)
        except socket.gaierror as e:
            raise HostResolutionError(
                f"Cannot resolve {host}: {e}",
                host=host,
                method=self.method.value,
                cause=e,
            ) from e

        if not infos:
            raise HostResolutionError(
                f"No addresses found for {host}",
                host=host,
                method=self.method.value,
            )

        family, _, _, _, sockaddr = infos[0]
        return family, sockaddr[0]

    async def _probe_icmp(self, host: str, address: str, family: int, deadline: float) -> ProbeResult:
        """Send one echo request with the system ping executable."""
        remaining = max(deadline - time.monotonic(), 0.001)
        # ping's -W takes whole seconds on older iputils releases
        wait_seconds = max(1, math.ceil(remaining))

        args = [self.settings.ping_binary, "-n", "-c", "1", "-W", str(wait_seconds)]
        if family == socket.AF_INET6:
            args.append("-6")
        args.append(address)

        start_time = time.perf_counter()
        try:
            proc = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except (FileNotFoundError, PermissionError) as e:
            raise ProbeUnavailableError(
                f"Cannot run {self.settings.ping_binary}: {e}",
                host=host,
                method=ProbeMethod.ICMP.value,
                cause=e,
            ) from e

        try:
            _, stderr = await proc.communicate()
        except asyncio.CancelledError:
            # Timed out or shut down: do not leave the ping process behind
            if proc.returncode is None:
                proc.kill()
            raise

        elapsed = time.perf_counter() - start_time

        if proc.returncode == 0:
            logger.debug(f"[ICMP] {host} ({address}) → reply in {elapsed:.3f}s")
            return ProbeResult(
                host=host,
                reachable=True,
                latency=round(elapsed, 4),
                ip_address=address,
            )

        detail = stderr.decode(errors="replace").strip() or f"ping exited with {proc.returncode}"
        logger.debug(f"[ICMP] {host} ({address}) → no reply: {detail}")
        return ProbeResult(
            host=host,
            reachable=False,
            latency=round(elapsed, 4),
            ip_address=address,
            detail=detail,
        )

    async def _probe_tcp(self, host: str, address: str) -> ProbeResult:
        """Open a TCP connection to address:port and close it again."""
        port = self.settings.tcp_port
        start_time = time.perf_counter()

        try:
            reader, writer = await asyncio.open_connection(address, port)
        except ConnectionRefusedError:
            # A reset comes from the host itself, so it is up
            elapsed = time.perf_counter() - start_time
            logger.debug(f"[TCP] {host}:{port} → refused in {elapsed:.3f}s (host is up)")
            return ProbeResult(
                host=host,
                reachable=True,
                latency=round(elapsed, 4),
                ip_address=address,
                detail="connection refused",
            )
        except OSError as e:
            elapsed = time.perf_counter() - start_time
            logger.debug(f"[TCP] {host}:{port} → {e}")
            return ProbeResult(
                host=host,
                reachable=False,
                latency=round(elapsed, 4),
                ip_address=address,
                detail=str(e),
            )

        elapsed = time.perf_counter() - start_time
        writer.close()
        try:
            await writer.wait_closed()
        except OSError:
            pass  # best-effort close

        logger.debug(f"[TCP] {host}:{port} → connected in {elapsed:.3f}s")
        return ProbeResult(
            host=host,
            reachable=True,
            latency=round(elapsed, 4),
            ip_address=address,
        )
