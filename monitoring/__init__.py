"""
============================================================================
HOST WATCH BOT - MONITORING PACKAGE
============================================================================
Runtime monitoring infrastructure:
    • ReachabilityProber — one ICMP or TCP probe with a fixed timeout
    • MonitorLoop        — start/stop state machine and periodic ticks
    • Notifier           — replies, broadcasts and the recipient registry
    • HealthServer       — optional aiohttp liveness endpoint

File layout
-----------
monitoring/
├── __init__.py          ← this file
├── prober.py            ← ReachabilityProber + ProbeResult
├── monitor.py           ← MonitorLoop + MonitorState
├── notifier.py          ← Notifier + RecipientRegistry
└── health.py            ← HealthServer

============================================================================
"""

from monitoring.prober import ReachabilityProber, ProbeResult
from monitoring.notifier import Notifier, RecipientRegistry, MessageSender
from monitoring.monitor import MonitorLoop, MonitorState
from monitoring.health import HealthServer

__all__ = [
    # Prober
    "ReachabilityProber",
    "ProbeResult",

    # Notifier
    "Notifier",
    "RecipientRegistry",
    "MessageSender",

    # Monitor
    "MonitorLoop",
    "MonitorState",

    # Health endpoint
    "HealthServer",
]
