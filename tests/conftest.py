"""Shared fixtures: settings, a recording chat sender and a scripted prober."""

import asyncio
from typing import List, Optional, Set, Tuple

import pytest

from bot.dispatcher import CommandDispatcher
from config.constants import ProbeMethod, RecipientMode
from config.settings import BotSettings, MonitorSettings, Settings
from exceptions.delivery import DeliveryError
from monitoring.monitor import MonitorLoop
from monitoring.notifier import Notifier, RecipientRegistry
from monitoring.prober import ProbeResult


TARGET = "watched.example.org"
TOKEN = "123456789:AAHdqTcvCH1vGWJxfSeofSAs0K5PALDsaw"


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------

class RecordingSender:
    """
    MessageSender that records deliveries and can fail for chosen chats.

    Texts listed in ``held_texts`` wait on ``hold`` before being recorded;
    ``holding`` is set as soon as one of them is waiting.
    """

    def __init__(self, failing: Optional[Set[str]] = None):
        self.sent: List[Tuple[str, str]] = []
        self.failing = failing or set()
        self.held_texts: Set[str] = set()
        self.hold = asyncio.Event()
        self.holding = asyncio.Event()

    async def send_text(self, recipient_id: str, text: str) -> None:
        if text in self.held_texts and not self.hold.is_set():
            self.holding.set()
            await self.hold.wait()
        if recipient_id in self.failing:
            raise DeliveryError("chat not found", recipient_id=recipient_id)
        self.sent.append((recipient_id, text))

    def texts_for(self, recipient_id: str) -> List[str]:
        return [text for rid, text in self.sent if rid == recipient_id]


class ScriptedProber:
    """
    Prober returning queued outcomes. Each outcome is a bool or an
    exception instance to raise. When the queue is empty ``default`` is used.
    An optional gate makes ``check`` wait until the test releases it.
    """

    method = ProbeMethod.ICMP

    def __init__(self, outcomes=None, default: bool = False):
        self.outcomes = list(outcomes or [])
        self.default = default
        self.calls = 0
        self.gate: Optional[asyncio.Event] = None
        self.entered = asyncio.Event()

    async def check(self, host=None, timeout_ms=None) -> ProbeResult:
        self.calls += 1
        self.entered.set()
        if self.gate is not None:
            await self.gate.wait()
        outcome = self.outcomes.pop(0) if self.outcomes else self.default
        if isinstance(outcome, BaseException):
            raise outcome
        return ProbeResult(host=host or TARGET, reachable=outcome)

    async def probe(self, host=None, timeout_ms=None) -> bool:
        try:
            return (await self.check(host, timeout_ms)).reachable
        except Exception:
            return False


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def monitor_settings() -> MonitorSettings:
    return MonitorSettings(
        target_host=TARGET,
        interval=0.01,
        probe_timeout_ms=200,
    )


@pytest.fixture
def settings(monitor_settings) -> Settings:
    return Settings(
        bot=BotSettings(token=TOKEN),
        monitor=monitor_settings,
    )


@pytest.fixture
def sender() -> RecordingSender:
    return RecordingSender()


@pytest.fixture
def notifier(sender) -> Notifier:
    return Notifier(sender, RecipientRegistry(RecipientMode.MULTI))


@pytest.fixture
def prober() -> ScriptedProber:
    return ScriptedProber()


@pytest.fixture
async def monitor(prober, notifier, monitor_settings):
    loop = MonitorLoop(prober, notifier, monitor_settings)
    yield loop
    await loop.shutdown()


@pytest.fixture
def dispatcher(monitor, notifier) -> CommandDispatcher:
    return CommandDispatcher(monitor, notifier)


async def wait_until(predicate, timeout: float = 2.0) -> None:
    """Poll *predicate* until it is true or fail after *timeout* seconds."""
    deadline = asyncio.get_running_loop().time() + timeout
    while not predicate():
        if asyncio.get_running_loop().time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.005)
