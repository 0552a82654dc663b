"""Tests for CommandDispatcher command routing."""

import pytest
from loguru import logger

from bot.dispatcher import build_help_text, build_unknown_command_text
from config.constants import BotCommands, MessageTemplates
from conftest import TARGET


CHAT = "555"


class TestHelpText:
    def test_lists_every_command_and_the_target(self):
        text = build_help_text(TARGET)
        for command in BotCommands.all():
            assert command.value in text
        assert TARGET in text

    def test_target_is_html_escaped(self):
        assert "a&lt;b" in build_help_text("a<b")

    def test_unknown_text_lists_commands(self):
        assert build_unknown_command_text() == (
            "Unknown command. Available commands: /start, /stop, /status, /help"
        )


class TestCommandDispatcher:
    async def test_help(self, dispatcher, sender):
        assert await dispatcher.handle(CHAT, "/help") is BotCommands.HELP
        assert sender.texts_for(CHAT) == [dispatcher.help_text]

    async def test_help_does_not_depend_on_monitoring_state(self, dispatcher, sender):
        await dispatcher.handle(CHAT, "/help")
        await dispatcher.handle(CHAT, "/start")
        await dispatcher.handle(CHAT, "/help")

        helps = [t for t in sender.texts_for(CHAT) if t == dispatcher.help_text]
        assert len(helps) == 2

    @pytest.mark.parametrize("text", [
        "/START",
        "/start now",
        " /help",
        "/help ",
        "start",
        "/stat",
        "",
    ])
    async def test_anything_else_is_unknown(self, dispatcher, monitor, sender, text):
        assert await dispatcher.handle(CHAT, text) is None

        assert sender.texts_for(CHAT) == [dispatcher.unknown_text]
        assert not monitor.is_running

    async def test_start_and_stop_drive_the_monitor(self, dispatcher, monitor, sender):
        assert await dispatcher.handle(CHAT, "/start") is BotCommands.START
        assert monitor.is_running

        assert await dispatcher.handle(CHAT, "/stop") is BotCommands.STOP
        assert not monitor.is_running

        texts = sender.texts_for(CHAT)
        assert texts[0] == MessageTemplates.MONITORING_STARTED.format(target=TARGET)
        assert texts[-1] == MessageTemplates.MONITORING_STOPPED

    async def test_status_probes_now(self, dispatcher, prober, sender):
        prober.default = True
        assert await dispatcher.handle(CHAT, "/status") is BotCommands.STATUS
        assert prober.calls == 1
        assert sender.texts_for(CHAT) == [
            MessageTemplates.STATUS_REACHABLE.format(target=TARGET)
        ]

    @pytest.mark.parametrize("text", ["/help", "/status", "hello"])
    async def test_any_message_registers_the_sender(self, dispatcher, notifier, text):
        await dispatcher.handle(123, text)
        assert "123" in notifier.recipients

    async def test_every_sender_hears_transitions(self, dispatcher, monitor, prober, sender):
        await dispatcher.handle("1", "/help")
        await dispatcher.handle("2", "hi")
        monitor.state.enabled = True
        prober.outcomes = [True]

        await monitor.tick()

        up = MessageTemplates.BECAME_REACHABLE.format(target=TARGET)
        assert sender.texts_for("1")[-1] == up
        assert sender.texts_for("2")[-1] == up


async def test_handled_command_is_logged(dispatcher):
    lines = []
    sink_id = logger.add(lambda message: lines.append(str(message)), level="INFO", format="{message}")
    try:
        await dispatcher.handle(CHAT, "/help")
    finally:
        logger.remove(sink_id)

    assert any(f"Command /help executed for chat {CHAT}" in line for line in lines)
