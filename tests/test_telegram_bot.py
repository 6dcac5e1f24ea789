from __future__ import annotations

import asyncio

import pytest

from futcalc.models import Direction, PositionInputs
from futcalc.telegram_bot import TelegramBot


class FakeApp:
    def __init__(self):
        self.handlers = []

    def add_handler(self, handler):
        self.handlers.append(handler)


class FakeChat:
    def __init__(self, chat_id):
        self.id = chat_id


class FakeMessage:
    def __init__(self):
        self.replies = []

    async def reply_text(self, text, **kwargs):
        self.replies.append(text)


class FakeUpdate:
    def __init__(self, chat_id=1):
        self.effective_chat = FakeChat(chat_id)
        self.message = FakeMessage()


class FakeContext:
    def __init__(self, *args):
        self.args = list(args)


DEFAULTS = PositionInputs(
    entry_price=40000.0,
    stop_loss_price=39000.0,
    target_price=42000.0,
    leverage=10,
    margin_amount=1000.0,
)


def _bot(allowed=None):
    return TelegramBot(application=FakeApp(), allowed_chat_ids=allowed or [], default_inputs=DEFAULTS)


def _run(handler, *args, chat_id=1):
    update = FakeUpdate(chat_id)
    asyncio.run(handler(update, FakeContext(*args)))
    return update.message.replies


def test_registers_commands():
    bot = _bot()
    commands = {c for h in bot.app.handlers for c in h.commands}
    assert {"entry", "stop", "target", "leverage", "margin", "long", "short", "calc", "reset"} <= commands


def test_calc_renders_default_session():
    bot = _bot()
    replies = _run(bot.cmd_calc)
    assert "0.25000000 BTC" in replies[0]


def test_entry_change_recomputes():
    bot = _bot()
    replies = _run(bot.cmd_entry, "20000")
    assert bot.session_for(1).inputs.entry_price == 20000.0
    assert "0.50000000 BTC" in replies[0]


def test_invalid_and_negative_amounts_rejected():
    bot = _bot()
    assert _run(bot.cmd_margin, "lots")[0].startswith("Invalid number")
    assert _run(bot.cmd_margin, "-1")[0] == "margin must be >= 0"
    assert bot.session_for(1).inputs.margin_amount == 1000.0


def test_amount_without_args_shows_current():
    bot = _bot()
    assert _run(bot.cmd_stop)[0] == "stop loss is 39000.00. Use: /stop 39000"


def test_leverage_out_of_range_keeps_previous():
    bot = _bot()
    replies = _run(bot.cmd_leverage, "5000")
    assert "keeping 10x" in replies[0]
    assert bot.session_for(1).inputs.leverage == 10

    _run(bot.cmd_leverage, "20")
    assert bot.session_for(1).inputs.leverage == 20


def test_direction_and_reset():
    bot = _bot()
    replies = _run(bot.cmd_short)
    assert bot.session_for(1).inputs.direction == Direction.SHORT
    assert "$43600.00" in replies[0]

    _run(bot.cmd_entry, "1")
    _run(bot.cmd_reset)
    assert bot.session_for(1).inputs == DEFAULTS


def test_sessions_are_per_chat():
    bot = _bot()
    _run(bot.cmd_leverage, "50", chat_id=1)
    assert bot.session_for(2).inputs.leverage == 10


@pytest.mark.parametrize("chat_id,allowed", [(7, True), (8, False)])
def test_allowlist(chat_id, allowed):
    bot = _bot(allowed=[7])
    replies = _run(bot.cmd_calc, chat_id=chat_id)
    assert (replies[0] == "Access denied.") is not allowed


@pytest.mark.parametrize("text", ["nan", "inf", "-inf", "1e400"])
def test_non_finite_amounts_rejected(text):
    bot = _bot()
    replies = _run(bot.cmd_margin, text)
    assert replies[0].startswith("Invalid number")
    assert bot.session_for(1).inputs.margin_amount == 1000.0


def test_start_and_help():
    bot = _bot()
    assert "/entry" in _run(bot.cmd_start)[0]
    assert "/leverage <1-1000>" in _run(bot.cmd_help)[0]


def test_long_switches_back_from_short():
    bot = _bot()
    _run(bot.cmd_short)
    replies = _run(bot.cmd_long)
    assert bot.session_for(1).inputs.direction == Direction.LONG
    assert "Long position" in replies[0]
    assert "$36400.00" in replies[0]
