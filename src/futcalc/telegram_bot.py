from __future__ import annotations

import logging
import math
from typing import Dict, List

from telegram import Update
from telegram.constants import ParseMode
from telegram.ext import (
    Application,
    CommandHandler,
    ContextTypes,
)

from futcalc.calculator import MAX_LEVERAGE, MIN_LEVERAGE, parse_leverage
from futcalc.models import Direction, PositionInputs
from futcalc.render import render_position
from futcalc.session import CalculatorSession

log = logging.getLogger("futcalc.telegram")

_AMOUNT_FIELDS = {
    "entry": ("entry_price", "entry price", "40000"),
    "stop": ("stop_loss_price", "stop loss", "39000"),
    "target": ("target_price", "target price", "42000"),
    "margin": ("margin_amount", "margin", "1000"),
}


def _is_allowed(chat_id: int, allowed: List[int]) -> bool:
    # Empty allowlist: the calculator is public.
    return not allowed or chat_id in allowed


class TelegramBot:
    def __init__(
        self,
        *,
        application: Application,
        allowed_chat_ids: List[int],
        default_inputs: PositionInputs,
        asset: str = "BTC",
    ) -> None:
        self.app = application
        self.allowed_chat_ids = allowed_chat_ids
        self.default_inputs = default_inputs
        self.asset = asset
        self.sessions: Dict[int, CalculatorSession] = {}

        self._register_handlers()

    def _register_handlers(self) -> None:
        self.app.add_handler(CommandHandler("start", self.cmd_start))
        self.app.add_handler(CommandHandler("help", self.cmd_help))
        self.app.add_handler(CommandHandler("entry", self.cmd_entry))
        self.app.add_handler(CommandHandler("stop", self.cmd_stop))
        self.app.add_handler(CommandHandler("target", self.cmd_target))
        self.app.add_handler(CommandHandler("margin", self.cmd_margin))
        self.app.add_handler(CommandHandler("leverage", self.cmd_leverage))
        self.app.add_handler(CommandHandler("long", self.cmd_long))
        self.app.add_handler(CommandHandler("short", self.cmd_short))
        self.app.add_handler(CommandHandler("calc", self.cmd_calc))
        self.app.add_handler(CommandHandler("reset", self.cmd_reset))

    def session_for(self, chat_id: int) -> CalculatorSession:
        session = self.sessions.get(chat_id)
        if session is None:
            session = CalculatorSession(self.default_inputs)
            session.subscribe(
                lambda inputs, metrics: log.debug("chat=%s inputs=%s metrics=%s", chat_id, inputs, metrics)
            )
            self.sessions[chat_id] = session
        return session

    async def _guard(self, update: Update) -> bool:
        chat_id = update.effective_chat.id if update.effective_chat else 0
        if not _is_allowed(chat_id, self.allowed_chat_ids):
            await update.message.reply_text("Access denied.")
            return False
        return True

    async def _reply_metrics(self, update: Update, session: CalculatorSession) -> None:
        text = render_position(session.inputs, session.metrics, asset=self.asset)
        await update.message.reply_text(text, parse_mode=ParseMode.HTML)

    async def cmd_start(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        if not await self._guard(update):
            return
        await update.message.reply_text(
            "Futures position calculator.\n"
            "Use /entry, /stop, /target, /leverage, /margin, /long, /short, /calc"
        )

    async def cmd_help(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        if not await self._guard(update):
            return
        await update.message.reply_text(
            "\n".join(
                [
                    "/entry <usd> - entry price",
                    "/stop <usd> - stop loss price",
                    "/target <usd> - target price",
                    f"/leverage <{MIN_LEVERAGE}-{MAX_LEVERAGE}> - leverage multiplier",
                    "/margin <usd> - margin committed",
                    "/long, /short - position direction",
                    "/calc - show position size, P&L, liquidation price",
                    "/reset - restore default inputs",
                ]
            )
        )

    async def _set_amount(self, key: str, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        if not await self._guard(update):
            return

        field, label, example = _AMOUNT_FIELDS[key]
        session = self.session_for(update.effective_chat.id)

        if not context.args:
            current = getattr(session.inputs, field)
            await update.message.reply_text(f"{label} is {current:.2f}. Use: /{key} {example}")
            return

        try:
            val = float(context.args[0])
        except ValueError:
            await update.message.reply_text(f"Invalid number. Example: /{key} {example}")
            return

        if not math.isfinite(val):
            await update.message.reply_text(f"Invalid number. Example: /{key} {example}")
            return

        if val < 0:
            await update.message.reply_text(f"{label} must be >= 0")
            return

        session.update(**{field: val})
        await self._reply_metrics(update, session)

    async def cmd_entry(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await self._set_amount("entry", update, context)

    async def cmd_stop(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await self._set_amount("stop", update, context)

    async def cmd_target(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await self._set_amount("target", update, context)

    async def cmd_margin(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await self._set_amount("margin", update, context)

    async def cmd_leverage(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        if not await self._guard(update):
            return

        session = self.session_for(update.effective_chat.id)
        if not context.args:
            await update.message.reply_text(
                f"leverage is {session.inputs.leverage}x. Use: /leverage 10"
            )
            return

        lev = parse_leverage(context.args[0])
        if lev is None:
            log.info("Rejected leverage %r for chat %s", context.args[0], update.effective_chat.id)
            await update.message.reply_text(
                f"leverage must be an integer between {MIN_LEVERAGE} and {MAX_LEVERAGE}; "
                f"keeping {session.inputs.leverage}x"
            )
            return

        session.update(leverage=lev)
        await self._reply_metrics(update, session)

    async def cmd_long(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        if not await self._guard(update):
            return
        session = self.session_for(update.effective_chat.id)
        session.set_direction(Direction.LONG)
        await self._reply_metrics(update, session)

    async def cmd_short(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        if not await self._guard(update):
            return
        session = self.session_for(update.effective_chat.id)
        session.set_direction(Direction.SHORT)
        await self._reply_metrics(update, session)

    async def cmd_calc(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        if not await self._guard(update):
            return
        await self._reply_metrics(update, self.session_for(update.effective_chat.id))

    async def cmd_reset(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        if not await self._guard(update):
            return
        session = self.session_for(update.effective_chat.id)
        session.reset(self.default_inputs)
        await self._reply_metrics(update, session)
