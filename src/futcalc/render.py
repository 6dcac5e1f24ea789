from __future__ import annotations

import math
from typing import List

from futcalc.calculator import (
    input_warnings,
    is_liquidation_risky,
    liquidation_move_percentage,
    risk_reward_rating,
)
from futcalc.models import PositionInputs, PositionMetrics


def _num(value: float, places: int = 2) -> str:
    if not math.isfinite(value):
        return "n/a"
    return f"{value:.{places}f}"


def render_inputs(inputs: PositionInputs) -> str:
    side = "LONG" if inputs.is_long else "SHORT"
    return (
        f"{side} | entry ${_num(inputs.entry_price)} | stop ${_num(inputs.stop_loss_price)} | "
        f"target ${_num(inputs.target_price)} | {inputs.leverage}x | margin ${_num(inputs.margin_amount)}"
    )


def render_position(inputs: PositionInputs, metrics: PositionMetrics, asset: str = "BTC") -> str:
    notional = metrics.position_size * inputs.entry_price if math.isfinite(metrics.position_size) else math.nan
    move = "fall" if inputs.is_long else "rise"

    lines: List[str] = [
        f"<b>{'Long' if inputs.is_long else 'Short'} position</b>",
        render_inputs(inputs),
        "",
        f"Position size: <b>{_num(metrics.position_size, 8)} {asset}</b> (${_num(notional)} USD)",
        f"Risk/Reward: <b>1:{_num(metrics.risk_reward_ratio)}</b> ({risk_reward_rating(metrics)} R:R ratio)",
        f"Potential loss: <b>-${_num(metrics.potential_loss)}</b> "
        f"(-{_num(metrics.loss_percentage)}% of margin)",
        f"Potential profit: <b>+${_num(metrics.potential_profit)}</b> "
        f"(+{_num(metrics.profit_percentage)}% of margin)",
        f"Liquidation price (est.): <b>${_num(metrics.liquidation_price)}</b>",
        f"Price must {move} by {_num(liquidation_move_percentage(inputs, metrics))}% to liquidate",
    ]

    if is_liquidation_risky(inputs, metrics):
        lines.append("⚠️ <b>WARNING: Stop loss is beyond liquidation price!</b>")
    for w in input_warnings(inputs):
        lines.append(f"⚠️ {w.message}")

    return "\n".join(lines)
