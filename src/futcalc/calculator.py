from __future__ import annotations

import math
import re
from typing import List, Optional

from futcalc.models import Direction, InputWarning, PositionInputs, PositionMetrics

# Fixed approximation; real liquidation depends on the exchange's maintenance margin.
LIQUIDATION_BUFFER = 0.9

MIN_LEVERAGE = 1
MAX_LEVERAGE = 1000

GOOD_RISK_REWARD = 2.0

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _div(num: float, den: float) -> float:
    """Float division that returns inf/nan on a zero denominator instead of raising."""
    if den == 0:
        if num == 0 or math.isnan(num):
            return math.nan
        return math.copysign(math.inf, num) * math.copysign(1.0, den)
    return num / den


def compute(inputs: PositionInputs) -> PositionMetrics:
    """
    Derive the risk metrics of a single leveraged position.

    Never raises for numeric input: a zero entry price, leverage or margin
    yields inf/nan in the affected fields.
    """
    entry = float(inputs.entry_price)
    stop = float(inputs.stop_loss_price)
    target = float(inputs.target_price)
    leverage = float(inputs.leverage)

    position_value = float(inputs.margin_amount) * leverage
    position_size = _div(position_value, entry)

    if inputs.direction == Direction.LONG:
        potential_loss = _div(position_value * abs(entry - stop), entry)
        potential_profit = _div(position_value * abs(target - entry), entry)
        liquidation_price = entry * (1 - _div(1.0, leverage) * LIQUIDATION_BUFFER)
    else:
        potential_loss = _div(position_value * abs(stop - entry), entry)
        potential_profit = _div(position_value * abs(entry - target), entry)
        liquidation_price = entry * (1 + _div(1.0, leverage) * LIQUIDATION_BUFFER)

    return PositionMetrics(
        position_size=position_size,
        potential_loss=potential_loss,
        potential_profit=potential_profit,
        liquidation_price=liquidation_price,
        risk_reward_ratio=_div(potential_profit, potential_loss),
        loss_percentage=_div(potential_loss, float(inputs.margin_amount)) * 100,
        profit_percentage=_div(potential_profit, float(inputs.margin_amount)) * 100,
    )


def is_liquidation_risky(inputs: PositionInputs, metrics: PositionMetrics) -> bool:
    """True when the stop-loss sits beyond the liquidation price and would never fire."""
    if inputs.direction == Direction.LONG:
        return inputs.stop_loss_price < metrics.liquidation_price
    return inputs.stop_loss_price > metrics.liquidation_price


def liquidation_move_percentage(inputs: PositionInputs, metrics: PositionMetrics) -> float:
    return _div(abs(inputs.entry_price - metrics.liquidation_price), float(inputs.entry_price)) * 100


def risk_reward_rating(metrics: PositionMetrics) -> str:
    return "Good" if metrics.risk_reward_ratio >= GOOD_RISK_REWARD else "Risky"


def input_warnings(inputs: PositionInputs) -> List[InputWarning]:
    """Advisory checks for stop/target placed on the wrong side of entry."""
    out: List[InputWarning] = []
    entry = inputs.entry_price

    if inputs.direction == Direction.LONG:
        if inputs.stop_loss_price >= entry:
            out.append(InputWarning(
                "stop_loss_price", "Stop loss should be below entry price for long positions"
            ))
        if inputs.target_price <= entry:
            out.append(InputWarning(
                "target_price", "Target price should be above entry price for long positions"
            ))
    else:
        if inputs.stop_loss_price <= entry:
            out.append(InputWarning(
                "stop_loss_price", "Stop loss should be above entry price for short positions"
            ))
        if inputs.target_price >= entry:
            out.append(InputWarning(
                "target_price", "Target price should be below entry price for short positions"
            ))
    return out


def parse_leverage(text: str) -> Optional[int]:
    """
    Parse a leverage value typed by the user.

    Only the leading integer counts ("12.7" -> 12, "10x" -> 10, "1e3" -> 1).
    Returns None when there is no leading integer or it falls outside
    [MIN_LEVERAGE, MAX_LEVERAGE]; the caller keeps its previous leverage.
    """
    m = _LEADING_INT.match(text or "")
    if m is None:
        return None
    lev = int(m.group(1))
    if lev < MIN_LEVERAGE or lev > MAX_LEVERAGE:
        return None
    return lev
