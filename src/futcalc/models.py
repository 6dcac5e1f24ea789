from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Direction(str, Enum):
    LONG = "long"
    SHORT = "short"


@dataclass(frozen=True)
class PositionInputs:
    entry_price: float  # USD per unit of underlying, 0 means "not set yet"
    stop_loss_price: float
    target_price: float
    leverage: int  # 1..1000, clamped by the caller
    margin_amount: float
    direction: Direction = Direction.LONG

    @property
    def is_long(self) -> bool:
        return self.direction == Direction.LONG


@dataclass(frozen=True)
class PositionMetrics:
    position_size: float  # units of underlying
    potential_loss: float
    potential_profit: float
    liquidation_price: float
    risk_reward_ratio: float
    loss_percentage: float  # % of margin
    profit_percentage: float  # % of margin


@dataclass(frozen=True)
class InputWarning:
    field: str  # "stop_loss_price" | "target_price"
    message: str
