from __future__ import annotations

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from futcalc.calculator import MAX_LEVERAGE, MIN_LEVERAGE
from futcalc.models import Direction, PositionInputs


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Telegram
    telegram_bot_token: str = Field(alias="TELEGRAM_BOT_TOKEN")
    telegram_allowed_chat_ids: str = Field(alias="TELEGRAM_ALLOWED_CHAT_IDS", default="")

    # Calculator defaults for a fresh chat
    default_entry_price: float = Field(alias="DEFAULT_ENTRY_PRICE", default=0.0, ge=0.0)
    default_stop_loss_price: float = Field(alias="DEFAULT_STOP_LOSS_PRICE", default=39000.0, ge=0.0)
    default_target_price: float = Field(alias="DEFAULT_TARGET_PRICE", default=42000.0, ge=0.0)
    default_leverage: int = Field(alias="DEFAULT_LEVERAGE", default=10, ge=MIN_LEVERAGE, le=MAX_LEVERAGE)
    default_margin_amount: float = Field(alias="DEFAULT_MARGIN_AMOUNT", default=1000.0, ge=0.0)
    default_direction: Direction = Field(alias="DEFAULT_DIRECTION", default=Direction.LONG)

    base_asset: str = Field(alias="BASE_ASSET", default="BTC")
    log_level: str = Field(alias="LOG_LEVEL", default="INFO")

    def allowed_chat_ids(self) -> List[int]:
        raw = [x.strip() for x in self.telegram_allowed_chat_ids.split(",") if x.strip()]
        out: List[int] = []
        for item in raw:
            try:
                out.append(int(item))
            except ValueError:
                continue
        return out

    def default_inputs(self) -> PositionInputs:
        return PositionInputs(
            entry_price=self.default_entry_price,
            stop_loss_price=self.default_stop_loss_price,
            target_price=self.default_target_price,
            leverage=self.default_leverage,
            margin_amount=self.default_margin_amount,
            direction=self.default_direction,
        )
