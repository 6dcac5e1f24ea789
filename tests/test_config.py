import pytest
from pydantic import ValidationError

from futcalc.config import Settings
from futcalc.models import Direction


def test_defaults(monkeypatch):
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "token")
    settings = Settings(_env_file=None)

    inp = settings.default_inputs()
    assert inp.entry_price == 0.0
    assert inp.stop_loss_price == 39000.0
    assert inp.target_price == 42000.0
    assert inp.leverage == 10
    assert inp.margin_amount == 1000.0
    assert inp.direction == Direction.LONG
    assert settings.allowed_chat_ids() == []


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "token")
    monkeypatch.setenv("TELEGRAM_ALLOWED_CHAT_IDS", "123, abc,456")
    monkeypatch.setenv("DEFAULT_DIRECTION", "short")
    monkeypatch.setenv("DEFAULT_LEVERAGE", "50")
    settings = Settings(_env_file=None)

    assert settings.allowed_chat_ids() == [123, 456]
    assert settings.default_inputs().direction == Direction.SHORT
    assert settings.default_inputs().leverage == 50


def test_leverage_out_of_range_rejected(monkeypatch):
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "token")
    monkeypatch.setenv("DEFAULT_LEVERAGE", "1001")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)
