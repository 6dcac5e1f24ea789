from __future__ import annotations

import logging

from telegram.ext import Application

from futcalc.config import Settings
from futcalc.logger import setup_logging
from futcalc.telegram_bot import TelegramBot

log = logging.getLogger("futcalc.main")


def main() -> None:
    settings = Settings()
    setup_logging(settings.log_level)

    allowed_ids = settings.allowed_chat_ids()
    if not allowed_ids:
        log.warning("TELEGRAM_ALLOWED_CHAT_IDS is empty; calculator is open to every chat.")

    app = Application.builder().token(settings.telegram_bot_token).build()

    defaults = settings.default_inputs()

    TelegramBot(
        application=app,
        allowed_chat_ids=allowed_ids,
        default_inputs=defaults,
        asset=settings.base_asset,
    )

    log.info("Bot started. allowed_chat_ids=%s defaults=%s", allowed_ids, defaults)
    app.run_polling()


if __name__ == "__main__":
    main()
