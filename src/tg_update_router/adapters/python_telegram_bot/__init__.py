"""python-telegram-bot adapter (optional dependency)."""

from tg_update_router.adapters.python_telegram_bot.bridge import (
    PTBUpdateBridge,
    build_application,
    run_polling,
)

__all__ = ["PTBUpdateBridge", "build_application", "run_polling"]
