"""
Echo bot wired through tg-update-router.

Run with TELEGRAM_BOT_TOKEN set (or a token in configs/bot.yml):

    pip install -e ".[telegram]"
    python examples/echo_bot/main.py
"""

from __future__ import annotations

import logging
from typing import Any

from tg_update_router.adapters.python_telegram_bot import build_application, run_polling
from tg_update_router.core import (
    MEDIA_KINDS,
    BotSettings,
    CommandRouter,
    HandlerRegistry,
    RoutingEvent,
    UpdateDispatcher,
    UpdateKind,
    YamlConfigManager,
)

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger("echo_bot")

registry = HandlerRegistry()
commands = CommandRouter()
bridge = None  # set in main()


def reply(update: Any, text: str) -> None:
    bridge.create_task(update.effective_message.reply_text(text))


@commands.command("start", "help")
def start(update: Any) -> None:
    reply(update, "Send me anything and I will echo it back.")


@commands.command("ping")
def ping(update: Any) -> None:
    reply(update, "pong")


@registry.handler(UpdateKind.PRIVATE_MESSAGE)
def echo(update: Any) -> None:
    reply(update, update.message.text or "(no text)")


@registry.handler(UpdateKind.CALLBACK_QUERY)
def on_button(update: Any) -> None:
    bridge.create_task(update.callback_query.answer(text=update.callback_query.data))


def on_media(update: Any) -> None:
    reply(update, "Nice media!")


def log_event(event: RoutingEvent) -> None:
    if event.is_fault or event.is_drop:
        logger.info("routing %s (update %s): %s", event.kind, event.update_id, event.payload)


def main() -> None:
    global bridge

    settings = YamlConfigManager("configs").load(BotSettings)
    logging.basicConfig(level=settings.log_level, format=_LOG_FORMAT, datefmt=_DATE_FORMAT)

    registry.register(UpdateKind.COMMAND, commands)
    registry.register(MEDIA_KINDS, on_media)  # PRIVATE_MESSAGE keeps its echo handler

    dispatcher = UpdateDispatcher(registry, on_event=log_event)
    application, bridge = build_application(settings, dispatcher)

    logger.info("Echo bot is running. Press Ctrl+C to stop.")
    run_polling(application, settings)
    logger.info("Stopped. Outcomes: %s", dict(dispatcher.stats))


if __name__ == "__main__":
    main()
