from __future__ import annotations

import logging
from collections.abc import Coroutine
from typing import Any, Optional

from telegram import Update
from telegram.ext import Application, ContextTypes, TypeHandler

from tg_update_router.core import BotSettings, UpdateDispatcher

logger = logging.getLogger(__name__)


class PTBUpdateBridge:
    """Feeds updates received by a python-telegram-bot Application into an UpdateDispatcher.

    PTB owns the transport (polling/webhook, acknowledgement, retries); every update it
    receives is passed, in order, to `dispatcher.dispatch`. Handlers stay synchronous;
    replies can be scheduled with `create_task`.
    """

    def __init__(
        self,
        dispatcher: UpdateDispatcher,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._dispatcher = dispatcher
        self._logger = logger or logging.getLogger(__name__)
        self._application: Optional[Application] = None

    @property
    def application(self) -> Optional[Application]:
        return self._application

    async def callback(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        result = self._dispatcher.dispatch(update)
        if not result.ok:
            self._logger.warning(
                "Update %s not handled cleanly: %s", result.update_id, result.status.value
            )

    def as_handler(self) -> TypeHandler:
        return TypeHandler(Update, self.callback)

    def attach(self, application: Application, *, group: int = 0) -> None:
        """Add the bridge to `application` in handler `group`."""
        application.add_handler(self.as_handler(), group=group)
        self._application = application

    def create_task(self, coroutine: Coroutine[Any, Any, Any]) -> Any:
        """Schedule an outbound Bot API call from inside a synchronous handler."""
        if self._application is None:
            raise RuntimeError("Bridge is not attached to an Application.")
        return self._application.create_task(coroutine)


def build_application(settings: BotSettings, dispatcher: UpdateDispatcher) -> tuple[Application, PTBUpdateBridge]:
    """Build a PTB Application for `settings` with the dispatcher attached."""
    if not settings.token:
        raise ValueError("Telegram bot token not configured")
    for kind in dispatcher.registry.missing_kinds(settings.handled_kinds):
        logger.warning("Kind %s is listed in handled_kinds but has no handler registered", kind.value)
    application = Application.builder().token(settings.token).build()
    bridge = PTBUpdateBridge(dispatcher)
    bridge.attach(application)
    return application, bridge


def run_polling(application: Application, settings: BotSettings) -> None:
    application.run_polling(
        allowed_updates=settings.allowed_updates or Update.ALL_TYPES,
        drop_pending_updates=settings.drop_pending_updates,
    )
