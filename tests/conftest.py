from __future__ import annotations

from types import SimpleNamespace
from typing import Any, Callable, Optional

import pytest

from tg_update_router.core import WITNESS_FIELDS, UpdateFamily, kinds_for

_GENERIC_FIELDS = {WITNESS_FIELDS[k] for k in kinds_for(UpdateFamily.GENERIC)}
_MESSAGE_FIELDS = {WITNESS_FIELDS[k] for k in kinds_for(UpdateFamily.MESSAGE)} - {"text", "chat"}


def build_update(
    *,
    update_id: int = 1,
    text: Optional[str] = None,
    scope: Optional[str] = None,
    message_fields: Optional[dict[str, Any]] = None,
    **generic_fields: Any,
) -> SimpleNamespace:
    """Duck-typed update shaped like telegram.Update, every witness field present."""
    message = None
    if text is not None or scope is not None or message_fields is not None:
        fields = {name: None for name in _MESSAGE_FIELDS}
        fields.update(message_fields or {})
        chat = SimpleNamespace(id=42, type=scope) if scope is not None else None
        message = SimpleNamespace(text=text, chat=chat, **fields)
    fields = {name: None for name in _GENERIC_FIELDS}
    fields.update(generic_fields)
    return SimpleNamespace(update_id=update_id, message=message, **fields)


@pytest.fixture
def make_update() -> Callable[..., SimpleNamespace]:
    return build_update


class RecordingHandler:
    def __init__(self, name: str = "handler", output: Any = None) -> None:
        self.name = name
        self.output = output
        self.calls: list[Any] = []

    def handle(self, update: Any) -> Any:
        self.calls.append(update)
        return self.output

    def __repr__(self) -> str:
        return f"RecordingHandler({self.name})"


@pytest.fixture
def recording_handler() -> Callable[..., RecordingHandler]:
    return RecordingHandler
