from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from tg_update_router.core.exceptions import IntegrityFault
from tg_update_router.core.kinds import (
    COMMAND_MARKER,
    SCOPE_KINDS,
    UpdateFamily,
    UpdateKind,
)
from tg_update_router.core.probe import probe

if TYPE_CHECKING:
    from tg_update_router.core.registry import HandlerRegistry

ResolvedBy = Literal["witness", "command_marker", "chat_scope"]


class Classification(BaseModel):
    """Outcome of classifying one update against the registered kinds."""

    model_config = ConfigDict(frozen=True)

    kind: Optional[UpdateKind] = Field(
        default=None, description="Selected kind, or None when the update is unclassified."
    )
    family: Optional[UpdateFamily] = Field(
        default=None, description="Family probed: generic when the update has no message."
    )
    resolved_by: Optional[ResolvedBy] = Field(
        default=None, description="Rule that selected the kind."
    )

    @property
    def classified(self) -> bool:
        return self.kind is not None


def _read_field(container: Any, field: str, kind: UpdateKind) -> Any:
    try:
        return getattr(container, field)
    except AttributeError as exc:
        raise IntegrityFault(kind, field, container) from exc


def _chat_scope(message: Any) -> Optional[str]:
    chat = _read_field(message, "chat", UpdateKind.PRIVATE_MESSAGE)
    if chat is None:
        return None
    scope = _read_field(chat, "type", UpdateKind.PRIVATE_MESSAGE)
    return None if scope is None else str(getattr(scope, "value", scope))


def explain(update: Any, registered_kinds: Iterable[UpdateKind]) -> Classification:
    """Classify an update and report which rule decided it.

    Only kinds in `registered_kinds` are probed, in the order given. Families are never
    mixed: an update without a message is probed against generic kinds only, an update
    with a message against message kinds only.
    """
    kinds = list(registered_kinds)
    message = getattr(update, "message", None)

    if message is None:
        generic = [k for k in kinds if k.family is UpdateFamily.GENERIC]
        for kind in generic:
            if probe(update, kind):
                return Classification(kind=kind, family=UpdateFamily.GENERIC, resolved_by="witness")
        return Classification(family=UpdateFamily.GENERIC)

    message_kinds = [k for k in kinds if k.family is UpdateFamily.MESSAGE]
    if not message_kinds:
        return Classification(family=UpdateFamily.MESSAGE)

    for kind in message_kinds:
        if not kind.is_ambiguous and probe(message, kind):
            return Classification(kind=kind, family=UpdateFamily.MESSAGE, resolved_by="witness")

    # The command marker outranks chat scope, whether or not COMMAND is registered.
    text = _read_field(message, "text", UpdateKind.COMMAND)
    if isinstance(text, str) and text.startswith(COMMAND_MARKER):
        return Classification(
            kind=UpdateKind.COMMAND, family=UpdateFamily.MESSAGE, resolved_by="command_marker"
        )

    scope_kind = SCOPE_KINDS.get(_chat_scope(message) or "")
    if scope_kind is not None and scope_kind in message_kinds:
        return Classification(kind=scope_kind, family=UpdateFamily.MESSAGE, resolved_by="chat_scope")
    return Classification(family=UpdateFamily.MESSAGE)


def classify(update: Any, registered_kinds: Iterable[UpdateKind]) -> Optional[UpdateKind]:
    """Return the best-matching registered kind for `update`, or None (unclassified)."""
    return explain(update, registered_kinds).kind


class UpdateClassifier:
    """Classifier bound to a registry; probes only the kinds that have handlers."""

    def __init__(self, registry: "HandlerRegistry") -> None:
        self._registry = registry

    def classify(self, update: Any) -> Optional[UpdateKind]:
        return classify(update, self._registry.registered_kinds())

    def explain(self, update: Any) -> Classification:
        return explain(update, self._registry.registered_kinds())
