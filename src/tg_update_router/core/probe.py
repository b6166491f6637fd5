"""Capability probe: does an update carry the witness field of a kind?"""

from __future__ import annotations

from collections.abc import Callable, Sized
from operator import attrgetter
from typing import Any

from tg_update_router.core.exceptions import IntegrityFault
from tg_update_router.core.kinds import WITNESS_FIELDS, UpdateFamily, UpdateKind

Accessor = Callable[[Any], Any]

WITNESS_ACCESSORS: dict[UpdateKind, Accessor] = {
    kind: attrgetter(field) for kind, field in WITNESS_FIELDS.items()
}


def is_present(value: Any) -> bool:
    """Presence rule for witness values.

    None, False and empty strings/sequences/mappings count as absent. python-telegram-bot
    exposes unset list fields (photo, new_chat_members, ...) as empty tuples and unset
    service flags as False.
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, Sized):
        return len(value) > 0
    return True


def container_for(update: Any, kind: UpdateKind) -> Any:
    """The object a kind is probed on: the update, or its message."""
    if kind.family is UpdateFamily.GENERIC:
        return update
    return getattr(update, "message", None)


def probe(container: Any, kind: UpdateKind) -> bool:
    """Return True iff `container` carries a present witness value for `kind`.

    Raises IntegrityFault if the witness attribute does not exist on the container.
    """
    accessor = WITNESS_ACCESSORS[kind]
    try:
        value = accessor(container)
    except AttributeError as exc:
        raise IntegrityFault(kind, kind.witness, container) from exc
    return is_present(value)
