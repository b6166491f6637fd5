"""Routing observability events."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

# Event kinds that carry an error: the update was not handled cleanly.
FAULT_EVENTS = frozenset({"integrity_fault", "handler_failed"})

# Event kinds for updates dropped without reaching application code.
DROP_EVENTS = frozenset({"unclassified", "handler_resolve_failed", "sub_handler_missing"})


@dataclass(frozen=True)
class RoutingEvent:
    """One step of classifying/dispatching an update, as seen by an `on_event` hook."""

    kind: str
    payload: Dict[str, Any]
    error: Optional[BaseException] = None

    @property
    def update_id(self) -> Optional[int]:
        return self.payload.get("update_id")

    @property
    def is_fault(self) -> bool:
        return self.kind in FAULT_EVENTS

    @property
    def is_drop(self) -> bool:
        return self.kind in DROP_EVENTS
