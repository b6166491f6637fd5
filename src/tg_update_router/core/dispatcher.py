from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from tg_update_router.core.classifier import UpdateClassifier
from tg_update_router.core.events import RoutingEvent
from tg_update_router.core.exceptions import HandlerFault, IntegrityFault
from tg_update_router.core.handlers import UpdateHandler
from tg_update_router.core.kinds import UpdateKind
from tg_update_router.core.registry import HandlerRegistry


class DispatchStatus(str, Enum):
    HANDLED = "handled"
    UNCLASSIFIED = "unclassified"
    UNHANDLED = "unhandled"
    FAILED = "failed"
    INTEGRITY_FAULT = "integrity_fault"


@dataclass(frozen=True)
class DispatchResult:
    update_id: Optional[int]
    status: DispatchStatus
    kind: Optional[UpdateKind] = None
    handler: Optional[UpdateHandler] = None
    output: Any = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.status not in (DispatchStatus.FAILED, DispatchStatus.INTEGRITY_FAULT)


class UpdateDispatcher:
    """Top-level loop: classify each update, resolve its handler, run it.

    Updates are processed one at a time, in delivery order. A failing handler or a stale
    witness table never stops the loop; both are logged and reported through `on_event`,
    and recorded in the returned DispatchResult.
    """

    def __init__(
        self,
        registry: HandlerRegistry,
        *,
        on_event: Callable[[RoutingEvent], None] | None = None,
        logger: logging.Logger | None = None,
        raise_on_integrity_fault: bool = False,
    ) -> None:
        self._registry = registry
        self._classifier = UpdateClassifier(registry)
        self._on_event = on_event
        self._logger = logger or logging.getLogger(__name__)
        self._raise_on_integrity_fault = raise_on_integrity_fault
        self.stats: Counter[DispatchStatus] = Counter()

    @property
    def registry(self) -> HandlerRegistry:
        return self._registry

    def _emit(
        self, kind: str, payload: dict, error: BaseException | None = None
    ) -> None:
        event = RoutingEvent(kind=kind, payload=payload, error=error)
        if self._on_event:
            try:
                self._on_event(event)
            except Exception:
                # Observability hooks should not break routing.
                self._logger.debug("Routing event hook failed", exc_info=True)
        if error:
            self._logger.debug("routing.%s error=%s payload=%s", kind, error, payload)
        else:
            self._logger.debug("routing.%s payload=%s", kind, payload)

    def _finish(self, result: DispatchResult) -> DispatchResult:
        self.stats[result.status] += 1
        return result

    def dispatch(self, update: Any) -> DispatchResult:
        """Route a single update to its handler."""
        update_id = getattr(update, "update_id", None)

        try:
            classification = self._classifier.explain(update)
        except IntegrityFault as fault:
            self._logger.error("Update %s could not be classified: %s", update_id, fault)
            self._emit("integrity_fault", {"update_id": update_id, "kind": fault.kind.value}, error=fault)
            if self._raise_on_integrity_fault:
                self.stats[DispatchStatus.INTEGRITY_FAULT] += 1
                raise
            return self._finish(
                DispatchResult(update_id=update_id, status=DispatchStatus.INTEGRITY_FAULT, error=fault)
            )

        kind = classification.kind
        if kind is None:
            # Unclassified updates never reach the default handler.
            self._emit("unclassified", {"update_id": update_id, "family": classification.family.value})
            return self._finish(DispatchResult(update_id=update_id, status=DispatchStatus.UNCLASSIFIED))

        self._emit(
            "classified",
            {"update_id": update_id, "kind": kind.value, "resolved_by": classification.resolved_by},
        )

        handler = self._registry.resolve(kind)
        if handler is None:
            self._emit("handler_resolve_failed", {"update_id": update_id, "kind": kind.value})
            return self._finish(
                DispatchResult(update_id=update_id, status=DispatchStatus.UNHANDLED, kind=kind)
            )

        self._emit(
            "handler_resolve_success",
            {"update_id": update_id, "kind": kind.value, "is_default": not self._registry.has(kind)},
        )
        try:
            output = handler.handle(update)
        except Exception as exc:
            fault = HandlerFault(kind, handler, exc)
            fault.__cause__ = exc
            self._logger.exception(
                "Handler %r failed on update %s (%s): %s", handler, update_id, kind.value, exc
            )
            self._emit("handler_failed", {"update_id": update_id, "kind": kind.value}, error=fault)
            return self._finish(
                DispatchResult(
                    update_id=update_id,
                    status=DispatchStatus.FAILED,
                    kind=kind,
                    handler=handler,
                    error=fault,
                )
            )

        self._emit("handler_run_success", {"update_id": update_id, "kind": kind.value})
        return self._finish(
            DispatchResult(
                update_id=update_id,
                status=DispatchStatus.HANDLED,
                kind=kind,
                handler=handler,
                output=output,
            )
        )

    def process(self, updates: Sequence[Any]) -> int:
        """Dispatch a batch in order and return how many updates are acknowledged.

        The whole batch is always acknowledged; per-update failures are reported, not
        redelivered.
        """
        for update in updates:
            self.dispatch(update)
        return len(updates)

    def process_results(self, updates: Sequence[Any]) -> list[DispatchResult]:
        """Like `process`, but return the per-update results."""
        return [self.dispatch(update) for update in updates]
