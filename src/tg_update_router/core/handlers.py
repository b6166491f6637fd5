"""Handlers: direct handlers, and delegating handlers that route a second time."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable, Hashable
from typing import Any, Generic, Optional, Protocol, TypeVar, runtime_checkable

from tg_update_router.core.events import RoutingEvent
from tg_update_router.core.exceptions import RegistryError
from tg_update_router.core.kinds import COMMAND_MARKER

IdentifierT = TypeVar("IdentifierT", bound=Hashable)


@runtime_checkable
class UpdateHandler(Protocol):
    """Anything with `handle(update)`; the only contract the dispatcher relies on."""

    def handle(self, update: Any) -> Any:  # pragma: no cover
        ...


class FunctionHandler:
    """Adapts a plain callable `func(update)` to the handler contract."""

    def __init__(self, func: Callable[[Any], Any]) -> None:
        self.func = func

    def handle(self, update: Any) -> Any:
        return self.func(update)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, FunctionHandler) and other.func is self.func

    def __hash__(self) -> int:
        return hash(self.func)

    def __repr__(self) -> str:
        name = getattr(self.func, "__qualname__", repr(self.func))
        return f"FunctionHandler({name})"


def as_handler(obj: Any) -> UpdateHandler:
    """Return `obj` if it already handles updates, else wrap a callable."""
    if callable(getattr(obj, "handle", None)):
        return obj
    if callable(obj):
        return FunctionHandler(obj)
    raise RegistryError(
        f"Handler must provide handle(update) or be callable, got {type(obj).__name__}."
    )


class SpecificUpdateHandler(ABC, Generic[IdentifierT]):
    """Delegating handler: a second routing tier keyed by an application identifier.

    Subclasses implement `extract_identifier`. `handle` looks the identifier up in the
    sub-registry and forwards the update; when nothing is registered for it the update
    is dropped (reported as a `sub_handler_missing` event, never raised).
    """

    def __init__(
        self,
        *,
        on_event: Callable[[RoutingEvent], None] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._specific: dict[IdentifierT, UpdateHandler] = {}
        self._lock = threading.RLock()
        self._on_event = on_event
        self._logger = logger or logging.getLogger(__name__)

    @abstractmethod
    def extract_identifier(self, update: Any) -> Optional[IdentifierT]:
        """Identifier used to pick a sub-handler, or None when there is none."""

    def register_specific(self, identifiers: Any, handler: Any) -> None:
        """Register `handler` for one identifier, or for each identifier in a list.

        Only a list is expanded; tuples and other hashables are single identifiers.
        """
        wrapped = as_handler(handler)
        keys = identifiers if isinstance(identifiers, list) else [identifiers]
        with self._lock:
            for key in keys:
                if key in self._specific:
                    self._logger.debug(
                        "routing.register_specific_ignored handler=%s identifier=%r",
                        type(self).__name__,
                        key,
                    )
                    continue
                self._specific[key] = wrapped

    def get_specific(self, identifier: IdentifierT) -> Optional[UpdateHandler]:
        with self._lock:
            return self._specific.get(identifier)

    def remove_specific(self, identifier: IdentifierT) -> Optional[UpdateHandler]:
        with self._lock:
            return self._specific.pop(identifier, None)

    def identifiers(self) -> tuple[IdentifierT, ...]:
        with self._lock:
            return tuple(self._specific)

    def handle(self, update: Any) -> Any:
        identifier = self.extract_identifier(update)
        handler = self.get_specific(identifier) if identifier is not None else None
        if handler is None:
            self._report_missing(update, identifier)
            return None
        return handler.handle(update)

    def _report_missing(self, update: Any, identifier: Any) -> None:
        payload = {
            "update_id": getattr(update, "update_id", None),
            "handler": type(self).__name__,
            "identifier": identifier,
        }
        self._logger.debug("routing.sub_handler_missing payload=%s", payload)
        if self._on_event:
            try:
                self._on_event(RoutingEvent(kind="sub_handler_missing", payload=payload))
            except Exception:
                self._logger.debug("Routing event hook failed", exc_info=True)


class KeyedUpdateHandler(SpecificUpdateHandler[IdentifierT]):
    """Delegating handler whose identifier comes from a plain extraction function."""

    def __init__(
        self,
        extract: Callable[[Any], Optional[IdentifierT]],
        *,
        on_event: Callable[[RoutingEvent], None] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(on_event=on_event, logger=logger)
        self._extract = extract

    def extract_identifier(self, update: Any) -> Optional[IdentifierT]:
        return self._extract(update)


def command_name(update: Any) -> Optional[str]:
    """`/Start@my_bot arg` -> `start`; None when the message text is not a command."""
    message = getattr(update, "message", None)
    text = getattr(message, "text", None) if message is not None else None
    if not isinstance(text, str) or not text.startswith(COMMAND_MARKER):
        return None
    token = text.split(maxsplit=1)[0]
    name = token[len(COMMAND_MARKER):].split("@", 1)[0].strip().lower()
    return name or None


def callback_data(update: Any) -> Optional[str]:
    """Data attached to an inline keyboard button press, if any."""
    query = getattr(update, "callback_query", None)
    data = getattr(query, "data", None) if query is not None else None
    return data if isinstance(data, str) and data else None


class CommandRouter(KeyedUpdateHandler[str]):
    """Routes COMMAND updates by command name (`/start` -> "start")."""

    def __init__(
        self,
        *,
        on_event: Callable[[RoutingEvent], None] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(command_name, on_event=on_event, logger=logger)

    def command(self, *names: str) -> Callable[[Callable[[Any], Any]], Callable[[Any], Any]]:
        """Decorator registering a function for one or more command names."""

        def decorator(func: Callable[[Any], Any]) -> Callable[[Any], Any]:
            self.register_specific([n.lstrip(COMMAND_MARKER).lower() for n in names], func)
            return func

        return decorator
