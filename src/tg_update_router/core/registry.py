from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from typing import Any, Optional, Union

from tg_update_router.core.exceptions import RegistryError
from tg_update_router.core.handlers import UpdateHandler, as_handler
from tg_update_router.core.kinds import UpdateFamily, UpdateKind, kind_from_name

KindSpec = Union[UpdateKind, str, Iterable[Union[UpdateKind, str]]]


def _coerce_kind(kind: Any) -> UpdateKind:
    if isinstance(kind, UpdateKind):
        return kind
    if isinstance(kind, str):
        resolved = kind_from_name(kind)
        if resolved is not None:
            return resolved
    raise RegistryError(f"Unknown update kind: {kind!r}.")


def _coerce_kinds(kinds: KindSpec) -> list[UpdateKind]:
    if isinstance(kinds, (UpdateKind, str)):
        return [_coerce_kind(kinds)]
    return [_coerce_kind(k) for k in kinds]


class HandlerRegistry:
    """Kind -> handler mapping with a default fallback.

    Registration is first-writer-wins: registering a kind (or the default) that is
    already set is a silent no-op. Registration order is kept and drives the order
    in which the classifier probes kinds.
    """

    def __init__(self, *, logger: logging.Logger | None = None) -> None:
        self._handlers: dict[UpdateKind, UpdateHandler] = {}
        self._default: Optional[UpdateHandler] = None
        self._lock = threading.RLock()
        self._logger = logger or logging.getLogger(__name__)

    def register(self, kinds: KindSpec, handler: Any) -> None:
        """Register `handler` for one kind or for every kind in an iterable."""
        wrapped = as_handler(handler)
        with self._lock:
            for kind in _coerce_kinds(kinds):
                if kind in self._handlers:
                    self._logger.debug("registry.register_ignored kind=%s", kind.value)
                    continue
                self._handlers[kind] = wrapped
                self._logger.debug("registry.register kind=%s handler=%r", kind.value, wrapped)

    def register_default(self, handler: Any) -> None:
        wrapped = as_handler(handler)
        with self._lock:
            if self._default is None:
                self._default = wrapped
            else:
                self._logger.debug("registry.register_default_ignored handler=%r", wrapped)

    def handler(self, kinds: KindSpec) -> Callable[[Callable[[Any], Any]], Callable[[Any], Any]]:
        """Decorator form of `register` for plain functions."""

        def decorator(func: Callable[[Any], Any]) -> Callable[[Any], Any]:
            self.register(kinds, func)
            return func

        return decorator

    def unregister(self, kind: Union[UpdateKind, str]) -> Optional[UpdateHandler]:
        """Remove and return the specific handler for `kind`, if any."""
        with self._lock:
            return self._handlers.pop(_coerce_kind(kind), None)

    def resolve(self, kind: Optional[UpdateKind]) -> Optional[UpdateHandler]:
        """Specific handler for `kind`, else the default handler, else None."""
        if kind is None:
            return None
        with self._lock:
            handler = self._handlers.get(kind)
            return handler if handler is not None else self._default

    get_handler = resolve

    def has(self, kind: UpdateKind) -> bool:
        """True if `kind` has a specific handler (the default does not count)."""
        with self._lock:
            return kind in self._handlers

    def has_default(self) -> bool:
        with self._lock:
            return self._default is not None

    @property
    def default_handler(self) -> Optional[UpdateHandler]:
        return self._default

    def missing_kinds(self, kinds: KindSpec) -> tuple[UpdateKind, ...]:
        """Kinds from `kinds` that have no specific handler, in the given order."""
        with self._lock:
            return tuple(k for k in _coerce_kinds(kinds) if k not in self._handlers)

    def registered_kinds(self, family: Optional[UpdateFamily] = None) -> tuple[UpdateKind, ...]:
        """Kinds with a specific handler, in registration order."""
        with self._lock:
            kinds = tuple(self._handlers)
        if family is None:
            return kinds
        return tuple(k for k in kinds if k.family is family)

    def __contains__(self, kind: object) -> bool:
        return isinstance(kind, UpdateKind) and self.has(kind)

    def __len__(self) -> int:
        with self._lock:
            return len(self._handlers)
