from __future__ import annotations

from typing import Any, Optional


class UpdateRouterError(Exception):
    """Base class for all tg-update-router errors."""


class RegistryError(UpdateRouterError):
    """Invalid handler registration (bad kind, bad handler)."""


class IntegrityFault(UpdateRouterError):
    """A witness field is missing from the update shape.

    Raised when the static kind/witness table names an attribute the update (or its
    message) does not have, meaning the upstream schema and the taxonomy disagree.
    """

    def __init__(self, kind: Any, witness: str, container: Any) -> None:
        self.kind = kind
        self.witness = witness
        self.container_type = type(container).__name__
        super().__init__(
            f"Witness field '{witness}' for kind {kind} is missing on {self.container_type}."
        )


class HandlerFault(UpdateRouterError):
    """Application handler code raised while handling an update."""

    def __init__(self, kind: Any, handler: Any, error: BaseException) -> None:
        self.kind = kind
        self.handler = handler
        self.error = error
        super().__init__(f"Handler {handler!r} failed for kind {kind}: {error}")


class ConfigError(UpdateRouterError):
    """A configuration file could not be materialized, read or validated."""

    def __init__(self, message: str, *, path: Optional[str] = None) -> None:
        self.path = path
        super().__init__(message if path is None else f"{message} ({path})")
