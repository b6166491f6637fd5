"""Core (framework-agnostic) primitives for tg-update-router."""

from tg_update_router.core.exceptions import (
    ConfigError,
    HandlerFault,
    IntegrityFault,
    RegistryError,
    UpdateRouterError,
)
from tg_update_router.core.events import DROP_EVENTS, FAULT_EVENTS, RoutingEvent
from tg_update_router.core.kinds import (
    AMBIGUOUS_KINDS,
    COMMAND_MARKER,
    GENERIC_KINDS,
    MEDIA_KINDS,
    SCOPE_KINDS,
    WITNESS_FIELDS,
    UpdateFamily,
    UpdateKind,
    kind_from_name,
    kinds_for,
)
from tg_update_router.core.probe import container_for, is_present, probe
from tg_update_router.core.classifier import Classification, UpdateClassifier, classify, explain
from tg_update_router.core.handlers import (
    CommandRouter,
    FunctionHandler,
    KeyedUpdateHandler,
    SpecificUpdateHandler,
    UpdateHandler,
    as_handler,
    callback_data,
    command_name,
)
from tg_update_router.core.registry import HandlerRegistry
from tg_update_router.core.dispatcher import DispatchResult, DispatchStatus, UpdateDispatcher
from tg_update_router.core.config import BotSettings, YamlConfigManager, YamlSettings

__all__ = [
    "UpdateRouterError",
    "RegistryError",
    "IntegrityFault",
    "HandlerFault",
    "ConfigError",
    "RoutingEvent",
    "FAULT_EVENTS",
    "DROP_EVENTS",
    "UpdateFamily",
    "UpdateKind",
    "AMBIGUOUS_KINDS",
    "COMMAND_MARKER",
    "GENERIC_KINDS",
    "MEDIA_KINDS",
    "SCOPE_KINDS",
    "WITNESS_FIELDS",
    "kind_from_name",
    "kinds_for",
    "probe",
    "is_present",
    "container_for",
    "Classification",
    "UpdateClassifier",
    "classify",
    "explain",
    "UpdateHandler",
    "FunctionHandler",
    "SpecificUpdateHandler",
    "KeyedUpdateHandler",
    "CommandRouter",
    "as_handler",
    "command_name",
    "callback_data",
    "HandlerRegistry",
    "DispatchResult",
    "DispatchStatus",
    "UpdateDispatcher",
    "BotSettings",
    "YamlConfigManager",
    "YamlSettings",
]
