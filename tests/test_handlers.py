import logging
from types import SimpleNamespace
from typing import Any, Optional

from tg_update_router.core import (
    CommandRouter,
    KeyedUpdateHandler,
    RoutingEvent,
    SpecificUpdateHandler,
    callback_data,
    command_name,
)


class FixedIdentifierHandler(SpecificUpdateHandler[str]):
    def __init__(self, identifier: Optional[str], **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.identifier = identifier

    def extract_identifier(self, update: Any) -> Optional[str]:
        return self.identifier


def test_delegating_handler_dispatches_to_sub_handler(recording_handler) -> None:
    a, b = recording_handler("A", output="from A"), recording_handler("B")
    handler = FixedIdentifierHandler("start")
    handler.register_specific("start", a)
    handler.register_specific("help", b)

    assert handler.handle("update") == "from A"
    assert a.calls == ["update"]
    assert b.calls == []


def test_unknown_identifier_drops_the_update(recording_handler) -> None:
    a, b = recording_handler("A"), recording_handler("B")
    events: list[RoutingEvent] = []
    handler = FixedIdentifierHandler("unknown", on_event=events.append)
    handler.register_specific("start", a)
    handler.register_specific("help", b)

    assert handler.handle("update") is None
    assert a.calls == [] and b.calls == []
    assert [e.kind for e in events] == ["sub_handler_missing"]
    assert events[0].payload["identifier"] == "unknown"


def test_none_identifier_is_a_miss(recording_handler) -> None:
    handler = FixedIdentifierHandler(None)
    handler.register_specific("start", recording_handler())
    assert handler.handle("update") is None


def test_sub_registry_is_first_writer_wins(recording_handler) -> None:
    first, second = recording_handler("first"), recording_handler("second")
    handler = FixedIdentifierHandler("start")

    handler.register_specific("start", first)
    handler.register_specific("start", second)

    assert handler.get_specific("start") is first


def test_register_specific_with_list_and_remove(recording_handler) -> None:
    shared = recording_handler()
    handler = FixedIdentifierHandler("a")
    handler.register_specific(["a", "b"], shared)

    assert handler.identifiers() == ("a", "b")
    assert handler.remove_specific("a") is shared
    assert handler.get_specific("a") is None
    assert handler.remove_specific("a") is None
    assert handler.get_specific("b") is shared


def test_tuple_identifier_is_a_single_key(recording_handler) -> None:
    target = recording_handler()
    handler = KeyedUpdateHandler(lambda u: u["route"])
    handler.register_specific(("page", 2), target)

    handler.handle({"route": ("page", 2)})

    assert handler.identifiers() == (("page", 2),)
    assert target.calls == [{"route": ("page", 2)}]


def test_duplicate_specific_registration_is_logged(recording_handler, caplog) -> None:
    first, second = recording_handler("first"), recording_handler("second")
    handler = FixedIdentifierHandler("start")
    handler.register_specific("start", first)

    with caplog.at_level(logging.DEBUG):
        handler.register_specific("start", second)

    assert handler.get_specific("start") is first
    assert "register_specific_ignored" in caplog.text


def test_event_hook_failure_is_swallowed(recording_handler) -> None:
    def bad_hook(event: RoutingEvent) -> None:
        raise RuntimeError("boom")

    handler = FixedIdentifierHandler("missing", on_event=bad_hook)
    assert handler.handle("update") is None


def test_keyed_handler_uses_extraction_function(recording_handler) -> None:
    target = recording_handler()
    handler = KeyedUpdateHandler(lambda update: update["route"])
    handler.register_specific(3, target)

    handler.handle({"route": 3})
    handler.handle({"route": 4})

    assert target.calls == [{"route": 3}]


def _command_update(text: Optional[str]) -> SimpleNamespace:
    return SimpleNamespace(message=SimpleNamespace(text=text))


def test_command_name_extraction() -> None:
    assert command_name(_command_update("/start")) == "start"
    assert command_name(_command_update("/Start@my_bot now")) == "start"
    assert command_name(_command_update("hello")) is None
    assert command_name(_command_update(None)) is None
    assert command_name(_command_update("/")) is None
    assert command_name(SimpleNamespace(message=None)) is None


def test_callback_data_extraction() -> None:
    assert callback_data(SimpleNamespace(callback_query=SimpleNamespace(data="page:2"))) == "page:2"
    assert callback_data(SimpleNamespace(callback_query=None)) is None
    assert callback_data(SimpleNamespace(callback_query=SimpleNamespace(data=""))) is None


def test_command_router_decorator() -> None:
    router = CommandRouter()
    replies = []

    @router.command("/start", "begin")
    def start(update):
        replies.append("started")

    router.handle(_command_update("/begin"))
    router.handle(_command_update("/start@bot"))
    router.handle(_command_update("/other"))

    assert replies == ["started", "started"]
    assert set(router.identifiers()) == {"start", "begin"}
