"""Kind taxonomy: every recognizable update kind and the field that witnesses it."""

from __future__ import annotations

from enum import Enum
from typing import Optional


COMMAND_MARKER = "/"


class UpdateFamily(str, Enum):
    """Where a kind's witness field lives."""

    GENERIC = "generic"  # on the update itself; the update has no message
    MESSAGE = "message"  # on update.message


class UpdateKind(str, Enum):
    """Closed taxonomy of update kinds."""

    # generic
    EDITED_MESSAGE = "edited_message"
    CALLBACK_QUERY = "callback_query"
    CHANNEL_POST = "channel_post"
    CHAT_JOIN_REQUEST = "chat_join_request"
    CHAT_MEMBER_UPDATED = "chat_member_updated"
    MY_CHAT_MEMBER_UPDATED = "my_chat_member_updated"
    CHOSEN_INLINE_RESULT = "chosen_inline_result"
    EDITED_CHANNEL_POST = "edited_channel_post"
    INLINE_QUERY = "inline_query"
    POLL_ANSWER = "poll_answer"
    SHIPPING_QUERY = "shipping_query"
    PRE_CHECKOUT_QUERY = "pre_checkout_query"

    # message-rooted
    POLL = "poll"
    PHOTO = "photo"
    VIDEO = "video"
    ANIMATION = "animation"
    AUDIO = "audio"
    DICE = "dice"
    DOCUMENT = "document"
    VOICE = "voice"
    LOCATION = "location"
    INVOICE = "invoice"
    STICKER = "sticker"
    CHANNEL_CHAT_CREATED = "channel_chat_created"
    CONTACT = "contact"
    DELETE_CHAT_PHOTO = "delete_chat_photo"
    FORWARDED = "forwarded"
    GAME = "game"
    GROUP_CHAT_CREATED = "group_chat_created"
    NEW_CHAT_MEMBERS = "new_chat_members"
    LEFT_CHAT_MEMBER = "left_chat_member"
    MESSAGE_AUTO_DELETE_TIMER_CHANGED = "message_auto_delete_timer_changed"
    MIGRATE_FROM_CHAT_ID = "migrate_from_chat_id"
    NEW_CHAT_PHOTO = "new_chat_photo"
    NEW_CHAT_TITLE = "new_chat_title"
    PASSPORT_DATA = "passport_data"
    PINNED_MESSAGE = "pinned_message"
    PROXIMITY_ALERT_TRIGGERED = "proximity_alert_triggered"
    SUCCESSFUL_PAYMENT = "successful_payment"
    SUPERGROUP_CHAT_CREATED = "supergroup_chat_created"
    VENUE = "venue"
    VIDEO_NOTE = "video_note"
    WEB_APP_DATA = "web_app_data"

    # message-rooted, ambiguous
    COMMAND = "command"
    PRIVATE_MESSAGE = "private_message"
    GROUP_MESSAGE = "group_message"
    SUPERGROUP_MESSAGE = "supergroup_message"

    @property
    def family(self) -> UpdateFamily:
        return UpdateFamily.GENERIC if self in GENERIC_KINDS else UpdateFamily.MESSAGE

    @property
    def witness(self) -> str:
        return WITNESS_FIELDS[self]

    @property
    def is_ambiguous(self) -> bool:
        return self in AMBIGUOUS_KINDS


GENERIC_KINDS: frozenset[UpdateKind] = frozenset(
    {
        UpdateKind.EDITED_MESSAGE,
        UpdateKind.CALLBACK_QUERY,
        UpdateKind.CHANNEL_POST,
        UpdateKind.CHAT_JOIN_REQUEST,
        UpdateKind.CHAT_MEMBER_UPDATED,
        UpdateKind.MY_CHAT_MEMBER_UPDATED,
        UpdateKind.CHOSEN_INLINE_RESULT,
        UpdateKind.EDITED_CHANNEL_POST,
        UpdateKind.INLINE_QUERY,
        UpdateKind.POLL_ANSWER,
        UpdateKind.SHIPPING_QUERY,
        UpdateKind.PRE_CHECKOUT_QUERY,
    }
)

AMBIGUOUS_KINDS: frozenset[UpdateKind] = frozenset(
    {
        UpdateKind.COMMAND,
        UpdateKind.PRIVATE_MESSAGE,
        UpdateKind.GROUP_MESSAGE,
        UpdateKind.SUPERGROUP_MESSAGE,
    }
)

# Kind -> witness field, in Bot API (and python-telegram-bot attribute) spelling.
# This is the contract with the upstream update schema.
WITNESS_FIELDS: dict[UpdateKind, str] = {
    UpdateKind.EDITED_MESSAGE: "edited_message",
    UpdateKind.CALLBACK_QUERY: "callback_query",
    UpdateKind.CHANNEL_POST: "channel_post",
    UpdateKind.CHAT_JOIN_REQUEST: "chat_join_request",
    UpdateKind.CHAT_MEMBER_UPDATED: "chat_member",
    UpdateKind.MY_CHAT_MEMBER_UPDATED: "my_chat_member",
    UpdateKind.CHOSEN_INLINE_RESULT: "chosen_inline_result",
    UpdateKind.EDITED_CHANNEL_POST: "edited_channel_post",
    UpdateKind.INLINE_QUERY: "inline_query",
    UpdateKind.POLL_ANSWER: "poll_answer",
    UpdateKind.SHIPPING_QUERY: "shipping_query",
    UpdateKind.PRE_CHECKOUT_QUERY: "pre_checkout_query",
    UpdateKind.POLL: "poll",
    UpdateKind.PHOTO: "photo",
    UpdateKind.VIDEO: "video",
    UpdateKind.ANIMATION: "animation",
    UpdateKind.AUDIO: "audio",
    UpdateKind.DICE: "dice",
    UpdateKind.DOCUMENT: "document",
    UpdateKind.VOICE: "voice",
    UpdateKind.LOCATION: "location",
    UpdateKind.INVOICE: "invoice",
    UpdateKind.STICKER: "sticker",
    UpdateKind.CHANNEL_CHAT_CREATED: "channel_chat_created",
    UpdateKind.CONTACT: "contact",
    UpdateKind.DELETE_CHAT_PHOTO: "delete_chat_photo",
    UpdateKind.FORWARDED: "forward_origin",
    UpdateKind.GAME: "game",
    UpdateKind.GROUP_CHAT_CREATED: "group_chat_created",
    UpdateKind.NEW_CHAT_MEMBERS: "new_chat_members",
    UpdateKind.LEFT_CHAT_MEMBER: "left_chat_member",
    UpdateKind.MESSAGE_AUTO_DELETE_TIMER_CHANGED: "message_auto_delete_timer_changed",
    UpdateKind.MIGRATE_FROM_CHAT_ID: "migrate_from_chat_id",
    UpdateKind.NEW_CHAT_PHOTO: "new_chat_photo",
    UpdateKind.NEW_CHAT_TITLE: "new_chat_title",
    UpdateKind.PASSPORT_DATA: "passport_data",
    UpdateKind.PINNED_MESSAGE: "pinned_message",
    UpdateKind.PROXIMITY_ALERT_TRIGGERED: "proximity_alert_triggered",
    UpdateKind.SUCCESSFUL_PAYMENT: "successful_payment",
    UpdateKind.SUPERGROUP_CHAT_CREATED: "supergroup_chat_created",
    UpdateKind.VENUE: "venue",
    UpdateKind.VIDEO_NOTE: "video_note",
    UpdateKind.WEB_APP_DATA: "web_app_data",
    UpdateKind.COMMAND: "text",
    UpdateKind.PRIVATE_MESSAGE: "chat",
    UpdateKind.GROUP_MESSAGE: "chat",
    UpdateKind.SUPERGROUP_MESSAGE: "chat",
}

# message.chat.type -> kind emitted by scope resolution
SCOPE_KINDS: dict[str, UpdateKind] = {
    "private": UpdateKind.PRIVATE_MESSAGE,
    "group": UpdateKind.GROUP_MESSAGE,
    "supergroup": UpdateKind.SUPERGROUP_MESSAGE,
}

MEDIA_KINDS: tuple[UpdateKind, ...] = (
    UpdateKind.POLL,
    UpdateKind.PHOTO,
    UpdateKind.VIDEO,
    UpdateKind.ANIMATION,
    UpdateKind.AUDIO,
    UpdateKind.DICE,
    UpdateKind.INVOICE,
    UpdateKind.STICKER,
    UpdateKind.VIDEO_NOTE,
    UpdateKind.CONTACT,
    UpdateKind.FORWARDED,
    UpdateKind.GAME,
    UpdateKind.PRIVATE_MESSAGE,
    UpdateKind.GROUP_MESSAGE,
    UpdateKind.SUPERGROUP_MESSAGE,
)


def kinds_for(family: UpdateFamily) -> tuple[UpdateKind, ...]:
    """All kinds of a family, in declaration order."""
    return tuple(kind for kind in UpdateKind if kind.family is family)


def kind_from_name(name: str) -> Optional[UpdateKind]:
    """Look up a kind by member name or value, case-insensitively."""
    normalized = name.strip()
    member = UpdateKind.__members__.get(normalized.upper())
    if member is not None:
        return member
    try:
        return UpdateKind(normalized.lower())
    except ValueError:
        return None
