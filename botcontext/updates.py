"""Update classification.

An update carries exactly one payload out of a closed set of kinds. Which one
is only discoverable by looking for the populated field, so the lookup lives
here, at the deserialization boundary, and everything downstream works with
the resulting tag.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import StrEnum
from typing import Any

from aiogram.types import Update
from pydantic import BaseModel

from botcontext.errors import UpdateClassificationError


class UpdateType(StrEnum):
    """Known update payload kinds."""

    MESSAGE = "message"
    EDITED_MESSAGE = "edited_message"
    CHANNEL_POST = "channel_post"
    EDITED_CHANNEL_POST = "edited_channel_post"
    BUSINESS_CONNECTION = "business_connection"
    BUSINESS_MESSAGE = "business_message"
    EDITED_BUSINESS_MESSAGE = "edited_business_message"
    DELETED_BUSINESS_MESSAGES = "deleted_business_messages"
    MESSAGE_REACTION = "message_reaction"
    MESSAGE_REACTION_COUNT = "message_reaction_count"
    INLINE_QUERY = "inline_query"
    CHOSEN_INLINE_RESULT = "chosen_inline_result"
    CALLBACK_QUERY = "callback_query"
    SHIPPING_QUERY = "shipping_query"
    PRE_CHECKOUT_QUERY = "pre_checkout_query"
    PURCHASED_PAID_MEDIA = "purchased_paid_media"
    POLL = "poll"
    POLL_ANSWER = "poll_answer"
    MY_CHAT_MEMBER = "my_chat_member"
    CHAT_MEMBER = "chat_member"
    CHAT_JOIN_REQUEST = "chat_join_request"
    CHAT_BOOST = "chat_boost"
    REMOVED_CHAT_BOOST = "removed_chat_boost"


def _fields(update: Update | Mapping[str, Any]) -> Iterable[tuple[str, Any]]:
    if isinstance(update, BaseModel):
        # Declared fields first, then extras the model did not know about
        return iter(update)
    return update.items()


def _is_object(value: Any) -> bool:
    return isinstance(value, (BaseModel, Mapping))


def classify_update(update: Update | Mapping[str, Any]) -> str:
    """Return the name of the populated payload field of ``update``.

    Fields are scanned in their natural order and the first object-valued one
    wins. Known kinds are returned as ``UpdateType`` members, anything else as
    the raw key.

    Raises:
        UpdateClassificationError: no field holds an object.
    """
    for key, value in _fields(update):
        if not _is_object(value):
            continue
        try:
            return UpdateType(key)
        except ValueError:
            return key

    raise UpdateClassificationError(update)


def parse_update(raw: Update | Mapping[str, Any]) -> Update:
    """Validate a raw update into an aiogram ``Update`` and check it is classifiable."""
    update = raw if isinstance(raw, Update) else Update.model_validate(raw)
    classify_update(update)
    return update
