"""Per-update context.

A ``Context`` wraps one ``Update`` for the duration of its dispatch. It
exposes typed projections of the update and shortcut operations that figure
out which chat, message or user the current update is about and forward the
call to the Bot API transport.

Shortcut operations are plain methods returning the transport's awaitable:
when the update kind cannot serve an operation, ``ContextUsageError`` is
raised at the call site, before anything reaches the transport.

    async def on_update(ctx: Context) -> None:
        if ctx.has("callback_query"):
            await ctx.answer_cb_query("Done")
        await ctx.reply("Hello!")
"""

from __future__ import annotations

import json
from collections.abc import (
    Awaitable,
    Callable,
    Iterable,
    Iterator,
    Mapping,
    MutableMapping,
)
from dataclasses import dataclass
from functools import cached_property
from typing import Any, Generic, TypeVar, overload

from aiogram.types import (
    CallbackQuery,
    Chat,
    ChatJoinRequest,
    ChatMemberUpdated,
    ChosenInlineResult,
    InaccessibleMessage,
    InlineQuery,
    Message,
    PassportData,
    Poll,
    PollAnswer,
    PreCheckoutQuery,
    ShippingQuery,
    Update,
    User,
)
from aiogram.utils.formatting import Text

from botcontext.errors import ContextUsageError
from botcontext.telegram import TelegramTransport
from botcontext.updates import classify_update, parse_update

T = TypeVar("T")

UpdateFilter = str | Callable[[Update], bool]


class StateKey(Generic[T]):
    """Typed key for ``State``."""

    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"StateKey({self.name!r})"


def _key_name(key: StateKey[Any] | str) -> str:
    return key.name if isinstance(key, StateKey) else key


class State(MutableMapping[str, Any]):
    """Key-value store shared by the handlers of a single dispatch."""

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}

    @overload
    def __getitem__(self, key: StateKey[T]) -> T: ...

    @overload
    def __getitem__(self, key: str) -> Any: ...

    def __getitem__(self, key: StateKey[Any] | str) -> Any:
        return self._data[_key_name(key)]

    def __setitem__(self, key: StateKey[Any] | str, value: Any) -> None:
        self._data[_key_name(key)] = value

    def __delitem__(self, key: StateKey[Any] | str) -> None:
        del self._data[_key_name(key)]

    def __contains__(self, key: object) -> bool:
        if isinstance(key, (StateKey, str)):
            return _key_name(key) in self._data
        return False

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    @overload
    def get(self, key: StateKey[T], default: T | None = None) -> T | None: ...

    @overload
    def get(self, key: str, default: Any = None) -> Any: ...

    def get(self, key: StateKey[Any] | str, default: Any = None) -> Any:
        return self._data.get(_key_name(key), default)

    @overload
    def set(self, key: StateKey[T], value: T) -> None: ...

    @overload
    def set(self, key: str, value: Any) -> None: ...

    def set(self, key: StateKey[Any] | str, value: Any) -> None:
        self._data[_key_name(key)] = value


@dataclass(frozen=True)
class WebAppPayload:
    """Data sent from a Web App through ``Telegram.WebApp.sendData``."""

    data: str
    button_text: str

    def text(self) -> str:
        return self.data

    def json(self) -> Any:
        return json.loads(self.data)


AnyMessage = Message | InaccessibleMessage

# Candidate extractors, tried in order; the first non-None one wins.


def _callback_message(update: Update) -> AnyMessage | None:
    return update.callback_query.message if update.callback_query else None


_MESSAGE_SOURCES: tuple[Callable[[Update], Any], ...] = (
    lambda update: update.message,
    lambda update: update.edited_message,
    _callback_message,
    lambda update: update.channel_post,
    lambda update: update.edited_channel_post,
)


def _any_message(update: Update) -> AnyMessage | None:
    return _first(update, _MESSAGE_SOURCES)


_CHAT_SOURCES: tuple[Callable[[Update], Any], ...] = (
    lambda update: update.chat_member,
    lambda update: update.my_chat_member,
    lambda update: update.chat_join_request,
    _any_message,
)

# Queries always carry a sender but never a chat, so they go first here
_FROM_SOURCES: tuple[Callable[[Update], Any], ...] = (
    lambda update: update.callback_query,
    lambda update: update.inline_query,
    lambda update: update.shipping_query,
    lambda update: update.pre_checkout_query,
    lambda update: update.chosen_inline_result,
    lambda update: update.chat_member,
    lambda update: update.my_chat_member,
    lambda update: update.chat_join_request,
    _any_message,
)


def _first(update: Update, sources: Iterable[Callable[[Update], Any]]) -> Any:
    for source in sources:
        value = source(update)
        if value is not None:
            return value
    return None


def _compact(payload: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in payload.items() if value is not None}


class Context:
    """Everything a handler needs to react to a single update."""

    def __init__(
        self,
        update: Update,
        telegram: TelegramTransport,
        bot_info: User | None = None,
    ) -> None:
        self.update = update
        self.telegram = telegram
        self.bot_info = bot_info
        self.state = State()

    @cached_property
    def update_type(self) -> str:
        """Kind of the wrapped update, e.g. ``"message"`` or ``"callback_query"``."""
        return classify_update(self.update)

    @property
    def me(self) -> str | None:
        """Bot username."""
        return self.bot_info.username if self.bot_info else None

    # -------------------------------------------------------------------------
    # Projections
    # -------------------------------------------------------------------------

    @property
    def message(self) -> Message | None:
        return self.update.message

    @property
    def edited_message(self) -> Message | None:
        return self.update.edited_message

    @property
    def inline_query(self) -> InlineQuery | None:
        return self.update.inline_query

    @property
    def shipping_query(self) -> ShippingQuery | None:
        return self.update.shipping_query

    @property
    def pre_checkout_query(self) -> PreCheckoutQuery | None:
        return self.update.pre_checkout_query

    @property
    def chosen_inline_result(self) -> ChosenInlineResult | None:
        return self.update.chosen_inline_result

    @property
    def channel_post(self) -> Message | None:
        return self.update.channel_post

    @property
    def edited_channel_post(self) -> Message | None:
        return self.update.edited_channel_post

    @property
    def callback_query(self) -> CallbackQuery | None:
        return self.update.callback_query

    @property
    def poll(self) -> Poll | None:
        return self.update.poll

    @property
    def poll_answer(self) -> PollAnswer | None:
        return self.update.poll_answer

    @property
    def my_chat_member(self) -> ChatMemberUpdated | None:
        return self.update.my_chat_member

    @property
    def chat_member(self) -> ChatMemberUpdated | None:
        return self.update.chat_member

    @property
    def chat_join_request(self) -> ChatJoinRequest | None:
        return self.update.chat_join_request

    @property
    def any_message(self) -> AnyMessage | None:
        """Message the update is about.

        Checks message, edited message, the callback query's message, channel
        post and edited channel post, in that order.
        """
        return _any_message(self.update)

    @property
    def chat(self) -> Chat | None:
        return getattr(_first(self.update, _CHAT_SOURCES), "chat", None)

    @property
    def sender_chat(self) -> Chat | None:
        return getattr(self.any_message, "sender_chat", None)

    @property
    def from_user(self) -> User | None:
        return getattr(_first(self.update, _FROM_SOURCES), "from_user", None)

    @property
    def inline_message_id(self) -> str | None:
        source = self.callback_query or self.chosen_inline_result
        return source.inline_message_id if source else None

    @property
    def passport_data(self) -> PassportData | None:
        if self.message is None:
            return None
        return self.message.passport_data

    @property
    def web_app_data(self) -> WebAppPayload | None:
        if self.message is None or self.message.web_app_data is None:
            return None
        data = self.message.web_app_data
        return WebAppPayload(data=data.data, button_text=data.button_text)

    def has(self, filters: UpdateFilter | Iterable[UpdateFilter]) -> bool:
        """Check the update against update kinds or predicates, any match wins."""
        if isinstance(filters, str) or callable(filters):
            filters = [filters]
        for update_filter in filters:
            if callable(update_filter):
                if update_filter(self.update):
                    return True
            elif self._has_field(update_filter):
                return True
        return False

    def _has_field(self, name: str) -> bool:
        # Only payload fields count, not model helpers like ``event_type``
        if name in type(self.update).model_fields:
            return getattr(self.update, name) is not None
        extra = self.update.model_extra or {}
        return extra.get(name) is not None

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------

    def _require(self, value: T | None, op: str) -> T:
        if value is None:
            raise ContextUsageError(op, self.update_type)
        return value

    def _call(self, api_method: str, payload: Mapping[str, Any]) -> Awaitable[Any]:
        return self.telegram.call_api(api_method, _compact(payload))

    @property
    def _thread_id(self) -> int | None:
        message = self.message
        if message is not None and message.is_topic_message:
            return message.message_thread_id
        return None

    @property
    def _reply_to_message_id(self) -> int | None:
        message = self.any_message
        return message.message_id if message is not None else None

    def _answer(
        self, op: str, api_method: str, query: Any, id_field: str, /, **payload: Any
    ) -> Awaitable[Any]:
        query = self._require(query, op)
        return self._call(api_method, {id_field: query.id, **payload})

    def _edit(self, op: str, api_method: str, /, **payload: Any) -> Awaitable[Any]:
        callback_query = self.callback_query
        inline_message_id = self.inline_message_id
        if callback_query is None and inline_message_id is None:
            raise ContextUsageError(op, self.update_type)

        chat = self.chat
        message = callback_query.message if callback_query else None
        return self._call(
            api_method,
            {
                "chat_id": chat.id if chat else None,
                "message_id": message.message_id if message else None,
                "inline_message_id": inline_message_id,
                **payload,
            },
        )

    def _chat_call(self, op: str, api_method: str, /, **payload: Any) -> Awaitable[Any]:
        chat = self._require(self.chat, op)
        return self._call(api_method, {"chat_id": chat.id, **payload})

    def _send(self, op: str, api_method: str, /, **payload: Any) -> Awaitable[Any]:
        chat = self._require(self.chat, op)
        return self._call(
            api_method,
            {"chat_id": chat.id, "message_thread_id": self._thread_id, **payload},
        )

    def _topic_call(self, op: str, api_method: str, /, **payload: Any) -> Awaitable[Any]:
        chat = self._require(self.chat, op)
        thread_id = self._require(
            self.message.message_thread_id if self.message else None, op
        )
        return self._call(
            api_method,
            {"chat_id": chat.id, "message_thread_id": thread_id, **payload},
        )

    def _user_call(self, op: str, api_method: str, /, **payload: Any) -> Awaitable[Any]:
        user = self._require(self.from_user, op)
        return self._call(api_method, {"user_id": user.id, **payload})

    def _message_call(
        self, op: str, api_method: str, chat_id: int | str, /, **payload: Any
    ) -> Awaitable[Any]:
        message = self._require(self.any_message, op)
        return self._call(
            api_method,
            {
                "chat_id": chat_id,
                "from_chat_id": message.chat.id,
                "message_id": message.message_id,
                **payload,
            },
        )

    def _reply_with(
        self, send: Callable[..., Awaitable[Any]], /, *args: Any, **extra: Any
    ) -> Awaitable[Any]:
        return send(*args, **{"reply_to_message_id": self._reply_to_message_id, **extra})

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def answer_inline_query(self, results: list[Any], **extra: Any) -> Awaitable[Any]:
        return self._answer(
            "answer_inline_query",
            "answerInlineQuery",
            self.inline_query,
            "inline_query_id",
            results=results,
            **extra,
        )

    def answer_cb_query(self, text: str | None = None, **extra: Any) -> Awaitable[Any]:
        return self._answer(
            "answer_cb_query",
            "answerCallbackQuery",
            self.callback_query,
            "callback_query_id",
            text=text,
            **extra,
        )

    def answer_game_query(self, url: str) -> Awaitable[Any]:
        """Answer a callback query from a game button by opening ``url``."""
        return self._answer(
            "answer_game_query",
            "answerCallbackQuery",
            self.callback_query,
            "callback_query_id",
            url=url,
        )

    def answer_shipping_query(
        self,
        ok: bool,
        shipping_options: list[Any] | None = None,
        error_message: str | None = None,
    ) -> Awaitable[Any]:
        return self._answer(
            "answer_shipping_query",
            "answerShippingQuery",
            self.shipping_query,
            "shipping_query_id",
            ok=ok,
            shipping_options=shipping_options,
            error_message=error_message,
        )

    def answer_pre_checkout_query(
        self, ok: bool, error_message: str | None = None
    ) -> Awaitable[Any]:
        return self._answer(
            "answer_pre_checkout_query",
            "answerPreCheckoutQuery",
            self.pre_checkout_query,
            "pre_checkout_query_id",
            ok=ok,
            error_message=error_message,
        )

    # -------------------------------------------------------------------------
    # Editing, addressed by chat + message id or by inline message id
    # -------------------------------------------------------------------------

    def edit_message_text(self, text: str | Text, **extra: Any) -> Awaitable[Any]:
        fields = text.as_kwargs() if isinstance(text, Text) else {"text": text}
        return self._edit("edit_message_text", "editMessageText", **{**fields, **extra})

    def edit_message_caption(
        self, caption: str | None = None, **extra: Any
    ) -> Awaitable[Any]:
        return self._edit(
            "edit_message_caption", "editMessageCaption", caption=caption, **extra
        )

    def edit_message_media(self, media: Any, **extra: Any) -> Awaitable[Any]:
        return self._edit("edit_message_media", "editMessageMedia", media=media, **extra)

    def edit_message_reply_markup(self, reply_markup: Any = None) -> Awaitable[Any]:
        return self._edit(
            "edit_message_reply_markup",
            "editMessageReplyMarkup",
            reply_markup=reply_markup,
        )

    def edit_message_live_location(
        self, latitude: float, longitude: float, **extra: Any
    ) -> Awaitable[Any]:
        return self._edit(
            "edit_message_live_location",
            "editMessageLiveLocation",
            latitude=latitude,
            longitude=longitude,
            **extra,
        )

    def stop_message_live_location(self, reply_markup: Any = None) -> Awaitable[Any]:
        return self._edit(
            "stop_message_live_location",
            "stopMessageLiveLocation",
            reply_markup=reply_markup,
        )

    # -------------------------------------------------------------------------
    # Sending to the current chat
    # -------------------------------------------------------------------------

    def send_message(self, text: str | Text, **extra: Any) -> Awaitable[Any]:
        """Send a message to the current chat.

        Accepts plain strings or aiogram ``Text`` formatting nodes. Inside a
        forum topic the message goes to the same topic unless
        ``message_thread_id`` is passed explicitly.
        """
        fields = text.as_kwargs() if isinstance(text, Text) else {"text": text}
        return self._send("send_message", "sendMessage", **{**fields, **extra})

    def send_photo(self, photo: Any, **extra: Any) -> Awaitable[Any]:
        return self._send("send_photo", "sendPhoto", photo=photo, **extra)

    def send_media_group(self, media: list[Any], **extra: Any) -> Awaitable[Any]:
        return self._send("send_media_group", "sendMediaGroup", media=media, **extra)

    def send_audio(self, audio: Any, **extra: Any) -> Awaitable[Any]:
        return self._send("send_audio", "sendAudio", audio=audio, **extra)

    def send_dice(self, **extra: Any) -> Awaitable[Any]:
        return self._send("send_dice", "sendDice", **extra)

    def send_document(self, document: Any, **extra: Any) -> Awaitable[Any]:
        return self._send("send_document", "sendDocument", document=document, **extra)

    def send_sticker(self, sticker: Any, **extra: Any) -> Awaitable[Any]:
        return self._send("send_sticker", "sendSticker", sticker=sticker, **extra)

    def send_video(self, video: Any, **extra: Any) -> Awaitable[Any]:
        return self._send("send_video", "sendVideo", video=video, **extra)

    def send_animation(self, animation: Any, **extra: Any) -> Awaitable[Any]:
        return self._send(
            "send_animation", "sendAnimation", animation=animation, **extra
        )

    def send_video_note(self, video_note: Any, **extra: Any) -> Awaitable[Any]:
        return self._send(
            "send_video_note", "sendVideoNote", video_note=video_note, **extra
        )

    def send_invoice(
        self,
        title: str,
        description: str,
        payload: str,
        currency: str,
        prices: list[Any],
        **extra: Any,
    ) -> Awaitable[Any]:
        return self._send(
            "send_invoice",
            "sendInvoice",
            title=title,
            description=description,
            payload=payload,
            currency=currency,
            prices=prices,
            **extra,
        )

    def send_game(self, game_short_name: str, **extra: Any) -> Awaitable[Any]:
        return self._send(
            "send_game", "sendGame", game_short_name=game_short_name, **extra
        )

    def send_voice(self, voice: Any, **extra: Any) -> Awaitable[Any]:
        return self._send("send_voice", "sendVoice", voice=voice, **extra)

    def send_poll(
        self, question: str, options: list[Any], **extra: Any
    ) -> Awaitable[Any]:
        return self._send(
            "send_poll", "sendPoll", question=question, options=options, **extra
        )

    def send_quiz(
        self, question: str, options: list[Any], **extra: Any
    ) -> Awaitable[Any]:
        return self._send(
            "send_quiz",
            "sendPoll",
            **{"type": "quiz", "question": question, "options": options, **extra},
        )

    def send_location(
        self, latitude: float, longitude: float, **extra: Any
    ) -> Awaitable[Any]:
        return self._send(
            "send_location",
            "sendLocation",
            latitude=latitude,
            longitude=longitude,
            **extra,
        )

    def send_venue(
        self,
        latitude: float,
        longitude: float,
        title: str,
        address: str,
        **extra: Any,
    ) -> Awaitable[Any]:
        return self._send(
            "send_venue",
            "sendVenue",
            latitude=latitude,
            longitude=longitude,
            title=title,
            address=address,
            **extra,
        )

    def send_contact(
        self, phone_number: str, first_name: str, **extra: Any
    ) -> Awaitable[Any]:
        return self._send(
            "send_contact",
            "sendContact",
            phone_number=phone_number,
            first_name=first_name,
            **extra,
        )

    # -------------------------------------------------------------------------
    # Replying to the message the update is about
    # -------------------------------------------------------------------------

    def reply(self, text: str | Text, **extra: Any) -> Awaitable[Any]:
        return self._reply_with(self.send_message, text, **extra)

    def reply_with_markdown(self, markdown: str, **extra: Any) -> Awaitable[Any]:
        """Deprecated by Telegram, prefer ``reply_with_markdown_v2``."""
        return self.reply(markdown, **{"parse_mode": "Markdown", **extra})

    def reply_with_markdown_v2(self, markdown: str, **extra: Any) -> Awaitable[Any]:
        return self.reply(markdown, **{"parse_mode": "MarkdownV2", **extra})

    def reply_with_html(self, html: str, **extra: Any) -> Awaitable[Any]:
        return self.reply(html, **{"parse_mode": "HTML", **extra})

    def reply_with_photo(self, photo: Any, **extra: Any) -> Awaitable[Any]:
        return self._reply_with(self.send_photo, photo, **extra)

    def reply_with_media_group(self, media: list[Any], **extra: Any) -> Awaitable[Any]:
        return self._reply_with(self.send_media_group, media, **extra)

    def reply_with_audio(self, audio: Any, **extra: Any) -> Awaitable[Any]:
        return self._reply_with(self.send_audio, audio, **extra)

    def reply_with_dice(self, **extra: Any) -> Awaitable[Any]:
        return self._reply_with(self.send_dice, **extra)

    def reply_with_document(self, document: Any, **extra: Any) -> Awaitable[Any]:
        return self._reply_with(self.send_document, document, **extra)

    def reply_with_sticker(self, sticker: Any, **extra: Any) -> Awaitable[Any]:
        return self._reply_with(self.send_sticker, sticker, **extra)

    def reply_with_video(self, video: Any, **extra: Any) -> Awaitable[Any]:
        return self._reply_with(self.send_video, video, **extra)

    def reply_with_animation(self, animation: Any, **extra: Any) -> Awaitable[Any]:
        return self._reply_with(self.send_animation, animation, **extra)

    def reply_with_video_note(self, video_note: Any, **extra: Any) -> Awaitable[Any]:
        return self._reply_with(self.send_video_note, video_note, **extra)

    def reply_with_invoice(
        self,
        title: str,
        description: str,
        payload: str,
        currency: str,
        prices: list[Any],
        **extra: Any,
    ) -> Awaitable[Any]:
        return self._reply_with(
            self.send_invoice, title, description, payload, currency, prices, **extra
        )

    def reply_with_game(self, game_short_name: str, **extra: Any) -> Awaitable[Any]:
        return self._reply_with(self.send_game, game_short_name, **extra)

    def reply_with_voice(self, voice: Any, **extra: Any) -> Awaitable[Any]:
        return self._reply_with(self.send_voice, voice, **extra)

    def reply_with_poll(
        self, question: str, options: list[Any], **extra: Any
    ) -> Awaitable[Any]:
        return self._reply_with(self.send_poll, question, options, **extra)

    def reply_with_quiz(
        self, question: str, options: list[Any], **extra: Any
    ) -> Awaitable[Any]:
        return self._reply_with(self.send_quiz, question, options, **extra)

    def reply_with_location(
        self, latitude: float, longitude: float, **extra: Any
    ) -> Awaitable[Any]:
        return self._reply_with(self.send_location, latitude, longitude, **extra)

    def reply_with_venue(
        self,
        latitude: float,
        longitude: float,
        title: str,
        address: str,
        **extra: Any,
    ) -> Awaitable[Any]:
        return self._reply_with(
            self.send_venue, latitude, longitude, title, address, **extra
        )

    def reply_with_contact(
        self, phone_number: str, first_name: str, **extra: Any
    ) -> Awaitable[Any]:
        return self._reply_with(self.send_contact, phone_number, first_name, **extra)

    # -------------------------------------------------------------------------
    # Chat management
    # -------------------------------------------------------------------------

    def get_chat(self) -> Awaitable[Any]:
        return self._chat_call("get_chat", "getChat")

    def export_chat_invite_link(self) -> Awaitable[Any]:
        return self._chat_call("export_chat_invite_link", "exportChatInviteLink")

    def create_chat_invite_link(self, **extra: Any) -> Awaitable[Any]:
        return self._chat_call(
            "create_chat_invite_link", "createChatInviteLink", **extra
        )

    def edit_chat_invite_link(self, invite_link: str, **extra: Any) -> Awaitable[Any]:
        return self._chat_call(
            "edit_chat_invite_link",
            "editChatInviteLink",
            invite_link=invite_link,
            **extra,
        )

    def revoke_chat_invite_link(self, invite_link: str) -> Awaitable[Any]:
        return self._chat_call(
            "revoke_chat_invite_link", "revokeChatInviteLink", invite_link=invite_link
        )

    def ban_chat_member(
        self, user_id: int, until_date: int | None = None, **extra: Any
    ) -> Awaitable[Any]:
        return self._chat_call(
            "ban_chat_member",
            "banChatMember",
            user_id=user_id,
            until_date=until_date,
            **extra,
        )

    def unban_chat_member(self, user_id: int, **extra: Any) -> Awaitable[Any]:
        return self._chat_call(
            "unban_chat_member", "unbanChatMember", user_id=user_id, **extra
        )

    def restrict_chat_member(
        self, user_id: int, permissions: Any, **extra: Any
    ) -> Awaitable[Any]:
        return self._chat_call(
            "restrict_chat_member",
            "restrictChatMember",
            user_id=user_id,
            permissions=permissions,
            **extra,
        )

    def promote_chat_member(self, user_id: int, **extra: Any) -> Awaitable[Any]:
        return self._chat_call(
            "promote_chat_member", "promoteChatMember", user_id=user_id, **extra
        )

    def set_chat_administrator_custom_title(
        self, user_id: int, custom_title: str
    ) -> Awaitable[Any]:
        return self._chat_call(
            "set_chat_administrator_custom_title",
            "setChatAdministratorCustomTitle",
            user_id=user_id,
            custom_title=custom_title,
        )

    def set_chat_photo(self, photo: Any) -> Awaitable[Any]:
        return self._chat_call("set_chat_photo", "setChatPhoto", photo=photo)

    def delete_chat_photo(self) -> Awaitable[Any]:
        return self._chat_call("delete_chat_photo", "deleteChatPhoto")

    def set_chat_title(self, title: str) -> Awaitable[Any]:
        return self._chat_call("set_chat_title", "setChatTitle", title=title)

    def set_chat_description(self, description: str | None = None) -> Awaitable[Any]:
        return self._chat_call(
            "set_chat_description", "setChatDescription", description=description
        )

    def pin_chat_message(self, message_id: int, **extra: Any) -> Awaitable[Any]:
        return self._chat_call(
            "pin_chat_message", "pinChatMessage", message_id=message_id, **extra
        )

    def unpin_chat_message(self, message_id: int | None = None) -> Awaitable[Any]:
        return self._chat_call(
            "unpin_chat_message", "unpinChatMessage", message_id=message_id
        )

    def unpin_all_chat_messages(self) -> Awaitable[Any]:
        return self._chat_call("unpin_all_chat_messages", "unpinAllChatMessages")

    def leave_chat(self) -> Awaitable[Any]:
        return self._chat_call("leave_chat", "leaveChat")

    def set_chat_permissions(self, permissions: Any, **extra: Any) -> Awaitable[Any]:
        return self._chat_call(
            "set_chat_permissions",
            "setChatPermissions",
            permissions=permissions,
            **extra,
        )

    def get_chat_administrators(self) -> Awaitable[Any]:
        return self._chat_call("get_chat_administrators", "getChatAdministrators")

    def get_chat_member(self, user_id: int) -> Awaitable[Any]:
        return self._chat_call("get_chat_member", "getChatMember", user_id=user_id)

    def get_chat_members_count(self) -> Awaitable[Any]:
        return self._chat_call("get_chat_members_count", "getChatMemberCount")

    def stop_poll(self, message_id: int, **extra: Any) -> Awaitable[Any]:
        return self._chat_call("stop_poll", "stopPoll", message_id=message_id, **extra)

    def send_chat_action(self, action: str, **extra: Any) -> Awaitable[Any]:
        return self._chat_call(
            "send_chat_action", "sendChatAction", action=action, **extra
        )

    def set_chat_sticker_set(self, sticker_set_name: str) -> Awaitable[Any]:
        return self._chat_call(
            "set_chat_sticker_set",
            "setChatStickerSet",
            sticker_set_name=sticker_set_name,
        )

    def delete_chat_sticker_set(self) -> Awaitable[Any]:
        return self._chat_call("delete_chat_sticker_set", "deleteChatStickerSet")

    def approve_chat_join_request(self, user_id: int) -> Awaitable[Any]:
        return self._chat_call(
            "approve_chat_join_request", "approveChatJoinRequest", user_id=user_id
        )

    def decline_chat_join_request(self, user_id: int) -> Awaitable[Any]:
        return self._chat_call(
            "decline_chat_join_request", "declineChatJoinRequest", user_id=user_id
        )

    def ban_chat_sender_chat(self, sender_chat_id: int) -> Awaitable[Any]:
        return self._chat_call(
            "ban_chat_sender_chat", "banChatSenderChat", sender_chat_id=sender_chat_id
        )

    def unban_chat_sender_chat(self, sender_chat_id: int) -> Awaitable[Any]:
        return self._chat_call(
            "unban_chat_sender_chat",
            "unbanChatSenderChat",
            sender_chat_id=sender_chat_id,
        )

    def set_chat_menu_button(self, menu_button: Any = None) -> Awaitable[Any]:
        """Change the bot's menu button in the current private chat."""
        return self._chat_call(
            "set_chat_menu_button", "setChatMenuButton", menu_button=menu_button
        )

    def get_chat_menu_button(self) -> Awaitable[Any]:
        return self._chat_call("get_chat_menu_button", "getChatMenuButton")

    def delete_message(self, message_id: int | None = None) -> Awaitable[Any]:
        """Delete ``message_id`` or, by default, the message the update is about."""
        chat = self._require(self.chat, "delete_message")
        if message_id is None:
            message_id = self._require(self.any_message, "delete_message").message_id
        return self._call("deleteMessage", {"chat_id": chat.id, "message_id": message_id})

    def forward_message(self, chat_id: int | str, **extra: Any) -> Awaitable[Any]:
        """Forward the message the update is about to ``chat_id``."""
        return self._message_call("forward_message", "forwardMessage", chat_id, **extra)

    def copy_message(self, chat_id: int | str, **extra: Any) -> Awaitable[Any]:
        return self._message_call("copy_message", "copyMessage", chat_id, **extra)

    # -------------------------------------------------------------------------
    # Forum topics, bound to the topic of the current message
    # -------------------------------------------------------------------------

    def create_forum_topic(self, name: str, **extra: Any) -> Awaitable[Any]:
        return self._chat_call(
            "create_forum_topic", "createForumTopic", name=name, **extra
        )

    def edit_forum_topic(self, **extra: Any) -> Awaitable[Any]:
        return self._topic_call("edit_forum_topic", "editForumTopic", **extra)

    def close_forum_topic(self) -> Awaitable[Any]:
        return self._topic_call("close_forum_topic", "closeForumTopic")

    def reopen_forum_topic(self) -> Awaitable[Any]:
        return self._topic_call("reopen_forum_topic", "reopenForumTopic")

    def delete_forum_topic(self) -> Awaitable[Any]:
        return self._topic_call("delete_forum_topic", "deleteForumTopic")

    def unpin_all_forum_topic_messages(self) -> Awaitable[Any]:
        return self._topic_call(
            "unpin_all_forum_topic_messages", "unpinAllForumTopicMessages"
        )

    # -------------------------------------------------------------------------
    # User scoped
    # -------------------------------------------------------------------------

    def set_passport_data_errors(self, errors: list[Any]) -> Awaitable[Any]:
        return self._user_call(
            "set_passport_data_errors", "setPassportDataErrors", errors=errors
        )

    def upload_sticker_file(self, sticker: Any, sticker_format: str) -> Awaitable[Any]:
        return self._user_call(
            "upload_sticker_file",
            "uploadStickerFile",
            sticker=sticker,
            sticker_format=sticker_format,
        )

    def create_new_sticker_set(
        self, name: str, title: str, stickers: list[Any], **extra: Any
    ) -> Awaitable[Any]:
        return self._user_call(
            "create_new_sticker_set",
            "createNewStickerSet",
            name=name,
            title=title,
            stickers=stickers,
            **extra,
        )

    def add_sticker_to_set(self, name: str, sticker: Any) -> Awaitable[Any]:
        return self._user_call(
            "add_sticker_to_set", "addStickerToSet", name=name, sticker=sticker
        )

    # -------------------------------------------------------------------------
    # Not bound to the update, kept for convenience
    # -------------------------------------------------------------------------

    def set_sticker_position_in_set(self, sticker: str, position: int) -> Awaitable[Any]:
        return self._call(
            "setStickerPositionInSet", {"sticker": sticker, "position": position}
        )

    def set_sticker_set_thumbnail(
        self, name: str, user_id: int, format: str, thumbnail: Any = None
    ) -> Awaitable[Any]:
        return self._call(
            "setStickerSetThumbnail",
            {"name": name, "user_id": user_id, "format": format, "thumbnail": thumbnail},
        )

    def delete_sticker_from_set(self, sticker: str) -> Awaitable[Any]:
        return self._call("deleteStickerFromSet", {"sticker": sticker})

    def set_my_default_administrator_rights(self, **extra: Any) -> Awaitable[Any]:
        return self._call("setMyDefaultAdministratorRights", extra)

    def get_my_default_administrator_rights(self, **extra: Any) -> Awaitable[Any]:
        return self._call("getMyDefaultAdministratorRights", extra)


def with_context(
    handler: Callable[[Context], Awaitable[None]],
    telegram: TelegramTransport,
    bot_info: User | None = None,
) -> Callable[[Any], Awaitable[None]]:
    """Adapt a context handler into a raw update handler.

    Each update is validated and wrapped in a fresh ``Context``.
    """

    async def handle(raw: Any) -> None:
        await handler(Context(parse_update(raw), telegram, bot_info))

    return handle
