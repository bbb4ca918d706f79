"""Outbound Bot API requests emitted by the builders."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Sequence

from telegram import (
    Bot as TelegramBot,
    InlineKeyboardMarkup,
    InlineQueryResultArticle,
    ReplyKeyboardMarkup,
    ReplyKeyboardRemove,
    ReplyParameters,
)

from tgbot_kit.core.types import PARSE_MODE

ReplyMarkup = InlineKeyboardMarkup | ReplyKeyboardMarkup | ReplyKeyboardRemove


@dataclass(frozen=True)
class BotRequest:
    """One Bot API call. ``method`` names the python-telegram-bot coroutine."""

    method: ClassVar[str] = ""

    def to_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for the client method, unset optionals omitted."""
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}

    async def send(self, bot: TelegramBot) -> Any:
        return await getattr(bot, self.method)(**self.to_kwargs())


@dataclass(frozen=True)
class SendMessageRequest(BotRequest):
    method: ClassVar[str] = "send_message"

    chat_id: int
    text: str
    parse_mode: str = PARSE_MODE
    reply_markup: ReplyMarkup | None = None
    reply_parameters: ReplyParameters | None = None


@dataclass(frozen=True)
class SendPhotoRequest(BotRequest):
    method: ClassVar[str] = "send_photo"

    chat_id: int
    photo: str  # file_id of an already uploaded photo
    caption: str | None = None
    parse_mode: str = PARSE_MODE


@dataclass(frozen=True)
class EditMessageTextRequest(BotRequest):
    method: ClassVar[str] = "edit_message_text"

    text: str
    chat_id: int | None = None
    message_id: int | None = None
    inline_message_id: str | None = None
    parse_mode: str = PARSE_MODE
    reply_markup: InlineKeyboardMarkup | None = None


@dataclass(frozen=True)
class AnswerInlineQueryRequest(BotRequest):
    method: ClassVar[str] = "answer_inline_query"

    inline_query_id: str
    results: Sequence[InlineQueryResultArticle] = field(default_factory=tuple)
    is_personal: bool = True
