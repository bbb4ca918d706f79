"""Builder for inline-query answers."""

from __future__ import annotations

from dataclasses import dataclass, field

from telegram import (
    InlineKeyboardButton,
    InlineKeyboardMarkup,
    InlineQueryResultArticle,
    InputTextMessageContent,
)

from tgbot_kit.core.types import PARSE_MODE
from tgbot_kit.exceptions import KeyboardRowError
from tgbot_kit.messenger.keyboard import KeyboardRows
from tgbot_kit.messenger.requests import AnswerInlineQueryRequest


@dataclass
class _Article:
    id: str
    title: str
    description: str
    text: str
    keyboard: KeyboardRows[InlineKeyboardButton] = field(default_factory=KeyboardRows)

    def to_result(self) -> InlineQueryResultArticle:
        return InlineQueryResultArticle(
            id=self.id,
            title=self.title,
            description=self.description or None,
            input_message_content=InputTextMessageContent(self.text, parse_mode=PARSE_MODE),
            reply_markup=InlineKeyboardMarkup(self.keyboard.rows()) if self.keyboard else None,
        )


class InlineResultBuilder:
    """Articles answering one inline query; keyboard calls act on the last article."""

    def __init__(self, inline_query_id: str):
        self._inline_query_id = inline_query_id
        self._articles: list[_Article] = []

    def add_article(self, id: str, title: str, description: str, text: str) -> InlineResultBuilder:
        self._articles.append(_Article(id=id, title=title, description=description, text=text))
        return self

    def _last_keyboard(self) -> KeyboardRows[InlineKeyboardButton]:
        if not self._articles:
            raise KeyboardRowError("add an article before adding keyboard rows")
        return self._articles[-1].keyboard

    def add_keyboard_row(self) -> InlineResultBuilder:
        self._last_keyboard().add_row()
        return self

    def add_button(self, text: str, callback_data: str) -> InlineResultBuilder:
        self._last_keyboard().add(InlineKeyboardButton(text, callback_data=callback_data))
        return self

    def add_button_switch(self, text: str, switch_query: str) -> InlineResultBuilder:
        self._last_keyboard().add(InlineKeyboardButton(text, switch_inline_query=switch_query))
        return self

    def add_button_url(self, text: str, url: str) -> InlineResultBuilder:
        self._last_keyboard().add(InlineKeyboardButton(text, url=url))
        return self

    def build(self) -> AnswerInlineQueryRequest:
        return AnswerInlineQueryRequest(
            inline_query_id=self._inline_query_id,
            results=tuple(article.to_result() for article in self._articles),
            is_personal=True,
        )
