"""Fluent builder for outgoing and edited messages."""

from __future__ import annotations

from telegram import (
    InlineKeyboardButton,
    InlineKeyboardMarkup,
    KeyboardButton,
    ReplyKeyboardMarkup,
    ReplyKeyboardRemove,
    ReplyParameters,
    WebAppInfo,
)

from tgbot_kit.messenger.keyboard import KeyboardRows
from tgbot_kit.messenger.requests import (
    BotRequest,
    EditMessageTextRequest,
    SendMessageRequest,
    SendPhotoRequest,
)
from tgbot_kit.storage.models import Button


class MessageBuilder:
    """Accumulates one message, then emits the matching request with build().

    Mode is "new message" unless message() got a non-zero message id or
    edit(True) was called. Buttons go to the row most recently added to
    their keyboard; adding one before any row raises KeyboardRowError.
    """

    def __init__(self) -> None:
        self._edit_message = False
        self._remove_reply_keyboard = False
        self._chat_id = 0
        self._reply_message_id = 0
        self._message_id = 0
        self._inline_id = ""
        self._text = ""
        self._photo_id = ""
        self._keyboard: KeyboardRows[InlineKeyboardButton] = KeyboardRows("keyboard")
        self._reply_keyboard: KeyboardRows[KeyboardButton] = KeyboardRows("reply keyboard")

    # Addressing

    def edit_message_text_and_markup(self, chat_id: int, message_id: int) -> MessageBuilder:
        self._chat_id = chat_id
        self._message_id = message_id
        self._edit_message = True
        return self

    def new_message(self, chat_id: int) -> MessageBuilder:
        self._chat_id = chat_id
        self._edit_message = False
        return self

    def message(self, chat_id: int, message_id: int) -> MessageBuilder:
        """New message when ``message_id`` is 0, otherwise an edit of it."""
        if message_id == 0:
            return self.new_message(chat_id)
        return self.edit_message_text_and_markup(chat_id, message_id)

    def chat_id(self, chat_id: int) -> MessageBuilder:
        self._chat_id = chat_id
        return self

    def message_id(self, message_id: int) -> MessageBuilder:
        self._message_id = message_id
        return self

    def reply_message_id(self, reply_message_id: int) -> MessageBuilder:
        self._reply_message_id = reply_message_id
        return self

    def inline_id(self, inline_id: str) -> MessageBuilder:
        self._inline_id = inline_id
        return self

    def edit(self, edit_message: bool) -> MessageBuilder:
        self._edit_message = edit_message
        return self

    # Content

    def text(self, text: str) -> MessageBuilder:
        self._text = text
        return self

    def photo_id(self, file_id: str) -> MessageBuilder:
        self._photo_id = file_id
        return self

    def remove_reply_keyboard(self) -> MessageBuilder:
        self._remove_reply_keyboard = True
        return self

    # Inline keyboard

    def add_keyboard_row(self) -> MessageBuilder:
        self._keyboard.add_row()
        return self

    def add_button(self, text: str, callback_data: str) -> MessageBuilder:
        self._keyboard.add(InlineKeyboardButton(text, callback_data=callback_data))
        return self

    def add_action_button(self, text: str, button: Button) -> MessageBuilder:
        """Inline button whose click resolves to the stored ``button``."""
        return self.add_button(text, button.id)

    def add_button_url(self, text: str, url: str) -> MessageBuilder:
        self._keyboard.add(InlineKeyboardButton(text, url=url))
        return self

    def add_button_switch(self, text: str, switch_query: str) -> MessageBuilder:
        self._keyboard.add(InlineKeyboardButton(text, switch_inline_query=switch_query))
        return self

    def add_web_app_button(self, text: str, url: str) -> MessageBuilder:
        self._keyboard.add(InlineKeyboardButton(text, web_app=WebAppInfo(url=url)))
        return self

    # Reply keyboard

    def add_reply_keyboard_row(self) -> MessageBuilder:
        self._reply_keyboard.add_row()
        return self

    def add_reply_button(self, text: str) -> MessageBuilder:
        self._reply_keyboard.add(KeyboardButton(text))
        return self

    def add_reply_web_app_button(self, text: str, url: str) -> MessageBuilder:
        self._reply_keyboard.add(KeyboardButton(text, web_app=WebAppInfo(url=url)))
        return self

    def add_reply_request_contact_button(self, text: str) -> MessageBuilder:
        self._reply_keyboard.add(KeyboardButton(text, request_contact=True))
        return self

    def build(self) -> BotRequest:
        if self._edit_message:
            markup = InlineKeyboardMarkup(self._keyboard.rows()) if self._keyboard else None
            if self._inline_id:
                return EditMessageTextRequest(
                    text=self._text,
                    inline_message_id=self._inline_id,
                    reply_markup=markup,
                )
            return EditMessageTextRequest(
                text=self._text,
                chat_id=self._chat_id,
                message_id=self._message_id,
                reply_markup=markup,
            )

        if self._photo_id:
            return SendPhotoRequest(chat_id=self._chat_id, photo=self._photo_id, caption=self._text)

        reply_markup: InlineKeyboardMarkup | ReplyKeyboardMarkup | ReplyKeyboardRemove | None = None
        if self._keyboard:
            reply_markup = InlineKeyboardMarkup(self._keyboard.rows())
        elif self._reply_keyboard:
            reply_markup = ReplyKeyboardMarkup(self._reply_keyboard.rows())
        elif self._remove_reply_keyboard:
            reply_markup = ReplyKeyboardRemove(selective=False)

        reply_parameters = None
        if self._reply_message_id:
            reply_parameters = ReplyParameters(message_id=self._reply_message_id)

        return SendMessageRequest(
            chat_id=self._chat_id,
            text=self._text,
            reply_markup=reply_markup,
            reply_parameters=reply_parameters,
        )
