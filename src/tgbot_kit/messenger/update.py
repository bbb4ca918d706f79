"""Wrapper over one inbound Telegram update.

Classification helpers (``is_command``, ``is_button``, ...) are independent
pure checks over the raw update; they may overlap, so callers decide the
order in which to test them. Everything that needs storage (the clicked
button, the chat's conversation chain) is fetched on first use through the
``ChatProvider`` and cached for the lifetime of this wrapper only.

Chain mutations stay in memory until ``flush_chat_info()`` is awaited.
"""

from __future__ import annotations

import uuid
from typing import Mapping

from telegram import Message, Update as TelegramUpdate

from tgbot_kit.core.types import Action, ChatType, escape_markdown
from tgbot_kit.log import get_logger
from tgbot_kit.storage.models import Button, ChatInfo, Data, User, utcnow
from tgbot_kit.storage.provider import ChatProvider

logger = get_logger(__name__)


class Update:
    """A raw update plus the resolved sending user and lazy storage lookups."""

    def __init__(self, update: TelegramUpdate, user: User, chat_provider: ChatProvider):
        self.raw = update
        self._user = user
        self._chat_provider = chat_provider
        self._button: Button | None = None
        self._chat: ChatInfo | None = None

    def __repr__(self) -> str:
        return f"Update(update_id={self.raw.update_id}, user_id={self._user.user_id})"

    @property
    def _message(self) -> Message | None:
        return self.raw.message

    def _message_text(self) -> str:
        if self._message is None:
            return ""
        return self._message.text or ""

    # Identity and addressing

    def get_user(self) -> User:
        return self._user

    def get_user_id(self) -> int:
        raw = self.raw
        if raw.message is not None and raw.message.from_user is not None:
            return raw.message.from_user.id
        if raw.edited_message is not None and raw.edited_message.from_user is not None:
            return raw.edited_message.from_user.id
        if raw.callback_query is not None:
            return raw.callback_query.from_user.id
        if raw.inline_query is not None:
            return raw.inline_query.from_user.id
        if raw.my_chat_member is not None:
            return raw.my_chat_member.from_user.id
        return 0

    def get_chat_id(self) -> int:
        raw = self.raw
        if raw.message is not None:
            return raw.message.chat.id
        if raw.edited_message is not None:
            return raw.edited_message.chat.id
        if raw.callback_query is not None and raw.callback_query.message is not None:
            return raw.callback_query.message.chat.id
        if raw.my_chat_member is not None:
            return raw.my_chat_member.chat.id
        return 0

    def get_message_id(self) -> int:
        callback = self.raw.callback_query
        if self.is_button() and callback is not None and callback.message is not None:
            return callback.message.message_id
        if self._message is not None:
            return self._message.message_id
        return 0

    def get_inline_message_id(self) -> str:
        if self.raw.inline_query is not None:
            return self.raw.inline_query.id
        return ""

    def get_inline_id(self) -> str:
        if self.raw.callback_query is not None:
            return self.raw.callback_query.inline_message_id or ""
        if self.raw.inline_query is not None:
            return self.raw.inline_query.id
        return ""

    # Text and commands

    def get_text(self) -> str:
        """Message text, escaped for re-embedding in a Markdown reply."""
        return escape_markdown(self._message_text())

    def get_inline(self) -> str:
        if self.raw.inline_query is not None:
            return self.raw.inline_query.query
        return ""

    def has_text(self, text: str) -> bool:
        return self._message is not None and self._message_text() == text

    def starts_with_text(self, prefix: str) -> bool:
        if self._message is not None and self._message_text().startswith(prefix):
            return True
        return self.raw.inline_query is not None and self.raw.inline_query.query.startswith(prefix)

    def is_command(self) -> bool:
        return self._message is not None and self._message_text().startswith("/")

    def has_command(self, command: str) -> bool:
        return self.is_command() and self._message_text() == command

    def starts_with_command(self, prefix: str) -> bool:
        return self.is_command() and self._message_text().startswith(prefix)

    def is_plain_text(self) -> bool:
        return not self.is_command() and self._message is not None and self._message_text() != ""

    def is_private(self) -> bool:
        raw = self.raw
        if raw.message is not None and raw.message.chat.type == ChatType.PRIVATE:
            return True
        callback = raw.callback_query
        if callback is not None and callback.message is not None and callback.message.chat.type == ChatType.PRIVATE:
            return True
        return raw.inline_query is not None and raw.inline_query.chat_type == ChatType.SENDER

    # Buttons

    def get_callback_data(self) -> str:
        if self.raw.callback_query is not None:
            return self.raw.callback_query.data or ""
        return ""

    def is_button(self) -> bool:
        return self.get_callback_data() != ""

    async def _fetch_button(self, button_id: str) -> Button:
        try:
            button = await self._chat_provider.get_button(button_id)
        except Exception as e:
            logger.error("button_lookup_failed", button_id=button_id, error=str(e))
            return Button()
        if button is None:
            logger.warning("button_not_found", button_id=button_id)
            return Button()
        return button

    async def get_button(self) -> Button:
        """The stored button behind the callback data; a blank Button if unknown."""
        if self._button is None:
            self._button = await self._fetch_button(self.get_callback_data())
        return self._button

    async def get_button_by_id(self, button_id: str) -> Button:
        return await self._fetch_button(button_id)

    async def create_button(self, action: Action, data: Mapping[str, str] | None = None) -> Button:
        """Store a new button and return it; render it with ``add_action_button``."""
        button = Button(
            id=uuid.uuid4().hex[:12],
            action=action,
            data=Data(data or {}),
            created_date=utcnow(),
        )
        await self._chat_provider.save_button(button)
        return button

    async def has_action(self, action: Action) -> bool:
        if not self.is_button():
            return False
        return (await self.get_button()).has_action(action)

    # Conversation chain

    async def get_chat_info(self) -> ChatInfo:
        # get_user_id() is 0 for pre-checkout queries.
        user_id = self.get_user_id() or self._user.user_id
        if self._chat is None:
            chat: ChatInfo | None = None
            try:
                chat = await self._chat_provider.get_chat_info(user_id)
            except Exception as e:
                logger.warning("chat_info_lookup_failed", chat_id=user_id, error=str(e))
            self._chat = chat if chat is not None else ChatInfo()

        if self._chat.chat_id == 0:
            self._chat.chat_id = user_id
        if self._chat.chain_data is None:
            self._chat.chain_data = Data()
        return self._chat

    async def has_chain(self, chain: Action) -> bool:
        return (await self.get_chat_info()).active_chain == chain

    async def has_action_or_chain(self, action_or_chain: Action) -> bool:
        return await self.has_action(action_or_chain) or await self.has_chain(action_or_chain)

    async def start_chain(self, chain: str) -> Update:
        (await self.get_chat_info()).start_chain(chain)
        return self

    async def start_chain_step(self, step: str) -> Update:
        (await self.get_chat_info()).start_chain_step(step)
        return self

    async def get_chain(self) -> str:
        return (await self.get_chat_info()).active_chain

    async def get_chain_step(self) -> str:
        return (await self.get_chat_info()).active_chain_step

    async def add_chain_data(self, key: str, value: str) -> Update:
        (await self.get_chat_info()).add_chain_data(key, value)
        return self

    async def get_chain_data(self, key: str) -> str:
        return (await self.get_chat_info()).get_chain_data(key)

    async def finish_chain(self) -> Update:
        (await self.get_chat_info()).finish_chain()
        return self

    async def flush_chat_info(self) -> None:
        """Persist the cached chat state. Failures are logged, never raised."""
        chat = await self.get_chat_info()
        try:
            await self._chat_provider.save_chat_info(chat)
        except Exception as e:
            logger.error("chat_info_save_failed", chat_id=chat.chat_id, chain=chat.active_chain, error=str(e))

    async def save_chat_info(self, info: ChatInfo) -> None:
        await self._chat_provider.save_chat_info(info)
