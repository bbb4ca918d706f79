"""Abstract persistence interface for chat state, buttons and users."""

from __future__ import annotations

from abc import ABC, abstractmethod

from tgbot_kit.storage.models import Button, ChatInfo, User


class ChatProvider(ABC):
    """Storage backend consumed by the bot.

    Lookups return ``None`` when the record does not exist and raise on
    backend failure. Implementations own their own concurrency discipline.
    """

    @abstractmethod
    async def get_chat_info(self, chat_id: int) -> ChatInfo | None:
        ...

    @abstractmethod
    async def save_chat_info(self, chat: ChatInfo) -> None:
        """Insert or replace the chain state of ``chat.chat_id``."""
        ...

    @abstractmethod
    async def get_button(self, button_id: str) -> Button | None:
        ...

    @abstractmethod
    async def save_button(self, button: Button) -> None:
        ...

    @abstractmethod
    async def save_user(self, user: User) -> None:
        """Insert or update the user identified by ``user.user_id``."""
        ...
