from __future__ import annotations

import dataclasses
import sys

import pytest
import structlog

from tgbot_kit.storage.models import Button, ChatInfo, Data, User
from tgbot_kit.storage.provider import ChatProvider


class MemoryChatProvider(ChatProvider):
    """Dict-backed ChatProvider that can be told to fail."""

    def __init__(self) -> None:
        self.chats: dict[int, ChatInfo] = {}
        self.buttons: dict[str, Button] = {}
        self.users: dict[int, User] = {}
        self.fail_on: set[str] = set()
        self.calls: list[tuple[str, object]] = []

    def _maybe_fail(self, op: str) -> None:
        if op in self.fail_on:
            raise RuntimeError(f"{op} backend down")

    async def get_chat_info(self, chat_id: int) -> ChatInfo | None:
        self.calls.append(("get_chat_info", chat_id))
        self._maybe_fail("get_chat_info")
        chat = self.chats.get(chat_id)
        if chat is None:
            return None
        return dataclasses.replace(chat, chain_data=Data(chat.chain_data))

    async def save_chat_info(self, chat: ChatInfo) -> None:
        self.calls.append(("save_chat_info", chat.chat_id))
        self._maybe_fail("save_chat_info")
        self.chats[chat.chat_id] = dataclasses.replace(chat, chain_data=Data(chat.chain_data))

    async def get_button(self, button_id: str) -> Button | None:
        self.calls.append(("get_button", button_id))
        self._maybe_fail("get_button")
        return self.buttons.get(button_id)

    async def save_button(self, button: Button) -> None:
        self.calls.append(("save_button", button.id))
        self._maybe_fail("save_button")
        self.buttons[button.id] = button

    async def save_user(self, user: User) -> None:
        self.calls.append(("save_user", user.user_id))
        self._maybe_fail("save_user")
        self.users[user.user_id] = user


@pytest.fixture
def provider() -> MemoryChatProvider:
    return MemoryChatProvider()


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Undo structlog configuration bound to a test's captured (later closed) stream."""
    yield
    structlog.reset_defaults()
    # Loggers cached under cache_logger_on_first_use keep the old stream; drop the cache.
    for name, module in list(sys.modules.items()):
        if name.startswith("tgbot_kit"):
            for value in vars(module).values():
                if isinstance(value, structlog._config.BoundLoggerLazyProxy):
                    value.__dict__.pop("bind", None)
