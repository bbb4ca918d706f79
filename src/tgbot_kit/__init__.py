"""Convenience layer over python-telegram-bot: builders, update wrapper, conversation chains."""

from tgbot_kit.bot import Bot
from tgbot_kit.core.types import Action, Command, escape_markdown
from tgbot_kit.exceptions import (
    BotSetupError,
    DataDecodeError,
    KeyboardRowError,
    PollingAlreadyStartedError,
    TgBotError,
    UserNotResolvedError,
)
from tgbot_kit.messenger.inline_builder import InlineResultBuilder
from tgbot_kit.messenger.message_builder import MessageBuilder
from tgbot_kit.messenger.update import Update
from tgbot_kit.storage.models import Button, ChatInfo, Data, User
from tgbot_kit.storage.provider import ChatProvider

__version__ = "0.1.0"

__all__ = [
    "Action",
    "Bot",
    "BotSetupError",
    "Button",
    "ChatInfo",
    "ChatProvider",
    "Command",
    "Data",
    "DataDecodeError",
    "InlineResultBuilder",
    "KeyboardRowError",
    "MessageBuilder",
    "PollingAlreadyStartedError",
    "TgBotError",
    "Update",
    "User",
    "UserNotResolvedError",
    "escape_markdown",
]
