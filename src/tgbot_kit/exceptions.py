"""Error taxonomy for tgbot-kit."""

from __future__ import annotations


class TgBotError(Exception):
    """Base class for every error raised by this package."""


class BotSetupError(TgBotError):
    """The Telegram client could not be created (bad token, unreachable endpoint)."""


class PollingAlreadyStartedError(TgBotError):
    """start_polling() was called on a bot that is already polling."""


class UserNotResolvedError(TgBotError):
    """An inbound update carries no identity-bearing sub-object."""

    def __init__(self, update_id: int | None):
        super().__init__(f"cannot resolve sending user, update_id={update_id}")
        self.update_id = update_id


class DataDecodeError(TgBotError, ValueError):
    """A stored key/value payload has the wrong shape."""


class KeyboardRowError(TgBotError, IndexError):
    """A button was added before any keyboard row (or article) exists."""
