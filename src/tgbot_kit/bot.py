"""Bot facade: owns the Telegram client, runs the polling loop, wraps updates."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable

from telegram import Update as TelegramUpdate, User as TelegramUser
from telegram.ext import Application, ContextTypes, TypeHandler

from tgbot_kit.config import DEFAULT_POLL_TIMEOUT, BotConfig
from tgbot_kit.exceptions import BotSetupError, PollingAlreadyStartedError, UserNotResolvedError
from tgbot_kit.log import get_logger
from tgbot_kit.messenger.requests import BotRequest
from tgbot_kit.messenger.update import Update
from tgbot_kit.storage.models import User
from tgbot_kit.storage.provider import ChatProvider

logger = get_logger(__name__)

UpdateHandler = Callable[[Update], Awaitable[None]]


def resolve_sender(update: TelegramUpdate) -> TelegramUser:
    """The user behind an update, or UserNotResolvedError."""
    sender: TelegramUser | None = None
    if update.callback_query is not None:
        sender = update.callback_query.from_user
    elif update.message is not None:
        sender = update.message.from_user
    elif update.edited_message is not None:
        sender = update.edited_message.from_user
    elif update.inline_query is not None:
        sender = update.inline_query.from_user
    elif update.my_chat_member is not None:
        sender = update.my_chat_member.from_user
    elif update.pre_checkout_query is not None:
        sender = update.pre_checkout_query.from_user

    if sender is None:
        raise UserNotResolvedError(update.update_id)
    return sender


def _to_user(update: TelegramUpdate, sender: TelegramUser) -> User:
    phone = ""
    contact = update.message.contact if update.message is not None else None
    # Only trust a contact the sender shared about themselves.
    if contact is not None and contact.user_id == sender.id:
        phone = contact.phone_number
    return User(
        user_id=sender.id,
        display_name=sender.first_name or "",
        last_name=sender.last_name or "",
        phone=phone,
        user_name=sender.username or "",
    )


class Bot:
    """Single polling loop that hands every wrapped update to one handler.

    Updates are processed one at a time, in delivery order; a slow handler
    delays everything behind it.
    """

    def __init__(
        self,
        application: Application,
        chat_provider: ChatProvider,
        *,
        poll_timeout: int = DEFAULT_POLL_TIMEOUT,
        drop_pending_updates: bool = False,
    ):
        self._app = application
        self._chat_provider = chat_provider
        self._poll_timeout = poll_timeout
        self._drop_pending_updates = drop_pending_updates
        self._handler: UpdateHandler | None = None
        self._stopped = asyncio.Event()
        self._shut_down = False

    @classmethod
    async def create(
        cls,
        token: str,
        chat_provider: ChatProvider,
        *,
        api_endpoint: str | None = None,
        poll_timeout: int = DEFAULT_POLL_TIMEOUT,
        drop_pending_updates: bool = False,
    ) -> Bot:
        """Build and initialize the client; the getMe round trip validates the token."""
        try:
            builder = Application.builder().token(token).concurrent_updates(False)
            if api_endpoint:
                builder = builder.base_url(api_endpoint)
            application = builder.build()
            await application.initialize()
        except Exception as e:
            raise BotSetupError(f"unable to create Telegram bot: {e}") from e

        bot = cls(
            application,
            chat_provider,
            poll_timeout=poll_timeout,
            drop_pending_updates=drop_pending_updates,
        )
        logger.info("bot_initialized", username=bot.bot_self.username, bot_id=bot.bot_self.id)
        return bot

    @classmethod
    async def from_config(cls, config: BotConfig, chat_provider: ChatProvider) -> Bot:
        return await cls.create(
            config.token,
            chat_provider,
            api_endpoint=config.api_endpoint,
            poll_timeout=config.poll_timeout,
            drop_pending_updates=config.drop_pending_updates,
        )

    @property
    def application(self) -> Application:
        return self._app

    @property
    def bot_self(self) -> TelegramUser:
        """The bot's own account, known once the client is initialized."""
        return self._app.bot.bot

    @property
    def is_polling(self) -> bool:
        return self._handler is not None

    # Update wrapping

    async def save_user(self, update: TelegramUpdate) -> User:
        user = _to_user(update, resolve_sender(update))
        await self._chat_provider.save_user(user)
        return user

    async def wrap_update(self, update: TelegramUpdate) -> Update:
        """Resolve and upsert the sender, then wrap. Raises on either failure."""
        user = await self.save_user(update)
        return Update(update, user, self._chat_provider)

    async def wrap_payload(self, payload: dict[str, Any]) -> Update:
        """Wrap a webhook request body (already JSON-decoded)."""
        update = TelegramUpdate.de_json(payload, self._app.bot)
        if update is None:
            raise UserNotResolvedError(None)
        return await self.wrap_update(update)

    # Polling

    async def _on_update(self, update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        if not isinstance(update, TelegramUpdate) or self._handler is None:
            return
        try:
            wrapped = await self.wrap_update(update)
        except Exception as e:
            logger.error("wrap_update_failed", update_id=update.update_id, error=str(e))
            return

        try:
            await self._handler(wrapped)
        except Exception as e:
            logger.exception("update_handler_error", update_id=update.update_id, error=str(e))

    async def start_polling(self, handler: UpdateHandler) -> None:
        """Start long polling in the background; a second call is rejected."""
        if self._handler is not None:
            raise PollingAlreadyStartedError("long polling already started")

        type_handler = TypeHandler(TelegramUpdate, self._on_update)
        self._handler = handler
        self._stopped.clear()
        self._app.add_handler(type_handler)
        try:
            await self._app.start()
            await self._app.updater.start_polling(  # type: ignore[union-attr]
                timeout=self._poll_timeout,
                allowed_updates=TelegramUpdate.ALL_TYPES,
                drop_pending_updates=self._drop_pending_updates,
            )
        except Exception as e:
            logger.error("polling_start_failed", error=str(e))
            self._handler = None
            self._app.remove_handler(type_handler)
            if self._app.running:
                await self._app.stop()
            raise
        logger.info("polling_started", poll_timeout=self._poll_timeout)

    async def run_polling(self, handler: UpdateHandler) -> None:
        """Poll until stop() is called or the task is cancelled."""
        await self.start_polling(handler)
        try:
            await self._stopped.wait()
        finally:
            await self.stop()

    async def stop(self) -> None:
        """Stop polling if it runs, then shut the client down. Safe to repeat."""
        self._handler = None
        if self._app.updater is not None and self._app.updater.running:
            await self._app.updater.stop()
        if self._app.running:
            await self._app.stop()
        if not self._shut_down:
            await self._app.shutdown()
            self._shut_down = True
            logger.info("bot_stopped")
        self._stopped.set()

    # Outbound

    async def send(self, request: BotRequest) -> Any:
        """Submit a request built by MessageBuilder or InlineResultBuilder."""
        return await request.send(self._app.bot)
