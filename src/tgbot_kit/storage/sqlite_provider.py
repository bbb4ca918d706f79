"""ChatProvider backed by the bundled SQLite database."""

from __future__ import annotations

from datetime import datetime

from tgbot_kit.storage.database import Database
from tgbot_kit.storage.models import Button, ChatInfo, Data, User, utcnow
from tgbot_kit.storage.provider import ChatProvider


class SqliteChatProvider(ChatProvider):
    """Upsert-style persistence of chats, buttons and users."""

    def __init__(self, db: Database):
        self._db = db

    async def get_chat_info(self, chat_id: int) -> ChatInfo | None:
        cursor = await self._db.conn.execute(
            """SELECT chat_id, active_chain, active_chain_step, chain_data
               FROM chats WHERE chat_id = ?""",
            (chat_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return ChatInfo(
            chat_id=row["chat_id"],
            active_chain=row["active_chain"],
            active_chain_step=row["active_chain_step"],
            chain_data=Data.scan(row["chain_data"]),
        )

    async def save_chat_info(self, chat: ChatInfo) -> None:
        await self._db.conn.execute(
            """INSERT INTO chats (chat_id, active_chain, active_chain_step, chain_data)
               VALUES (?, ?, ?, ?)
               ON CONFLICT(chat_id) DO UPDATE SET
                   active_chain = excluded.active_chain,
                   active_chain_step = excluded.active_chain_step,
                   chain_data = excluded.chain_data,
                   updated_at = strftime('%Y-%m-%dT%H:%M:%f','now')""",
            (
                chat.chat_id,
                chat.active_chain,
                chat.active_chain_step,
                Data(chat.chain_data or {}).dumps(),
            ),
        )
        await self._db.conn.commit()

    async def get_button(self, button_id: str) -> Button | None:
        cursor = await self._db.conn.execute(
            "SELECT id, action, data, created_date FROM buttons WHERE id = ?",
            (button_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return Button(
            id=row["id"],
            action=row["action"],
            data=Data.scan(row["data"]),
            created_date=datetime.fromisoformat(row["created_date"]),
        )

    async def save_button(self, button: Button) -> None:
        # Buttons are immutable: a second save with the same id is ignored.
        created = button.created_date or utcnow()
        await self._db.conn.execute(
            """INSERT OR IGNORE INTO buttons (id, action, data, created_date)
               VALUES (?, ?, ?, ?)""",
            (button.id, button.action, Data(button.data or {}).dumps(), created.isoformat()),
        )
        await self._db.conn.commit()

    async def save_user(self, user: User) -> None:
        await self._db.conn.execute(
            """INSERT INTO users (user_id, display_name, last_name, phone, user_name)
               VALUES (?, ?, ?, ?, ?)
               ON CONFLICT(user_id) DO UPDATE SET
                   display_name = excluded.display_name,
                   last_name = excluded.last_name,
                   phone = CASE WHEN excluded.phone != '' THEN excluded.phone ELSE users.phone END,
                   user_name = excluded.user_name,
                   last_seen_at = strftime('%Y-%m-%dT%H:%M:%f','now')""",
            (user.user_id, user.display_name, user.last_name, user.phone, user.user_name),
        )
        await self._db.conn.commit()

    async def get_user(self, user_id: int) -> User | None:
        """Fetch a stored user; not part of the ChatProvider contract."""
        cursor = await self._db.conn.execute(
            "SELECT user_id, display_name, last_name, phone, user_name FROM users WHERE user_id = ?",
            (user_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return User(
            user_id=row["user_id"],
            display_name=row["display_name"],
            last_name=row["last_name"],
            phone=row["phone"],
            user_name=row["user_name"],
        )
