import pytest

from tgbot_kit.exceptions import DataDecodeError
from tgbot_kit.storage.database import Database
from tgbot_kit.storage.models import Button, ChatInfo, Data, User
from tgbot_kit.storage.sqlite_provider import SqliteChatProvider


@pytest.fixture
async def db(tmp_path):
    database = Database(str(tmp_path / "bot.db"))
    await database.initialize()
    yield database
    await database.close()


@pytest.fixture
def store(db):
    return SqliteChatProvider(db)


async def test_missing_records_are_none(store):
    assert await store.get_chat_info(1) is None
    assert await store.get_button("nope") is None
    assert await store.get_user(1) is None


async def test_chat_info_upsert(store):
    await store.save_chat_info(ChatInfo(chat_id=1, active_chain="order", active_chain_step="size", chain_data=Data({"a": "b"})))
    await store.save_chat_info(ChatInfo(chat_id=1, active_chain="order", active_chain_step="color"))

    chat = await store.get_chat_info(1)
    assert chat == ChatInfo(chat_id=1, active_chain="order", active_chain_step="color", chain_data=Data())


async def test_button_is_write_once(store):
    await store.save_button(Button(id="b1", action="confirm", data=Data({"order": "42"})))
    await store.save_button(Button(id="b1", action="cancel"))

    button = await store.get_button("b1")
    assert button.action == "confirm"
    assert button.get_data("order") == "42"
    assert button.created_date is not None


async def test_user_upsert_keeps_known_phone(store):
    await store.save_user(User(user_id=5, display_name="Ann", phone="+49"))
    await store.save_user(User(user_id=5, display_name="Anna", user_name="anna"))

    user = await store.get_user(5)
    assert user == User(user_id=5, display_name="Anna", phone="+49", user_name="anna")


async def test_malformed_chain_data_surfaces(db, store):
    await db.conn.execute("INSERT INTO chats (chat_id, chain_data) VALUES (?, ?)", (9, "[1, 2]"))
    await db.conn.commit()

    with pytest.raises(DataDecodeError):
        await store.get_chat_info(9)


async def test_uninitialized_database():
    with pytest.raises(RuntimeError):
        Database(":memory:").conn
