import pytest

from tgbot_kit.exceptions import DataDecodeError
from tgbot_kit.storage.models import Button, ChatInfo, Data


class TestDataScan:
    def test_decodes_json_bytes(self):
        assert Data.scan(b'{"order": "42", "size": "xl"}') == {"order": "42", "size": "xl"}

    def test_decodes_text(self):
        assert Data.scan('{"a": "b"}') == {"a": "b"}

    def test_none_is_empty(self):
        data = Data.scan(None)
        assert data == {}
        assert isinstance(data, Data)

    def test_rejects_wrong_type(self):
        with pytest.raises(DataDecodeError, match="Invalid type"):
            Data.scan(42)

    def test_rejects_malformed_json(self):
        with pytest.raises(DataDecodeError, match="Unable to unmarshal"):
            Data.scan(b"{not json")

    def test_rejects_non_object(self):
        with pytest.raises(DataDecodeError):
            Data.scan(b'["a", "b"]')

    @pytest.mark.parametrize(
        "raw",
        [b'{"a": 1}', b'{"qty": 1, "nested": {"a": "b"}, "n": null}', '{"ok": "x", "n": null}'],
    )
    def test_rejects_non_string_values(self, raw):
        with pytest.raises(DataDecodeError, match="Unable to unmarshal"):
            Data.scan(raw)

    def test_dumps_is_compact(self):
        assert Data({"k": "v"}).dumps() == '{"k":"v"}'


def test_button_get_data_missing_key():
    button = Button(id="b1", action="confirm", data=Data({"order": "42"}))
    assert button.get_data("order") == "42"
    assert button.get_data("nope") == ""
    assert Button().get_data("order") == ""


def test_button_is_immutable():
    button = Button(id="b1", action="confirm")
    with pytest.raises(AttributeError):
        button.action = "cancel"  # type: ignore[misc]


def test_button_data_is_read_only():
    source = {"order": "42"}
    button = Button(id="b1", action="confirm", data=source)
    with pytest.raises(TypeError):
        button.data["order"] = "999"  # type: ignore[index]

    source["order"] = "999"
    assert button.get_data("order") == "42"
    assert Button() == Button()


def test_finish_chain_clears_everything():
    chat = ChatInfo(chat_id=1, active_chain="order", active_chain_step="size", chain_data=Data({"a": "b"}))
    chat.finish_chain()
    assert (chat.active_chain, chat.active_chain_step) == ("", "")
    assert chat.chain_data == {}
    assert chat.get_chain_data("a") == ""
