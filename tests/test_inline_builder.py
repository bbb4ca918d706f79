import pytest
from telegram import InlineKeyboardButton
from telegram.constants import ParseMode

from tgbot_kit.exceptions import KeyboardRowError
from tgbot_kit.messenger.inline_builder import InlineResultBuilder


def test_articles_are_personal_and_markdown():
    request = (
        InlineResultBuilder("iq-1")
        .add_article("1", "First", "desc", "*bold*")
        .add_article("2", "Second", "", "plain")
        .build()
    )

    assert request.inline_query_id == "iq-1"
    assert request.is_personal is True
    first, second = request.results
    assert first.id == "1"
    assert first.title == "First"
    assert first.description == "desc"
    assert first.input_message_content.message_text == "*bold*"
    assert first.input_message_content.parse_mode == ParseMode.MARKDOWN
    assert first.reply_markup is None
    assert second.description is None


def test_keyboard_belongs_to_last_article():
    request = (
        InlineResultBuilder("iq-1")
        .add_article("1", "First", "", "a")
        .add_keyboard_row()
        .add_button("Vote", "vote-1")
        .add_keyboard_row()
        .add_article("2", "Second", "", "b")
        .add_keyboard_row()
        .add_button_url("Open", "https://example.org")
        .add_button_switch("Share", "q")
        .build()
    )

    first, second = request.results
    assert first.reply_markup.inline_keyboard == ((InlineKeyboardButton("Vote", callback_data="vote-1"),),)
    assert len(second.reply_markup.inline_keyboard) == 1
    assert second.reply_markup.inline_keyboard[0][0].url == "https://example.org"
    assert second.reply_markup.inline_keyboard[0][1].switch_inline_query == "q"


def test_empty_result_list():
    request = InlineResultBuilder("iq-1").build()
    assert tuple(request.results) == ()
    assert request.to_kwargs()["is_personal"] is True


def test_row_without_article_fails():
    with pytest.raises(KeyboardRowError):
        InlineResultBuilder("iq-1").add_keyboard_row()


def test_button_without_row_fails():
    with pytest.raises(KeyboardRowError):
        InlineResultBuilder("iq-1").add_article("1", "t", "", "x").add_button("b", "c")
