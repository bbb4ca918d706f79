"""Shared types and enumerations."""

from __future__ import annotations

from enum import StrEnum

from telegram.constants import ParseMode

Action = str
Command = str

# Every outbound text goes out in legacy Markdown.
PARSE_MODE = ParseMode.MARKDOWN

_MARKDOWN_SPECIALS = ("_", "*", "~")


class ChatType(StrEnum):
    PRIVATE = "private"
    GROUP = "group"
    SUPERGROUP = "supergroup"
    CHANNEL = "channel"
    SENDER = "sender"  # inline query sent from the private chat with the bot


def escape_markdown(text: str) -> str:
    """Backslash-escape ``_``, ``*`` and ``~``.

    Not idempotent: a second pass escapes the same characters again.
    """
    for char in _MARKDOWN_SPECIALS:
        text = text.replace(char, "\\" + char)
    return text
