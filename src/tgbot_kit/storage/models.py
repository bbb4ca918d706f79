"""Data models for storage layer."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Mapping

from tgbot_kit.core.types import Action
from tgbot_kit.exceptions import DataDecodeError


class Data(dict[str, str]):
    """String-to-string payload attached to buttons and chains."""

    @classmethod
    def scan(cls, value: Any) -> Data:
        """Decode a stored JSON object (bytes or text) into a Data map."""
        if value is None:
            return cls()
        if isinstance(value, (bytes, bytearray, memoryview)):
            value = bytes(value).decode("utf-8", errors="replace")
        if not isinstance(value, str):
            raise DataDecodeError(f"Invalid type for Data: {type(value).__name__}")
        try:
            decoded = json.loads(value)
        except json.JSONDecodeError as e:
            raise DataDecodeError("Unable to unmarshal data") from e
        if not isinstance(decoded, dict):
            raise DataDecodeError("Unable to unmarshal data")
        if not all(isinstance(v, str) for v in decoded.values()):
            raise DataDecodeError("Unable to unmarshal data")
        return cls(decoded)

    def dumps(self) -> str:
        return json.dumps(self, ensure_ascii=False, separators=(",", ":"))


@dataclass(frozen=True)
class Button:
    """A rendered interactive control, looked up by id when clicked."""

    id: str = ""
    action: Action = ""
    data: Mapping[str, str] = field(default_factory=Data)
    created_date: datetime | None = None

    def __post_init__(self) -> None:
        # Read-only copy; the caller keeps its own dict.
        object.__setattr__(self, "data", MappingProxyType(Data(self.data or {})))

    def has_action(self, action: Action) -> bool:
        return self.action == action

    def get_data(self, key: str) -> str:
        if not self.data:
            return ""
        return self.data.get(key, "")


@dataclass
class ChatInfo:
    """Conversation-chain state of one chat."""

    chat_id: int = 0
    active_chain: str = ""
    active_chain_step: str = ""
    chain_data: Data = field(default_factory=Data)

    def start_chain(self, chain: str) -> None:
        self.active_chain = chain

    def start_chain_step(self, step: str) -> None:
        self.active_chain_step = step

    def add_chain_data(self, key: str, value: str) -> None:
        self.chain_data[key] = value

    def get_chain_data(self, key: str) -> str:
        return self.chain_data.get(key, "")

    def finish_chain(self) -> None:
        self.active_chain = ""
        self.active_chain_step = ""
        self.chain_data = Data()


@dataclass
class User:
    user_id: int
    display_name: str = ""
    last_name: str = ""
    phone: str = ""
    user_name: str = ""


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
