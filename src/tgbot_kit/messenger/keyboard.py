"""Row-oriented keyboard accumulator shared by the builders."""

from __future__ import annotations

from typing import Generic, TypeVar

from tgbot_kit.exceptions import KeyboardRowError

T = TypeVar("T")


class KeyboardRows(Generic[T]):
    """Rows of buttons with an explicit cursor on the row being filled."""

    def __init__(self, kind: str = "keyboard") -> None:
        self._kind = kind
        self._rows: list[list[T]] = []
        self._cursor: int | None = None

    def add_row(self) -> None:
        self._rows.append([])
        self._cursor = len(self._rows) - 1

    def add(self, button: T) -> None:
        if self._cursor is None:
            raise KeyboardRowError(f"add a {self._kind} row before adding buttons")
        self._rows[self._cursor].append(button)

    def rows(self) -> list[list[T]]:
        """Non-empty rows, in the order they were added."""
        return [list(row) for row in self._rows if row]

    def __bool__(self) -> bool:
        return any(self._rows)
