"""In-memory editor buffer with cursor, change events and undo."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol


@dataclass(frozen=True)
class Cursor:
    line: int
    ch: int


@dataclass(frozen=True)
class Edit:
    """One undoable change: ``removed`` text at (line, ch) replaced by ``inserted``."""

    line: int
    ch: int
    removed: str
    inserted: str


ChangeListener = Callable[["EditorSurface"], None]


class EditorSurface(Protocol):
    def get_cursor(self) -> Cursor: ...

    def get_line(self, line: int) -> str: ...

    def line_count(self) -> int: ...

    def get_text(self) -> str: ...

    def set_text(self, text: str) -> None: ...

    def insert(self, line: int, ch: int, text: str) -> None: ...

    def on_change(self, listener: ChangeListener) -> Callable[[], None]: ...


class TextBuffer:
    """A live text buffer.

    Every mutation is recorded in ``history`` and fires the change listeners
    after it has been applied. ``insert`` is a positional edit; ``set_text``
    replaces the whole buffer as a single edit.
    """

    def __init__(self, text: str = "", cursor: Cursor | None = None):
        self._text = text
        self._cursor = cursor or Cursor(0, 0)
        self.history: list[Edit] = []
        self._listeners: list[ChangeListener] = []

    def get_text(self) -> str:
        return self._text

    def get_lines(self) -> list[str]:
        return self._text.split("\n")

    def get_line(self, line: int) -> str:
        lines = self.get_lines()
        if line < 0 or line >= len(lines):
            raise IndexError(f"line {line} out of range (0..{len(lines) - 1})")
        return lines[line]

    def line_count(self) -> int:
        return len(self.get_lines())

    def get_cursor(self) -> Cursor:
        return self._cursor

    def set_cursor(self, line: int, ch: int) -> None:
        self._cursor = Cursor(line, ch)

    def on_change(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a change listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _offset(self, line: int, ch: int) -> int:
        lines = self.get_lines()
        if line < 0 or line >= len(lines):
            raise IndexError(f"line {line} out of range (0..{len(lines) - 1})")
        if ch < 0 or ch > len(lines[line]):
            raise IndexError(f"column {ch} out of range for line {line}")
        return sum(len(s) + 1 for s in lines[:line]) + ch

    def _position(self, offset: int) -> Cursor:
        head = self._text[:offset]
        line = head.count("\n")
        return Cursor(line, offset - (head.rfind("\n") + 1))

    def _emit(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def insert(self, line: int, ch: int, text: str) -> None:
        """Insert ``text`` at (line, ch) without touching the rest of the buffer."""
        offset = self._offset(line, ch)
        cursor_offset = self._offset(self._cursor.line, self._cursor.ch)
        self._text = self._text[:offset] + text + self._text[offset:]
        if offset < cursor_offset:
            self._cursor = self._position(cursor_offset + len(text))
        self.history.append(Edit(line=line, ch=ch, removed="", inserted=text))
        self._emit()

    def type_text(self, text: str) -> None:
        """Simulate the user typing at the cursor; the cursor ends after ``text``."""
        offset = self._offset(self._cursor.line, self._cursor.ch)
        self.history.append(Edit(line=self._cursor.line, ch=self._cursor.ch, removed="", inserted=text))
        self._text = self._text[:offset] + text + self._text[offset:]
        self._cursor = self._position(offset + len(text))
        self._emit()

    def set_text(self, text: str) -> None:
        """Replace the whole buffer, keeping the cursor where it still fits."""
        self.history.append(Edit(line=0, ch=0, removed=self._text, inserted=text))
        self._text = text
        lines = self.get_lines()
        line = min(self._cursor.line, len(lines) - 1)
        self._cursor = Cursor(line, min(self._cursor.ch, len(lines[line])))
        self._emit()

    def undo(self) -> bool:
        """Revert the most recent edit. Returns False when there is nothing to undo.

        A cursor after the edit moves back with the text it sat on. Undo does
        not notify change listeners.
        """
        if not self.history:
            return False
        edit = self.history.pop()
        offset = self._offset(edit.line, edit.ch)
        end = offset + len(edit.inserted)
        cursor_offset = self._offset(self._cursor.line, self._cursor.ch)
        self._text = self._text[:offset] + edit.removed + self._text[end:]
        if cursor_offset >= end and end > offset:
            self._cursor = self._position(cursor_offset - len(edit.inserted) + len(edit.removed))
        elif cursor_offset > offset:
            lines = self.get_lines()
            line = min(self._cursor.line, len(lines) - 1)
            self._cursor = Cursor(line, min(self._cursor.ch, len(lines[line])))
        return True
