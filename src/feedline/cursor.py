"""Immutable text buffer with a caret.

Every operation returns a new :class:`TextCursor` (or the same one when
nothing changes); none of them mutate and none of them raise. Offsets are
plain ``str`` indices. Line navigation is newline-delimited only:
``width_hint`` is carried for the renderer and never consulted here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from feedline.theme import inverse
from feedline.utils import is_whitespace_char


@dataclass(frozen=True)
class TextCursor:
    """A text buffer plus caret offset.

    Equality is structural, which is what callers compare to decide whether
    an operation changed anything.
    """

    text: str
    width_hint: int
    offset: int

    @classmethod
    def from_text(cls, text: str, width_hint: int = 80, offset: int = 0) -> TextCursor:
        """Build a cursor, clamping *offset* into ``[0, len(text)]``."""
        return cls(text, max(1, width_hint), max(0, min(offset, len(text))))

    def _with(self, text: str, offset: int) -> TextCursor:
        return TextCursor(text, self.width_hint, offset)

    # -- line helpers ------------------------------------------------------

    def _line_column(self) -> tuple[int, int]:
        before = self.text[: self.offset].split("\n")
        return len(before) - 1, len(before[-1])

    def _offset_at(self, line_index: int, column: int) -> int:
        lines = self.text.split("\n")
        offset = sum(len(line) + 1 for line in lines[:line_index])
        target = lines[line_index] if line_index < len(lines) else ""
        offset += min(column, len(target))
        return min(offset, len(self.text))

    @property
    def line_index(self) -> int:
        return self._line_column()[0]

    @property
    def column(self) -> int:
        return self._line_column()[1]

    # -- movement ----------------------------------------------------------

    def left(self) -> TextCursor:
        return self._with(self.text, max(0, self.offset - 1))

    def right(self) -> TextCursor:
        return self._with(self.text, min(len(self.text), self.offset + 1))

    def up(self) -> TextCursor:
        line_index, column = self._line_column()
        if line_index == 0:
            return self
        return self._with(self.text, self._offset_at(line_index - 1, column))

    def down(self) -> TextCursor:
        line_index, column = self._line_column()
        if line_index >= self.text.count("\n"):
            return self
        return self._with(self.text, self._offset_at(line_index + 1, column))

    def start_of_line(self) -> TextCursor:
        line_index, _ = self._line_column()
        return self._with(self.text, self._offset_at(line_index, 0))

    def end_of_line(self) -> TextCursor:
        line_index, _ = self._line_column()
        line = self.text.split("\n")[line_index]
        return self._with(self.text, self._offset_at(line_index, len(line)))

    def prev_word(self) -> TextCursor:
        offset = self.offset
        while offset > 0 and is_whitespace_char(self.text[offset - 1]):
            offset -= 1
        while offset > 0 and not is_whitespace_char(self.text[offset - 1]):
            offset -= 1
        return self._with(self.text, offset)

    def next_word(self) -> TextCursor:
        offset = self.offset
        end = len(self.text)
        while offset < end and not is_whitespace_char(self.text[offset]):
            offset += 1
        while offset < end and is_whitespace_char(self.text[offset]):
            offset += 1
        return self._with(self.text, offset)

    # -- editing -----------------------------------------------------------

    def insert(self, s: str) -> TextCursor:
        text = self.text[: self.offset] + s + self.text[self.offset :]
        return self._with(text, self.offset + len(s))

    def backspace(self) -> TextCursor:
        if self.offset == 0:
            return self
        text = self.text[: self.offset - 1] + self.text[self.offset :]
        return self._with(text, self.offset - 1)

    def delete(self) -> TextCursor:
        """Remove the character under the caret."""
        if self.offset >= len(self.text):
            return self
        return self._with(self.text[: self.offset] + self.text[self.offset + 1 :], self.offset)

    def delete_to_line_start(self) -> TextCursor:
        line_start = self.start_of_line().offset
        return self._with(self.text[:line_start] + self.text[self.offset :], line_start)

    def delete_to_line_end(self) -> TextCursor:
        line_end = self.end_of_line().offset
        return self._with(self.text[: self.offset] + self.text[line_end:], self.offset)

    def delete_word_before(self) -> TextCursor:
        boundary = self.prev_word().offset
        return self._with(self.text[:boundary] + self.text[self.offset :], boundary)

    def delete_word_after(self) -> TextCursor:
        boundary = self.next_word().offset
        return self._with(self.text[: self.offset] + self.text[boundary:], self.offset)

    # -- display -----------------------------------------------------------

    def render(
        self,
        cursor_char: str,
        mask: str = "",
        invert: Callable[[str], str] | None = None,
    ) -> str:
        """Return the display string with the cursor glyph spliced in.

        A non-empty *mask* replaces every character of the text. The cursor
        glyph is passed through *invert* (reverse video by default).
        """
        display = mask * len(self.text) if mask else self.text
        if cursor_char and self.offset <= len(display):
            glyph = (invert or inverse)(cursor_char)
            display = display[: self.offset] + glyph + display[self.offset :]
        return display
