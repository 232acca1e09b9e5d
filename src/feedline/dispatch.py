"""Key dispatch: routes decoded key events to cursor operations.

Routing is an ordered list of :class:`Rule` objects; the first rule whose
predicate matches handles the event. A handler returns the next
:class:`~feedline.cursor.TextCursor`, or ``None`` when the event was fully
handled by a side effect (submit, no-op chords). The dispatcher then commits
the result against the controlled ``(value, offset)`` pair.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable

from feedline.clipboard import (
    CLIPBOARD_ERROR_MESSAGE,
    get_image_from_clipboard,
    is_image_paste_supported,
)
from feedline.cursor import TextCursor
from feedline.double_press import DoublePress
from feedline.keys import BACKSPACE_LITERALS, END_SEQUENCES, HOME_SEQUENCES, KeyEvent
from feedline.options import TextInputOptions

logger = logging.getLogger(__name__)

ESCAPE_CLEAR_MESSAGE = "Press Escape again to clear"

Handler = Callable[[TextCursor, str, KeyEvent], "TextCursor | None"]
Predicate = Callable[[str, KeyEvent], bool]


@dataclass
class InputCallbacks:
    """Host hooks. Every callback is optional."""

    on_change: Callable[[str], None] | None = None
    on_offset_change: Callable[[int], None] | None = None
    on_submit: Callable[[str], None] | None = None
    on_exit: Callable[[], None] | None = None
    on_exit_message: Callable[[bool, str], None] | None = None
    on_message: Callable[[bool, str], None] | None = None
    on_history_up: Callable[[], None] | None = None
    on_history_down: Callable[[], None] | None = None
    on_history_reset: Callable[[], None] | None = None
    on_image_paste: Callable[[str], None] | None = None


@dataclass(frozen=True)
class Rule:
    name: str
    matches: Predicate
    handler: Handler


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def is_backspace(literal: str, key: KeyEvent) -> bool:
    return key.backspace or key.delete or literal in BACKSPACE_LITERALS


def _is_return(literal: str, key: KeyEvent) -> bool:
    return key.return_


def _is_escape(literal: str, key: KeyEvent) -> bool:
    return key.escape


def _is_word_jump(literal: str, key: KeyEvent) -> bool:
    return (key.left_arrow or key.right_arrow) and (key.ctrl or key.meta)


def _is_ctrl(literal: str, key: KeyEvent) -> bool:
    return key.ctrl


def _is_page(literal: str, key: KeyEvent) -> bool:
    return key.page_up or key.page_down


def _is_meta(literal: str, key: KeyEvent) -> bool:
    return key.meta


def _is_tab(literal: str, key: KeyEvent) -> bool:
    return key.tab


def _is_arrow(literal: str, key: KeyEvent) -> bool:
    return key.is_arrow


def _always(literal: str, key: KeyEvent) -> bool:
    return True


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------


class KeyDispatcher:
    """Maps key events onto a controlled ``(value, offset)`` text buffer.

    The host owns the authoritative value and offset; it can overwrite them
    with :meth:`set_value` / :meth:`set_offset` at any time. After every
    handled key the dispatcher commits changes back, calling
    ``on_offset_change`` when the cursor moved or the text changed and
    ``on_change`` when the text changed.
    """

    def __init__(
        self,
        value: str = "",
        offset: int = 0,
        *,
        options: TextInputOptions | None = None,
        callbacks: InputCallbacks | None = None,
        read_clipboard_image: Callable[[], str | None] = get_image_from_clipboard,
        image_paste_supported: Callable[[], bool] = is_image_paste_supported,
    ) -> None:
        self.options = options or TextInputOptions()
        self.callbacks = callbacks or InputCallbacks()
        self._value = value
        self._offset = max(0, min(offset, len(value)))
        self._read_clipboard_image = read_clipboard_image
        self._image_paste_supported = image_paste_supported
        self._image_error_timer: asyncio.TimerHandle | None = None
        self._image_error_shown = False

        timeout = self.options.double_press_timeout
        self._ctrl_c = DoublePress(
            self._show_ctrl_c_message,
            self._exit,
            self._clear_after_interrupt,
            timeout=timeout,
        )
        self._escape = DoublePress(
            self._show_escape_message,
            self._clear_after_escape,
            timeout=timeout,
        )
        self._empty_ctrl_d = DoublePress(
            lambda show: self._exit_message(show, "Ctrl-D"),
            self._exit,
            timeout=timeout,
        )

        self._ctrl_table: dict[str, Handler] = {
            "a": lambda c, _l, _k: c.start_of_line(),
            "b": lambda c, _l, _k: c.left(),
            "c": self._handle_ctrl_c,
            "d": self._handle_ctrl_d,
            "e": lambda c, _l, _k: c.end_of_line(),
            "f": lambda c, _l, _k: c.right(),
            "h": self._handle_backspace,
            "k": lambda c, _l, _k: c.delete_to_line_end(),
            "l": self._handle_clear,
            "n": self._down_or_history_down,
            "p": self._up_or_history_up,
            "u": lambda c, _l, _k: c.delete_to_line_start(),
            "v": self._try_image_paste,
            "w": lambda c, _l, _k: c.delete_word_before(),
        }
        self._meta_table: dict[str, Handler] = {
            "b": lambda c, _l, _k: c.prev_word(),
            "f": lambda c, _l, _k: c.next_word(),
            "d": lambda c, _l, _k: c.delete_word_after(),
        }

        self.rules: list[Rule] = [
            Rule("backspace", is_backspace, self._handle_backspace),
            Rule("return", _is_return, self._handle_return),
            Rule("escape", _is_escape, self._handle_escape),
            Rule("word-jump", _is_word_jump, self._handle_word_jump),
            Rule("ctrl", _is_ctrl, self._table_handler(self._ctrl_table)),
            Rule("page", _is_page, self._handle_page),
            Rule("meta", _is_meta, self._table_handler(self._meta_table)),
            Rule("tab", _is_tab, lambda c, _l, _k: None),
            Rule("arrow", _is_arrow, self._handle_arrow),
            Rule("literal", _always, self._handle_literal),
        ]

    # -- controlled state --------------------------------------------------

    @property
    def value(self) -> str:
        return self._value

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def cursor(self) -> TextCursor:
        return TextCursor.from_text(self._value, self.options.columns, self._offset)

    def set_value(self, value: str) -> None:
        self._value = value
        self._offset = min(self._offset, len(value))

    def set_offset(self, offset: int) -> None:
        self._offset = max(0, min(offset, len(self._value)))

    # -- entry points ------------------------------------------------------

    def match(self, literal: str, key: KeyEvent) -> Rule:
        """Return the first rule that claims the event."""
        for rule in self.rules:
            if rule.matches(literal, key):
                return rule
        raise AssertionError("literal rule matches every event")

    def dispatch(self, literal: str, key: KeyEvent) -> TextCursor | None:
        """Run the matching rule against the current cursor without committing."""
        rule = self.match(literal, key)
        logger.debug("key %r routed to %s", literal, rule.name)
        return rule.handler(self.cursor, literal, key)

    def on_input(self, literal: str, key: KeyEvent) -> None:
        """Handle one key event and commit the result."""
        current = self.cursor
        next_cursor = self.dispatch(literal, key)
        if next_cursor is not None:
            self.commit(current, next_cursor)

    def commit(self, current: TextCursor, next_cursor: TextCursor) -> None:
        if next_cursor == current:
            return
        self._offset = next_cursor.offset
        if self.callbacks.on_offset_change:
            self.callbacks.on_offset_change(next_cursor.offset)
        if next_cursor.text != current.text:
            self._value = next_cursor.text
            if self.callbacks.on_change:
                self.callbacks.on_change(next_cursor.text)

    # -- rule handlers -----------------------------------------------------

    def _table_handler(self, table: dict[str, Handler]) -> Handler:
        def handle(cursor: TextCursor, literal: str, key: KeyEvent) -> TextCursor | None:
            handler = table.get(literal)
            if handler is None:
                return None
            return handler(cursor, literal, key)

        return handle

    def _handle_backspace(self, cursor: TextCursor, literal: str, key: KeyEvent) -> TextCursor:
        self._hide_image_error()
        return cursor.backspace()

    def _handle_return(self, cursor: TextCursor, literal: str, key: KeyEvent) -> TextCursor | None:
        if (
            self.options.multiline
            and cursor.offset > 0
            and cursor.text[cursor.offset - 1] == "\\"
        ):
            return cursor.backspace().insert("\n")
        if key.meta:
            return cursor.insert("\n")
        if self.callbacks.on_submit:
            self.callbacks.on_submit(self._value)
        return None

    def _handle_escape(self, cursor: TextCursor, literal: str, key: KeyEvent) -> TextCursor:
        self._escape.press()
        return cursor

    def _handle_word_jump(self, cursor: TextCursor, literal: str, key: KeyEvent) -> TextCursor:
        return cursor.prev_word() if key.left_arrow else cursor.next_word()

    def _handle_page(self, cursor: TextCursor, literal: str, key: KeyEvent) -> TextCursor:
        return cursor.start_of_line() if key.page_up else cursor.end_of_line()

    def _handle_arrow(self, cursor: TextCursor, literal: str, key: KeyEvent) -> TextCursor | None:
        if key.up_arrow:
            return self._up_or_history_up(cursor, literal, key)
        if key.down_arrow:
            return self._down_or_history_down(cursor, literal, key)
        if key.left_arrow:
            return cursor.left()
        return cursor.right()

    def _handle_literal(self, cursor: TextCursor, literal: str, key: KeyEvent) -> TextCursor:
        if literal in HOME_SEQUENCES:
            return cursor.start_of_line()
        if literal in END_SEQUENCES:
            return cursor.end_of_line()
        if literal in BACKSPACE_LITERALS:
            return self._handle_backspace(cursor, literal, key)
        return cursor.insert(literal.replace("\r", "\n"))

    def _handle_ctrl_c(self, cursor: TextCursor, literal: str, key: KeyEvent) -> TextCursor:
        self._ctrl_c.press()
        return cursor

    def _handle_ctrl_d(self, cursor: TextCursor, literal: str, key: KeyEvent) -> TextCursor:
        self._hide_image_error()
        if cursor.text == "":
            self._empty_ctrl_d.press()
            return cursor
        return cursor.delete()

    def _handle_clear(self, cursor: TextCursor, literal: str, key: KeyEvent) -> TextCursor:
        return TextCursor.from_text("", self.options.columns, 0)

    def _up_or_history_up(self, cursor: TextCursor, literal: str, key: KeyEvent) -> TextCursor:
        if self.options.disable_cursor_movement_for_up_down_keys:
            if self.callbacks.on_history_up:
                self.callbacks.on_history_up()
            return cursor
        moved = cursor.up()
        if moved == cursor and self.callbacks.on_history_up:
            self.callbacks.on_history_up()
        return moved

    def _down_or_history_down(self, cursor: TextCursor, literal: str, key: KeyEvent) -> TextCursor:
        if self.options.disable_cursor_movement_for_up_down_keys:
            if self.callbacks.on_history_down:
                self.callbacks.on_history_down()
            return cursor
        moved = cursor.down()
        if moved == cursor and self.callbacks.on_history_down:
            self.callbacks.on_history_down()
        return moved

    def _try_image_paste(self, cursor: TextCursor, literal: str, key: KeyEvent) -> TextCursor:
        image = self._read_clipboard_image()
        if image is not None:
            if self.callbacks.on_image_paste:
                self.callbacks.on_image_paste(image)
            return cursor
        if not self._image_paste_supported():
            return cursor

        self._hide_image_error()
        self._message(True, CLIPBOARD_ERROR_MESSAGE)
        self._image_error_shown = True
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Stays visible until the next key that hides it
            return cursor
        self._image_error_timer = loop.call_later(
            self.options.image_error_timeout, self._expire_image_error
        )
        return cursor

    # -- gesture callbacks -------------------------------------------------

    def _show_ctrl_c_message(self, show: bool) -> None:
        self._hide_image_error()
        self._exit_message(show, "Ctrl-C")

    def _show_escape_message(self, show: bool) -> None:
        self._hide_image_error()
        self._message(bool(self._value) and show, ESCAPE_CLEAR_MESSAGE)

    def _clear_after_interrupt(self) -> None:
        if self._value:
            self._clear_buffer()
            if self.callbacks.on_history_reset:
                self.callbacks.on_history_reset()

    def _clear_after_escape(self) -> None:
        if self._value:
            self._clear_buffer()

    def _clear_buffer(self) -> None:
        self._value = ""
        self._offset = 0
        if self.callbacks.on_change:
            self.callbacks.on_change("")
        if self.callbacks.on_offset_change:
            self.callbacks.on_offset_change(0)

    def _exit(self) -> None:
        logger.debug("exit requested")
        if self.callbacks.on_exit:
            self.callbacks.on_exit()

    def _exit_message(self, show: bool, key_label: str) -> None:
        if self.callbacks.on_exit_message:
            self.callbacks.on_exit_message(show, key_label)

    def _message(self, show: bool, text: str = "") -> None:
        if self.callbacks.on_message:
            self.callbacks.on_message(show, text)

    # -- clipboard error banner --------------------------------------------

    @property
    def image_error_visible(self) -> bool:
        return self._image_error_shown

    def _hide_image_error(self) -> None:
        if not self._image_error_shown:
            return
        if self._image_error_timer is not None:
            self._image_error_timer.cancel()
            self._image_error_timer = None
        self._image_error_shown = False
        self._message(False)

    def _expire_image_error(self) -> None:
        self._image_error_timer = None
        self._image_error_shown = False
        self._message(False)

    def close(self) -> None:
        """Cancel every pending timer."""
        self._ctrl_c.cancel()
        self._escape.cancel()
        self._empty_ctrl_d.cancel()
        if self._image_error_timer is not None:
            self._image_error_timer.cancel()
            self._image_error_timer = None
        self._image_error_shown = False
