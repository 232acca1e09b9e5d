"""TextInput component - controlled line editor with paste coalescing."""

from __future__ import annotations

from typing import Callable

from feedline.clipboard import get_image_from_clipboard, is_image_paste_supported
from feedline.cursor import TextCursor
from feedline.dispatch import InputCallbacks, KeyDispatcher
from feedline.keys import KeyEvent, parse_key_event
from feedline.options import TextInputOptions
from feedline.paste import PasteBurstCoalescer
from feedline.theme import dim, get_theme, hex_color, identity, inverse
from feedline.utils import truncate_to_width


class TextInput:
    """Text input component.

    Raw terminal data goes through :meth:`handle_input`; hosts that decode
    keys themselves call :meth:`on_input`. Input first passes the paste
    coalescer, then the key dispatcher. Bursts are reported through
    ``on_paste`` and never inserted into the buffer.
    """

    def __init__(
        self,
        value: str = "",
        offset: int = 0,
        *,
        options: TextInputOptions | None = None,
        callbacks: InputCallbacks | None = None,
        on_paste: Callable[[str], None] | None = None,
        read_clipboard_image: Callable[[], str | None] = get_image_from_clipboard,
        image_paste_supported: Callable[[], bool] = is_image_paste_supported,
    ) -> None:
        self.options = options or TextInputOptions()
        self._dispatcher = KeyDispatcher(
            value,
            offset,
            options=self.options,
            callbacks=callbacks,
            read_clipboard_image=read_clipboard_image,
            image_paste_supported=image_paste_supported,
        )
        self._coalescer = PasteBurstCoalescer(
            self._dispatcher.on_input,
            on_paste,
            threshold=self.options.paste_threshold,
            quiet_period=self.options.paste_quiet_period,
        )

    # -- state -------------------------------------------------------------

    @property
    def dispatcher(self) -> KeyDispatcher:
        return self._dispatcher

    @property
    def coalescer(self) -> PasteBurstCoalescer:
        return self._coalescer

    @property
    def callbacks(self) -> InputCallbacks:
        return self._dispatcher.callbacks

    @property
    def value(self) -> str:
        return self._dispatcher.value

    @property
    def offset(self) -> int:
        return self._dispatcher.offset

    @property
    def cursor(self) -> TextCursor:
        return self._dispatcher.cursor

    def get_value(self) -> str:
        return self._dispatcher.value

    def set_value(self, value: str) -> None:
        self._dispatcher.set_value(value)

    def set_offset(self, offset: int) -> None:
        self._dispatcher.set_offset(offset)

    # -- input -------------------------------------------------------------

    def handle_input(self, data: str) -> None:
        if not self.options.focus:
            return
        literal, key = parse_key_event(data)
        self._coalescer.process(literal, key, data)

    def on_input(self, literal: str, key: KeyEvent) -> None:
        if not self.options.focus:
            return
        self._coalescer.process(literal, key)

    # -- rendering ---------------------------------------------------------

    @property
    def rendered_value(self) -> str:
        opts = self.options
        cursor_char = " " if opts.show_cursor else ""
        invert = inverse if opts.show_cursor and opts.focus else identity
        return self.cursor.render(cursor_char, opts.mask, invert)

    def _rendered_placeholder(self) -> str:
        placeholder = self.options.placeholder
        secondary = hex_color(get_theme().secondary_text)
        if self.options.show_cursor and self.options.focus:
            return inverse(placeholder[0]) + secondary(placeholder[1:])
        return secondary(placeholder)

    def render(self, width: int) -> list[str]:
        if not self.value and self.options.placeholder:
            lines = [self._rendered_placeholder()]
        else:
            lines = self.rendered_value.split("\n")

        # Single-line values are cut at the edge; multi-line wrapping is
        # left to the host.
        if not self.options.multiline and "\n" not in self.value:
            lines = [truncate_to_width(line, width) for line in lines]

        if self.options.dimmed:
            lines = [dim(line) for line in lines]
        return lines

    def close(self) -> None:
        """Cancel pending timers and drop any half-collected paste."""
        self._dispatcher.close()
        self._coalescer.clear()
