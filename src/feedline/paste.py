"""Paste-burst coalescing.

Terminals without bracketed paste deliver a paste as a run of ordinary input
chunks. :class:`PasteBurstCoalescer` sits in front of the key dispatcher and
buffers chunks that look like part of a burst (long chunks, anything arriving
while a burst is open, shell path fragments starting with ``'/``). Once no
chunk has arrived for the quiet period the buffer is emitted as one paste.
Normal typing is forwarded immediately.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import Callable

from feedline.keys import BACKSPACE_LITERALS, KeyEvent

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 20
DEFAULT_QUIET_PERIOD = 0.05
PATH_FRAGMENT_PREFIX = "'/"


class PasteBurstCoalescer:
    """Buffers burst input and emits it as a single paste event."""

    def __init__(
        self,
        forward: Callable[[str, KeyEvent], None],
        on_paste: Callable[[str], None] | None = None,
        *,
        threshold: int = DEFAULT_THRESHOLD,
        quiet_period: float = DEFAULT_QUIET_PERIOD,
    ) -> None:
        self._forward = forward
        self._on_paste = on_paste
        self._threshold = threshold
        self._quiet_period = quiet_period

        self._chunks: list[str] = []
        self._total_length: int = 0
        self._timer: asyncio.TimerHandle | None = None

    @property
    def is_buffering(self) -> bool:
        return self._timer is not None or bool(self._chunks)

    @property
    def total_length(self) -> int:
        return self._total_length

    def get_buffer(self) -> str:
        return "".join(self._chunks)

    def on_paste(self, callback: Callable[[str], None]) -> None:
        self._on_paste = callback

    def process(self, literal: str, key: KeyEvent, raw: str | None = None) -> None:
        """Feed one input chunk with its decoded key flags.

        *raw* is the undecoded terminal data. It is what gets buffered, so
        a lone ``\\r`` or control byte inside a burst survives decoding.
        Without it the literal is buffered.
        """
        chunk = literal if raw is None else raw
        if key.backspace or key.delete or literal in BACKSPACE_LITERALS:
            # Edits are never delayed
            self._forward(literal, as_backspace(key))
            return

        if (
            len(chunk) > self._threshold
            or self.is_buffering
            or chunk.startswith(PATH_FRAGMENT_PREFIX)
        ):
            self._chunks.append(chunk)
            self._total_length += len(chunk)
            self._arm()
            return

        self._forward(literal, key)

    def _arm(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop - flush immediately
            self.flush()
            return
        self._timer = loop.call_later(self._quiet_period, self._flush_timeout)

    def _flush_timeout(self) -> None:
        self._timer = None
        self.flush()

    def flush(self) -> str | None:
        """Emit the buffered burst now. Returns the pasted text, if any."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if not self._chunks:
            return None

        text = "".join(self._chunks)
        self._chunks = []
        self._total_length = 0
        logger.debug("paste burst flushed (%d chars)", len(text))
        if self._on_paste:
            self._on_paste(text)
        return text

    def clear(self) -> None:
        """Drop the buffered burst without emitting it."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._chunks = []
        self._total_length = 0


def as_backspace(key: KeyEvent) -> KeyEvent:
    """Return *key* with the backspace flag set."""
    if key.backspace:
        return key
    return replace(key, backspace=True)
