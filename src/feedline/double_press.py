"""Double-press gesture detector.

Classifies repeated presses of the same key: a second press within the
timeout is a "double" and fires immediately, while a lone press resolves as a
"single" once the timeout has passed. The pending single-press timer is an
``asyncio`` timer handle and is cancelled on every new press.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 0.8


class DoublePress:
    """Timeout-based single/double press classifier.

    Without a running event loop there is no timer to wait on, so a lone
    press resolves as a single immediately: ``on_visibility(True)``,
    ``on_visibility(False)`` and ``on_single`` all fire inside :meth:`press`.
    The press time is still recorded, so a quick second press is a double.

    Args:
        on_visibility: Called with ``True`` on a first press and ``False``
            once the gesture resolves, so the host can show and hide a
            "press again" hint.
        on_double: Called when a second press lands within *timeout*.
        on_single: Called when *timeout* passes without a second press.
        timeout: Seconds within which a second press counts as a double.
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        on_visibility: Callable[[bool], None],
        on_double: Callable[[], None] | None = None,
        on_single: Callable[[], None] | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._on_visibility = on_visibility
        self._on_double = on_double
        self._on_single = on_single
        self._timeout = timeout
        self._clock = clock
        self._last_press_time: float | None = None
        self._timer: asyncio.TimerHandle | None = None

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def pending(self) -> bool:
        """Whether a single-press resolution is still scheduled."""
        return self._timer is not None

    def press(self) -> None:
        now = self._clock()
        last = self._last_press_time
        delta = float("inf") if last is None else now - last
        self.cancel()

        if delta < self._timeout:
            # Reset so a third rapid press starts a new gesture
            self._last_press_time = None
            self._on_visibility(False)
            if self._on_double:
                self._on_double()
            return

        self._last_press_time = now
        self._on_visibility(True)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; resolving single press now")
            self._resolve_single()
            return
        self._timer = loop.call_later(self._timeout, self._expire)

    def cancel(self) -> None:
        """Drop the pending single-press timer, if any."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _expire(self) -> None:
        self._timer = None
        self._resolve_single()

    def _resolve_single(self) -> None:
        self._on_visibility(False)
        if self._on_single:
            self._on_single()
