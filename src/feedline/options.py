"""Configuration for the text input."""

from __future__ import annotations

from dataclasses import dataclass

from feedline.double_press import DEFAULT_TIMEOUT


@dataclass
class TextInputOptions:
    # Editing
    multiline: bool = False
    disable_cursor_movement_for_up_down_keys: bool = False
    # Display
    mask: str = ""
    show_cursor: bool = True
    focus: bool = True
    dimmed: bool = False
    placeholder: str = ""
    columns: int = 80
    # Timing (seconds)
    double_press_timeout: float = DEFAULT_TIMEOUT
    image_error_timeout: float = 4.0
    paste_quiet_period: float = 0.05
    # Chunks longer than this many characters start a paste burst
    paste_threshold: int = 20
