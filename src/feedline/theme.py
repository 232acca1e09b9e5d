"""Colour theme (One Dark Pro palette) and ANSI styling helpers."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Callable


@dataclass(frozen=True)
class Theme:
    text: str = "#abb2bf"
    secondary_text: str = "#5c6370"
    success: str = "#98c379"
    warning: str = "#d19a66"
    error: str = "#e06c75"
    info: str = "#61afef"


ONE_DARK_PRO = Theme()

_current_theme: Theme = ONE_DARK_PRO


def get_theme() -> Theme:
    return _current_theme


def set_theme(**overrides: Any) -> Theme:
    """Override individual colours of the current theme."""
    global _current_theme
    known = {f.name for f in fields(Theme)}
    unknown = set(overrides) - known
    if unknown:
        raise ValueError(f"Unknown theme colours: {', '.join(sorted(unknown))}")
    _current_theme = replace(_current_theme, **overrides)
    return _current_theme


def reset_theme() -> None:
    global _current_theme
    _current_theme = ONE_DARK_PRO


def hex_color(color: str) -> Callable[[str], str]:
    """Return a styler that paints text in the 24-bit colour *color*."""
    value = color.lstrip("#")
    if len(value) == 3:
        value = "".join(ch * 2 for ch in value)
    r, g, b = (int(value[i : i + 2], 16) for i in (0, 2, 4))

    def style(text: str) -> str:
        return f"\x1b[38;2;{r};{g};{b}m{text}\x1b[39m"

    return style


def inverse(text: str) -> str:
    return f"\x1b[7m{text}\x1b[27m"


def dim(text: str) -> str:
    return f"\x1b[2m{text}\x1b[22m"


def identity(text: str) -> str:
    return text
