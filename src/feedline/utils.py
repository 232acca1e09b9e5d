"""Terminal text helpers: ANSI stripping, width measurement, truncation."""

from __future__ import annotations

import re
import unicodedata

import grapheme
import wcwidth as _wcwidth

# SGR and other CSI sequences, plus OSC strings terminated by BEL or ST
_STRIP_RE = re.compile(
    r"\x1b\[[0-9;?]*[A-Za-z~]"
    r"|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)"
)

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences from *text*."""
    return _STRIP_RE.sub("", text)


def is_whitespace_char(char: str) -> bool:
    """Return ``True`` if *char* is whitespace (``str.isspace`` semantics)."""
    return char.isspace()


def _grapheme_width(g: str) -> int:
    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or 0x7F <= cp <= 0x9F:
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    # Emoji presentation, ZWJ sequences and regional indicator pairs
    for ch in g:
        cp = ord(ch)
        if cp in (0xFE0F, 0x200D) or 0x1F1E6 <= cp <= 0x1F1FF:
            return 2
    if ord(g[0]) >= 0x1F000:
        return 2
    if unicodedata.category(g[0]) in ("Mn", "Me", "Cf"):
        return 0
    return max(_wcwidth.wcwidth(g[0]), 0)


def visible_width(text: str) -> int:
    """Return the number of terminal cells *text* occupies.

    ANSI escape sequences are ignored and tabs count as three cells.
    """
    if not text:
        return 0
    stripped = strip_ansi(text).replace("\t", "   ")
    if stripped.isascii() and stripped.isprintable():
        return len(stripped)

    cached = _width_cache.get(stripped)
    if cached is not None:
        return cached

    total = sum(_grapheme_width(g) for g in grapheme.graphemes(stripped))
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[stripped] = total
    return total


def truncate_to_width(text: str, max_width: int, ellipsis: str = "…") -> str:
    """Truncate *text* to at most *max_width* cells, keeping ANSI codes intact.

    When truncation happens the result ends with *ellipsis* followed by a
    reset so that no style leaks past the cut.
    """
    if max_width <= 0:
        return ""
    if visible_width(text) <= max_width:
        return text

    budget = max_width - visible_width(ellipsis)
    result: list[str] = []
    width = 0
    pos = 0
    while pos < len(text):
        match = _STRIP_RE.match(text, pos)
        if match:
            result.append(match.group(0))
            pos = match.end()
            continue
        next_esc = text.find("\x1b", pos)
        end = len(text) if next_esc == -1 else max(next_esc, pos + 1)
        for g in grapheme.graphemes(text[pos:end]):
            w = _grapheme_width(g)
            if width + w > budget:
                return "".join(result) + ellipsis + "\x1b[0m"
            result.append(g)
            width += w
        pos = end
    return "".join(result) + ellipsis + "\x1b[0m"
