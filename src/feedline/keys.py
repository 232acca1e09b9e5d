"""Decoding of raw terminal input into key events.

A :class:`KeyEvent` carries the flags the dispatcher routes on; the literal
string travels beside it. Decoding follows legacy xterm/VT sequences:
recognised keys set flags and leave an empty literal, ctrl and alt chords
set the modifier and keep the letter, and anything unrecognised (Home/End,
pasted text) is passed through untouched as the literal.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

ESC = "\x1b"

BACKSPACE_LITERALS: frozenset[str] = frozenset({"\b", "\x7f", "\x08"})

HOME_SEQUENCES: frozenset[str] = frozenset({"\x1b[H", "\x1b[1~"})
END_SEQUENCES: frozenset[str] = frozenset({"\x1b[F", "\x1b[4~"})


@dataclass(frozen=True)
class KeyEvent:
    """Decoded modifier and special-key flags for one input chunk."""

    ctrl: bool = False
    meta: bool = False
    shift: bool = False
    return_: bool = False
    escape: bool = False
    tab: bool = False
    backspace: bool = False
    delete: bool = False
    up_arrow: bool = False
    down_arrow: bool = False
    left_arrow: bool = False
    right_arrow: bool = False
    page_up: bool = False
    page_down: bool = False

    @property
    def is_arrow(self) -> bool:
        return self.up_arrow or self.down_arrow or self.left_arrow or self.right_arrow


# Sequence -> flag name for unmodified navigation keys
_NAV_SEQUENCES: dict[str, str] = {
    "\x1b[A": "up_arrow",
    "\x1b[B": "down_arrow",
    "\x1b[C": "right_arrow",
    "\x1b[D": "left_arrow",
    "\x1bOA": "up_arrow",
    "\x1bOB": "down_arrow",
    "\x1bOC": "right_arrow",
    "\x1bOD": "left_arrow",
    "\x1b[5~": "page_up",
    "\x1b[6~": "page_down",
    "\x1b[3~": "delete",
    "\x1b[Z": "tab",
}

_ARROW_FINALS: dict[str, str] = {
    "A": "up_arrow",
    "B": "down_arrow",
    "C": "right_arrow",
    "D": "left_arrow",
}

# xterm modifier parameter (1 + bitmask) -> (shift, meta, ctrl)
_MODIFIER_PARAMS: dict[str, tuple[bool, bool, bool]] = {
    "2": (True, False, False),
    "3": (False, True, False),
    "4": (True, True, False),
    "5": (False, False, True),
    "6": (True, False, True),
    "7": (False, True, True),
    "8": (True, True, True),
}

_MODIFIED_ARROW_PREFIX = "\x1b[1;"


def _parse_modified_arrow(data: str) -> KeyEvent | None:
    """Parse ``ESC[1;<mod><A-D>`` style modified arrows."""
    if not data.startswith(_MODIFIED_ARROW_PREFIX) or len(data) != 6:
        return None
    param, final = data[4], data[5]
    mods = _MODIFIER_PARAMS.get(param)
    flag = _ARROW_FINALS.get(final)
    if mods is None or flag is None:
        return None
    shift, meta, ctrl = mods
    return replace(KeyEvent(shift=shift, meta=meta, ctrl=ctrl), **{flag: True})


def parse_key_event(data: str) -> tuple[str, KeyEvent]:  # noqa: C901
    """Decode one raw input chunk into ``(literal, KeyEvent)``."""
    if not data:
        return "", KeyEvent()

    flag = _NAV_SEQUENCES.get(data)
    if flag is not None:
        shift = data == "\x1b[Z"
        return "", replace(KeyEvent(shift=shift), **{flag: True})

    modified = _parse_modified_arrow(data)
    if modified is not None:
        return "", modified

    # rxvt meta+arrow: ESC followed by an arrow sequence
    if data.startswith(ESC + ESC) and data[1:] in _NAV_SEQUENCES:
        flag = _NAV_SEQUENCES[data[1:]]
        return "", replace(KeyEvent(meta=True), **{flag: True})

    if data in ("\r", "\n"):
        return "", KeyEvent(return_=True)
    if data == ESC:
        return "", KeyEvent(escape=True)
    if data == "\t":
        return "", KeyEvent(tab=True)
    if data in BACKSPACE_LITERALS:
        return data, KeyEvent(backspace=True)

    if len(data) == 1:
        code = ord(data)
        if 1 <= code <= 26:
            return chr(code + ord("a") - 1), KeyEvent(ctrl=True)
        if data.isalpha() and data.isupper():
            return data, KeyEvent(shift=True)
        return data, KeyEvent()

    # Alt/Option chords arrive as ESC + key
    if len(data) == 2 and data[0] == ESC:
        ch = data[1]
        if ch in ("\r", "\n"):
            return "", KeyEvent(meta=True, return_=True)
        if ch in BACKSPACE_LITERALS:
            return "", KeyEvent(meta=True, backspace=True)
        if ch == ESC:
            return "", KeyEvent(meta=True, escape=True)
        code = ord(ch)
        if 1 <= code <= 26:
            return chr(code + ord("a") - 1), KeyEvent(meta=True, ctrl=True)
        if ch.isprintable():
            return ch.lower() if ch.isalpha() else ch, KeyEvent(meta=True, shift=ch.isupper())

    # Home/End, unknown sequences and multi-character text pass through
    return data, KeyEvent()
