"""Tests for feedline.utils and feedline.theme."""

from __future__ import annotations

import pytest

from feedline.theme import (
    ONE_DARK_PRO,
    dim,
    get_theme,
    hex_color,
    identity,
    inverse,
    reset_theme,
    set_theme,
)
from feedline.utils import is_whitespace_char, strip_ansi, truncate_to_width, visible_width


class TestVisibleWidth:
    def test_plain_ascii(self) -> None:
        assert visible_width("hello") == 5

    def test_ansi_ignored(self) -> None:
        assert visible_width("\x1b[31mred\x1b[0m") == 3

    def test_wide_characters(self) -> None:
        assert visible_width("日本") == 4

    def test_emoji(self) -> None:
        assert visible_width("👍") == 2

    def test_combining_mark(self) -> None:
        assert visible_width("e\u0301") == 1

    def test_tab_counts_three(self) -> None:
        assert visible_width("\t") == 3

    def test_empty(self) -> None:
        assert visible_width("") == 0


class TestTruncate:
    def test_short_text_unchanged(self) -> None:
        assert truncate_to_width("abc", 5) == "abc"

    def test_truncates_with_ellipsis(self) -> None:
        assert truncate_to_width("abcdefgh", 5) == "abcd…\x1b[0m"

    def test_keeps_escape_codes(self) -> None:
        result = truncate_to_width("\x1b[31mabcdefgh\x1b[0m", 5)
        assert result.startswith("\x1b[31mabcd")
        assert visible_width(result) == 5

    def test_wide_char_not_split(self) -> None:
        result = truncate_to_width("日本語", 4)
        assert strip_ansi(result) == "日…"

    def test_zero_width(self) -> None:
        assert truncate_to_width("abc", 0) == ""


class TestHelpers:
    def test_strip_ansi_osc(self) -> None:
        assert strip_ansi("\x1b]0;title\x07text") == "text"

    @pytest.mark.parametrize("char", [" ", "\t", "\n", "\r"])
    def test_whitespace(self, char: str) -> None:
        assert is_whitespace_char(char)

    def test_not_whitespace(self) -> None:
        assert not is_whitespace_char("a")


class TestTheme:
    def teardown_method(self) -> None:
        reset_theme()

    def test_default_is_one_dark(self) -> None:
        assert get_theme() == ONE_DARK_PRO

    def test_set_theme_overrides(self) -> None:
        set_theme(error="#ff0000")
        assert get_theme().error == "#ff0000"
        assert get_theme().info == ONE_DARK_PRO.info

    def test_set_theme_rejects_unknown(self) -> None:
        with pytest.raises(ValueError):
            set_theme(background="#000")

    def test_hex_color(self) -> None:
        assert hex_color("#ff8000")("x") == "\x1b[38;2;255;128;0mx\x1b[39m"
        assert hex_color("#fff")("x") == "\x1b[38;2;255;255;255mx\x1b[39m"

    def test_styles(self) -> None:
        assert inverse("a") == "\x1b[7ma\x1b[27m"
        assert dim("a") == "\x1b[2ma\x1b[22m"
        assert identity("a") == "a"
