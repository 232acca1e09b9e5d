"""Tests for feedline.cursor.TextCursor."""

from __future__ import annotations

import pytest

from feedline.cursor import TextCursor


def cur(text: str, offset: int, width: int = 80) -> TextCursor:
    return TextCursor.from_text(text, width, offset)


class TestConstruction:
    def test_offset_clamped_high(self) -> None:
        assert cur("abc", 10).offset == 3

    def test_offset_clamped_low(self) -> None:
        assert cur("abc", -4).offset == 0

    def test_width_hint_at_least_one(self) -> None:
        assert TextCursor.from_text("abc", 0).width_hint == 1

    def test_structural_equality(self) -> None:
        assert cur("abc", 1) == cur("abc", 1)
        assert cur("abc", 1) != cur("abc", 2)
        assert cur("abc", 1, 40) != cur("abc", 1, 80)

    def test_immutable(self) -> None:
        c = cur("abc", 1)
        with pytest.raises(AttributeError):
            c.offset = 2  # type: ignore[misc]


class TestHorizontalMovement:
    def test_left_then_right_is_identity(self) -> None:
        c = cur("hello", 3)
        assert c.left().right() == c

    def test_left_at_start_is_noop(self) -> None:
        assert cur("hello", 0).left() == cur("hello", 0)

    def test_right_at_end_is_noop(self) -> None:
        assert cur("hello", 5).right() == cur("hello", 5)

    def test_width_hint_is_preserved(self) -> None:
        assert cur("hello", 2, 33).right().width_hint == 33


class TestVerticalMovement:
    def test_down_keeps_column(self) -> None:
        assert cur("line1\nline2", 3).down().offset == 9

    def test_up_keeps_column(self) -> None:
        assert cur("line1\nline2", 9).up().offset == 3

    def test_up_on_first_line_returns_equal(self) -> None:
        c = cur("line1\nline2", 2)
        assert c.up() == c

    def test_down_on_last_line_returns_equal(self) -> None:
        c = cur("line1\nline2", 8)
        assert c.down() == c

    def test_single_line_up_and_down(self) -> None:
        c = cur("abc", 1)
        assert c.up() == c
        assert c.down() == c

    def test_column_clamped_to_shorter_line(self) -> None:
        c = cur("long line\nab", 8)
        assert c.down().offset == len("long line\nab")

    def test_column_clamped_moving_up(self) -> None:
        c = cur("ab\nlong line", 11)
        assert c.up().offset == 2

    def test_empty_middle_line(self) -> None:
        c = cur("abc\n\nxyz", 2)
        assert c.down().offset == 4
        assert c.down().down().offset == 5

    def test_width_hint_not_used_for_wrapping(self) -> None:
        # A long line narrower than its width hint is still one line
        c = cur("a" * 30, 25, width=10)
        assert c.up() == c


class TestLineBoundaries:
    def test_start_of_line_on_second_line(self) -> None:
        assert cur("abc\ndef", 6).start_of_line().offset == 4

    def test_end_of_line_on_first_line(self) -> None:
        assert cur("abc\ndef", 1).end_of_line().offset == 3

    def test_end_of_last_line(self) -> None:
        assert cur("abc\ndef", 4).end_of_line().offset == 7

    def test_start_of_line_at_newline_boundary(self) -> None:
        # Offset right after the newline belongs to the second line
        assert cur("abc\ndef", 4).start_of_line().offset == 4


class TestWordMovement:
    def test_prev_word_from_end(self) -> None:
        assert cur("hello world", 11).prev_word().offset == 6

    def test_prev_word_skips_trailing_whitespace(self) -> None:
        assert cur("hello world   ", 14).prev_word().offset == 6

    def test_prev_word_at_start(self) -> None:
        assert cur("hello", 0).prev_word().offset == 0

    def test_next_word_from_start(self) -> None:
        assert cur("hello world", 0).next_word().offset == 6

    def test_next_word_from_inside_last_word(self) -> None:
        assert cur("hello world", 7).next_word().offset == 11

    def test_next_word_from_whitespace(self) -> None:
        # Only whitespace left to skip
        assert cur("hello   world", 5).next_word().offset == 8

    def test_newline_counts_as_whitespace(self) -> None:
        assert cur("one\ntwo", 7).prev_word().offset == 4

    def test_tab_is_whitespace(self) -> None:
        assert cur("a\t b", 4).prev_word().offset == 3
        assert cur("a\t b", 0).next_word().offset == 3

    def test_prev_then_next_round_trip(self) -> None:
        c = cur("hello world", 6)
        assert c.next_word().prev_word() == c


class TestEditing:
    def test_insert_in_middle(self) -> None:
        c = cur("ac", 1).insert("b")
        assert (c.text, c.offset) == ("abc", 2)

    def test_insert_multi_char(self) -> None:
        c = cur("", 0).insert("hello")
        assert (c.text, c.offset) == ("hello", 5)

    def test_insert_then_backspace_restores(self) -> None:
        original = cur("hello world", 5)
        inserted = original.insert("XYZ")
        for _ in range(3):
            inserted = inserted.backspace()
        assert inserted == original

    def test_backspace_at_start_is_noop(self) -> None:
        c = cur("abc", 0)
        assert c.backspace() == c

    def test_backspace_removes_previous_char(self) -> None:
        c = cur("abc", 2).backspace()
        assert (c.text, c.offset) == ("ac", 1)

    def test_delete_removes_char_under_caret(self) -> None:
        c = cur("abc", 1).delete()
        assert (c.text, c.offset) == ("ac", 1)

    def test_delete_at_end_is_noop(self) -> None:
        c = cur("abc", 3)
        assert c.delete() == c

    def test_delete_to_line_start(self) -> None:
        c = cur("abc\ndef", 6).delete_to_line_start()
        assert (c.text, c.offset) == ("abc\nf", 4)

    def test_delete_to_line_end(self) -> None:
        c = cur("abc\ndef", 1).delete_to_line_end()
        assert (c.text, c.offset) == ("a\ndef", 1)

    def test_delete_to_line_end_at_line_end_is_equal(self) -> None:
        c = cur("abc\ndef", 3)
        assert c.delete_to_line_end() == c

    def test_delete_word_before(self) -> None:
        c = cur("hello world", 11).delete_word_before()
        assert (c.text, c.offset) == ("hello ", 6)

    def test_delete_word_after(self) -> None:
        c = cur("hello world", 0).delete_word_after()
        assert (c.text, c.offset) == ("world", 0)

    def test_operations_never_mutate(self) -> None:
        c = cur("hello world", 5)
        c.insert("!")
        c.delete_word_before()
        c.delete_to_line_end()
        assert (c.text, c.offset) == ("hello world", 5)


class TestOffsetInvariant:
    @pytest.mark.parametrize(
        "op",
        [
            "left", "right", "up", "down", "start_of_line", "end_of_line",
            "prev_word", "next_word", "backspace", "delete",
            "delete_to_line_start", "delete_to_line_end",
            "delete_word_before", "delete_word_after",
        ],
    )
    def test_offset_stays_in_bounds(self, op: str) -> None:
        text = "ab cd\n\n ef  \ngh"
        for offset in range(len(text) + 1):
            result = getattr(cur(text, offset), op)()
            assert 0 <= result.offset <= len(result.text)


class TestRender:
    def test_default_invert_is_reverse_video(self) -> None:
        assert cur("ab", 1).render(" ") == "a\x1b[7m \x1b[27mb"

    def test_custom_invert(self) -> None:
        assert cur("ab", 2).render("_", invert=lambda s: f"[{s}]") == "ab[_]"

    def test_empty_cursor_char_leaves_text(self) -> None:
        assert cur("ab", 1).render("") == "ab"

    def test_mask_replaces_every_char(self) -> None:
        assert cur("secret", 6).render("", mask="*") == "******"

    def test_mask_with_cursor(self) -> None:
        assert cur("abc", 1).render("|", mask="*", invert=lambda s: s) == "*|**"

    def test_render_does_not_mutate(self) -> None:
        c = cur("abc", 1)
        c.render(" ", mask="*")
        assert c == cur("abc", 1)
