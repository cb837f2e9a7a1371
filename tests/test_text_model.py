"""Tests for mep.engine.text_model -- classification, widths and graphemes."""

from __future__ import annotations

from mep.engine.text_model import (
    WIDE_RANGES,
    CodePointClass,
    classify,
    column_at,
    decode_code_point,
    delete_grapheme_after,
    delete_grapheme_before,
    grapheme_boundaries,
    grapheme_width,
    is_zero_width,
    iter_code_points,
    next_boundary,
    previous_boundary,
    segment_graphemes,
)


# ---------------------------------------------------------------------------
# classify
# ---------------------------------------------------------------------------


class TestClassify:
    """Binary search over the wide range table."""

    def test_cjk_ideograph_is_wide(self) -> None:
        assert classify(ord("中")) is CodePointClass.WIDE

    def test_ascii_is_narrow(self) -> None:
        assert classify(ord("a")) is CodePointClass.NARROW

    def test_emoji_is_wide(self) -> None:
        assert classify(0x1F600) is CodePointClass.WIDE

    def test_range_boundaries_are_inclusive(self) -> None:
        for start, end in WIDE_RANGES:
            assert classify(start) is CodePointClass.WIDE
            assert classify(end) is CodePointClass.WIDE

    def test_just_outside_a_range_is_narrow(self) -> None:
        assert classify(0x10FF) is CodePointClass.NARROW
        assert classify(0x1200) is CodePointClass.NARROW

    def test_negative_and_huge_values_are_narrow(self) -> None:
        assert classify(-1) is CodePointClass.NARROW
        assert classify(0x10FFFF) is CodePointClass.NARROW

    def test_columns(self) -> None:
        assert CodePointClass.NARROW.columns == 1
        assert CodePointClass.WIDE.columns == 2

    def test_table_is_sorted_and_disjoint(self) -> None:
        for (_s1, e1), (s2, _e2) in zip(WIDE_RANGES, WIDE_RANGES[1:]):
            assert e1 < s2


# ---------------------------------------------------------------------------
# decode_code_point
# ---------------------------------------------------------------------------


class TestDecodeCodePoint:
    """Surrogate pair joining and out-of-range handling."""

    def test_plain_character(self) -> None:
        assert decode_code_point("abc", 1) == (ord("b"), 1)

    def test_surrogate_pair_is_combined(self) -> None:
        text = "\ud83d\ude00"
        assert decode_code_point(text, 0) == (0x1F600, 2)

    def test_lone_high_surrogate(self) -> None:
        assert decode_code_point("\ud83dx", 0) == (0xD83D, 1)

    def test_lone_low_surrogate(self) -> None:
        assert decode_code_point("\ude00", 0) == (0xDE00, 1)

    def test_out_of_range(self) -> None:
        assert decode_code_point("abc", 3) == (0, 0)
        assert decode_code_point("abc", -1) == (0, 0)
        assert decode_code_point("", 0) == (0, 0)

    def test_iter_code_points_joins_pairs(self) -> None:
        assert list(iter_code_points("a😀b")) == [ord("a"), 0x1F600, ord("b")]


# ---------------------------------------------------------------------------
# segment_graphemes
# ---------------------------------------------------------------------------


class TestSegmentGraphemes:
    """Grapheme clusters are the unit of width and editing."""

    def test_empty(self) -> None:
        assert segment_graphemes("") == []

    def test_ascii(self) -> None:
        assert segment_graphemes("abc") == ["a", "b", "c"]

    def test_combining_mark_stays_with_base(self) -> None:
        assert segment_graphemes("e\u0301x") == ["e\u0301", "x"]

    def test_surrogate_pair_is_one_grapheme(self) -> None:
        assert segment_graphemes("a\ud83d\ude00b") == ["a", "\ud83d\ude00", "b"]

    def test_lone_surrogate_does_not_raise(self) -> None:
        assert "".join(segment_graphemes("a\ud83db")) == "a\ud83db"


# ---------------------------------------------------------------------------
# grapheme_width / is_zero_width
# ---------------------------------------------------------------------------


class TestGraphemeWidth:
    def test_narrow(self) -> None:
        assert grapheme_width("a") == 1

    def test_wide(self) -> None:
        assert grapheme_width("中") == 2

    def test_combining_cluster_is_narrow(self) -> None:
        assert grapheme_width("e\u0301") == 1

    def test_emoji_presentation_selector_widens(self) -> None:
        assert grapheme_width("\u2714\ufe0f") == 2

    def test_lone_combining_mark_is_zero(self) -> None:
        assert grapheme_width("\u0301") == 0

    def test_empty(self) -> None:
        assert grapheme_width("") == 0

    def test_controls_are_zero_width(self) -> None:
        assert is_zero_width(0x07)
        assert is_zero_width(0x9B)
        assert not is_zero_width(ord("a"))

    def test_zwj_is_zero_width(self) -> None:
        assert is_zero_width(0x200D)

    def test_lone_surrogate_is_narrow(self) -> None:
        assert grapheme_width("\ud83d") == 1


# ---------------------------------------------------------------------------
# Cursor helpers
# ---------------------------------------------------------------------------


class TestCursorHelpers:
    """Movement and deletion operate on whole graphemes."""

    def test_boundaries(self) -> None:
        assert grapheme_boundaries("ae\u0301b") == [0, 1, 3, 4]

    def test_previous_boundary_skips_cluster(self) -> None:
        assert previous_boundary("ae\u0301b", 3) == 1

    def test_next_boundary_skips_cluster(self) -> None:
        assert next_boundary("ae\u0301b", 1) == 3

    def test_boundaries_clamp(self) -> None:
        assert previous_boundary("abc", 0) == 0
        assert next_boundary("abc", 3) == 3
        assert next_boundary("abc", 99) == 3

    def test_backspace_removes_whole_cluster(self) -> None:
        assert delete_grapheme_before("ae\u0301b", 3) == ("ab", 1)

    def test_backspace_at_start_is_noop(self) -> None:
        assert delete_grapheme_before("abc", 0) == ("abc", 0)

    def test_delete_after_removes_surrogate_pair(self) -> None:
        assert delete_grapheme_after("a\ud83d\ude00b", 1) == ("ab", 1)

    def test_delete_at_end_is_noop(self) -> None:
        assert delete_grapheme_after("abc", 3) == ("abc", 3)

    def test_column_at_counts_wide(self) -> None:
        assert column_at("中文ab", 2) == 4
        assert column_at("中文ab", 3) == 5
