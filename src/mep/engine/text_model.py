"""Unicode text model: code-point classification, widths, grapheme clusters.

Widths are decided by a sorted table of inclusive wide ranges searched with
``bisect``.  Grapheme clusters come from the ``grapheme`` package, and
non-spacing code points are recognised through ``wcwidth``.  Nothing in this
module raises on arbitrary input; lone surrogates are plain narrow units.
"""

from __future__ import annotations

import enum
from bisect import bisect_right
from typing import Iterator

import grapheme
import wcwidth as _wcwidth


class CodePointClass(enum.Enum):
    """Column class of a single code point."""

    NARROW = 1
    WIDE = 2

    @property
    def columns(self) -> int:
        return self.value


# ---------------------------------------------------------------------------
# Wide range table
# ---------------------------------------------------------------------------

# Sorted, non-overlapping, inclusive ``(start, end)`` ranges of code points
# that occupy two terminal columns.
WIDE_RANGES: tuple[tuple[int, int], ...] = (
    (0x1100, 0x11FF),  # Hangul Jamo
    (0x2E80, 0x2EFF),  # CJK Radicals Supplement
    (0x2F00, 0x2FDF),  # Kangxi Radicals
    (0x3000, 0x303F),  # CJK Symbols and Punctuation
    (0x3040, 0x309F),  # Hiragana
    (0x30A0, 0x30FF),  # Katakana
    (0x3100, 0x312F),  # Bopomofo
    (0x3130, 0x318F),  # Hangul Compatibility Jamo
    (0x3200, 0x32FF),  # Enclosed CJK Letters and Months
    (0x3300, 0x33FF),  # CJK Compatibility
    (0x3400, 0x4DBF),  # CJK Unified Ideographs Extension A
    (0x4E00, 0x9FFF),  # CJK Unified Ideographs
    (0xA960, 0xA97F),  # Hangul Jamo Extended-A
    (0xAC00, 0xD7AF),  # Hangul Syllables
    (0xD7B0, 0xD7FF),  # Hangul Jamo Extended-B
    (0xF900, 0xFAFF),  # CJK Compatibility Ideographs
    (0xFE10, 0xFE1F),  # Vertical Forms
    (0xFE30, 0xFE4F),  # CJK Compatibility Forms
    (0xFE50, 0xFE6F),  # Small Form Variants
    (0xFF01, 0xFF60),  # Fullwidth ASCII variants
    (0xFFE0, 0xFFE6),  # Fullwidth currency/symbols
    (0x1F1E6, 0x1F1FF),  # Regional indicators
    (0x1F300, 0x1F6FF),  # Miscellaneous Symbols and Pictographs
    (0x1F900, 0x1F9FF),  # Supplemental Symbols and Pictographs
    (0x1FA70, 0x1FAFF),  # Symbols and Pictographs Extended-A
    (0x20000, 0x2FFFD),  # CJK Unified Ideographs Extension B..F
    (0x30000, 0x3FFFD),  # CJK Unified Ideographs Extension G..
)

_RANGE_STARTS: tuple[int, ...] = tuple(start for start, _end in WIDE_RANGES)

_VS16 = 0xFE0F
_HIGH_SURROGATES = range(0xD800, 0xDC00)
_LOW_SURROGATES = range(0xDC00, 0xE000)


def classify(code_point: int) -> CodePointClass:
    """Return the column class of *code_point*.

    Anything not covered by :data:`WIDE_RANGES` is narrow, control codes
    included.
    """
    idx = bisect_right(_RANGE_STARTS, code_point) - 1
    if idx >= 0 and code_point <= WIDE_RANGES[idx][1]:
        return CodePointClass.WIDE
    return CodePointClass.NARROW


def is_zero_width(code_point: int) -> bool:
    """Return ``True`` for code points that never advance the cursor.

    Covers C0/C1 controls and the non-spacing code points ``wcwidth``
    reports as zero width (combining marks, ZWJ, variation selectors).
    """
    if code_point < 0x20 or 0x7F <= code_point <= 0x9F:
        return True
    if 0xD800 <= code_point <= 0xDFFF:
        return False
    return _wcwidth.wcwidth(chr(code_point)) == 0


# ---------------------------------------------------------------------------
# Code point decoding
# ---------------------------------------------------------------------------


def decode_code_point(text: str, index: int) -> tuple[int, int]:
    """Decode the code point at *index* in *text*.

    Returns ``(code_point, consumed)``.  A high surrogate followed by a low
    surrogate is combined into one supplementary code point and consumes two
    units; every other unit, a lone surrogate included, consumes one.  An
    index outside the string yields ``(0, 0)``.
    """
    if index < 0 or index >= len(text):
        return (0, 0)

    cp = ord(text[index])
    if cp in _HIGH_SURROGATES and index + 1 < len(text):
        low = ord(text[index + 1])
        if low in _LOW_SURROGATES:
            return ((cp - 0xD800) * 0x400 + (low - 0xDC00) + 0x10000, 2)
    return (cp, 1)


def iter_code_points(text: str) -> Iterator[int]:
    """Yield the code points of *text*, joining surrogate pairs."""
    i = 0
    while i < len(text):
        cp, consumed = decode_code_point(text, i)
        yield cp
        i += consumed


# ---------------------------------------------------------------------------
# Grapheme segmentation
# ---------------------------------------------------------------------------


def segment_graphemes(text: str) -> list[str]:
    """Split *text* into user-perceived characters.

    Combining marks stay fused with their base character, and a surrogate
    pair carried in the string is kept as one grapheme.
    """
    if not text:
        return []

    result: list[str] = []
    for g in grapheme.graphemes(text):
        if (
            result
            and ord(result[-1][-1]) in _HIGH_SURROGATES
            and ord(g[0]) in _LOW_SURROGATES
        ):
            result[-1] += g
        else:
            result.append(g)
    return result


def grapheme_width(g: str) -> int:
    """Return the terminal width (0, 1 or 2) of a single grapheme cluster."""
    if not g:
        return 0

    code_points = list(iter_code_points(g))
    if classify(code_points[0]) is CodePointClass.WIDE:
        return 2

    if all(is_zero_width(cp) for cp in code_points):
        return 0

    # Emoji presentation selector turns a narrow symbol into a wide glyph
    if _VS16 in code_points:
        return 2

    return 1


# ---------------------------------------------------------------------------
# Cursor math over grapheme boundaries
# ---------------------------------------------------------------------------


def grapheme_boundaries(text: str) -> list[int]:
    """Return every string offset that starts or ends a grapheme."""
    offsets = [0]
    pos = 0
    for g in segment_graphemes(text):
        pos += len(g)
        offsets.append(pos)
    return offsets


def previous_boundary(text: str, offset: int) -> int:
    """Offset of the grapheme boundary immediately before *offset*."""
    offset = min(max(offset, 0), len(text))
    if offset == 0:
        return 0
    graphemes = segment_graphemes(text[:offset])
    return offset - len(graphemes[-1])


def next_boundary(text: str, offset: int) -> int:
    """Offset of the grapheme boundary immediately after *offset*."""
    offset = min(max(offset, 0), len(text))
    if offset == len(text):
        return offset
    graphemes = segment_graphemes(text[offset:])
    return offset + len(graphemes[0])


def delete_grapheme_before(text: str, offset: int) -> tuple[str, int]:
    """Backspace: remove the grapheme ending at *offset*.

    Returns the new text and the new cursor offset.
    """
    offset = min(max(offset, 0), len(text))
    start = previous_boundary(text, offset)
    return (text[:start] + text[offset:], start)


def delete_grapheme_after(text: str, offset: int) -> tuple[str, int]:
    """Forward delete: remove the grapheme starting at *offset*."""
    offset = min(max(offset, 0), len(text))
    end = next_boundary(text, offset)
    return (text[:offset] + text[end:], offset)


def column_at(text: str, offset: int) -> int:
    """Visual column reached after the first *offset* units of *text*."""
    return sum(grapheme_width(g) for g in segment_graphemes(text[:offset]))
