"""Escape-aware text algebra: measure, strip, truncate, pad, wrap, split.

Formatting directives are opaque zero-width runs.  They are skipped when
measuring and passed through verbatim in output.  Widths come from
:mod:`mep.engine.text_model`, so wide glyphs and grapheme clusters are
accounted for by column, never by code unit.
"""

from __future__ import annotations

import math
from typing import Callable, Iterable, Iterator, Literal

from mep.engine.ansi import RESET
from mep.engine.text_model import grapheme_width, segment_graphemes

Align = Literal["left", "right", "center"]

_TAB_WIDTH = 3

# String directives (OSC, DCS, APC, PM) run until BEL or ST
_STRING_INTRODUCERS = "]P_^"


# ---------------------------------------------------------------------------
# Directive scanning
# ---------------------------------------------------------------------------


def extract_ansi_code(text: str, pos: int) -> tuple[str, int] | None:
    """Extract the formatting directive starting at *pos* in *text*.

    Returns ``(code, length)`` or ``None`` when *text[pos]* is not ESC.

    * ``ESC [`` ... one final byte in ``@``..``~`` (CSI)
    * ``ESC ]`` / ``ESC P`` / ``ESC _`` / ``ESC ^`` ... ``BEL`` or ``ESC \\``
    * ``ESC`` followed by any other single character

    A directive cut off by the end of the text swallows the remainder, so
    truncated sequences measure as zero width instead of leaking bytes.
    """
    if pos >= len(text) or text[pos] != "\x1b":
        return None

    if pos + 1 >= len(text):
        return ("\x1b", 1)

    next_ch = text[pos + 1]

    if next_ch == "[":
        i = pos + 2
        while i < len(text):
            if "@" <= text[i] <= "~":
                code = text[pos : i + 1]
                return (code, len(code))
            i += 1
        code = text[pos:]
        return (code, len(code))

    if next_ch in _STRING_INTRODUCERS:
        i = pos + 2
        while i < len(text):
            ch = text[i]
            if ch == "\x07":
                code = text[pos : i + 1]
                return (code, len(code))
            if ch == "\x1b" and i + 1 < len(text) and text[i + 1] == "\\":
                code = text[pos : i + 2]
                return (code, len(code))
            i += 1
        code = text[pos:]
        return (code, len(code))

    return (text[pos : pos + 2], 2)


def _scan(text: str) -> Iterator[tuple[bool, str]]:
    """Yield ``(is_directive, chunk)`` runs in order."""
    start = 0
    i = text.find("\x1b")
    while i != -1:
        if i > start:
            yield (False, text[start:i])
        code, length = extract_ansi_code(text, i)  # type: ignore[misc]
        yield (True, code)
        start = i + length
        i = text.find("\x1b", start)
    if start < len(text):
        yield (False, text[start:])


def is_open_directive(code: str) -> bool:
    """Whether *code* (from :func:`extract_ansi_code`) lacks its terminator.

    Such a directive ran into the end of its text, so anything appended
    after it would be swallowed by the terminal as part of the sequence.
    """
    if len(code) < 2:
        return True
    introducer = code[1]
    if introducer == "[":
        return len(code) == 2 or not ("@" <= code[-1] <= "~")
    if introducer in _STRING_INTRODUCERS:
        if code.endswith("\x07") and len(code) > 2:
            return False
        return not (len(code) >= 4 and code.endswith("\x1b\\"))
    return False


def _drop_open_tail(text: str) -> str:
    # Only the last directive can be open: it swallows the rest of the text
    if "\x1b" not in text:
        return text
    pos = 0
    for is_code, chunk in _scan(text):
        if is_code and is_open_directive(chunk):
            return text[:pos]
        pos += len(chunk)
    return text


def tokenize(text: str) -> Iterator[tuple[bool, str]]:
    """Yield ``(is_directive, chunk)`` where visible chunks are graphemes."""
    for is_code, chunk in _scan(text):
        if is_code:
            yield (True, chunk)
        else:
            for g in segment_graphemes(chunk):
                yield (False, g)


def _cluster_width(g: str) -> int:
    if g == "\t":
        return _TAB_WIDTH
    return grapheme_width(g)


# ---------------------------------------------------------------------------
# Width cache (capped at 512 entries)
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


# ---------------------------------------------------------------------------
# measure / strip
# ---------------------------------------------------------------------------


def strip_ansi(text: str) -> str:
    """Remove every formatting directive, leaving only visible text."""
    if "\x1b" not in text:
        return text
    return "".join(chunk for is_code, chunk in _scan(text) if not is_code)


def visible_width(text: str) -> int:
    """Return the number of terminal columns *text* occupies.

    Directives cost nothing, tabs count as three columns and control
    characters as zero.
    """
    if not text:
        return 0

    stripped = strip_ansi(text)
    if not stripped:
        return 0

    if stripped.isascii() and stripped.isprintable():
        return len(stripped)

    cached = _width_cache.get(stripped)
    if cached is not None:
        return cached

    total = sum(_cluster_width(g) for g in segment_graphemes(stripped))
    return _cache_width(stripped, total)


# ---------------------------------------------------------------------------
# AnsiCodeTracker
# ---------------------------------------------------------------------------


class AnsiCodeTracker:
    """Track which SGR attributes are active while walking styled text.

    Used by wrapping to re-open styling on continuation lines and to close
    it at line ends.
    """

    _ATTRIBUTE_ON = (1, 2, 3, 4, 5, 7, 8, 9)
    _ATTRIBUTE_OFF = {
        22: (1, 2),
        23: (3,),
        24: (4,),
        25: (5,),
        27: (7,),
        28: (8,),
        29: (9,),
    }

    def __init__(self) -> None:
        self._attributes: set[int] = set()
        self.fg_color: str | None = None
        self.bg_color: str | None = None

    def process(self, code: str) -> None:
        """Update the state from one directive; non-SGR codes are ignored."""
        if not code.startswith("\x1b[") or not code.endswith("m"):
            return

        body = code[2:-1]
        if not body:
            self.clear()
            return

        params = body.split(";")
        i = 0
        while i < len(params):
            try:
                val = int(params[i]) if params[i] else 0
            except ValueError:
                i += 1
                continue

            if val == 0:
                self.clear()
            elif val in self._ATTRIBUTE_ON:
                self._attributes.add(val)
            elif val in self._ATTRIBUTE_OFF:
                self._attributes.difference_update(self._ATTRIBUTE_OFF[val])
            elif 30 <= val <= 37 or 90 <= val <= 97:
                self.fg_color = f"\x1b[{val}m"
            elif 40 <= val <= 47 or 100 <= val <= 107:
                self.bg_color = f"\x1b[{val}m"
            elif val == 39:
                self.fg_color = None
            elif val == 49:
                self.bg_color = None
            elif val in (38, 48):
                extended, consumed = self._extended_color(params, i)
                if extended is not None:
                    if val == 38:
                        self.fg_color = extended
                    else:
                        self.bg_color = extended
                i += consumed
            i += 1

    @staticmethod
    def _extended_color(params: list[str], i: int) -> tuple[str | None, int]:
        # 38;5;N / 38;2;R;G;B (and the 48 background forms)
        if i + 1 >= len(params):
            return (None, 0)
        base = params[i]
        mode = params[i + 1]
        if mode == "5" and i + 2 < len(params):
            return (f"\x1b[{base};5;{params[i + 2]}m", 2)
        if mode == "2" and i + 4 < len(params):
            rgb = ";".join(params[i + 2 : i + 5])
            return (f"\x1b[{base};2;{rgb}m", 4)
        return (None, 1)

    def feed(self, text: str) -> None:
        """Process every directive found in *text*."""
        for is_code, chunk in _scan(text):
            if is_code:
                self.process(chunk)

    def clear(self) -> None:
        self._attributes.clear()
        self.fg_color = None
        self.bg_color = None

    def get_active_codes(self) -> str:
        """Return directives that re-establish the current state."""
        parts = [f"\x1b[{attr}m" for attr in sorted(self._attributes)]
        if self.fg_color is not None:
            parts.append(self.fg_color)
        if self.bg_color is not None:
            parts.append(self.bg_color)
        return "".join(parts)

    def has_active_codes(self) -> bool:
        return bool(self._attributes) or self.fg_color is not None or self.bg_color is not None

    def get_line_end_reset(self) -> str:
        return RESET if self.has_active_codes() else ""


# ---------------------------------------------------------------------------
# truncate / pad
# ---------------------------------------------------------------------------


def _take_columns(text: str, max_cols: int) -> tuple[str, bool]:
    """Return the longest prefix of *text* within *max_cols* columns.

    The second item tells whether any directive was kept.
    """
    result: list[str] = []
    cols = 0
    kept_code = False

    for is_code, chunk in tokenize(text):
        if is_code:
            result.append(chunk)
            kept_code = True
            continue
        w = _cluster_width(chunk)
        if cols + w > max_cols:
            break
        result.append(chunk)
        cols += w

    return ("".join(result), kept_code)


def truncate_to_width(
    text: str,
    max_width: int,
    ellipsis: str = "",
    pad: bool = False,
) -> str:
    """Cut *text* so it fits within *max_width* columns.

    No ellipsis is added unless one is passed; its width is then reserved
    inside *max_width*.  When directives survive the cut a reset is
    appended so no style leaks past the end.  If *pad* is ``True`` the
    result is right-padded to exactly *max_width*.  An unterminated
    directive at the end of *text* is dropped.
    """
    if max_width <= 0:
        return ""

    text = _drop_open_tail(text)
    text_width = visible_width(text)
    if text_width <= max_width:
        if pad:
            return text + " " * (max_width - text_width)
        return text

    ellipsis_width = visible_width(ellipsis)
    target_width = max_width - ellipsis_width
    if target_width <= 0:
        result, _kept = _take_columns(ellipsis, max_width)
    else:
        kept, kept_code = _take_columns(text, target_width)
        result = kept + ellipsis
        if kept_code:
            result += RESET

    if pad:
        result_width = visible_width(result)
        if result_width < max_width:
            result += " " * (max_width - result_width)

    return result


def pad_to_width(text: str, width: int, align: Align = "left") -> str:
    """Pad *text* with spaces to *width* columns.

    Text already at least *width* wide is returned unchanged.  Centering
    puts the odd extra space on the right.  An unterminated trailing
    directive is dropped so the padding stays visible.
    """
    text = _drop_open_tail(text)
    text_width = visible_width(text)
    if text_width >= width:
        return text

    remaining = width - text_width
    if align == "right":
        return " " * remaining + text
    if align == "center":
        left = remaining // 2
        return " " * left + text + " " * (remaining - left)
    return text + " " * remaining


def apply_background_to_line(
    line: str,
    width: int,
    bg_fn: Callable[[str], str],
) -> str:
    """Pad *line* to *width* and hand it to *bg_fn* for background styling."""
    return bg_fn(pad_to_width(line, width))


# ---------------------------------------------------------------------------
# wrap
# ---------------------------------------------------------------------------


def wrap_lines(text: str, width: int) -> list[str]:
    """Greedy word-wrap *text* to *width* columns.

    Explicit line breaks are kept.  Within a paragraph words (runs between
    spaces) are packed while the joined line ``line + " " + word`` fits;
    a single word wider than *width* is left whole on its own line.  The
    joined line is measured as a whole because a leading mark or selector
    in *word* can merge with the separating space into a wider cluster.
    Active SGR styling is re-opened on continuation lines and reset at
    styled line ends.
    """
    if width < 1:
        return text.split("\n")

    result: list[str] = []
    tracker = AnsiCodeTracker()

    for paragraph in text.split("\n"):
        prefix = tracker.get_active_codes()
        line = ""

        for word in paragraph.split(" "):
            if not word:
                continue
            if line:
                candidate = f"{line} {word}"
                if visible_width(candidate) > width:
                    result.append(prefix + line + tracker.get_line_end_reset())
                    prefix = tracker.get_active_codes()
                    line = word
                else:
                    line = candidate
            else:
                line = word
            tracker.feed(word)

        result.append(prefix + line + tracker.get_line_end_reset())

    return result


def wrap_text(text: str, width: int) -> str:
    """Like :func:`wrap_lines` but joined back with newlines."""
    if width < 1:
        return text
    return "\n".join(wrap_lines(text, width))


# ---------------------------------------------------------------------------
# Column layout
# ---------------------------------------------------------------------------


def _fit(line: str, width: int) -> str:
    return pad_to_width(truncate_to_width(line, width), width)


def split_columns(
    left: str | Iterable[str],
    right: str | Iterable[str],
    total_width: int,
    ratio: float = 0.5,
    gap: int = 2,
) -> str:
    """Lay two blocks side by side within *total_width* columns.

    The left block gets ``floor((total_width - gap) * ratio)`` columns and
    the right block what remains after the gap.  Each row of each side is
    truncated and padded independently.  When either side would be
    narrower than one column only the left block is shown, at full width.
    """
    left_lines = left.split("\n") if isinstance(left, str) else list(left)
    right_lines = right.split("\n") if isinstance(right, str) else list(right)
    gap = max(gap, 0)

    left_width = math.floor((total_width - gap) * ratio)
    right_width = total_width - left_width - gap

    if left_width < 1 or right_width < 1:
        return "\n".join(truncate_to_width(line, total_width) for line in left_lines)

    rows = max(len(left_lines), len(right_lines))
    spacer = " " * gap
    out: list[str] = []
    for i in range(rows):
        l_line = left_lines[i] if i < len(left_lines) else ""
        r_line = right_lines[i] if i < len(right_lines) else ""
        out.append(_fit(l_line, left_width) + spacer + _fit(r_line, right_width))
    return "\n".join(out)


# ---------------------------------------------------------------------------
# Match highlighting
# ---------------------------------------------------------------------------


def highlight_indices(
    text: str,
    indices: Iterable[int],
    style: str,
    resume: str = "",
) -> str:
    """Wrap the characters of plain *text* at *indices* in *style*.

    After each highlighted character the style is reset and *resume* is
    emitted, so a surrounding line style can continue.
    """
    wanted = set(indices)
    if not wanted:
        return text
    out: list[str] = []
    for i, ch in enumerate(text):
        if i in wanted:
            out.append(f"{style}{ch}{RESET}{resume}")
        else:
            out.append(ch)
    return "".join(out)
