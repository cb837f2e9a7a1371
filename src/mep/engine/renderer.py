"""In-place frame rendering with relative cursor control.

Provides the ``FrameProducer`` protocol that widgets implement and the
``FrameRenderer`` that redraws a multi-line frame over the previous one
without growing the scrollback.  Only relative movement is used: cursor
up/down, carriage return, cursor forward and per-line erase.  The renderer
remembers nothing about a frame except its height and the row the cursor
was parked on.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, NamedTuple, Protocol

from mep.engine import ansi
from mep.engine.ansi_text import truncate_to_width, visible_width
from mep.engine.config import RenderConfig

if TYPE_CHECKING:
    from mep.engine.terminal import Terminal

logger = logging.getLogger(__name__)

__all__ = [
    "CURSOR_MARKER",
    "CursorTarget",
    "Frame",
    "FrameProducer",
    "FrameRenderer",
]

# Zero-width APC sequence a widget may embed to mark the cursor position
CURSOR_MARKER = "\x1b_mep:c\x07"


class CursorTarget(NamedTuple):
    line: int
    column: int


@dataclass
class Frame:
    lines: list[str]
    cursor: CursorTarget | None = None

    @classmethod
    def from_text(cls, content: str, cursor: CursorTarget | None = None) -> Frame:
        return cls(lines=content.split("\n"), cursor=cursor)


class FrameProducer(Protocol):
    """Anything that can describe its current visual state as a frame."""

    def frame(self, width: int) -> Frame:
        ...


def extract_cursor_position(
    lines: list[str],
) -> tuple[list[str], CursorTarget | None]:
    """Find and remove the first ``CURSOR_MARKER`` in *lines*.

    Returns the cleaned lines (a copy when a marker was removed) and the
    marker's ``(line, visible column)``, or ``None`` if there was none.
    """
    for row_idx, line in enumerate(lines):
        marker_pos = line.find(CURSOR_MARKER)
        if marker_pos == -1:
            continue
        cleaned = line[:marker_pos] + line[marker_pos + len(CURSOR_MARKER) :]
        lines = list(lines)
        lines[row_idx] = cleaned
        return lines, CursorTarget(row_idx, visible_width(line[:marker_pos]))
    return lines, None


class FrameRenderer:
    """Redraw frames in place and park the real cursor inside them."""

    def __init__(
        self,
        terminal: Terminal,
        config: RenderConfig | None = None,
    ) -> None:
        self.terminal = terminal
        self.config = config if config is not None else RenderConfig()

        # Line count of the last frame drawn (0 before the first render)
        self._height: int = 0
        # Row, counted from the frame top, the cursor currently sits on
        self._cursor_row: int = 0

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def height(self) -> int:
        return self._height

    @property
    def cursor_row(self) -> int:
        return self._cursor_row

    # ------------------------------------------------------------------
    # Render
    # ------------------------------------------------------------------

    def render(
        self,
        lines: str | Iterable[str],
        cursor_target: CursorTarget | tuple[int, int] | None = None,
    ) -> None:
        """Draw *lines* over the previous frame.

        *lines* may be a list of lines or one string with embedded
        newlines; a newline inside a list item also starts a new row.  An
        empty frame is drawn as one blank line.  With a
        *cursor_target* (or a ``CURSOR_MARKER`` inside a line) the cursor is
        parked there and made visible; otherwise it stays hidden at the end
        of the frame.
        """
        if isinstance(lines, str):
            lines = [lines]
        frame_lines = [row for line in lines for row in line.split("\n")]
        if not frame_lines:
            frame_lines = [""]

        frame_lines, marker = extract_cursor_position(frame_lines)
        if cursor_target is None:
            cursor_target = marker

        if self.config.truncate_lines:
            width = self.terminal.columns
            if width > 0:
                frame_lines = [truncate_to_width(line, width) for line in frame_lines]

        out: list[str] = [ansi.HIDE_CURSOR, self._rehome()]

        for i, line in enumerate(frame_lines):
            if i > 0:
                out.append("\n")
            out.append(ansi.CARRIAGE_RETURN + ansi.ERASE_LINE + line)

        new_height = len(frame_lines)
        leftover = self._height - new_height
        if leftover > 0:
            # Wipe rows the shorter frame no longer covers, then come back
            out.append(("\n" + ansi.CARRIAGE_RETURN + ansi.ERASE_LINE) * leftover)
            out.append(ansi.cursor_up(leftover))

        if new_height != self._height:
            logger.debug("Frame height %d -> %d", self._height, new_height)
        self._height = new_height
        self._cursor_row = new_height - 1

        if cursor_target is not None:
            out.append(self._cursor_sequence(cursor_target[0], cursor_target[1]))

        self.terminal.write("".join(out))

    def render_frame(self, frame: Frame) -> None:
        self.render(frame.lines, frame.cursor)

    def draw(self, producer: FrameProducer) -> None:
        """Ask *producer* for a frame at the terminal width and render it."""
        self.render_frame(producer.frame(self.terminal.columns))

    # ------------------------------------------------------------------
    # Cursor
    # ------------------------------------------------------------------

    def move_cursor_to(self, line_index: int, visual_column: int) -> None:
        """Park the cursor at *line_index*, *visual_column* of the last frame.

        Right after a render the cursor is on the bottom row, so this moves
        up ``(height - 1) - line_index`` rows, returns to column 0 and steps
        right *visual_column* columns before showing the cursor glyph.
        """
        self.terminal.write(
            ansi.HIDE_CURSOR + self._cursor_sequence(line_index, visual_column)
        )

    def _cursor_sequence(self, line_index: int, visual_column: int) -> str:
        if self._height == 0:
            return ""
        line_index = max(0, min(line_index, self._height - 1))
        seq = (
            ansi.cursor_move_rows(line_index - self._cursor_row)
            + ansi.CARRIAGE_RETURN
            + ansi.cursor_forward(visual_column)
            + ansi.SHOW_CURSOR
        )
        self._cursor_row = line_index
        return seq

    def _rehome(self) -> str:
        """Move from wherever the cursor is parked to the frame's top row."""
        if self._height == 0:
            return ""
        return ansi.cursor_up(self._cursor_row)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def clear(self) -> None:
        """Erase the previous frame and leave the cursor on its top row."""
        if self._height == 0:
            return
        out = [self._rehome()]
        for i in range(self._height):
            if i > 0:
                out.append("\n")
            out.append(ansi.CARRIAGE_RETURN + ansi.ERASE_LINE)
        out.append(ansi.cursor_up(self._height - 1))
        self.terminal.write("".join(out))
        self._height = 0
        self._cursor_row = 0

    def finish(self, final_lines: str | Iterable[str] | None = None) -> None:
        """Optionally draw *final_lines*, then move below the frame.

        The cursor glyph is shown again and bookkeeping is reset, so the
        next render starts a fresh frame on the following line.
        """
        if final_lines is not None:
            self.render(final_lines)
        out: list[str] = []
        if self._height > 0:
            out.append(ansi.cursor_down(self._height - 1 - self._cursor_row))
            out.append("\r\n")
        out.append(ansi.SHOW_CURSOR)
        self.terminal.write("".join(out))
        self._height = 0
        self._cursor_row = 0
