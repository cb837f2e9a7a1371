"""ANSI escape constants and relative cursor-movement builders."""

from __future__ import annotations

ESC = "\x1b"
BEL = "\x07"
CSI = "\x1b["

# ---------------------------------------------------------------------------
# SGR styling
# ---------------------------------------------------------------------------

RESET = "\x1b[0m"
BOLD = "\x1b[1m"
DIM = "\x1b[2m"
ITALIC = "\x1b[3m"
UNDERLINE = "\x1b[4m"
INVERSE = "\x1b[7m"

FG_RED = "\x1b[31m"
FG_GREEN = "\x1b[32m"
FG_YELLOW = "\x1b[33m"
FG_BLUE = "\x1b[34m"
FG_CYAN = "\x1b[36m"
FG_WHITE = "\x1b[37m"
FG_GRAY = "\x1b[90m"

# ---------------------------------------------------------------------------
# Cursor and erasing (relative only)
# ---------------------------------------------------------------------------

ERASE_LINE = "\x1b[2K"
CARRIAGE_RETURN = "\r"
HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"

_CURSOR_UP_FMT = "\x1b[{}A"
_CURSOR_DOWN_FMT = "\x1b[{}B"
_CURSOR_FORWARD_FMT = "\x1b[{}C"


def cursor_up(n: int) -> str:
    """Move up *n* rows; empty for ``n <= 0``."""
    return _CURSOR_UP_FMT.format(n) if n > 0 else ""


def cursor_down(n: int) -> str:
    """Move down *n* rows; empty for ``n <= 0``."""
    return _CURSOR_DOWN_FMT.format(n) if n > 0 else ""


def cursor_forward(n: int) -> str:
    """Move right *n* columns; empty for ``n <= 0``."""
    return _CURSOR_FORWARD_FMT.format(n) if n > 0 else ""


def cursor_move_rows(delta: int) -> str:
    """Move up (negative *delta*) or down (positive *delta*)."""
    if delta < 0:
        return cursor_up(-delta)
    return cursor_down(delta)
