"""mep-engine: rendering core for line-mode terminal prompts."""

# Styled text: strip, measure, truncate, pad, wrap, columns
from mep.engine.ansi_text import (
    AnsiCodeTracker,
    apply_background_to_line,
    extract_ansi_code,
    highlight_indices,
    is_open_directive,
    pad_to_width,
    split_columns,
    strip_ansi,
    truncate_to_width,
    visible_width,
    wrap_lines,
    wrap_text,
)

# Capabilities, glyphs and colours
from mep.engine.config import (
    ASCII_SYMBOLS,
    UNICODE_SYMBOLS,
    Capabilities,
    RenderConfig,
    Symbols,
    Theme,
    detect_capabilities,
)

# Fuzzy matching
from mep.engine.fuzzy import (
    DEFAULT_WEIGHTS,
    FuzzyWeights,
    MatchResult,
    RankedMatch,
    fuzzy_filter,
    fuzzy_match,
    rank_all,
)

# Selection and scrolling
from mep.engine.navigable_list import Choice, NavigableList, Separator, is_selectable

# Frame rendering
from mep.engine.renderer import (
    CURSOR_MARKER,
    CursorTarget,
    Frame,
    FrameProducer,
    FrameRenderer,
    extract_cursor_position,
)

# Busy indicator
from mep.engine.spinner import Spinner

# Terminal interface and implementation
from mep.engine.terminal import ProcessTerminal, Terminal

# Unicode text model
from mep.engine.text_model import (
    CodePointClass,
    classify,
    decode_code_point,
    grapheme_width,
    segment_graphemes,
)

# Timers
from mep.engine.timers import Debouncer, StalenessGuard, Ticker

# Hierarchical data
from mep.engine.tree import Leaf, Node, TreeRow, flatten, from_data

__all__ = [
    # ansi_text
    "AnsiCodeTracker",
    "apply_background_to_line",
    "extract_ansi_code",
    "highlight_indices",
    "is_open_directive",
    "pad_to_width",
    "split_columns",
    "strip_ansi",
    "truncate_to_width",
    "visible_width",
    "wrap_lines",
    "wrap_text",
    # config
    "ASCII_SYMBOLS",
    "UNICODE_SYMBOLS",
    "Capabilities",
    "RenderConfig",
    "Symbols",
    "Theme",
    "detect_capabilities",
    # fuzzy
    "DEFAULT_WEIGHTS",
    "FuzzyWeights",
    "MatchResult",
    "RankedMatch",
    "fuzzy_filter",
    "fuzzy_match",
    "rank_all",
    # navigable_list
    "Choice",
    "NavigableList",
    "Separator",
    "is_selectable",
    # renderer
    "CURSOR_MARKER",
    "CursorTarget",
    "Frame",
    "FrameProducer",
    "FrameRenderer",
    "extract_cursor_position",
    # spinner
    "Spinner",
    # terminal
    "ProcessTerminal",
    "Terminal",
    # text_model
    "CodePointClass",
    "classify",
    "decode_code_point",
    "grapheme_width",
    "segment_graphemes",
    # timers
    "Debouncer",
    "StalenessGuard",
    "Ticker",
    # tree
    "Leaf",
    "Node",
    "TreeRow",
    "flatten",
    "from_data",
]
