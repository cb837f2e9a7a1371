"""Render configuration: terminal capabilities, glyph set and colour theme.

A :class:`RenderConfig` is built once at start-up (usually with
:meth:`RenderConfig.from_environment`) and passed to the renderer and the
widgets explicitly.
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from typing import Mapping

from mep.engine import ansi

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Capabilities
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Capabilities:
    unicode: bool = True
    color: bool = True
    true_color: bool = False
    is_ci: bool = False
    is_tty: bool = True


def _unicode_supported(env: Mapping[str, str], is_ci: bool) -> bool:
    if sys.platform == "win32":
        if env.get("WT_SESSION") or env.get("ConEmuTask"):
            return True
        if env.get("TERM_PROGRAM") == "vscode":
            return True
        if env.get("TERM") in ("xterm-256color", "alacritty"):
            return True
        return is_ci

    if env.get("TERM_PROGRAM") in ("Apple_Terminal", "vscode"):
        return True
    if env.get("WT_SESSION"):
        return True

    for var in ("LC_ALL", "LANG"):
        value = env.get(var, "").upper()
        if value.endswith("UTF-8") or value.endswith("UTF8"):
            return True
    return is_ci


def detect_capabilities(
    env: Mapping[str, str] | None = None,
    is_tty: bool | None = None,
) -> Capabilities:
    """Inspect the environment once and snapshot what the terminal supports."""
    if env is None:
        env = os.environ
    if is_tty is None:
        try:
            is_tty = sys.stdout.isatty()
        except (AttributeError, ValueError):
            is_tty = False

    is_ci = bool(env.get("CI"))
    unicode = is_tty and _unicode_supported(env, is_ci)
    if env.get("MEP_NO_UNICODE") == "1":
        unicode = False

    color = "NO_COLOR" not in env and env.get("TERM") != "dumb"
    color_term = env.get("COLORTERM", "").lower()
    true_color = color and (color_term in ("truecolor", "24bit") or bool(env.get("WT_SESSION")))

    caps = Capabilities(
        unicode=unicode,
        color=color,
        true_color=true_color,
        is_ci=is_ci,
        is_tty=is_tty,
    )
    logger.debug("Detected terminal capabilities: %s", caps)
    return caps


# ---------------------------------------------------------------------------
# Symbols
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Symbols:
    tick: str
    cross: str
    pointer: str
    line: str
    checked: str
    unchecked: str
    spinner: tuple[str, ...]
    star: str
    star_empty: str
    top_left: str
    top_right: str
    bottom_left: str
    bottom_right: str
    horizontal: str
    vertical: str


UNICODE_SYMBOLS = Symbols(
    tick="✔",
    cross="✖",
    pointer="❯",
    line="─",
    checked="◉",
    unchecked="◯",
    spinner=("⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏"),
    star="★",
    star_empty="☆",
    top_left="┌",
    top_right="┐",
    bottom_left="└",
    bottom_right="┘",
    horizontal="─",
    vertical="│",
)

ASCII_SYMBOLS = Symbols(
    tick="+",
    cross="x",
    pointer=">",
    line="-",
    checked="[x]",
    unchecked="[ ]",
    spinner=("|", "/", "-", "\\"),
    star="*",
    star_empty=" ",
    top_left="+",
    top_right="+",
    bottom_left="+",
    bottom_right="+",
    horizontal="-",
    vertical="|",
)


# ---------------------------------------------------------------------------
# Theme
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Theme:
    main: str = ansi.FG_CYAN
    success: str = ansi.FG_GREEN
    error: str = ansi.FG_RED
    muted: str = ansi.FG_GRAY
    title: str = ansi.BOLD
    reset: str = ansi.RESET

    @classmethod
    def plain(cls) -> Theme:
        return cls(main="", success="", error="", muted="", title="", reset="")

    def style(self, name: str, text: str) -> str:
        """Wrap *text* in the named colour (``"main"``, ``"error"``, ...)."""
        code = getattr(self, name)
        if not code:
            return text
        return f"{code}{text}{self.reset}"


# ---------------------------------------------------------------------------
# RenderConfig
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RenderConfig:
    capabilities: Capabilities = field(default_factory=Capabilities)
    symbols: Symbols = UNICODE_SYMBOLS
    theme: Theme = field(default_factory=Theme)
    # Cut frame lines at the terminal width so soft wraps never break the
    # height bookkeeping
    truncate_lines: bool = True

    @classmethod
    def from_capabilities(cls, capabilities: Capabilities, **overrides: object) -> RenderConfig:
        symbols = UNICODE_SYMBOLS if capabilities.unicode else ASCII_SYMBOLS
        theme = Theme() if capabilities.color else Theme.plain()
        return cls(capabilities=capabilities, symbols=symbols, theme=theme, **overrides)  # type: ignore[arg-type]

    @classmethod
    def from_environment(
        cls,
        env: Mapping[str, str] | None = None,
        is_tty: bool | None = None,
    ) -> RenderConfig:
        return cls.from_capabilities(detect_capabilities(env, is_tty))
