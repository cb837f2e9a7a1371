"""Tests for mep.engine.config -- capability detection, glyphs and theme."""

from __future__ import annotations

import sys

import pytest

from mep.engine.ansi import FG_RED, RESET
from mep.engine.config import (
    ASCII_SYMBOLS,
    UNICODE_SYMBOLS,
    Capabilities,
    RenderConfig,
    Theme,
    detect_capabilities,
)

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="POSIX unicode rules")


# ---------------------------------------------------------------------------
# detect_capabilities
# ---------------------------------------------------------------------------


class TestDetectCapabilities:
    @posix_only
    def test_utf8_locale_enables_unicode(self) -> None:
        caps = detect_capabilities({"LANG": "en_US.UTF-8"}, is_tty=True)
        assert caps.unicode is True

    @posix_only
    def test_plain_locale_disables_unicode(self) -> None:
        caps = detect_capabilities({"LANG": "C"}, is_tty=True)
        assert caps.unicode is False

    @posix_only
    def test_terminal_program(self) -> None:
        caps = detect_capabilities({"TERM_PROGRAM": "vscode"}, is_tty=True)
        assert caps.unicode is True

    @posix_only
    def test_ci_enables_unicode(self) -> None:
        caps = detect_capabilities({"CI": "true"}, is_tty=True)
        assert caps.unicode is True
        assert caps.is_ci is True

    def test_not_a_tty_disables_unicode(self) -> None:
        caps = detect_capabilities({"LANG": "en_US.UTF-8"}, is_tty=False)
        assert caps.unicode is False
        assert caps.is_tty is False

    def test_no_unicode_override(self) -> None:
        env = {"LANG": "en_US.UTF-8", "MEP_NO_UNICODE": "1"}
        assert detect_capabilities(env, is_tty=True).unicode is False

    def test_color_on_by_default(self) -> None:
        caps = detect_capabilities({}, is_tty=True)
        assert caps.color is True
        assert caps.true_color is False

    def test_no_color(self) -> None:
        caps = detect_capabilities({"NO_COLOR": ""}, is_tty=True)
        assert caps.color is False

    def test_dumb_terminal(self) -> None:
        assert detect_capabilities({"TERM": "dumb"}, is_tty=True).color is False

    def test_true_color(self) -> None:
        caps = detect_capabilities({"COLORTERM": "truecolor"}, is_tty=True)
        assert caps.true_color is True

    def test_true_color_requires_color(self) -> None:
        caps = detect_capabilities({"COLORTERM": "24bit", "NO_COLOR": "1"}, is_tty=True)
        assert caps.true_color is False


# ---------------------------------------------------------------------------
# Theme
# ---------------------------------------------------------------------------


class TestTheme:
    def test_style_wraps_text(self) -> None:
        assert Theme().style("error", "x") == f"{FG_RED}x{RESET}"

    def test_plain_theme_leaves_text_alone(self) -> None:
        assert Theme.plain().style("error", "x") == "x"


# ---------------------------------------------------------------------------
# RenderConfig
# ---------------------------------------------------------------------------


class TestRenderConfig:
    def test_defaults(self) -> None:
        config = RenderConfig()
        assert config.symbols is UNICODE_SYMBOLS
        assert config.truncate_lines is True

    def test_ascii_glyphs_without_unicode(self) -> None:
        config = RenderConfig.from_capabilities(Capabilities(unicode=False))
        assert config.symbols is ASCII_SYMBOLS
        assert config.symbols.tick == "+"

    def test_plain_theme_without_color(self) -> None:
        config = RenderConfig.from_capabilities(Capabilities(color=False))
        assert config.theme == Theme.plain()

    def test_overrides(self) -> None:
        config = RenderConfig.from_capabilities(Capabilities(), truncate_lines=False)
        assert config.truncate_lines is False

    def test_from_environment(self) -> None:
        config = RenderConfig.from_environment({"MEP_NO_UNICODE": "1", "NO_COLOR": "1"}, is_tty=True)
        assert config.symbols is ASCII_SYMBOLS
        assert config.theme.main == ""
        assert config.capabilities.color is False

    def test_spinner_frames(self) -> None:
        assert len(UNICODE_SYMBOLS.spinner) == 10
        assert ASCII_SYMBOLS.spinner == ("|", "/", "-", "\\")
