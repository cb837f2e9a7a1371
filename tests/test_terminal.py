"""Tests for ProcessTerminal -- stream output and the write log."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from mep.engine.terminal import ProcessTerminal


class BrokenStream(io.StringIO):
    """A stream whose reader has gone away."""

    def write(self, data: str) -> int:
        raise BrokenPipeError("reader closed")


class TestProcessTerminal:
    def test_writes_to_stream(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("MEP_WRITE_LOG", raising=False)
        stream = io.StringIO()
        terminal = ProcessTerminal(stream)
        terminal.write("abc")
        terminal.write("def")
        assert stream.getvalue() == "abcdef"

    def test_size_falls_back_without_tty(self) -> None:
        terminal = ProcessTerminal(io.StringIO())
        assert terminal.columns == 80
        assert terminal.rows == 24

    def test_write_log(self, tmp_path: Path) -> None:
        log = tmp_path / "writes.log"
        terminal = ProcessTerminal(io.StringIO(), write_log_path=str(log))
        terminal.write("\x1b[2Khello")
        terminal.write("!")
        assert log.read_text(encoding="utf-8") == "\x1b[2Khello!"

    def test_write_log_from_environment(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        log = tmp_path / "env.log"
        monkeypatch.setenv("MEP_WRITE_LOG", str(log))
        ProcessTerminal(io.StringIO()).write("x")
        assert log.read_text(encoding="utf-8") == "x"

    def test_unwritable_log_is_ignored(self, tmp_path: Path) -> None:
        stream = io.StringIO()
        terminal = ProcessTerminal(stream, write_log_path=str(tmp_path / "missing" / "log"))
        terminal.write("x")
        assert stream.getvalue() == "x"

    def test_broken_stream_does_not_raise(self) -> None:
        terminal = ProcessTerminal(BrokenStream(), write_log_path="")
        terminal.write("x")
