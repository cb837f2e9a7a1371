"""Terminal output sink used by the frame renderer.

Provides a ``Terminal`` protocol and a concrete ``ProcessTerminal`` that
writes to a text stream (``sys.stdout`` by default).  Raw mode, input
decoding and signal handling belong to the widget layer and are not
handled here.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Protocol, TextIO

logger = logging.getLogger(__name__)

_DEFAULT_COLUMNS = 80
_DEFAULT_ROWS = 24


class Terminal(Protocol):
    """Interface for terminal output."""

    def write(self, data: str) -> None: ...

    @property
    def columns(self) -> int: ...

    @property
    def rows(self) -> int: ...


class ProcessTerminal:
    """Terminal backed by a process stream.

    When ``MEP_WRITE_LOG`` names a file every write is appended to it as
    well, which makes rendering problems reproducible.
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        write_log_path: str | None = None,
    ) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self._write_log_path: str = (
            write_log_path
            if write_log_path is not None
            else os.environ.get("MEP_WRITE_LOG", "")
        )

    # -- properties ---------------------------------------------------------

    @property
    def columns(self) -> int:
        try:
            return os.get_terminal_size(self._stream.fileno()).columns
        except (AttributeError, ValueError, OSError):
            return _DEFAULT_COLUMNS

    @property
    def rows(self) -> int:
        try:
            return os.get_terminal_size(self._stream.fileno()).lines
        except (AttributeError, ValueError, OSError):
            return _DEFAULT_ROWS

    # -- write --------------------------------------------------------------

    def write(self, data: str) -> None:
        """Write data to the stream and optionally to the write log."""
        self._raw_write(data)

        if self._write_log_path:
            try:
                with open(self._write_log_path, "a", encoding="utf-8") as f:
                    f.write(data)
            except OSError as exc:
                logger.debug("Write log %s unavailable: %s", self._write_log_path, exc)

    def _raw_write(self, data: str) -> None:
        """Write directly to the stream, flushing immediately."""
        try:
            self._stream.write(data)
            self._stream.flush()
        except OSError:
            pass
