"""Busy indicator redrawn in place on a periodic ticker."""

from __future__ import annotations

import asyncio

from mep.engine import ansi
from mep.engine.renderer import FrameRenderer
from mep.engine.timers import Ticker


class Spinner:
    """Spinner that updates every 80ms until stopped.

    The ticker is owned by the spinner; :meth:`stop` (or any of the
    finishing methods) must be called so it does not keep redrawing.

    Example::

        spinner = Spinner(renderer, "Installing...").start()
        ...
        spinner.succeed("Installed")
    """

    def __init__(
        self,
        renderer: FrameRenderer,
        text: str,
        interval: float = 0.08,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._renderer = renderer
        self._text = text
        self._frame_index = 0
        self._ticker = Ticker(interval, self._render, loop=loop)

    @property
    def spinning(self) -> bool:
        return self._ticker.running

    @property
    def text(self) -> str:
        return self._text

    def start(self) -> Spinner:
        if self.spinning:
            return self
        self._render()
        self._ticker.start()
        return self

    def stop(self) -> Spinner:
        self._ticker.stop()
        return self

    def update(self, text: str) -> Spinner:
        """Change the message; it shows on the next tick."""
        self._text = text
        return self

    def succeed(self, message: str | None = None) -> Spinner:
        return self._finish("success", self._renderer.config.symbols.tick, message)

    def fail(self, message: str | None = None) -> Spinner:
        return self._finish("error", self._renderer.config.symbols.cross, message)

    def clear(self) -> Spinner:
        """Stop and erase the spinner line."""
        self.stop()
        self._renderer.clear()
        self._renderer.terminal.write(ansi.SHOW_CURSOR)
        return self

    def _finish(self, color: str, glyph: str, message: str | None) -> Spinner:
        self.stop()
        theme = self._renderer.config.theme
        text = message if message is not None else self._text
        self._renderer.finish(f"{theme.style(color, glyph)} {text}")
        return self

    def _render(self) -> None:
        config = self._renderer.config
        frames = config.symbols.spinner
        frame = frames[self._frame_index % len(frames)]
        self._renderer.render(f"{config.theme.style('main', frame)} {self._text}")
        self._frame_index = (self._frame_index + 1) % len(frames)
