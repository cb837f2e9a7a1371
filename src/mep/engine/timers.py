"""Cancellable timers and the staleness guard for asynchronous lookups.

Everything here runs on the caller's asyncio event loop through
``loop.call_later``; no threads are involved.  Every timer that can be
started exposes a matching cancel.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

R = TypeVar("R")


def _running_loop(loop: asyncio.AbstractEventLoop | None) -> asyncio.AbstractEventLoop | None:
    if loop is not None:
        return loop
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


# ---------------------------------------------------------------------------
# Ticker
# ---------------------------------------------------------------------------


class Ticker:
    """Call *callback* every *interval* seconds until stopped."""

    def __init__(
        self,
        interval: float,
        callback: Callable[[], None],
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._interval = interval
        self._callback = callback
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._schedule_next()

    def stop(self) -> None:
        """Cancel the pending tick; safe to call repeatedly."""
        self._running = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
            logger.debug("Ticker stopped")

    def _schedule_next(self) -> None:
        loop = _running_loop(self._loop)
        if loop is None:
            logger.debug("No running event loop; ticker will not fire")
            return
        self._handle = loop.call_later(self._interval, self._tick)

    def _tick(self) -> None:
        self._handle = None
        if not self._running:
            return
        try:
            self._callback()
        except Exception:
            self._running = False
            raise
        if self._running:
            self._schedule_next()


# ---------------------------------------------------------------------------
# Debouncer
# ---------------------------------------------------------------------------


class Debouncer:
    """Delay *callback* until calls pause for *delay* seconds.

    Each :meth:`schedule` cancels the previous pending call unconditionally,
    so only the most recent one can fire.  A callback returning an awaitable
    is run as a task on the loop, and a failure of that task is logged.
    Without a running loop the call happens at once and an awaitable
    result is run to completion.
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[..., Any],
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._delay = delay
        self._callback = callback
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None
        self._args: tuple[Any, ...] = ()
        self._task: asyncio.Future[Any] | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, *args: Any) -> None:
        self.cancel()
        loop = _running_loop(self._loop)
        if loop is None:
            logger.debug("No running event loop; running debounced call now")
            self._args = args
            self._fire()
            return
        self._args = args
        self._handle = loop.call_later(self._delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
            logger.debug("Debounced call cancelled")

    def flush(self) -> None:
        """Run the pending call now instead of waiting."""
        if self._handle is None:
            return
        self._handle.cancel()
        self._fire()

    def _fire(self) -> None:
        self._handle = None
        args, self._args = self._args, ()
        result = self._callback(*args)
        if not inspect.isawaitable(result):
            return
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; awaiting debounced call now")
            asyncio.run(_await(result))
            return
        self._task = asyncio.ensure_future(result)
        self._task.add_done_callback(_log_failure)


async def _await(awaitable: Awaitable[Any]) -> Any:
    return await awaitable


def _log_failure(task: asyncio.Future[Any]) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Debounced callback failed", exc_info=exc)


# ---------------------------------------------------------------------------
# StalenessGuard
# ---------------------------------------------------------------------------


class StalenessGuard(Generic[R]):
    """Drop asynchronous results that no longer match the current input.

    Call :meth:`issue` with the input (e.g. the query) before starting a
    lookup and hand the returned token back with the result.  Only the
    most recently issued token is current.
    """

    def __init__(self) -> None:
        self._generation = 0
        self._key: object = None

    @property
    def current_key(self) -> object:
        return self._key

    def issue(self, key: object) -> int:
        self._generation += 1
        self._key = key
        return self._generation

    def is_current(self, token: int) -> bool:
        return token == self._generation

    def accept(self, token: int, result: R, apply: Callable[[R], None]) -> bool:
        """Apply *result* if *token* is still current; report whether it was."""
        if not self.is_current(token):
            logger.debug("Dropping stale result for token %d (current %d)", token, self._generation)
            return False
        apply(result)
        return True

    async def run(
        self,
        key: object,
        lookup: Awaitable[R],
        apply: Callable[[R], None],
    ) -> bool:
        """Issue a token for *key*, await *lookup*, apply only if still current."""
        token = self.issue(key)
        result = await lookup
        return self.accept(token, result, apply)
