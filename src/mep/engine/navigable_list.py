"""Selection and scroll-window bookkeeping shared by list-style widgets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Sequence, TypeVar

T = TypeVar("T")


@dataclass
class Choice:
    title: str
    value: Any = None
    description: str | None = None
    disabled: bool = False


@dataclass
class Separator:
    text: str | None = None


def is_selectable(item: object) -> bool:
    """Default predicate: separators and disabled choices are skipped."""
    if isinstance(item, Separator):
        return False
    return not getattr(item, "disabled", False)


class NavigableList(Generic[T]):
    """Selected index plus a fixed-size scroll window over a list of items.

    After every mutating call, when at least one selectable item exists,
    ``scroll_top <= selected_index < scroll_top + page_size`` holds and the
    selected item is selectable.
    """

    def __init__(
        self,
        items: Sequence[T] = (),
        page_size: int = 7,
        selectable: Callable[[T], bool] | None = None,
    ) -> None:
        self._page_size = max(1, page_size)
        self._is_selectable: Callable[[Any], bool] = selectable or is_selectable
        self._items: list[T] = []
        self.selected_index = 0
        self.scroll_top = 0
        self.set_items(items)

    # -- accessors ----------------------------------------------------------

    @property
    def items(self) -> list[T]:
        return self._items

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def is_empty(self) -> bool:
        return not self._items

    @property
    def has_selectable(self) -> bool:
        return any(self._is_selectable(item) for item in self._items)

    @property
    def current(self) -> T | None:
        """The selected item, or ``None`` when nothing is selectable."""
        if not self._items:
            return None
        item = self._items[self.selected_index]
        return item if self._is_selectable(item) else None

    # -- list replacement ---------------------------------------------------

    def set_items(self, items: Sequence[T]) -> None:
        """Replace the underlying items (e.g. new filter results)."""
        self._items = list(items)
        self.selected_index = 0
        self.scroll_top = 0
        self.select_first()

    # -- movement -----------------------------------------------------------

    def select_next(self, direction: int) -> None:
        """Move by one in *direction* (+1 / -1), wrapping and skipping
        non-selectable items.  With nothing selectable the index stays put.
        """
        count = len(self._items)
        if count == 0:
            return
        step = 1 if direction >= 0 else -1

        index = self.selected_index
        for _ in range(count):
            index = (index + step) % count
            if self._is_selectable(self._items[index]):
                self.selected_index = index
                break
        self.reclamp_scroll()

    def select_first(self) -> None:
        for i, item in enumerate(self._items):
            if self._is_selectable(item):
                self.selected_index = i
                break
        else:
            self.selected_index = 0
        self.reclamp_scroll()

    def select_last(self) -> None:
        for i in range(len(self._items) - 1, -1, -1):
            if self._is_selectable(self._items[i]):
                self.selected_index = i
                break
        self.reclamp_scroll()

    def select_index(self, index: int) -> None:
        """Select *index* (clamped), snapping forward past separators."""
        if not self._items:
            return
        index = max(0, min(index, len(self._items) - 1))
        if self._is_selectable(self._items[index]):
            self.selected_index = index
            self.reclamp_scroll()
            return
        self.selected_index = index
        self.select_next(1)
        if not self._is_selectable(self._items[self.selected_index]):
            self.select_first()

    def page(self, direction: int) -> None:
        """Jump one page up or down without wrapping."""
        if not self._items:
            return
        last = len(self._items) - 1
        step = self._page_size if direction >= 0 else -self._page_size
        target = max(0, min(self.selected_index + step, last))

        forward = range(target, last + 1)
        backward = range(target, -1, -1)
        # Prefer the paging direction, fall back to the other side
        order = (forward, backward) if direction >= 0 else (backward, forward)
        for candidates in order:
            found = next(
                (i for i in candidates if self._is_selectable(self._items[i])),
                None,
            )
            if found is not None:
                self.selected_index = found
                break
        self.reclamp_scroll()

    # -- scroll window ------------------------------------------------------

    def reclamp_scroll(self) -> None:
        """Bring the selection into the window and keep the window in range."""
        count = len(self._items)
        if count == 0:
            self.selected_index = 0
            self.scroll_top = 0
            return

        self.selected_index = max(0, min(self.selected_index, count - 1))

        if self.selected_index < self.scroll_top:
            self.scroll_top = self.selected_index
        elif self.selected_index >= self.scroll_top + self._page_size:
            self.scroll_top = self.selected_index - self._page_size + 1

        max_top = max(0, count - self._page_size)
        if self.scroll_top > max_top:
            self.scroll_top = max_top

    def visible_slice(self) -> tuple[list[T], int]:
        """Items to draw this frame and the absolute index of the first."""
        if not self.has_selectable:
            return ([], 0)
        end = self.scroll_top + self._page_size
        return (self._items[self.scroll_top : end], self.scroll_top)

    def scroll_info(self) -> str:
        """``"(i/N)"`` when the list does not fit in one page, else ``""``."""
        if len(self._items) <= self._page_size:
            return ""
        return f"({self.selected_index + 1}/{len(self._items)})"
