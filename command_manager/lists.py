from __future__ import annotations

from typing import Generic, Iterable, Iterator, List, Optional, TypeVar

T = TypeVar("T")


class SelectableList(Generic[T]):
    """
    Ordered items with an optional selection and a focus flag.

    Navigation wraps around (carousel). An empty list never holds a selection;
    `next()`/`previous()` are no-ops on it.
    """

    def __init__(self, items: Optional[Iterable[T]] = None, *, focused: bool = False) -> None:
        self.items: List[T] = list(items or [])
        self.selected: Optional[int] = None
        self.focused = focused

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __repr__(self) -> str:
        return f"SelectableList(items={self.items!r}, selected={self.selected!r}, focused={self.focused!r})"

    @property
    def is_empty(self) -> bool:
        return not self.items

    def peek_next(self) -> Optional[int]:
        if not self.items:
            return None
        if self.selected is None:
            return 0
        return (self.selected + 1) % len(self.items)

    def peek_previous(self) -> Optional[int]:
        if not self.items:
            return None
        if self.selected is None:
            return 0
        return (self.selected - 1) % len(self.items)

    def next(self) -> None:
        idx = self.peek_next()
        if idx is not None:
            self.selected = idx

    def previous(self) -> None:
        idx = self.peek_previous()
        if idx is not None:
            self.selected = idx

    def select(self, index: int) -> None:
        if not 0 <= index < len(self.items):
            raise IndexError(f"selection {index} out of range for {len(self.items)} items")
        self.selected = index

    def select_first(self) -> None:
        # Selecting into an empty list would break `selected < len(items)`.
        if self.items:
            self.selected = 0
        else:
            self.selected = None

    def clear_selection(self) -> None:
        self.selected = None

    def current_index(self) -> int:
        return self.selected if self.selected is not None else 0

    def current_item(self) -> T:
        if not self.items:
            raise IndexError("current_item() on an empty list")
        return self.items[self.current_index()]
