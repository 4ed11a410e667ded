"""Bounded history window."""

from collections import deque
from collections.abc import Iterator
from typing import Generic, TypeVar

T = TypeVar("T")


class RingWindow(Generic[T]):
    """
    Bounded FIFO keeping the most recent ``retention`` items.

    Appending past the bound evicts the single oldest item in the same call,
    so the length never exceeds ``retention``.
    """

    def __init__(self, retention: int) -> None:
        """
        Initialize the RingWindow.

        Args:
            retention: Maximum number of items kept. Must be at least 1.
        """
        if retention < 1:
            raise ValueError(f"retention must be >= 1, got {retention}")
        self._items: deque[T] = deque(maxlen=retention)

    @property
    def retention(self) -> int:
        """Get the maximum length of the window."""
        return self._items.maxlen or 0

    def append(self, item: T) -> None:
        """Append an item, evicting the oldest one if the window is full."""
        self._items.append(item)

    def last(self) -> T | None:
        """Get the most recent item, or None if the window is empty."""
        return self._items[-1] if self._items else None

    def second_to_last(self) -> T | None:
        """Get the item before the most recent one, or None."""
        return self._items[-2] if len(self._items) >= 2 else None

    def __len__(self) -> int:
        """Get the number of items held."""
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        """Iterate from oldest to newest."""
        return iter(self._items)
