"""
Undo/redo history for creature edits.
"""
from __future__ import annotations

from typing import Generic, List, Optional, TypeVar

T = TypeVar('T')

MAX_HISTORY = 50


class SelectionHistory(Generic[T]):
    """
    Linear edit history with a cursor.

    Pushing a new state discards anything that was undone; once `limit`
    states are held the oldest is dropped.
    """

    def __init__(self, initial: T, limit: int = MAX_HISTORY):
        if limit < 1:
            raise ValueError(f"limit must be at least 1, got {limit}")
        self.limit = limit
        self._states: List[T] = [initial]
        self._index = 0

    @property
    def current(self) -> T:
        return self._states[self._index]

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._states) - 1

    def __len__(self) -> int:
        return len(self._states)

    def push(self, state: T) -> None:
        """Record a new state after the current one."""
        self._states = self._states[:self._index + 1]
        self._states.append(state)

        if len(self._states) > self.limit:
            self._states.pop(0)

        self._index = len(self._states) - 1

    def undo(self) -> Optional[T]:
        """Step back; returns the restored state or None at the start."""
        if not self.can_undo:
            return None
        self._index -= 1
        return self.current

    def redo(self) -> Optional[T]:
        """Step forward; returns the restored state or None at the end."""
        if not self.can_redo:
            return None
        self._index += 1
        return self.current
