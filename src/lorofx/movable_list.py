"""ObservableMovableList: reactive view over a LoroMovableList."""

from __future__ import annotations

from typing import Any

from lorofx.base import ContainerKind
from lorofx.list import _ObservableSequence


class ObservableMovableList(_ObservableSequence):
    """Single-atom wrapper for a LoroMovableList. Create through ObservablePool.get().

    Adds in-place replacement and moves on top of the list operations. A move
    changes the index of every element between the two positions, which is
    why the whole list is invalidated rather than the two slots.
    """

    __slots__ = ()

    kind = ContainerKind.MOVABLE

    def set(self, pos: int, value: Any) -> None:
        self._container.set(pos, value)
        self._handle_change()

    def __setitem__(self, pos: int, value: Any) -> None:
        self.set(pos, value)

    def set_container(self, pos: int, child):
        container = self._container.set_container(pos, child)
        self._handle_change()
        return self._resolve(container)

    def move(self, from_index: int, to_index: int) -> None:
        """Move the element at from_index so it ends up at to_index."""
        self._container.mov(from_index, to_index)
        self._handle_change()
