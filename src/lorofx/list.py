"""ObservableLoroList: reactive view over a LoroList.

Indices shift under insert/delete, so the whole list shares one atom. Any read
(get, iteration, len, ...) tracks the list; any mutation reports it changed.
"""

from __future__ import annotations

from typing import Any, Callable, Iterator

from lorofx.base import ContainerKind, ObservableContainer


class _ObservableSequence(ObservableContainer):
    """Operations shared by the list and the movable list wrappers."""

    __slots__ = ()

    # --- Read operations (track) ---

    def get(self, index: int) -> Any:
        """Value at index, or None past the end. Containers come back wrapped."""
        self._atom.report_observed()
        return self._resolve(self._container.get(index))

    def __getitem__(self, index: int) -> Any:
        self._atom.report_observed()
        length = len(self._container)
        if index < 0:
            index += length
        if not 0 <= index < length:
            raise IndexError("list index out of range")
        return self._resolve(self._container.get(index))

    def to_array(self) -> list[Any]:
        """Every element, with child containers resolved to their wrappers."""
        self._atom.report_observed()
        return [self._resolve(self._container.get(i)) for i in range(len(self._container))]

    def __iter__(self) -> Iterator[Any]:
        return iter(self.to_array())

    @property
    def length(self) -> int:
        self._atom.report_observed()
        return len(self._container)

    def __len__(self) -> int:
        return self.length

    def to_json(self) -> list[Any]:
        """Deep plain-data snapshot of the list."""
        self._atom.report_observed()
        return self._container.get_deep_value()

    # --- Write operations (notify) ---

    def insert(self, pos: int, value: Any) -> None:
        self._container.insert(pos, value)
        self._handle_change()

    def delete(self, pos: int, length: int) -> None:
        self._container.delete(pos, length)
        self._handle_change()

    def push(self, value: Any) -> None:
        self._container.push(value)
        self._handle_change()

    def pop(self) -> Any:
        value = self._container.pop()
        self._handle_change()
        return self._resolve(value)

    def clear(self) -> None:
        self._container.clear()
        self._handle_change()

    def insert_container(self, pos: int, child):
        container = self._container.insert_container(pos, child)
        self._handle_change()
        return self._resolve(container)

    def push_container(self, child):
        container = self._container.push_container(child)
        self._handle_change()
        return self._resolve(container)

    # --- Pass-throughs (not tracked) ---

    def subscribe(self, listener: Callable) -> Any:
        """Subscribe listener to raw loro events for this list."""
        return self._pool.doc.subscribe(self._container.id, listener)

    def get_cursor(self, pos: int, side) -> Any:
        return self._container.get_cursor(pos, side)


class ObservableLoroList(_ObservableSequence):
    """Single-atom wrapper for a LoroList. Create through ObservablePool.get()."""

    __slots__ = ()

    kind = ContainerKind.LIST
