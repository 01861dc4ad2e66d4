"""ObservableLoroText: reactive view over a LoroText."""

from __future__ import annotations

from typing import Any

from lorofx.base import ContainerKind, ObservableContainer


class ObservableLoroText(ObservableContainer):
    """Single-atom wrapper for a LoroText. Create through ObservablePool.get()."""

    __slots__ = ()

    kind = ContainerKind.TEXT

    def to_string(self) -> str:
        self._atom.report_observed()
        return self._container.to_string()

    def __str__(self) -> str:
        return self.to_string()

    @property
    def length(self) -> int:
        """Length in unicode code points."""
        self._atom.report_observed()
        return self._container.len_unicode

    def __len__(self) -> int:
        return self.length

    def to_delta(self) -> list[Any]:
        self._atom.report_observed()
        return self._container.to_delta()

    def to_json(self) -> str:
        return self.to_string()

    def insert(self, pos: int, text: str) -> None:
        self._container.insert(pos, text)
        self._handle_change()

    def delete(self, pos: int, length: int) -> None:
        self._container.delete(pos, length)
        self._handle_change()

    def apply_delta(self, delta: list[Any]) -> None:
        self._container.apply_delta(delta)
        self._handle_change()
