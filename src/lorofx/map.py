"""ObservableLoroMap: reactive view over a LoroMap.

Any read operation (get, keys, len, ...) registers a dependency on the whole
map. Any mutation reports a change for the whole map. Nested containers come
back as their pool wrappers.
"""

from __future__ import annotations

from typing import Any, Iterator

from lorofx.base import ContainerKind, ObservableContainer

_MISSING = object()


class ObservableLoroMap(ObservableContainer):
    """Single-atom wrapper for a LoroMap. Create through ObservablePool.get()."""

    __slots__ = ()

    kind = ContainerKind.MAP

    # --- Read operations (track) ---

    def get(self, key: str, default: Any = None) -> Any:
        """Value at key, with containers resolved to their wrappers."""
        self._atom.report_observed()
        value = self._container.get(key)
        if value is None:
            return default
        return self._resolve(value)

    def __getitem__(self, key: str) -> Any:
        value = self.get(key, _MISSING)
        if value is _MISSING:
            raise KeyError(key)
        return value

    def __contains__(self, key: str) -> bool:
        self._atom.report_observed()
        return self._container.get(key) is not None

    @property
    def size(self) -> int:
        self._atom.report_observed()
        return len(self._container)

    def __len__(self) -> int:
        return self.size

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def keys(self) -> list[str]:
        self._atom.report_observed()
        return list(self._container.keys())

    def values(self) -> list[Any]:
        self._atom.report_observed()
        return [self._resolve(value) for value in self._container.values()]

    def items(self) -> list[tuple[str, Any]]:
        self._atom.report_observed()
        return [(key, self._resolve(self._container.get(key))) for key in self._container.keys()]

    def to_json(self) -> dict[str, Any]:
        """Deep plain-data snapshot of the map."""
        self._atom.report_observed()
        return self._container.get_deep_value()

    # --- Write operations (notify) ---

    def set(self, key: str, value: Any) -> None:
        self._container.insert(key, value)
        self._handle_change()

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)

    def delete(self, key: str) -> None:
        self._container.delete(key)
        self._handle_change()

    def __delitem__(self, key: str) -> None:
        self.delete(key)

    def clear(self) -> None:
        self._container.clear()
        self._handle_change()

    def set_container(self, key: str, child):
        """Attach a new child container at key and return its wrapper."""
        container = self._container.insert_container(key, child)
        self._handle_change()
        return self._resolve(container)

    def get_or_create_container(self, key: str, child):
        """Wrapper for the container at key, attaching child if the key is empty."""
        container = self._container.get_or_create_container(key, child)
        self._handle_change()
        return self._resolve(container)
