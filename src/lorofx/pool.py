"""ObservablePool: one wrapper per loro container.

The pool is the only place wrappers come from. It keeps one registry per
container kind, keyed by ContainerID, so asking twice for the same container
returns the very same wrapper object, which is what makes reference equality
usable inside reactions. The same id can legally exist in two registries
(a map and a tree can share a root name); they never collide.

Wrappers are evicted only by clear_instance(), clear_all() or dispose(); a
container being deleted in the document is a state of that container, not a
reason to drop its wrapper.
"""

from __future__ import annotations

import logging
import weakref
from typing import Any

from loro import ContainerID, LoroCounter, LoroDoc, LoroList, LoroMap, LoroMovableList, LoroText, LoroTree

from lorofx._loro import unwrap
from lorofx.base import ContainerKind, ObservableContainer
from lorofx.errors import UnsupportedContainerError
from lorofx.list import ObservableLoroList
from lorofx.map import ObservableLoroMap
from lorofx.movable_list import ObservableMovableList
from lorofx.text import ObservableLoroText
from lorofx.tree import ObservableLoroTree

logger = logging.getLogger("lorofx.pool")

# Checked in order; LoroMovableList and LoroList are distinct classes.
_KINDS: tuple[tuple[type, ContainerKind], ...] = (
    (LoroMap, ContainerKind.MAP),
    (LoroTree, ContainerKind.TREE),
    (LoroMovableList, ContainerKind.MOVABLE),
    (LoroList, ContainerKind.LIST),
    (LoroText, ContainerKind.TEXT),
)

_WRAPPERS: dict[ContainerKind, type[ObservableContainer]] = {
    ContainerKind.MAP: ObservableLoroMap,
    ContainerKind.LIST: ObservableLoroList,
    ContainerKind.MOVABLE: ObservableMovableList,
    ContainerKind.TREE: ObservableLoroTree,
    ContainerKind.TEXT: ObservableLoroText,
}


def container_kind(value: Any) -> ContainerKind | None:
    """Which supported container kind value is, or None when it is not a container.

    Raises UnsupportedContainerError for loro containers of any other kind.
    """
    for cls, kind in _KINDS:
        if isinstance(value, cls):
            return kind
    if isinstance(value, LoroCounter) or isinstance(getattr(value, "id", None), ContainerID):
        raise UnsupportedContainerError(f"Unsupported loro container: {type(value).__name__}")
    return None


class ObservablePool:
    """Flyweight registry of container wrappers for one LoroDoc."""

    def __init__(self, doc: LoroDoc) -> None:
        self.doc = doc
        self._registries: dict[ContainerKind, dict[ContainerID, ObservableContainer]] = {
            kind: {} for kind in ContainerKind
        }
        # Every wrapper ever created, including ones evicted from the registries
        # but still held by a reaction. dispose() releases all of them.
        self._created: weakref.WeakSet[ObservableContainer] = weakref.WeakSet()
        self._disposed = False
        self._subscription = doc.subscribe_root(self._handle_doc_event)
        logger.debug("Created pool for doc peer %s", doc.peer_id)

    def get(self, value: Any) -> Any:
        """Wrapper for a loro container; any other value is returned unchanged."""
        if isinstance(value, ObservableContainer):
            return value
        value = unwrap(value)
        kind = container_kind(value)
        if kind is None:
            return value

        registry = self._registries[kind]
        key = value.id
        wrapper = registry.get(key)
        if wrapper is None:
            wrapper = _WRAPPERS[kind]._create(value, self)
            self._created.add(wrapper)
            registry[key] = wrapper
        return wrapper

    def clear_instance(self, kind: ContainerKind | str, container_id: ContainerID) -> None:
        """Forget one wrapper. The next get() for it builds a fresh one."""
        self._registries[ContainerKind(kind)].pop(container_id, None)

    def clear_all(self) -> None:
        for registry in self._registries.values():
            registry.clear()

    def has(self, kind: ContainerKind | str, container_id: ContainerID) -> bool:
        return container_id in self._registries[ContainerKind(kind)]

    @property
    def size(self) -> int:
        """Number of cached wrappers across every kind."""
        return sum(len(registry) for registry in self._registries.values())

    def __len__(self) -> int:
        return self.size

    @property
    def disposed(self) -> bool:
        return self._disposed

    def _handle_doc_event(self, event) -> None:
        # Document-wide hook, reserved for evicting wrappers of deleted containers.
        logger.debug("Doc event on pool: %s", event.triggered_by)

    def dispose(self) -> None:
        """Unsubscribe everything and empty the pool. Safe to call twice."""
        if self._disposed:
            return
        self._disposed = True
        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            subscription.unsubscribe()
        for wrapper in list(self._created):
            wrapper._release()
        self._created.clear()
        self.clear_all()
        logger.debug("Disposed pool for doc peer %s", self.doc.peer_id)

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else f"size={self.size}"
        return f"ObservablePool({state})"
