"""Convenience getters backed by one pool per document.

loro hands out a fresh LoroDoc handle every time a container is asked for its
document, so the registry is keyed by the document's peer id rather than by
handle identity. Call set_peer_id() before the first getter if you need a
fixed peer id; a document whose peer id changes afterwards gets a new pool.

The registry keeps each document alive until dispose_pool(doc) is called. Call
it before discarding a document.
"""

from __future__ import annotations

from loro import LoroDoc

from lorofx.errors import MissingDocumentError
from lorofx.list import ObservableLoroList
from lorofx.map import ObservableLoroMap
from lorofx.movable_list import ObservableMovableList
from lorofx.pool import ObservablePool
from lorofx.text import ObservableLoroText
from lorofx.tree import ObservableLoroTree

# peer id -> pool. The pool keeps its doc alive.
_pools: dict[int, ObservablePool] = {}


def get_pool(doc: LoroDoc) -> ObservablePool:
    """The pool for doc, created on first use."""
    pool = _pools.get(doc.peer_id)
    if pool is None:
        pool = _pools[doc.peer_id] = ObservablePool(doc)
    return pool


def get_map(doc: LoroDoc, name: str) -> ObservableLoroMap:
    return get_pool(doc).get(doc.get_map(name))


def get_list(doc: LoroDoc, name: str) -> ObservableLoroList:
    return get_pool(doc).get(doc.get_list(name))


def get_movable_list(doc: LoroDoc, name: str) -> ObservableMovableList:
    return get_pool(doc).get(doc.get_movable_list(name))


def get_tree(doc: LoroDoc, name: str) -> ObservableLoroTree:
    return get_pool(doc).get(doc.get_tree(name))


def get_text(doc: LoroDoc, name: str) -> ObservableLoroText:
    return get_pool(doc).get(doc.get_text(name))


def to_observable(container, doc: LoroDoc | None = None):
    """Wrapper for any supported container, using the pool of its document.

    Without doc, the document is taken from the container itself. Detached
    containers have none and raise MissingDocumentError.
    """
    if doc is None:
        doc = container.doc()
    if doc is None:
        raise MissingDocumentError(f"Cannot determine document for {container!r}")
    return get_pool(doc).get(container)


def dispose_pool(doc: LoroDoc) -> None:
    """Dispose doc's pool and forget it. Later getters create a new pool."""
    pool = _pools.pop(doc.peer_id, None)
    if pool is not None:
        pool.dispose()
