"""Shared machinery for the container wrappers.

Each wrapper owns one Atom for the whole container, not one per key or index:
keys and indices are not stable identities under insert/delete/move, so any
write invalidates every reader of that container.

Lifecycle of the atom, and therefore of the loro subscription:

    Unobserved --first reaction reads--> Observed   (doc.subscribe)
    Observed   --last reaction leaves--> Unobserved (unsubscribe)

Local writes report the change synchronously right after delegating to loro.
Events delivered by loro are only turned into change reports when they were
not triggered locally, so a local write is never reported twice.

Wrapper methods must not be re-entered from inside an event callback fired by
the same wrapper.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar

from lorofx._loro import is_local
from lorofx.atom import Atom
from lorofx.errors import DirectConstructionError

if TYPE_CHECKING:
    from lorofx.pool import ObservablePool

logger = logging.getLogger("lorofx.containers")


class ContainerKind(str, Enum):
    """The container kinds the pool keeps a registry for."""

    MAP = "map"
    LIST = "list"
    MOVABLE = "movable"
    TREE = "tree"
    TEXT = "text"


class ObservableContainer:
    """Base class for the pool-managed container wrappers."""

    __slots__ = ("_container", "_pool", "_atom", "_subscription", "_released", "__weakref__")

    kind: ClassVar[ContainerKind]

    def __init__(self, *args, **kwargs) -> None:
        raise DirectConstructionError(
            f"{type(self).__name__} cannot be constructed directly; "
            "use ObservablePool.get() on the loro container"
        )

    @classmethod
    def _create(cls, container, pool: ObservablePool):
        """Internal factory. Only ObservablePool calls this."""
        self = cls.__new__(cls)
        self._container = container
        self._pool = pool
        self._subscription = None
        self._released = False
        self._atom = Atom(cls.__name__, self._subscribe, self._unsubscribe)
        return self

    # --- Subscription lifecycle ---

    def _subscribe(self) -> None:
        if self._subscription is not None or self._released:
            return
        self._subscription = self._pool.doc.subscribe(self._container.id, self._on_event)
        logger.debug("Subscribed %s %s", type(self).__name__, self._container.id)

    def _unsubscribe(self) -> None:
        subscription, self._subscription = self._subscription, None
        if subscription is None:
            return
        subscription.unsubscribe()
        logger.debug("Unsubscribed %s %s", type(self).__name__, self._container.id)

    def _release(self) -> None:
        """Drop the subscription for good. Used when the owning pool is disposed."""
        self._released = True
        self._unsubscribe()

    def _on_event(self, event) -> None:
        # Local changes were already reported when the write happened.
        if not is_local(event):
            self._handle_remote_change(event)

    def _handle_remote_change(self, event) -> None:
        self._handle_change()

    def _handle_change(self) -> None:
        self._atom.report_changed()

    def _resolve(self, value: Any) -> Any:
        return self._pool.get(value)

    # --- Common surface ---

    @property
    def id(self):
        return self._container.id

    @property
    def original(self):
        """The underlying loro container."""
        return self._container

    @property
    def pool(self) -> ObservablePool:
        return self._pool

    @property
    def is_observed(self) -> bool:
        """Whether a loro subscription is currently active for this wrapper."""
        return self._subscription is not None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._container.id!r})"
