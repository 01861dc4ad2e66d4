"""Computed values: derived state with automatic dependency tracking.

A Computed wraps a function. When evaluated inside a reaction, it tracks which
atoms the function reads and caches the result. When any dependency changes,
the cached value is invalidated. On next read, it re-evaluates.

Computed values are lazy: they only recompute when read. A computed nobody
observes holds no dependencies, so reading one from plain code never keeps a
container subscription alive.
"""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

from lorofx._tracking import current_derivation, track

T = TypeVar("T")

_UNSET = object()


class Computed(Generic[T]):
    """A derived value that auto-tracks dependencies and caches the result."""

    __slots__ = ("_fn", "_value", "_dirty", "_dependencies", "_observers")

    def __init__(self, fn: Callable[[], T]) -> None:
        self._fn = fn
        self._value = _UNSET
        self._dirty = True
        self._dependencies: set = set()
        self._observers: dict = {}

    def get(self) -> T:
        """Read the computed value. Recomputes if dirty."""
        derivation = current_derivation.get()
        if derivation is None and not self._observers:
            # Nobody is watching: evaluate without holding on to anything.
            return self._fn()

        if derivation is not None:
            derivation._dependencies.add(self)
            self._observers[derivation] = None

        if self._dirty:
            self._value = track(self, self._fn)
            self._dirty = False

        return self._value

    def _on_stale(self) -> None:
        """A dependency changed: mark dirty and propagate to our own observers.

        We don't recompute eagerly; that happens on next .get().
        """
        if not self._dirty:
            self._dirty = True
            for observer in list(self._observers):
                observer._on_stale()

    def _remove_observer(self, observer) -> None:
        if observer not in self._observers:
            return
        del self._observers[observer]
        if not self._observers:
            self._suspend()

    def _suspend(self) -> None:
        for dep in list(self._dependencies):
            dep._remove_observer(self)
        self._dependencies = set()
        self._dirty = True
        self._value = _UNSET

    def dispose(self) -> None:
        """Disconnect from all dependencies. The computed becomes inert."""
        self._observers.clear()
        self._suspend()

    def __repr__(self) -> str:
        state = "dirty" if self._dirty else f"cached={self._value!r}"
        return f"Computed({getattr(self._fn, '__name__', 'fn')}, {state})"


def computed(fn: Callable[[], T]) -> Computed[T]:
    """Decorator/factory to create a Computed from a function.

    Usage:
        todos = get_list(doc, "todos")

        @computed
        def count():
            return todos.length

        autorun(lambda: print(count.get()))
        todos.push("write docs")  # prints 1
    """
    return Computed(fn)
