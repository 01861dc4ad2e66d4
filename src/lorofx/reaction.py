"""Reactions: side effects triggered by container changes.

Unlike Computed (which is lazy and only evaluates on read), a Reaction
eagerly re-runs its side effect whenever its tracked dependencies change.

Two flavors:
- autorun(fn): runs fn immediately, re-runs when anything it read changes.
- reaction(data_fn, effect_fn): tracks data_fn, calls effect_fn with the new value
  only when data_fn's result changes.

A reaction is what makes a container wrapper "observed". Disposing the last
reaction that read a wrapper is what unsubscribes it from loro.
"""

from __future__ import annotations

from typing import Callable, TypeVar

from lorofx._tracking import schedule, track

T = TypeVar("T")


class Reaction:
    """A reactive side effect that re-runs when its dependencies change.

    Reactions run eagerly (unlike Computed which is lazy).
    """

    __slots__ = ("_fn", "_dependencies", "_disposed")

    def __init__(self, fn: Callable[[], None]) -> None:
        self._fn = fn
        self._dependencies: set = set()
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def _on_stale(self) -> None:
        if not self._disposed:
            schedule(self)

    def _run(self) -> None:
        """Re-evaluate the reaction function, re-tracking dependencies."""
        if self._disposed:
            return
        track(self, self._fn)

    def dispose(self) -> None:
        """Stop this reaction. Disconnects from all dependencies."""
        self._disposed = True
        deps, self._dependencies = self._dependencies, set()
        for dep in deps:
            dep._remove_observer(self)

    def __call__(self) -> None:
        self.dispose()

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else "active"
        return f"Reaction({getattr(self._fn, '__name__', 'fn')}, {state})"


class _DataReaction(Reaction):
    """Internal: reaction(data_fn, effect_fn) implementation.

    Tracks data_fn's dependencies. When they change, re-runs data_fn.
    If the result differs from last time, calls effect_fn with the new value.
    """

    __slots__ = ("_effect_fn", "_last_value", "_initialized")

    def __init__(self, data_fn: Callable, effect_fn: Callable) -> None:
        super().__init__(data_fn)
        self._effect_fn = effect_fn
        self._last_value = None
        self._initialized = False

    def _run(self) -> None:
        if self._disposed:
            return

        new_value = track(self, self._fn)

        if not self._initialized or new_value != self._last_value:
            self._last_value = new_value
            self._initialized = True
            self._effect_fn(new_value)

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else "active"
        return f"_DataReaction({getattr(self._fn, '__name__', 'fn')}, {state})"


def autorun(fn: Callable[[], None]) -> Reaction:
    """Run fn immediately, then re-run whenever anything it reads changes.

    Returns the Reaction (call .dispose(), or the reaction itself, to stop).

    Usage:
        settings = get_map(doc, "settings")
        log = []

        r = autorun(lambda: log.append(settings.get("theme")))
        # log == [None]: ran immediately

        settings.set("theme", "dark")
        # log == [None, "dark"]: re-ran because the map changed

        r.dispose()
        settings.set("theme", "light")
        # log == [None, "dark"]: stopped
    """
    r = Reaction(fn)
    r._run()  # Initial run to establish dependencies
    return r


def reaction(
    data_fn: Callable[[], T],
    effect_fn: Callable[[T], None],
    *,
    fire_immediately: bool = False,
) -> Reaction:
    """Track data_fn's reads; call effect_fn when the result changes.

    Unlike autorun, effect_fn only fires when data_fn's *return value* changes,
    not on every dependency notification. effect_fn itself is not tracked.

    Returns the reaction (call .dispose() to stop).

    Usage:
        title = get_text(doc, "title")

        effects = []
        r = reaction(lambda: title.to_string(), effects.append)
        # effects == []: data_fn ran to establish deps, the effect did not

        title.insert(0, "Hello")
        # effects == ["Hello"]

        r.dispose()
    """
    r = _DataReaction(data_fn, effect_fn)
    if fire_immediately:
        r._run()
    else:
        # Run data_fn to establish deps, but suppress the initial effect
        r._last_value = track(r, data_fn)
        r._initialized = True
    return r
