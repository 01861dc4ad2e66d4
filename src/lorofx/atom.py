"""Atoms: the change-tracking cell every container wrapper is built on.

An Atom holds no value. It only records "a derivation read me"
(report_observed) and "I changed" (report_changed). Two optional hooks fire
when the first observer attaches and when the last one detaches, which is what
lets a wrapper subscribe to its loro container only while someone is watching.

Thread safety: call set_scheduler() once from the main thread. After that,
any report_changed() from a background thread is auto-marshaled. Main-thread
calls remain synchronous.
"""

from __future__ import annotations

import threading
from typing import Callable

from lorofx._tracking import begin_batch, current_derivation, end_batch

Hook = Callable[[], None]

# ─── Auto-marshal ────────────────────────────────────────────────────────────
_scheduler = None
_scheduler_thread = None


def set_scheduler(scheduler) -> None:
    """Set the global thread scheduler for cross-thread change reports.

    Call once from the main/UI thread:
        lorofx.set_scheduler(loop.call_soon_threadsafe)

    After this, a report_changed() coming from another thread (for example a
    loro import running on a network thread) is marshaled through the
    scheduler. Pass None to go back to fully synchronous behavior.
    """
    global _scheduler, _scheduler_thread
    _scheduler = scheduler
    _scheduler_thread = threading.current_thread() if scheduler is not None else None


class Atom:
    """A change-tracking cell with first/last observer hooks."""

    __slots__ = ("name", "_observers", "_on_become_observed", "_on_become_unobserved")

    def __init__(
        self,
        name: str = "Atom",
        on_become_observed: Hook | None = None,
        on_become_unobserved: Hook | None = None,
    ) -> None:
        self.name = name
        self._observers: dict = {}
        self._on_become_observed = on_become_observed
        self._on_become_unobserved = on_become_unobserved

    @property
    def is_observed(self) -> bool:
        return bool(self._observers)

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    def report_observed(self) -> bool:
        """Register the running derivation, if any. Returns whether one was running."""
        derivation = current_derivation.get()
        if derivation is None:
            return False
        derivation._dependencies.add(self)
        self._add_observer(derivation)
        return True

    def report_changed(self) -> None:
        """Mark every observer stale. Auto-marshals from background threads."""
        if _scheduler is not None and threading.current_thread() != _scheduler_thread:
            _scheduler(self._report_changed_direct)
        else:
            self._report_changed_direct()

    def _report_changed_direct(self) -> None:
        begin_batch()
        try:
            for observer in list(self._observers):
                observer._on_stale()
        finally:
            end_batch()

    def _add_observer(self, observer) -> None:
        if observer in self._observers:
            return
        self._observers[observer] = None
        if len(self._observers) == 1 and self._on_become_observed is not None:
            self._on_become_observed()

    def _remove_observer(self, observer) -> None:
        """Remove an observer. Called during dependency cleanup."""
        if observer not in self._observers:
            return
        del self._observers[observer]
        if not self._observers and self._on_become_unobserved is not None:
            self._on_become_unobserved()

    def __repr__(self) -> str:
        return f"Atom({self.name!r}, observers={len(self._observers)})"
