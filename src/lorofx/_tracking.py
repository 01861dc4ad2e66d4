"""Dependency tracking engine.

Uses contextvars to track which atoms are read during a computed/reaction
evaluation, building the dependency graph automatically.

Every derivation keeps the set of things it read during its last run. After a
re-run the old and new sets are diffed, so a dependency that is read again
keeps its observer and never sees a spurious "last observer left" transition.

Batching: changes reported inside an @action, `with transaction()` or an
Atom.report_changed() call queue reactions and flush them once at the end,
ensuring glitch-free updates.
"""

from __future__ import annotations

import contextvars
from typing import TYPE_CHECKING, Callable, TypeVar

from lorofx.errors import ReactionLoopError

if TYPE_CHECKING:
    from lorofx.computed import Computed
    from lorofx.reaction import Reaction

    Derivation = Computed | Reaction

T = TypeVar("T")

# Reactions that keep re-triggering each other past this many rounds are a bug.
MAX_REACTION_ITERATIONS = 100

# The currently-evaluating derivation (computed or reaction).
# When set, any Atom.report_observed() call registers itself as a dependency.
current_derivation: contextvars.ContextVar[Derivation | None] = contextvars.ContextVar(
    "current_derivation", default=None
)

# Batch depth counter. When > 0, reactions are queued instead of run.
_batch_depth: int = 0

# Reactions invalidated during a batch, awaiting flush. Insertion-ordered.
_pending: dict[Derivation, None] = {}


def track(derivation: Derivation, fn: Callable[[], T]) -> T:
    """Run fn with derivation as the current tracker and rewire its dependencies."""
    previous = derivation._dependencies
    derivation._dependencies = set()
    token = current_derivation.set(derivation)
    try:
        return fn()
    finally:
        current_derivation.reset(token)
        for dep in previous - derivation._dependencies:
            dep._remove_observer(derivation)


def untracked(fn: Callable[[], T]) -> T:
    """Run fn without registering anything it reads."""
    token = current_derivation.set(None)
    try:
        return fn()
    finally:
        current_derivation.reset(token)


def begin_batch() -> None:
    """Enter a batching scope. Nested batches are supported."""
    global _batch_depth
    _batch_depth += 1


def end_batch() -> None:
    """Exit a batching scope. When the outermost scope exits, flush pending reactions."""
    global _batch_depth
    if _batch_depth == 1:
        # Stay inside the batch while flushing so reactions triggered by other
        # reactions are queued into this same flush.
        try:
            _flush_pending()
        finally:
            _batch_depth -= 1
    else:
        _batch_depth -= 1


def in_batch() -> bool:
    return _batch_depth > 0


def schedule(derivation: Derivation) -> None:
    """Schedule a reaction for re-evaluation.

    If inside a batch, defers. Otherwise, runs immediately.
    """
    if _batch_depth > 0:
        _pending[derivation] = None
    else:
        derivation._run()


def _flush_pending() -> None:
    """Run all pending reactions. Handles reactions scheduled during flush."""
    rounds = 0
    while _pending:
        rounds += 1
        if rounds > MAX_REACTION_ITERATIONS:
            stuck = list(_pending)
            _pending.clear()
            raise ReactionLoopError(
                f"Reactions did not settle after {MAX_REACTION_ITERATIONS} rounds: {stuck!r}"
            )
        # Snapshot and clear: reactions may schedule new ones during run.
        batch = list(_pending)
        _pending.clear()
        for derivation in batch:
            derivation._run()


def get_pending_count() -> int:
    """Number of reactions waiting to run. Useful for testing."""
    return len(_pending)
