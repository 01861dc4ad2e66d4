"""Actions and transactions: batched mutations.

Wrapping mutations in an @action or `with transaction()` defers all
reaction runs until the outermost scope exits. This prevents glitchy
intermediate states where some dependents have updated but others haven't yet.
"""

from __future__ import annotations

import functools
from contextlib import contextmanager
from typing import Callable, ParamSpec, TypeVar

from lorofx._tracking import begin_batch, end_batch

P = ParamSpec("P")
R = TypeVar("R")


def action(fn: Callable[P, R]) -> Callable[P, R]:
    """Decorator: batch all container mutations inside fn.

    Reactions only fire after fn returns, not during.

    Usage:
        todos = get_list(doc, "todos")
        done = get_list(doc, "done")

        @action
        def complete(index):
            done.push(todos.get(index))
            todos.delete(index, 1)
            # reactions see both lists change at once
    """

    @functools.wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        begin_batch()
        try:
            return fn(*args, **kwargs)
        finally:
            end_batch()

    return wrapper


def run_in_action(fn: Callable[[], R]) -> R:
    """Run fn immediately as a one-off action and return its result."""
    begin_batch()
    try:
        return fn()
    finally:
        end_batch()


@contextmanager
def transaction():
    """Context manager for batching mutations.

    Usage:
        with transaction():
            profile.set("name", "Ada")
            profile.set("email", "ada@example.com")
            # reactions fire here, after both are set
    """
    begin_batch()
    try:
        yield
    finally:
        end_batch()
