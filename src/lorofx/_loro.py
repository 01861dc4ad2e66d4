"""Small adapters for the shapes loro hands back to Python.

Kept in one place so the wrappers read like the containers they mirror.
"""

from __future__ import annotations

from typing import Any

from loro import EventTriggerKind, ValueOrContainer


def unwrap(value: Any) -> Any:
    """Turn a ValueOrContainer into the container or plain value it carries."""
    if isinstance(value, ValueOrContainer.Container):
        return value.container
    if isinstance(value, ValueOrContainer.Value):
        return value.value
    return value


def is_local(event) -> bool:
    """Whether a DiffEvent was caused by a local transaction commit."""
    return event.triggered_by == EventTriggerKind.Local


def node_key(tree_id) -> tuple[int, int]:
    return (tree_id.peer, tree_id.counter)
