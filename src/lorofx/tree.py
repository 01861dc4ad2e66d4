"""ObservableLoroTree and ObservableLoroTreeNode.

The tree wrapper keeps its own cache of node wrappers, keyed by node identity.
A node wrapper is created the first time a node is reached (creation,
traversal or lookup by id) and then reused for as long as the tree wrapper
lives, including after remote moves and after the node is deleted.

Structural invalidation is deliberately coarse: any successful structural write,
and any non-local event, reports a change on the tree atom and on the atom of
every cached node, inside a single batch. Working out exactly which parents,
siblings and subtrees were touched would need a diff against the previous
structure; over-invalidating is always correct.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from lorofx._loro import node_key
from lorofx.action import transaction
from lorofx.atom import Atom
from lorofx.base import ContainerKind, ObservableContainer
from lorofx.errors import MissingPoolError

if TYPE_CHECKING:
    from lorofx.pool import ObservablePool


def _tree_id(target):
    """Accept either a TreeID or a node wrapper wherever a node is expected."""
    if isinstance(target, ObservableLoroTreeNode):
        return target.id
    return target


class ObservableLoroTreeNode:
    """Stable wrapper for one node of an ObservableLoroTree.

    Reads observe the node's own atom; writes go through the owning tree so the
    whole tree gets invalidated. Normally obtained from the tree wrapper rather
    than constructed by hand.
    """

    __slots__ = ("id", "_tree", "_pool", "_atom")

    def __init__(self, node_id, tree: ObservableLoroTree, pool: ObservablePool | None) -> None:
        if pool is None:
            raise MissingPoolError("ObservablePool is required to create ObservableLoroTreeNode")
        self.id = node_id
        self._tree = tree
        self._pool = pool
        self._atom = Atom("ObservableLoroTreeNode")

    @property
    def data(self):
        """Wrapper for the node's metadata map."""
        return self._pool.get(self._tree.original.get_meta(self.id))

    # --- Structural writes (delegate to the tree) ---

    def create_node(self, index: int | None = None) -> ObservableLoroTreeNode:
        """Create a child of this node."""
        return self._tree.create_node(self.id, index)

    def move(self, parent: Any = None, index: int | None = None) -> None:
        """Make this node a child of parent (a root when parent is None)."""
        self._tree.move(self.id, parent, index)

    def move_after(self, target: Any) -> None:
        self._tree.move_after(self.id, target)

    def move_before(self, target: Any) -> None:
        self._tree.move_before(self.id, target)

    def delete(self) -> None:
        self._tree.delete(self.id)

    # --- Reads (track this node) ---

    def _parent_id(self):
        # loro panics when asked for the parent of a deleted node.
        tree = self._tree.original
        if tree.is_node_deleted(self.id):
            return None
        return tree.parent(self.id)

    def parent(self) -> ObservableLoroTreeNode | None:
        """Parent node wrapper, None for roots and deleted nodes."""
        self._atom.report_observed()
        parent_id = self._parent_id()
        return None if parent_id is None else self._tree._wrap_node(parent_id)

    def children(self) -> list[ObservableLoroTreeNode]:
        self._atom.report_observed()
        tree = self._tree.original
        if tree.is_node_deleted(self.id):
            return []
        children = tree.children(self.id)
        return [self._tree._wrap_node(child) for child in children or []]

    def index(self) -> int | None:
        """Position among the parent's children, None once the node is deleted."""
        self._atom.report_observed()
        tree = self._tree.original
        if tree.is_node_deleted(self.id):
            return None
        parent_id = tree.parent(self.id)
        siblings = tree.roots if parent_id is None else tree.children(parent_id)
        keys = [node_key(sibling) for sibling in siblings or []]
        try:
            return keys.index(node_key(self.id))
        except ValueError:
            return None

    def fractional_index(self) -> str | None:
        self._atom.report_observed()
        tree = self._tree.original
        if tree.is_node_deleted(self.id):
            return None
        return tree.fractional_index(self.id)

    def is_deleted(self) -> bool:
        self._atom.report_observed()
        return self._tree.original.is_node_deleted(self.id)

    def last_move_id(self):
        self._atom.report_observed()
        return self._tree.original.get_last_move_id(self.id)

    def creation_id(self) -> dict[str, int]:
        self._atom.report_observed()
        return {"peer": self.id.peer, "counter": self.id.counter}

    def creator(self) -> int:
        self._atom.report_observed()
        return self.id.peer

    def report_changed(self) -> None:
        self._atom.report_changed()

    @property
    def original(self):
        """The underlying LoroTree this node lives in."""
        return self._tree.original

    @property
    def tree(self) -> ObservableLoroTree:
        return self._tree

    @property
    def pool(self) -> ObservablePool:
        return self._tree.pool

    def __repr__(self) -> str:
        return f"ObservableLoroTreeNode({self.id!r})"


class ObservableLoroTree(ObservableContainer):
    """Wrapper for a LoroTree. Create through ObservablePool.get()."""

    __slots__ = ("_nodes",)

    kind = ContainerKind.TREE

    @classmethod
    def _create(cls, container, pool: ObservablePool):
        self = super()._create(container, pool)
        self._nodes: dict[tuple[int, int], ObservableLoroTreeNode] = {}
        return self

    def _wrap_node(self, node_id) -> ObservableLoroTreeNode:
        """Node wrapper for node_id, reusing the cached one when it exists."""
        key = node_key(node_id)
        wrapper = self._nodes.get(key)
        if wrapper is None:
            wrapper = ObservableLoroTreeNode(node_id, self, self._pool)
            self._nodes[key] = wrapper
        return wrapper

    def _handle_change(self) -> None:
        with transaction():
            self._atom.report_changed()
            for wrapper in list(self._nodes.values()):
                wrapper.report_changed()

    # --- Structural writes ---

    def create_node(self, parent: Any = None, index: int | None = None) -> ObservableLoroTreeNode:
        """Create a node under parent (a new root when parent is None)."""
        parent_id = _tree_id(parent)
        if index is None:
            node_id = self._container.create(parent=parent_id)
        else:
            node_id = self._container.create_at(index, parent=parent_id)
        self._handle_change()
        return self._wrap_node(node_id)

    def move(self, target: Any, parent: Any = None, index: int | None = None) -> None:
        target_id = _tree_id(target)
        parent_id = _tree_id(parent)
        if index is None:
            self._container.mov(target_id, parent=parent_id)
        else:
            self._container.mov_to(target_id, index, parent=parent_id)
        self._handle_change()

    def move_after(self, target: Any, after: Any) -> None:
        self._container.mov_after(_tree_id(target), _tree_id(after))
        self._handle_change()

    def move_before(self, target: Any, before: Any) -> None:
        self._container.mov_before(_tree_id(target), _tree_id(before))
        self._handle_change()

    def delete(self, target: Any) -> None:
        self._container.delete(_tree_id(target))
        self._handle_change()

    # --- Reads (track the tree) ---

    def has(self, target: Any) -> bool:
        self._atom.report_observed()
        return self._container.contains(_tree_id(target))

    def is_node_deleted(self, target: Any) -> bool:
        self._atom.report_observed()
        return self._container.is_node_deleted(_tree_id(target))

    def get_node_by_id(self, target: Any) -> ObservableLoroTreeNode | None:
        self._atom.report_observed()
        node_id = _tree_id(target)
        if not self._container.contains(node_id):
            return None
        return self._wrap_node(node_id)

    def get_nodes(self, with_deleted: bool = False) -> list[ObservableLoroTreeNode]:
        self._atom.report_observed()
        tree = self._container
        return [
            self._wrap_node(node_id)
            for node_id in tree.nodes()
            if with_deleted or not tree.is_node_deleted(node_id)
        ]

    def roots(self) -> list[ObservableLoroTreeNode]:
        self._atom.report_observed()
        return [self._wrap_node(node_id) for node_id in self._container.roots]

    def to_array(self) -> list[Any]:
        self._atom.report_observed()
        return self._container.get_value()

    def to_json(self) -> Any:
        self._atom.report_observed()
        return self._container.get_value_with_meta()

    # --- Fractional index settings ---

    def enable_fractional_index(self, jitter: int) -> None:
        self._container.enable_fractional_index(jitter)

    def disable_fractional_index(self) -> None:
        self._container.disable_fractional_index()

    def is_fractional_index_enabled(self) -> bool:
        self._atom.report_observed()
        return self._container.is_fractional_index_enabled()

    @property
    def cached_node_count(self) -> int:
        return len(self._nodes)
