"""Tests for ObservableLoroTree and its node wrappers."""

import pytest

from lorofx import MissingPoolError, ObservableLoroMap, ObservableLoroTreeNode, autorun, reaction


@pytest.fixture
def tree(doc, pool):
    return pool.get(doc.get_tree("tree"))


class TestStructure:
    def test_create_roots_and_children(self, tree):
        root = tree.create_node()
        child = root.create_node()
        assert tree.roots() == [root]
        assert root.children() == [child]
        assert child.parent() is root
        assert root.parent() is None

    def test_create_at_index(self, tree):
        root = tree.create_node()
        b = root.create_node()
        a = root.create_node(0)
        assert root.children() == [a, b]
        assert a.index() == 0
        assert b.index() == 1

    def test_create_under_node_wrapper_or_id(self, tree):
        root = tree.create_node()
        by_wrapper = tree.create_node(root)
        by_id = tree.create_node(root.id)
        assert root.children() == [by_wrapper, by_id]

    def test_move(self, tree):
        a = tree.create_node()
        b = tree.create_node()
        child = a.create_node()
        child.move(b)
        assert a.children() == []
        assert b.children() == [child]
        assert child.parent() is b

    def test_move_to_root(self, tree):
        root = tree.create_node()
        child = root.create_node()
        child.move()
        assert child.parent() is None
        assert child in tree.roots()

    def test_move_with_index(self, tree):
        root = tree.create_node()
        a = root.create_node()
        b = root.create_node()
        tree.move(b, root, 0)
        assert root.children() == [b, a]

    def test_move_after_and_before(self, tree):
        root = tree.create_node()
        a = root.create_node()
        b = root.create_node()
        c = root.create_node()
        a.move_after(c)
        assert root.children() == [b, c, a]
        a.move_before(b)
        assert root.children() == [a, b, c]

    def test_delete(self, tree):
        root = tree.create_node()
        child = root.create_node()
        child.delete()
        assert child.is_deleted()
        assert tree.is_node_deleted(child)
        assert root.children() == []
        assert child.index() is None

    def test_deleted_node_stays_queryable(self, tree):
        root = tree.create_node()
        child = root.create_node()
        grandchild = child.create_node()
        child.delete()
        assert child.parent() is None
        assert child.index() is None
        assert child.children() == []
        assert child.fractional_index() is None
        assert grandchild.is_deleted()
        assert grandchild.parent() is None
        assert grandchild.index() is None

    def test_deleted_root_stays_queryable(self, tree):
        root = tree.create_node()
        root.delete()
        assert root.is_deleted()
        assert root.parent() is None
        assert root.index() is None
        assert tree.roots() == []

    def test_get_nodes(self, tree):
        a = tree.create_node()
        b = a.create_node()
        b.delete()
        assert tree.get_nodes() == [a]
        assert set(map(id, tree.get_nodes(with_deleted=True))) == {id(a), id(b)}

    def test_has_and_lookup(self, tree, doc):
        node = tree.create_node()
        assert tree.has(node)
        assert tree.get_node_by_id(node.id) is node
        other = doc.get_tree("other").create()
        assert tree.get_node_by_id(other) is None

    def test_node_data(self, tree):
        node = tree.create_node()
        data = node.data
        assert isinstance(data, ObservableLoroMap)
        data.set("title", "Root")
        assert node.data is data
        assert node.data.get("title") == "Root"
        assert tree.to_json()

    def test_creation_metadata(self, tree, doc):
        node = tree.create_node()
        assert node.creator() == doc.peer_id
        assert node.creation_id() == {"peer": node.id.peer, "counter": node.id.counter}
        assert node.last_move_id() is not None

    def test_fractional_index(self, tree):
        tree.enable_fractional_index(0)
        assert tree.is_fractional_index_enabled()
        node = tree.create_node()
        assert node.fractional_index() is not None
        tree.disable_fractional_index()
        assert not tree.is_fractional_index_enabled()

    def test_to_array(self, tree):
        tree.create_node().create_node()
        assert tree.to_array()

    def test_node_backlinks(self, tree, pool):
        node = tree.create_node()
        assert node.tree is tree
        assert node.pool is pool
        assert node.original is tree.original


class TestNodeIdentity:
    def test_same_wrapper_on_every_path(self, tree):
        root = tree.create_node()
        child = root.create_node()
        assert tree.roots()[0] is root
        assert root.children()[0] is child
        assert tree.get_node_by_id(child.id) is child
        assert child.parent() is root

    def test_deleted_nodes_stay_cached(self, tree):
        node = tree.create_node()
        node.delete()
        assert tree.cached_node_count == 1
        assert tree.get_nodes(with_deleted=True)[0] is node

    def test_requires_pool(self, tree):
        with pytest.raises(MissingPoolError):
            ObservableLoroTreeNode(None, tree, None)

    def test_repr(self, tree):
        assert repr(tree.create_node()).startswith("ObservableLoroTreeNode(")


class TestReactivity:
    def test_roots_react_to_creation(self, tree):
        counts = []
        reaction(lambda: len(tree.roots()), counts.append)
        tree.create_node()
        tree.create_node()
        assert counts == [1, 2]

    def test_every_cached_node_invalidated(self, tree):
        a = tree.create_node()
        b = tree.create_node()
        runs = []
        autorun(lambda: runs.append(len(a.children())))
        tree.create_node(b)  # a is untouched but still re-runs
        assert runs == [0, 0]

    def test_node_reads_follow_moves(self, tree):
        a = tree.create_node()
        b = tree.create_node()
        child = a.create_node()
        parents = []
        reaction(lambda: child.parent(), parents.append)
        child.move(b)
        assert parents == [b]

    def test_subscription_lifecycle(self, tree):
        r = autorun(lambda: tree.roots())
        assert tree.is_observed
        r.dispose()
        assert not tree.is_observed

    def test_node_reads_do_not_subscribe_tree(self, tree):
        node = tree.create_node()
        r = autorun(lambda: node.children())
        assert not tree.is_observed
        r.dispose()


class TestRemote:
    def test_wrapper_stable_across_remote_move(self, doc, tree, peer, sync):
        doc2, pool2 = peer
        old_parent = tree.create_node()
        new_parent = tree.create_node()
        child = old_parent.create_node()
        sync(doc, doc2)

        tree2 = pool2.get(doc2.get_tree("tree"))
        child2 = tree2.get_node_by_id(child.id)
        old_parent2 = tree2.get_node_by_id(old_parent.id)
        new_parent2 = tree2.get_node_by_id(new_parent.id)
        assert child2.parent() is old_parent2

        parents = []
        r1 = autorun(lambda: tree2.roots())
        r2 = reaction(lambda: child2.parent(), parents.append)

        child.move(new_parent)
        sync(doc, doc2)

        assert tree2.get_node_by_id(child.id) is child2
        assert new_parent2.children()[0] is child2
        assert child2.parent() is new_parent2
        assert old_parent2.children() == []
        assert parents == [new_parent2]
        r1.dispose()
        r2.dispose()

    def test_wrapper_stable_across_remote_move_to_root(self, doc, tree, peer, sync):
        doc2, pool2 = peer
        root = tree.create_node()
        child = root.create_node()
        sync(doc, doc2)

        tree2 = pool2.get(doc2.get_tree("tree"))
        child2 = tree2.get_node_by_id(child.id)
        root2 = tree2.get_node_by_id(root.id)

        child.move()
        sync(doc, doc2)

        assert tree2.get_node_by_id(child.id) is child2
        assert child2.parent() is None
        assert root2.children() == []
        assert child2 in tree2.roots()

    def test_remote_change_invalidates_nodes(self, doc, tree, peer, sync):
        doc2, pool2 = peer
        root = tree.create_node()
        sync(doc, doc2)

        tree2 = pool2.get(doc2.get_tree("tree"))
        root2 = tree2.get_node_by_id(root.id)
        counts = []
        r1 = autorun(lambda: tree2.roots())
        r2 = reaction(lambda: len(root2.children()), counts.append)

        root.create_node()
        sync(doc, doc2)
        assert counts == [1]
        r1.dispose()
        r2.dispose()

    def test_remote_delete_keeps_wrapper(self, doc, tree, peer, sync):
        doc2, pool2 = peer
        node = tree.create_node()
        sync(doc, doc2)

        tree2 = pool2.get(doc2.get_tree("tree"))
        node2 = tree2.get_node_by_id(node.id)
        node.delete()
        sync(doc, doc2)
        assert node2.is_deleted()
        assert node2.parent() is None
        assert node2.index() is None
        assert tree2.get_nodes(with_deleted=True) == [node2]
