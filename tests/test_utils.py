"""Tests for the per-document convenience getters."""

import pytest
from loro import LoroDoc, LoroMap

from lorofx import (
    MissingDocumentError,
    ObservableLoroList,
    ObservableLoroMap,
    ObservableLoroText,
    ObservableLoroTree,
    ObservableMovableList,
    dispose_pool,
    get_list,
    get_map,
    get_movable_list,
    get_pool,
    get_text,
    get_tree,
    to_observable,
)


@pytest.fixture
def doc():
    d = LoroDoc()
    yield d
    dispose_pool(d)


class TestGetters:
    def test_every_getter(self, doc):
        assert isinstance(get_map(doc, "m"), ObservableLoroMap)
        assert isinstance(get_list(doc, "l"), ObservableLoroList)
        assert isinstance(get_movable_list(doc, "ml"), ObservableMovableList)
        assert isinstance(get_tree(doc, "t"), ObservableLoroTree)
        assert isinstance(get_text(doc, "x"), ObservableLoroText)

    def test_getters_share_one_pool(self, doc):
        m = get_map(doc, "m")
        assert get_map(doc, "m") is m
        assert get_list(doc, "l").pool is m.pool
        assert get_pool(doc) is m.pool

    def test_different_docs_different_pools(self, doc):
        other = LoroDoc()
        try:
            assert get_pool(doc) is not get_pool(other)
            assert get_map(doc, "m") is not get_map(other, "m")
        finally:
            dispose_pool(other)


class TestToObservable:
    def test_with_explicit_doc(self, doc):
        m = get_map(doc, "m")
        assert to_observable(doc.get_map("m"), doc) is m

    def test_document_taken_from_container(self, doc):
        m = get_map(doc, "m")
        assert to_observable(doc.get_map("m")) is m

    def test_document_taken_from_container_before_any_getter(self, doc):
        t = to_observable(doc.get_text("t"))
        assert isinstance(t, ObservableLoroText)
        assert t.pool is get_pool(doc)
        assert get_text(doc, "t") is t

    def test_nested_container_uses_document_pool(self, doc):
        parent = get_map(doc, "parent")
        child = parent.original.insert_container("child", LoroMap())
        assert to_observable(child) is parent.get("child")

    def test_detached_container_fails(self):
        with pytest.raises(MissingDocumentError):
            to_observable(LoroMap())

    def test_is_a_value_error(self):
        with pytest.raises(ValueError):
            to_observable(LoroMap())


class TestDisposePool:
    def test_new_pool_after_dispose(self, doc):
        first = get_pool(doc)
        m = get_map(doc, "m")
        dispose_pool(doc)
        assert first.disposed
        assert get_pool(doc) is not first
        assert get_map(doc, "m") is not m

    def test_unknown_doc_is_noop(self):
        dispose_pool(LoroDoc())

    def test_dispose_through_another_handle(self, doc):
        first = get_pool(doc)
        dispose_pool(doc.get_map("m").doc())
        assert first.disposed
        assert get_pool(doc) is not first
