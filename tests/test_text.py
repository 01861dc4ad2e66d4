"""Tests for ObservableLoroText."""

from lorofx import ObservableLoroText, autorun, reaction


class TestText:
    def test_insert_and_delete(self, doc, pool):
        t = pool.get(doc.get_text("t"))
        t.insert(0, "Hello ")
        t.insert(6, "World")
        assert t.to_string() == "Hello World"
        assert str(t) == "Hello World"
        t.delete(5, 6)
        assert t.to_string() == "Hello"
        assert t.length == 5
        assert len(t) == 5

    def test_unicode_length(self, doc, pool):
        t = pool.get(doc.get_text("t"))
        t.insert(0, "héllo ✓")
        assert t.length == 7

    def test_to_json(self, doc, pool):
        t = pool.get(doc.get_text("t"))
        t.insert(0, "abc")
        assert t.to_json() == "abc"

    def test_delta_round_trip(self, doc, pool):
        t = pool.get(doc.get_text("t"))
        t.insert(0, "Hello")
        delta = t.to_delta()
        other = pool.get(doc.get_text("copy"))
        other.apply_delta(delta)
        assert other.to_string() == "Hello"

    def test_same_instance_from_pool(self, doc, pool):
        t = pool.get(doc.get_text("t"))
        assert isinstance(t, ObservableLoroText)
        assert pool.get(doc.get_text("t")) is t

    def test_reactive_updates(self, doc, pool):
        t = pool.get(doc.get_text("t"))
        seen = []
        autorun(lambda: seen.append(t.to_string()))
        t.insert(0, "a")
        t.insert(1, "b")
        t.delete(0, 1)
        assert seen == ["", "a", "ab", "b"]

    def test_concurrent_edits_merge(self, doc, pool, peer, sync):
        doc2, pool2 = peer
        t1 = pool.get(doc.get_text("t"))
        t2 = pool2.get(doc2.get_text("t"))
        t1.insert(0, "Hello")
        sync(doc, doc2)

        t1.insert(5, " left")
        t2.insert(0, "Right: ")
        sync(doc, doc2)
        sync(doc2, doc)
        assert t1.to_string() == t2.to_string()
        assert "left" in t1.to_string()
        assert "Right: " in t1.to_string()

    def test_remote_updates_reactive(self, doc, pool, peer, sync):
        doc2, pool2 = peer
        t1 = pool.get(doc.get_text("t"))
        t2 = pool2.get(doc2.get_text("t"))
        seen = []
        r = reaction(lambda: t2.to_string(), seen.append)
        t1.insert(0, "remote")
        sync(doc, doc2)
        assert seen == ["remote"]
        r.dispose()
