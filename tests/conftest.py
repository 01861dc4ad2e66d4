"""Shared fixtures: documents, pools and a tiny atom-backed value cell."""

import pytest
from loro import ExportMode, LoroDoc

from lorofx import Atom, ObservablePool


class Cell:
    """Minimal observable value used to exercise the reactive core."""

    def __init__(self, value, **hooks):
        self.value = value
        self.atom = Atom("Cell", **hooks)

    def get(self):
        self.atom.report_observed()
        return self.value

    def set(self, value):
        self.value = value
        self.atom.report_changed()


@pytest.fixture
def cell():
    return Cell


@pytest.fixture
def doc():
    return LoroDoc()


@pytest.fixture
def pool(doc):
    p = ObservablePool(doc)
    yield p
    p.dispose()


@pytest.fixture
def peer():
    """A second document with its own pool, for remote-change scenarios."""
    d = LoroDoc()
    p = ObservablePool(d)
    yield d, p
    p.dispose()


@pytest.fixture
def sync():
    """sync(src, dst): import everything dst is missing from src."""

    def _sync(src, dst):
        dst.import_(src.export(ExportMode.Updates(dst.oplog_vv)))

    return _sync
