"""lorofx: reactive, identity-stable wrappers for Loro CRDT containers."""

from importlib.metadata import version as _version

__version__ = _version("lorofx")

from lorofx._tracking import get_pending_count, untracked
from lorofx.atom import Atom, set_scheduler
from lorofx.computed import Computed, computed
from lorofx.reaction import Reaction, autorun, reaction
from lorofx.action import action, run_in_action, transaction
from lorofx.errors import (
    DirectConstructionError,
    LoroFxError,
    MissingDocumentError,
    MissingPoolError,
    ReactionLoopError,
    UnsupportedContainerError,
)
from lorofx.base import ContainerKind, ObservableContainer
from lorofx.map import ObservableLoroMap
from lorofx.list import ObservableLoroList
from lorofx.movable_list import ObservableMovableList
from lorofx.text import ObservableLoroText
from lorofx.tree import ObservableLoroTree, ObservableLoroTreeNode
from lorofx.pool import ObservablePool, container_kind
from lorofx.utils import (
    dispose_pool,
    get_list,
    get_map,
    get_movable_list,
    get_pool,
    get_text,
    get_tree,
    to_observable,
)

__all__ = [
    "Atom",
    "Computed",
    "computed",
    "Reaction",
    "autorun",
    "reaction",
    "action",
    "run_in_action",
    "transaction",
    "untracked",
    "get_pending_count",
    "set_scheduler",
    "LoroFxError",
    "DirectConstructionError",
    "MissingPoolError",
    "UnsupportedContainerError",
    "MissingDocumentError",
    "ReactionLoopError",
    "ContainerKind",
    "ObservableContainer",
    "ObservableLoroMap",
    "ObservableLoroList",
    "ObservableMovableList",
    "ObservableLoroText",
    "ObservableLoroTree",
    "ObservableLoroTreeNode",
    "ObservablePool",
    "container_kind",
    "get_pool",
    "get_map",
    "get_list",
    "get_movable_list",
    "get_tree",
    "get_text",
    "to_observable",
    "dispose_pool",
]
