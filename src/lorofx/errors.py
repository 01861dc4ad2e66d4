"""Exceptions raised by lorofx.

Errors coming out of loro itself (index out of range, cyclic tree moves, ...)
are not wrapped; they reach the caller unchanged.
"""


class LoroFxError(Exception):
    """Base class for every error raised by lorofx."""


class DirectConstructionError(LoroFxError, TypeError):
    """A container wrapper was instantiated outside of ObservablePool."""


class MissingPoolError(LoroFxError, ValueError):
    """A tree node wrapper was built without the pool it needs."""


class UnsupportedContainerError(LoroFxError, TypeError):
    """The value is a loro container, but not one of the supported kinds."""


class MissingDocumentError(LoroFxError, ValueError):
    """No LoroDoc could be found for a container."""


class ReactionLoopError(LoroFxError, RuntimeError):
    """Reactions kept invalidating each other and never settled."""
