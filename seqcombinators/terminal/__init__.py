"""
Terminal operations: drive a pull handle and produce a final value.

Each one runs synchronously while every step is immediate and returns an
awaitable from the first step (or callback result) that is not.
"""

from .at import at
from .collect import to_list
from .for_each import for_each
from .reduce import reduce
from .search import Match, every, find, search, some

__all__ = (
    "Match",
    "at",
    "every",
    "find",
    "for_each",
    "reduce",
    "search",
    "some",
    "to_list",
)
