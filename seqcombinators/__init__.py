"""
Lazy, chainable sequence combinators over sync and async sources.

One wrapper, ExtendedIterable, over lists, generators, async generators
or any object with next(). Combinators (map, filter, take, drop, slice,
concat, flat_map, map_error, results) are lazy; terminal operations
(every, some, find, for_each, reduce, to_list, at) run synchronously
until the data turns asynchronous, then return an awaitable.

Architecture:
- resolve    - any accepted source -> pull handle
- handles    - one decorator handle per combinator
- terminal   - drivers that consume a handle into a value
- lift       - terminal results as kungfu LazyCoroResult
"""

# Core types
from ._types import Callback, ErrorMapper, IterableLike, MaybeAwaitable, PullHandle, Reducer, Transform
from .step import DONE, Step

# Errors
from ._errors import EmptyReduceError, NotIterableError, SyncIterationError

# Resolution
from .resolve import AsyncIteratorHandle, IteratorHandle, resolve

# Wrapper
from .iterable import ExtendedIterable, collect

# Result bridge
from . import lift

__all__ = (
    # Types
    "Callback",
    "ErrorMapper",
    "IterableLike",
    "MaybeAwaitable",
    "PullHandle",
    "Reducer",
    "Transform",
    "DONE",
    "Step",
    # Errors
    "EmptyReduceError",
    "NotIterableError",
    "SyncIterationError",
    # Resolution
    "AsyncIteratorHandle",
    "IteratorHandle",
    "resolve",
    # Wrapper
    "ExtendedIterable",
    "collect",
    # Lift
    "lift",
)
