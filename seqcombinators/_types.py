"""
Core type definitions for seqcombinators.

Aliases and protocols shared by handles, terminal operations and the
ExtendedIterable wrapper.
"""

from __future__ import annotations

import typing
from collections.abc import AsyncIterable, AsyncIterator, Awaitable, Callable, Iterable, Iterator

from .step import Step

# ============================================================================
# Type aliases
# ============================================================================

# MaybeAwaitable = value now, or a value to be awaited
type MaybeAwaitable[T] = T | Awaitable[T]

# Transform = raw source element -> element, attached once per wrapper
type Transform[A, T] = Callable[[A], MaybeAwaitable[T]]

# Callback = (element, index) -> result, used by map/filter/every/...
type Callback[T, R] = Callable[[T, int], MaybeAwaitable[R]]

# Reducer = (accumulator, element, index) -> accumulator
type Reducer[A, T] = Callable[[A, T, int], MaybeAwaitable[A]]

# ErrorMapper = caught exception -> value emitted in its place
type ErrorMapper[R] = Callable[[Exception], MaybeAwaitable[R]]


# ============================================================================
# Pull handle protocol
# ============================================================================


@typing.runtime_checkable
class PullHandle[T](typing.Protocol):
    """
    Anything elements can be pulled from, one step at a time.

    `next()` is the only required method. A handle may also expose
    `close()` (release early) and `throw(exc)` (notify of a failure);
    both are looked up with getattr and treated as optional.
    """

    def next(self) -> MaybeAwaitable[Step[T]]: ...


# IterableLike = everything the resolver accepts
type IterableLike[T] = (
    Iterable[T]
    | AsyncIterable[T]
    | PullHandle[T]
    | Callable[[], Iterator[T]]
    | Callable[[], AsyncIterator[T]]
)


__all__ = (
    "Callback",
    "ErrorMapper",
    "IterableLike",
    "MaybeAwaitable",
    "PullHandle",
    "Reducer",
    "Transform",
)
