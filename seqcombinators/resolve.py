"""
Sequence resolver
=================

Normalizes everything ExtendedIterable accepts into one pull handle:

- sync iterables (list, set, generator, ...)   -> IteratorHandle
- async iterables (async generator, ...)       -> AsyncIteratorHandle
- generator / async generator functions        -> called once, then adapted
- objects that already have next()             -> used as is
"""

from __future__ import annotations

import inspect
import logging
import typing
from collections.abc import AsyncIterable, AsyncIterator, Awaitable, Callable, Iterable, Iterator

from ._errors import NotIterableError
from ._types import IterableLike, PullHandle
from .step import DONE, Step

logger = logging.getLogger(__name__)


# ============================================================================
# Adapters
# ============================================================================


class IteratorHandle[T]:
    """Pull handle over a plain Python iterator. Every step is immediate."""

    __slots__ = ("_iterator",)

    def __init__(self, iterator: Iterator[T], /) -> None:
        self._iterator = iterator

    def next(self) -> Step[T]:
        try:
            value = next(self._iterator)
        except StopIteration:
            return DONE
        return Step(value)

    def close(self) -> Step[T]:
        close = getattr(self._iterator, "close", None)
        if close is not None:
            close()
        return DONE

    def throw(self, exc: Exception, /) -> None:
        # Generators run their except/finally blocks; plain iterators have nothing to notify
        throw = getattr(self._iterator, "throw", None)
        if throw is not None:
            throw(exc)

    def __repr__(self) -> str:
        return f"IteratorHandle({self._iterator!r})"


class AsyncIteratorHandle[T]:
    """Pull handle over an async iterator. Every step is an awaitable."""

    __slots__ = ("_iterator",)

    def __init__(self, iterator: AsyncIterator[T], /) -> None:
        self._iterator = iterator

    def next(self) -> Awaitable[Step[T]]:
        return self._pull()

    async def _pull(self) -> Step[T]:
        try:
            value = await anext(self._iterator)
        except StopAsyncIteration:
            return DONE
        return Step(value)

    def close(self) -> Step[T] | Awaitable[Step[T]]:
        aclose = getattr(self._iterator, "aclose", None)
        if aclose is None:
            return DONE
        return self._close(aclose)

    async def _close(self, aclose: Callable[[], Awaitable[object]]) -> Step[T]:
        await aclose()
        return DONE

    def throw(self, exc: Exception, /) -> Awaitable[object] | None:
        athrow = getattr(self._iterator, "athrow", None)
        if athrow is None:
            return None
        return athrow(exc)

    def __repr__(self) -> str:
        return f"AsyncIteratorHandle({self._iterator!r})"


# ============================================================================
# Resolution
# ============================================================================


def opener[T](source: IterableLike[T]) -> Callable[[], PullHandle[T]]:
    """
    Classify source now, open it later.

    Returns a zero-arg callable producing the pull handle. Raises
    NotIterableError immediately when source has no usable shape, so
    callers that defer opening (concat) still fail at call time.
    """
    from .iterable import ExtendedIterable

    if isinstance(source, ExtendedIterable):
        return lambda: source.handle
    if isinstance(source, Iterable):
        return lambda: IteratorHandle(iter(source))
    if isinstance(source, AsyncIterable):
        return lambda: AsyncIteratorHandle(aiter(source))
    if inspect.isgeneratorfunction(source):
        return lambda: IteratorHandle(source())
    if inspect.isasyncgenfunction(source):
        return lambda: AsyncIteratorHandle(source())
    if callable(getattr(source, "next", None)):
        return lambda: typing.cast(PullHandle[T], source)
    raise NotIterableError(source)


def resolve[T](source: IterableLike[T]) -> PullHandle[T]:
    """Turn source into a pull handle, failing fast on unsupported input."""
    handle = opener(source)()
    logger.debug("resolved %s to %r", type(source).__name__, handle)
    return handle


__all__ = ("AsyncIteratorHandle", "IteratorHandle", "opener", "resolve")
