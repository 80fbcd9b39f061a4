"""
ExtendedIterable
================

User-facing sequence wrapper. Owns one pull handle plus an optional
transform, and exposes lazy combinators, terminal operations, and both
`for` and `async for` enumeration over the same handle.

Every operation runs synchronously for as long as the data allows and
returns an awaitable from the first step that is not immediate:

    ExtendedIterable([1, 2, 3]).map(lambda x, i: x * 2).to_list()
    # [2, 4, 6]

    await ExtendedIterable(ticker()).take(3).to_list()
    # async source, so to_list() returned an awaitable

Combinators consume the wrapper's handle: chain from the newest wrapper
rather than branching from an old one.
"""

from __future__ import annotations

import logging
import typing
from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator

from kungfu import LazyCoroResult, Result

from . import lift, terminal
from ._errors import SyncIterationError
from ._helpers import MISSING, check_callback, check_count, discard, fail, is_awaitable, release, settle
from ._types import Callback, ErrorMapper, IterableLike, MaybeAwaitable, PullHandle, Reducer, Transform
from .handles import (
    ConcatHandle,
    DropHandle,
    FilterHandle,
    FlatMapHandle,
    MapErrorHandle,
    MapHandle,
    ResultHandle,
    TakeHandle,
    slice_handle,
)
from .resolve import opener, resolve

logger = logging.getLogger(__name__)


class ExtendedIterable[T]:
    """
    Composable sequence over any iterable, async iterable, generator
    function or pull handle.

    `transform` is applied exactly once per raw element, by whichever
    handle reads the source first.
    """

    __slots__ = ("_handle", "transform")

    def __init__(
        self,
        source: IterableLike[typing.Any],
        transform: Transform[typing.Any, T] | None = None,
    ) -> None:
        self._handle: PullHandle[typing.Any] = resolve(source)
        if transform is not None and not callable(transform):
            raise TypeError("Transformer must be a function")
        self.transform = transform

    @property
    def handle(self) -> PullHandle[T]:
        """Pull handle yielding transformed elements."""
        if self.transform is None:
            return self._handle
        return MapHandle(self._handle, transform=self.transform)

    def __repr__(self) -> str:
        return f"ExtendedIterable({self._handle!r})"

    # ========================================================================
    # Lazy combinators
    # ========================================================================

    def map[U](self, callback: Callback[T, U]) -> ExtendedIterable[U]:
        check_callback(callback)
        return ExtendedIterable(MapHandle(self._handle, callback, transform=self.transform))

    def filter(self, callback: Callback[T, object]) -> ExtendedIterable[T]:
        check_callback(callback)
        return ExtendedIterable(FilterHandle(self._handle, callback, transform=self.transform))

    def take(self, limit: int) -> ExtendedIterable[T]:
        """First `limit` elements; releases the source once they are out."""
        limit = check_count(limit, "limit")
        return ExtendedIterable(TakeHandle(self._handle, limit, transform=self.transform))

    def drop(self, count: int) -> ExtendedIterable[T]:
        """Everything after the first `count` elements."""
        count = check_count(count, "Count")
        if count == 0:
            return self
        return ExtendedIterable(DropHandle(self._handle, count, transform=self.transform))

    def slice(self, start: int = 0, end: int | None = None) -> ExtendedIterable[T]:
        """
        Elements [start, end). end=None runs to the end of the source.

        start >= end gives an empty sequence without touching the source.
        """
        start = check_count(start, "Start")
        if end is not None:
            end = check_count(end, "End")
            if start >= end:
                return ExtendedIterable(())
        return ExtendedIterable(slice_handle(self._handle, start, end, transform=self.transform))

    def concat[U](self, other: IterableLike[U]) -> ExtendedIterable[T | U]:
        """
        This sequence followed by `other`.

        `other` is checked now but opened only once this one is exhausted.
        """
        open_second = opener(other)
        return ExtendedIterable(ConcatHandle(self._handle, open_second, transform=self.transform))

    def flat_map[U](
        self,
        callback: Callback[T, U | Iterable[U] | AsyncIterable[U]],
    ) -> ExtendedIterable[U]:
        """Map, draining sequence results element by element. Strings count as scalars."""
        check_callback(callback)
        return ExtendedIterable(FlatMapHandle(self._handle, callback, transform=self.transform))

    def map_error[R](self, on_error: ErrorMapper[R] | None = None) -> ExtendedIterable[T | R]:
        """Emit errors (or on_error(exc)) as elements instead of raising them."""
        check_callback(on_error, optional=True)
        return ExtendedIterable(MapErrorHandle(self._handle, on_error, transform=self.transform))

    def results[E](self, on_error: ErrorMapper[E] | None = None) -> ExtendedIterable[Result[T, E]]:
        """Like map_error, but every element is Ok(value) and every caught error Error(...)."""
        check_callback(on_error, optional=True)
        return ExtendedIterable(ResultHandle(self._handle, on_error, transform=self.transform))

    # ========================================================================
    # Terminal operations
    # ========================================================================

    def every(self, callback: Callback[T, object]) -> MaybeAwaitable[bool]:
        check_callback(callback)
        return terminal.every(self._handle, callback, self.transform)

    def some(self, callback: Callback[T, object]) -> MaybeAwaitable[bool]:
        check_callback(callback)
        return terminal.some(self._handle, callback, self.transform)

    def find(self, callback: Callback[T, object]) -> MaybeAwaitable[T | None]:
        check_callback(callback)
        return terminal.find(self._handle, callback, self.transform)

    def for_each(self, callback: Callback[T, object]) -> MaybeAwaitable[None]:
        check_callback(callback)
        return terminal.for_each(self._handle, callback, self.transform)

    def reduce[A](self, callback: Reducer[A, T], initial: A = MISSING) -> MaybeAwaitable[A]:
        check_callback(callback)
        return terminal.reduce(self._handle, callback, self.transform, initial)

    def to_list(self) -> MaybeAwaitable[list[T]]:
        return terminal.to_list(self._handle, self.transform)

    @property
    def as_list(self) -> MaybeAwaitable[list[T]]:
        return self.to_list()

    def at(self, index: int) -> MaybeAwaitable[T | None]:
        index = check_count(index, "index")
        return terminal.at(self._handle, index, self.transform)

    def to_result(self) -> LazyCoroResult[list[T], Exception]:
        """Collect into a LazyCoroResult: Ok(items), or Error(exc) if collecting fails."""
        return lift.catching(self.to_list)

    # ========================================================================
    # Enumeration
    # ========================================================================

    def __iter__(self) -> Iterator[T]:
        handle = self.handle
        while True:
            try:
                step = handle.next()
            except Exception as exc:
                discard(fail(handle, exc))
                raise
            if is_awaitable(step):
                discard(step)
                raise SyncIterationError(self)
            if step.done:
                return
            try:
                yield typing.cast(T, step.value)
            except GeneratorExit:
                pending = release(handle)
                if is_awaitable(pending):
                    logger.debug("%r has an async close(); not run on exit from a sync loop", handle)
                    discard(pending)
                raise

    async def __aiter__(self) -> AsyncIterator[T]:
        handle = self.handle
        while True:
            try:
                step = await settle(handle.next())
            except Exception as exc:
                await settle(fail(handle, exc))
                raise
            if step.done:
                return
            try:
                yield typing.cast(T, step.value)
            except GeneratorExit:
                await settle(release(handle))
                raise


def collect[T](
    source: IterableLike[typing.Any],
    transform: Transform[typing.Any, T] | None = None,
) -> MaybeAwaitable[list[T]]:
    """One-shot ExtendedIterable(source, transform).to_list()."""
    return ExtendedIterable(source, transform).to_list()


__all__ = ("ExtendedIterable", "collect")
