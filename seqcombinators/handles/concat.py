"""Concat handle

Drains the primary upstream, then opens and drains the second source.
The second source is opened only once the primary is exhausted."""

from __future__ import annotations

import typing
from collections.abc import Awaitable, Callable

from .._helpers import after, apply, fail, is_awaitable, release, settle
from .._types import MaybeAwaitable, PullHandle, Transform
from ..step import DONE, Step
from .base import BaseHandle


class ConcatHandle[T](BaseHandle[T]):
    """
    Primary upstream followed by a second handle.

    The transform belongs to the primary sequence and is not applied to
    the second one. close() releases the primary and, if it was already
    opened, the second handle.
    """

    __slots__ = ("_open_second", "_second")

    def __init__(
        self,
        upstream: PullHandle[typing.Any],
        open_second: Callable[[], PullHandle[T]],
        *,
        transform: Transform[typing.Any, T] | None = None,
    ) -> None:
        super().__init__(upstream, transform=transform)
        self._open_second = open_second
        self._second: PullHandle[T] | None = None

    def _next(self) -> MaybeAwaitable[Step[T]]:
        if self._second is None:
            try:
                step = self.upstream.next()
            except Exception as exc:
                return self._raise(exc)
            if is_awaitable(step):
                return self._next_async(step)
            if not step.done:
                return self._emit(step.value)
            self._second = self._open_second()

        try:
            step = self._second.next()
        except Exception as exc:
            return self._raise(exc)
        if is_awaitable(step):
            return self._second_async(step)
        return step

    async def _next_async(self, pending: Awaitable[Step[typing.Any]]) -> Step[T]:
        try:
            step = await pending
            if not step.done:
                return Step(await settle(apply(self.transform, step.value)))
            self._second = self._open_second()
            return await settle(self._second.next())
        except Exception as exc:
            await self._raise_async(exc)

    async def _second_async(self, pending: Awaitable[Step[T]]) -> Step[T]:
        try:
            return await pending
        except Exception as exc:
            await self._raise_async(exc)

    def _active(self) -> PullHandle[typing.Any]:
        return self.upstream if self._second is None else self._second

    def close(self) -> MaybeAwaitable[Step[T]]:
        if self._closed:
            return DONE
        self._closed = True
        if self._second is None:
            return after(DONE, release(self.upstream))
        return after(DONE, release(self.upstream), release(self._second))

    def throw(self, exc: Exception, /) -> Awaitable[None] | None:
        # Errors are reported to whichever side is currently being drained
        if exc is self._reported:
            return None
        self._reported = exc
        return fail(self._active(), exc)


__all__ = ("ConcatHandle",)
