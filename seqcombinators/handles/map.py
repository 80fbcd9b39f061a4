"""Map handle

Applies the wrapper transform, then callback(value, index), to every
upstream element. The index counts emitted elements from 0."""

from __future__ import annotations

import typing
from collections.abc import Awaitable

from .._helpers import MISSING, apply, is_awaitable, settle
from .._types import Callback, MaybeAwaitable, PullHandle, Transform
from ..step import Step
from .base import BaseHandle


class MapHandle[T, U](BaseHandle[U]):
    """
    Lazy map over an upstream handle.

    Without a callback it only applies the transform; the wrapper uses
    that form to expose a transform-bound handle.
    """

    __slots__ = ("callback", "_index")

    def __init__(
        self,
        upstream: PullHandle[typing.Any],
        callback: Callback[T, U] | None = None,
        *,
        transform: Transform[typing.Any, T] | None = None,
    ) -> None:
        super().__init__(upstream, transform=transform)
        self.callback = callback
        self._index = 0

    def _call(self, value: T) -> MaybeAwaitable[U]:
        if self.callback is None:
            return typing.cast(U, value)
        index = self._index
        self._index += 1
        return self.callback(value, index)

    def _next(self) -> MaybeAwaitable[Step[U]]:
        try:
            step = self.upstream.next()
        except Exception as exc:
            return self._raise(exc)

        if is_awaitable(step):
            return self._next_async(step=step)
        if step.done:
            return step

        try:
            value = apply(self.transform, step.value)
            if is_awaitable(value):
                return self._next_async(value=value)
            mapped = self._call(value)
        except Exception as exc:
            return self._raise(exc)

        if is_awaitable(mapped):
            return self._next_async(mapped=mapped)
        return Step(mapped)

    async def _next_async(
        self,
        *,
        step: Awaitable[Step[typing.Any]] = MISSING,
        value: Awaitable[T] = MISSING,
        mapped: Awaitable[U] = MISSING,
    ) -> Step[U]:
        # Resumes from whichever stage first produced an awaitable
        try:
            if mapped is MISSING:
                if value is MISSING:
                    current = await step
                    if current.done:
                        return current
                    value = apply(self.transform, current.value)
                mapped = self._call(await settle(value))
            return Step(await settle(mapped))
        except Exception as exc:
            await self._raise_async(exc)


__all__ = ("MapHandle",)
