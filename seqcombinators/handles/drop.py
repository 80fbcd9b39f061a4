"""Drop handle

Pulls and discards the first `count` elements, then passes the rest
through. Discarded elements are never transformed."""

from __future__ import annotations

import typing
from collections.abc import Awaitable

from .._helpers import apply, is_awaitable, settle
from .._types import MaybeAwaitable, PullHandle, Transform
from ..step import Step
from .base import BaseHandle


class DropHandle[T](BaseHandle[T]):
    __slots__ = ("count", "_dropped")

    def __init__(
        self,
        upstream: PullHandle[typing.Any],
        count: int,
        *,
        transform: Transform[typing.Any, T] | None = None,
    ) -> None:
        super().__init__(upstream, transform=transform)
        self.count = count
        self._dropped = 0

    def _next(self) -> MaybeAwaitable[Step[T]]:
        try:
            step = self.upstream.next()
            while not is_awaitable(step) and not step.done and self._dropped < self.count:
                self._dropped += 1
                step = self.upstream.next()
        except Exception as exc:
            return self._raise(exc)

        if is_awaitable(step):
            return self._next_async(step)
        if step.done:
            return step
        return self._emit(step.value)

    async def _next_async(self, pending: Awaitable[Step[typing.Any]]) -> Step[T]:
        try:
            step = await pending
            while not step.done and self._dropped < self.count:
                self._dropped += 1
                step = await settle(self.upstream.next())
            if step.done:
                return step
            value = await settle(apply(self.transform, step.value))
        except Exception as exc:
            await self._raise_async(exc)
        return Step(value)


__all__ = ("DropHandle",)
