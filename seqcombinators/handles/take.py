"""Take handle

Emits at most `limit` elements. The pull after the budget is spent
releases upstream instead of pulling from it."""

from __future__ import annotations

import typing
from collections.abc import Awaitable

from .._helpers import apply, is_awaitable, settle
from .._types import MaybeAwaitable, PullHandle, Transform
from ..step import Step
from .base import BaseHandle


class TakeHandle[T](BaseHandle[T]):
    __slots__ = ("limit", "_count")

    def __init__(
        self,
        upstream: PullHandle[typing.Any],
        limit: int,
        *,
        transform: Transform[typing.Any, T] | None = None,
    ) -> None:
        super().__init__(upstream, transform=transform)
        self.limit = limit
        self._count = 0

    def _next(self) -> MaybeAwaitable[Step[T]]:
        if self._count >= self.limit:
            return self.close()

        try:
            step = self.upstream.next()
        except Exception as exc:
            return self._raise(exc)

        if is_awaitable(step):
            return self._next_async(step)
        if step.done:
            return step

        self._count += 1
        return self._emit(step.value)

    async def _next_async(self, pending: Awaitable[Step[typing.Any]]) -> Step[T]:
        try:
            step = await pending
            if step.done:
                return step
            self._count += 1
            value = await settle(apply(self.transform, step.value))
        except Exception as exc:
            await self._raise_async(exc)
        return Step(value)


__all__ = ("TakeHandle",)
