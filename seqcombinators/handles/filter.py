"""Filter handle

Keeps pulling upstream until callback(value, index) is truthy or the
upstream is exhausted. The index counts every tested element."""

from __future__ import annotations

import typing
from collections.abc import Awaitable

from .._helpers import MISSING, apply, is_awaitable, settle
from .._types import Callback, MaybeAwaitable, PullHandle, Transform
from ..step import Step
from .base import BaseHandle


class FilterHandle[T](BaseHandle[T]):
    __slots__ = ("callback", "_index")

    def __init__(
        self,
        upstream: PullHandle[typing.Any],
        callback: Callback[T, object],
        *,
        transform: Transform[typing.Any, T] | None = None,
    ) -> None:
        super().__init__(upstream, transform=transform)
        self.callback = callback
        self._index = 0

    def _test(self, value: T) -> MaybeAwaitable[object]:
        index = self._index
        self._index += 1
        return self.callback(value, index)

    def _next(self) -> MaybeAwaitable[Step[T]]:
        while True:
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
                keep = self._test(value)
            except Exception as exc:
                return self._raise(exc)

            if is_awaitable(keep):
                return self._next_async(value=value, keep=keep)
            if keep:
                return Step(value)

    async def _next_async(
        self,
        *,
        step: Awaitable[Step[typing.Any]] = MISSING,
        value: T | Awaitable[T] = MISSING,
        keep: Awaitable[object] = MISSING,
    ) -> Step[T]:
        # Same scan as _next, continued with awaits from the stage that went async
        try:
            while True:
                if keep is MISSING:
                    if value is MISSING:
                        current = await settle(self.upstream.next() if step is MISSING else step)
                        step = MISSING
                        if current.done:
                            return current
                        value = apply(self.transform, current.value)
                    value = await settle(value)
                    keep = self._test(value)
                if await settle(keep):
                    return Step(value)
                value = keep = MISSING
        except Exception as exc:
            await self._raise_async(exc)


__all__ = ("FilterHandle",)
