"""FlatMap handle

callback(value, index) may return a sequence, drained element by
element before the next upstream pull, or a scalar, emitted as is."""

from __future__ import annotations

import typing
from collections.abc import AsyncIterable, Awaitable, Iterable

from .._helpers import MISSING, after, apply, fail, is_awaitable, release, settle
from .._types import Callback, MaybeAwaitable, PullHandle, Transform
from ..step import DONE, Step
from .base import BaseHandle

# Iterable, but emitted whole
_SCALARS = (str, bytes, bytearray)


def _is_sequence(result: object) -> bool:
    if isinstance(result, _SCALARS):
        return False
    if isinstance(result, (Iterable, AsyncIterable)):
        return True
    return callable(getattr(result, "next", None))


class FlatMapHandle[T, U](BaseHandle[U]):
    __slots__ = ("callback", "_index", "_sub")

    def __init__(
        self,
        upstream: PullHandle[typing.Any],
        callback: Callback[T, U | Iterable[U] | AsyncIterable[U]],
        *,
        transform: Transform[typing.Any, T] | None = None,
    ) -> None:
        super().__init__(upstream, transform=transform)
        self.callback = callback
        self._index = 0
        self._sub: PullHandle[U] | None = None

    def _call(self, value: T) -> MaybeAwaitable[object]:
        index = self._index
        self._index += 1
        return self.callback(value, index)

    def _expand(self, result: object) -> bool:
        """Start draining result if it is a sequence. False for scalars."""
        if not _is_sequence(result):
            return False
        from ..resolve import resolve

        self._sub = resolve(typing.cast(Iterable[U], result))
        return True

    def _next(self) -> MaybeAwaitable[Step[U]]:
        while True:
            if self._sub is not None:
                try:
                    sub_step = self._sub.next()
                except Exception as exc:
                    return self._raise(exc)
                if is_awaitable(sub_step):
                    return self._next_async(sub_step=sub_step)
                if not sub_step.done:
                    return sub_step
                self._sub = None

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
                result = self._call(value)
                if is_awaitable(result):
                    return self._next_async(result=result)
                if not self._expand(result):
                    return Step(typing.cast(U, result))
            except Exception as exc:
                return self._raise(exc)

    async def _next_async(
        self,
        *,
        sub_step: Awaitable[Step[U]] = MISSING,
        step: Awaitable[Step[typing.Any]] = MISSING,
        value: Awaitable[T] = MISSING,
        result: Awaitable[object] = MISSING,
    ) -> Step[U]:
        try:
            while True:
                if self._sub is not None:
                    current = await settle(self._sub.next() if sub_step is MISSING else sub_step)
                    sub_step = MISSING
                    if not current.done:
                        return current
                    self._sub = None

                if result is MISSING:
                    if value is MISSING:
                        current = await settle(self.upstream.next() if step is MISSING else step)
                        step = MISSING
                        if current.done:
                            return current
                        value = apply(self.transform, current.value)
                    result = self._call(await settle(value))
                    value = MISSING

                resolved = await settle(result)
                result = MISSING
                if not self._expand(resolved):
                    return Step(typing.cast(U, resolved))
        except Exception as exc:
            await self._raise_async(exc)

    def close(self) -> MaybeAwaitable[Step[U]]:
        if self._closed:
            return DONE
        self._closed = True
        sub, self._sub = self._sub, None
        if sub is None:
            return after(DONE, release(self.upstream))
        return after(DONE, release(sub), release(self.upstream))

    def throw(self, exc: Exception, /) -> Awaitable[None] | None:
        # The sub-sequence being drained hears about exc before upstream does
        if exc is self._reported:
            return None
        self._reported = exc
        sub, self._sub = self._sub, None
        if sub is None:
            return fail(self.upstream, exc)
        return after(None, fail(sub, exc), fail(self.upstream, exc))


__all__ = ("FlatMapHandle",)
