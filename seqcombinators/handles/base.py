"""
Base handle
===========

Shared plumbing for combinator handles: upstream ownership, the
transform, and the release/fail lifecycle.

Every combinator handle owns exactly one upstream handle. Releasing is a
single call down the chain, guarded so it happens at most once; failure
notification is forwarded at most once per exception object.
"""

from __future__ import annotations

import typing
from collections.abc import Awaitable

from .._helpers import after, apply, fail, is_awaitable, release, reraise
from .._types import MaybeAwaitable, PullHandle, Transform
from ..step import DONE, Step


class BaseHandle[T]:
    """
    Combinator handle over one upstream handle.

    Subclasses implement `_next()`. `next()` short-circuits to DONE once
    the handle has been closed.
    """

    __slots__ = ("upstream", "transform", "_closed", "_reported")

    def __init__(
        self,
        upstream: PullHandle[typing.Any],
        *,
        transform: Transform[typing.Any, typing.Any] | None = None,
    ) -> None:
        self.upstream = upstream
        self.transform = transform
        self._closed = False
        self._reported: Exception | None = None

    def next(self) -> MaybeAwaitable[Step[T]]:
        if self._closed:
            return DONE
        return self._next()

    def _next(self) -> MaybeAwaitable[Step[T]]:
        raise NotImplementedError

    def close(self) -> MaybeAwaitable[Step[T]]:
        """Release upstream (once) and report done."""
        if self._closed:
            return DONE
        self._closed = True
        return after(DONE, release(self.upstream))

    def throw(self, exc: Exception, /) -> Awaitable[None] | None:
        """Forward exc to upstream, unless this handle already did."""
        if exc is self._reported:
            return None
        self._reported = exc
        return fail(self.upstream, exc)

    # Helpers for subclasses

    def _raise(self, exc: Exception) -> typing.Any:
        """Report exc upstream, then re-raise it (possibly from an awaitable)."""
        return reraise(self.throw(exc), exc)

    async def _raise_async(self, exc: Exception) -> typing.NoReturn:
        pending = self.throw(exc)
        if pending is not None:
            await pending
        raise exc

    def _emit(self, raw: typing.Any) -> MaybeAwaitable[Step[T]]:
        """Apply the transform to raw and wrap it in a step."""
        try:
            value = apply(self.transform, raw)
        except Exception as exc:
            return self._raise(exc)
        if is_awaitable(value):
            return self._emit_async(value)
        return Step(value)

    async def _emit_async(self, pending: Awaitable[T]) -> Step[T]:
        try:
            value = await pending
        except Exception as exc:
            await self._raise_async(exc)
        return Step(value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.upstream!r})"


__all__ = ("BaseHandle",)
