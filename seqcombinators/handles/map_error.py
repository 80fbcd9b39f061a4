"""MapError handles

Turn errors raised while pulling upstream into emitted values, so
enumeration carries on with the next pull instead of stopping."""

from __future__ import annotations

import typing
from collections.abc import Awaitable

from kungfu import Error, Ok, Result

from .._helpers import MISSING, apply, is_awaitable, settle
from .._types import ErrorMapper, MaybeAwaitable, PullHandle, Transform
from ..step import Step
from .base import BaseHandle


class MapErrorHandle[T, R](BaseHandle[T | R]):
    """
    Emit caught errors instead of raising them.

    With on_error, its result (awaited if needed) is emitted in place
    of the error; without it the exception object itself is emitted.
    Errors raised by on_error propagate.
    """

    __slots__ = ("on_error",)

    def __init__(
        self,
        upstream: PullHandle[typing.Any],
        on_error: ErrorMapper[R] | None = None,
        *,
        transform: Transform[typing.Any, T] | None = None,
    ) -> None:
        super().__init__(upstream, transform=transform)
        self.on_error = on_error

    # Hooks (overridden by ResultHandle)

    def _wrap_value(self, value: typing.Any) -> typing.Any:
        return value

    def _wrap_error(self, error: typing.Any) -> typing.Any:
        return error

    def _next(self) -> MaybeAwaitable[Step[T | R]]:
        try:
            step = self.upstream.next()
            if is_awaitable(step):
                return self._next_async(step=step)
            if step.done:
                return step
            value = apply(self.transform, step.value)
        except Exception as exc:
            return self._convert(exc)

        if is_awaitable(value):
            return self._next_async(value=value)
        return Step(self._wrap_value(value))

    async def _next_async(
        self,
        *,
        step: Awaitable[Step[typing.Any]] = MISSING,
        value: Awaitable[T] = MISSING,
    ) -> Step[T | R]:
        try:
            if value is MISSING:
                current = await step
                if current.done:
                    return current
                value = apply(self.transform, current.value)
            resolved = await settle(value)
        except Exception as exc:
            return await settle(self._convert(exc))
        return Step(self._wrap_value(resolved))

    def _convert(self, exc: Exception) -> MaybeAwaitable[Step[T | R]]:
        if self.on_error is None:
            return Step(self._wrap_error(exc))
        try:
            replacement = self.on_error(exc)
        except Exception as err:
            return self._raise(err)
        if is_awaitable(replacement):
            return self._convert_async(replacement)
        return Step(self._wrap_error(replacement))

    async def _convert_async(self, pending: Awaitable[R]) -> Step[T | R]:
        try:
            replacement = await pending
        except Exception as err:
            await self._raise_async(err)
        return Step(self._wrap_error(replacement))


class ResultHandle[T, E](MapErrorHandle[T, E]):
    """MapError with typed output: Ok(value) per element, Error(...) per caught error."""

    __slots__ = ()

    def _wrap_value(self, value: typing.Any) -> Result[T, E]:
        return Ok(value)

    def _wrap_error(self, error: typing.Any) -> Result[T, E]:
        return Error(error)


__all__ = ("MapErrorHandle", "ResultHandle")
