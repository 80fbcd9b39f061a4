"""at: element at a zero-based position, or None past the end.

Elements before the position are pulled but not transformed. The source
is released once the lookup finishes, found or not."""

from __future__ import annotations

import logging
import typing
from collections.abc import Awaitable

from .._helpers import MISSING, after, apply, fail, is_awaitable, release, reraise, settle
from .._types import MaybeAwaitable, PullHandle, Transform
from ..step import Step

logger = logging.getLogger(__name__)


def at[T](
    handle: PullHandle[typing.Any],
    index: int,
    transform: Transform[typing.Any, T] | None = None,
) -> MaybeAwaitable[T | None]:
    position = 0
    while True:
        try:
            step = handle.next()
        except Exception as exc:
            return reraise(fail(handle, exc), exc)

        if is_awaitable(step):
            return _at_async(handle, index, transform, position, step=step)
        if step.done:
            return after(None, release(handle))
        if position < index:
            position += 1
            continue

        try:
            value = apply(transform, step.value)
        except Exception as exc:
            return reraise(fail(handle, exc), exc)
        if is_awaitable(value):
            return _at_async(handle, index, transform, position, value=value)
        return after(value, release(handle))


async def _at_async[T](
    handle: PullHandle[typing.Any],
    index: int,
    transform: Transform[typing.Any, T] | None,
    position: int,
    *,
    step: Awaitable[Step[typing.Any]] = MISSING,
    value: Awaitable[T] = MISSING,
) -> T | None:
    logger.debug("at(%d) continuing asynchronously at position %d", index, position)
    result: T | None = None
    try:
        while value is MISSING:
            current = await settle(handle.next() if step is MISSING else step)
            step = MISSING
            if current.done:
                break
            if position < index:
                position += 1
                continue
            value = apply(transform, current.value)
        if value is not MISSING:
            result = await settle(value)
    except Exception as exc:
        await settle(fail(handle, exc))
        raise
    await settle(release(handle))
    return result


__all__ = ("at",)
