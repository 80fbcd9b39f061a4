"""forEach: drive the source to the end, calling callback(value, index) per element."""

from __future__ import annotations

import logging
import typing
from collections.abc import Awaitable

from .._helpers import MISSING, apply, fail, is_awaitable, reraise, settle
from .._types import Callback, MaybeAwaitable, PullHandle, Transform
from ..step import Step

logger = logging.getLogger(__name__)


def for_each[T](
    handle: PullHandle[typing.Any],
    callback: Callback[T, object],
    transform: Transform[typing.Any, T] | None = None,
) -> MaybeAwaitable[None]:
    index = 0
    while True:
        try:
            step = handle.next()
        except Exception as exc:
            return reraise(fail(handle, exc), exc)

        if is_awaitable(step):
            return _for_each_async(handle, callback, transform, index, step=step)
        if step.done:
            return None

        try:
            value = apply(transform, step.value)
            if is_awaitable(value):
                return _for_each_async(handle, callback, transform, index, value=value)
            outcome = callback(value, index)
        except Exception as exc:
            return reraise(fail(handle, exc), exc)
        index += 1

        if is_awaitable(outcome):
            return _for_each_async(handle, callback, transform, index, outcome=outcome)


async def _for_each_async[T](
    handle: PullHandle[typing.Any],
    callback: Callback[T, object],
    transform: Transform[typing.Any, T] | None,
    index: int,
    *,
    step: Awaitable[Step[typing.Any]] = MISSING,
    value: Awaitable[T] = MISSING,
    outcome: Awaitable[object] = MISSING,
) -> None:
    logger.debug("for_each continuing asynchronously at index %d", index)
    try:
        while True:
            if outcome is MISSING:
                if value is MISSING:
                    current = await settle(handle.next() if step is MISSING else step)
                    step = MISSING
                    if current.done:
                        return
                    value = apply(transform, current.value)
                outcome = callback(await settle(value), index)
                index += 1
            await settle(outcome)
            value = outcome = MISSING
    except Exception as exc:
        await settle(fail(handle, exc))
        raise


__all__ = ("for_each",)
