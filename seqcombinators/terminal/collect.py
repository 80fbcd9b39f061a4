"""to_list: drain the sequence into a list, then release the source."""

from __future__ import annotations

import logging
import typing
from collections.abc import Awaitable

from .._helpers import MISSING, after, apply, fail, is_awaitable, release, reraise, settle
from .._types import MaybeAwaitable, PullHandle, Transform
from ..step import Step

logger = logging.getLogger(__name__)


def to_list[T](
    handle: PullHandle[typing.Any],
    transform: Transform[typing.Any, T] | None = None,
) -> MaybeAwaitable[list[T]]:
    items: list[T] = []
    while True:
        try:
            step = handle.next()
        except Exception as exc:
            return reraise(fail(handle, exc), exc)

        if is_awaitable(step):
            return _to_list_async(handle, transform, items, step=step)
        if step.done:
            return after(items, release(handle))

        try:
            value = apply(transform, step.value)
        except Exception as exc:
            return reraise(fail(handle, exc), exc)
        if is_awaitable(value):
            return _to_list_async(handle, transform, items, value=value)
        items.append(value)


async def _to_list_async[T](
    handle: PullHandle[typing.Any],
    transform: Transform[typing.Any, T] | None,
    items: list[T],
    *,
    step: Awaitable[Step[typing.Any]] = MISSING,
    value: Awaitable[T] = MISSING,
) -> list[T]:
    logger.debug("to_list continuing asynchronously after %d items", len(items))
    try:
        while True:
            if value is MISSING:
                current = await settle(handle.next() if step is MISSING else step)
                step = MISSING
                if current.done:
                    break
                value = apply(transform, current.value)
            items.append(await settle(value))
            value = MISSING
    except Exception as exc:
        await settle(fail(handle, exc))
        raise
    await settle(release(handle))
    return items


__all__ = ("to_list",)
