"""
Reduce
======

Fold the sequence into one accumulator with callback(acc, value, index).
Without an initial value the first element seeds the accumulator and the
callback starts at index 1. The source is always drained, never released.
"""

from __future__ import annotations

import logging
import typing
from collections.abc import Awaitable

from .._errors import EmptyReduceError
from .._helpers import MISSING, apply, fail, is_awaitable, reraise, settle
from .._types import MaybeAwaitable, PullHandle, Reducer, Transform
from ..step import Step

logger = logging.getLogger(__name__)


def reduce[A, T](
    handle: PullHandle[typing.Any],
    callback: Reducer[A, T],
    transform: Transform[typing.Any, T] | None = None,
    initial: A = MISSING,
) -> MaybeAwaitable[A]:
    acc: typing.Any = initial
    index = 0
    while True:
        try:
            step = handle.next()
        except Exception as exc:
            return reraise(fail(handle, exc), exc)

        if is_awaitable(step):
            return _reduce_async(handle, callback, transform, index, acc, step=step)
        if step.done:
            if acc is MISSING:
                raise EmptyReduceError()
            return acc

        try:
            value = apply(transform, step.value)
            if is_awaitable(value):
                return _reduce_async(handle, callback, transform, index, acc, value=value)
            acc = value if acc is MISSING else callback(acc, value, index)
        except Exception as exc:
            return reraise(fail(handle, exc), exc)
        index += 1

        if is_awaitable(acc):
            return _reduce_async(handle, callback, transform, index, acc)


async def _reduce_async[A, T](
    handle: PullHandle[typing.Any],
    callback: Reducer[A, T],
    transform: Transform[typing.Any, T] | None,
    index: int,
    acc: typing.Any,
    *,
    step: Awaitable[Step[typing.Any]] = MISSING,
    value: Awaitable[T] = MISSING,
) -> A:
    logger.debug("reduce continuing asynchronously at index %d", index)
    try:
        acc = await settle(acc)
        while True:
            if value is MISSING:
                current = await settle(handle.next() if step is MISSING else step)
                step = MISSING
                if current.done:
                    break
                value = apply(transform, current.value)
            value = await settle(value)
            acc = value if acc is MISSING else await settle(callback(acc, value, index))
            index += 1
            value = MISSING
    except Exception as exc:
        await settle(fail(handle, exc))
        raise

    if acc is MISSING:
        raise EmptyReduceError()
    return acc


__all__ = ("reduce",)
