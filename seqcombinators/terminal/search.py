"""
Search operations
=================

every / some / find share one engine: pull until the callback's verdict
matches `stop_on`, release the source on that match, and report what
was found. A source exhausted naturally is not released.
"""

from __future__ import annotations

import logging
import typing
from collections.abc import Awaitable

from .._helpers import MISSING, after, apply, fail, is_awaitable, release, reraise, settle, then
from .._types import Callback, MaybeAwaitable, PullHandle, Transform
from ..step import Step

logger = logging.getLogger(__name__)


class Match(typing.NamedTuple):
    found: bool
    value: typing.Any = None


NO_MATCH = Match(False)


def search[T](
    handle: PullHandle[typing.Any],
    callback: Callback[T, object],
    transform: Transform[typing.Any, T] | None = None,
    *,
    stop_on: bool,
) -> MaybeAwaitable[Match]:
    """Find the first element whose verdict is `stop_on`. Sync until something is awaitable."""
    index = 0
    while True:
        try:
            step = handle.next()
        except Exception as exc:
            return reraise(fail(handle, exc), exc)

        if is_awaitable(step):
            return _search_async(handle, callback, transform, stop_on, index, step=step)
        if step.done:
            return NO_MATCH

        try:
            value = apply(transform, step.value)
            if is_awaitable(value):
                return _search_async(handle, callback, transform, stop_on, index, value=value)
            verdict = callback(value, index)
        except Exception as exc:
            return reraise(fail(handle, exc), exc)
        index += 1

        if is_awaitable(verdict):
            return _search_async(handle, callback, transform, stop_on, index, value=value, verdict=verdict)
        if bool(verdict) is stop_on:
            return after(Match(True, value), release(handle))


async def _search_async[T](
    handle: PullHandle[typing.Any],
    callback: Callback[T, object],
    transform: Transform[typing.Any, T] | None,
    stop_on: bool,
    index: int,
    *,
    step: Awaitable[Step[typing.Any]] = MISSING,
    value: T | Awaitable[T] = MISSING,
    verdict: Awaitable[object] = MISSING,
) -> Match:
    logger.debug("search continuing asynchronously at index %d", index)
    try:
        while True:
            if verdict is MISSING:
                if value is MISSING:
                    current = await settle(handle.next() if step is MISSING else step)
                    step = MISSING
                    if current.done:
                        return NO_MATCH
                    value = apply(transform, current.value)
                value = await settle(value)
                verdict = callback(value, index)
                index += 1
            if bool(await settle(verdict)) is stop_on:
                break
            value = verdict = MISSING
    except Exception as exc:
        await settle(fail(handle, exc))
        raise
    await settle(release(handle))
    return Match(True, value)


# ============================================================================
# Sugar
# ============================================================================


def every[T](
    handle: PullHandle[typing.Any],
    callback: Callback[T, object],
    transform: Transform[typing.Any, T] | None = None,
) -> MaybeAwaitable[bool]:
    """True unless some element fails the callback. Empty -> True."""
    return then(search(handle, callback, transform, stop_on=False), lambda m: not m.found)


def some[T](
    handle: PullHandle[typing.Any],
    callback: Callback[T, object],
    transform: Transform[typing.Any, T] | None = None,
) -> MaybeAwaitable[bool]:
    """True as soon as one element passes the callback. Empty -> False."""
    return then(search(handle, callback, transform, stop_on=True), lambda m: m.found)


def find[T](
    handle: PullHandle[typing.Any],
    callback: Callback[T, object],
    transform: Transform[typing.Any, T] | None = None,
) -> MaybeAwaitable[T | None]:
    """First element passing the callback, or None."""
    return then(search(handle, callback, transform, stop_on=True), lambda m: m.value)


__all__ = ("Match", "every", "find", "search", "some")
