"""Internal helpers for seqcombinators.

Small building blocks shared by every handle and terminal operation:
awaitable detection, the release/fail lifecycle calls, and argument
validation. Not part of the public API."""

from __future__ import annotations

import inspect
import logging
import typing
from collections.abc import Awaitable, Callable

from ._types import Transform

logger = logging.getLogger(__name__)


class _Missing:
    """Marker for "no value" where None is a legitimate value."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"


MISSING: typing.Any = _Missing()


# Identity function
def identity[T](x: T) -> T:
    """Identity function: returns its argument unchanged."""
    return x


def is_awaitable(value: object) -> bool:
    return inspect.isawaitable(value)


def apply[A, T](transform: Transform[A, T] | None, raw: A) -> T | Awaitable[T]:
    """Apply the wrapper transform, if any, to one raw element."""
    if transform is None:
        return typing.cast(T, raw)
    return transform(raw)


async def settle[T](value: T | Awaitable[T]) -> T:
    """Await value if it is awaitable, otherwise return it as is."""
    if inspect.isawaitable(value):
        return await value
    return value


def after[T](result: T, *pending: object) -> T | Awaitable[T]:
    """
    Return result once every awaitable in pending has completed.

    Stays synchronous when nothing in pending needs awaiting.
    """
    waiting = [p for p in pending if inspect.isawaitable(p)]
    if not waiting:
        return result
    return _after(result, waiting)


async def _after[T](result: T, waiting: list[typing.Any]) -> T:
    for p in waiting:
        await p
    return result


def then[T, U](value: T | Awaitable[T], f: Callable[[T], U]) -> U | Awaitable[U]:
    """Apply f now, or once value has been awaited."""
    if inspect.isawaitable(value):
        return _then(value, f)
    return f(value)


async def _then[T, U](value: Awaitable[T], f: Callable[[T], U]) -> U:
    return f(await value)


def discard(value: object) -> None:
    """Close a coroutine nobody is going to await."""
    if inspect.iscoroutine(value):
        value.close()


# ============================================================================
# Lifecycle: release / fail
# ============================================================================


def release(handle: object) -> object:
    """
    Ask handle to release its resources early.

    Returns whatever the handle's close() returned (possibly awaitable),
    or None when the handle has nothing to release.
    """
    close = getattr(handle, "close", None)
    if close is None:
        return None
    logger.debug("releasing %s", type(handle).__name__)
    return close()


def fail(handle: object, exc: Exception) -> Awaitable[None] | None:
    """
    Best-effort notification of handle about exc.

    The caller re-raises exc afterwards, so anything throw() raises here
    is only logged. Returns an awaitable when the notification is async.
    Whatever throw() returns is dropped, including a value a generator
    yields after catching exc.
    """
    throw = getattr(handle, "throw", None)
    if throw is None:
        return None
    logger.debug("notifying %s of %r", type(handle).__name__, exc)
    try:
        result = throw(exc)
    except Exception as err:
        _log_throw_error(handle, exc, err)
        return None
    if inspect.isawaitable(result):
        return _absorb(handle, exc, result)
    return None


async def _absorb(handle: object, exc: Exception, pending: Awaitable[object]) -> None:
    try:
        await pending
    except Exception as err:
        _log_throw_error(handle, exc, err)


def _log_throw_error(handle: object, exc: Exception, err: Exception) -> None:
    # A source re-raising the error it was handed is the normal outcome
    if err is not exc and not isinstance(err, (StopIteration, StopAsyncIteration)):
        logger.debug("throw() on %s raised %r while handling %r", type(handle).__name__, err, exc)


def reraise(pending: Awaitable[None] | None, exc: Exception) -> typing.Any:
    """
    Raise exc, after pending has been awaited when there is one.

    Returns an awaitable that raises exc when pending is async, so the
    caller's result switches to async mode like any other step.
    """
    if pending is None:
        raise exc
    return _reraise(pending, exc)


async def _reraise(pending: Awaitable[None], exc: Exception) -> typing.NoReturn:
    await pending
    raise exc


# ============================================================================
# Argument validation
# ============================================================================


def check_callback(callback: object, *, optional: bool = False) -> None:
    if optional and callback is None:
        return
    if not callable(callback):
        raise TypeError("Callback is not a function")


def check_count(value: object, label: str) -> int:
    """Validate a non-negative integer argument such as a limit or index."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{label} is not a number")
    if value < 0:
        raise ValueError(f"{label} must be a positive number")
    return value


__all__ = (
    "MISSING",
    "after",
    "apply",
    "check_callback",
    "check_count",
    "discard",
    "fail",
    "identity",
    "is_awaitable",
    "release",
    "reraise",
    "settle",
    "then",
)
