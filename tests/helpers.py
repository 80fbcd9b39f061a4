"""Shared sources for the test suite: pull handles that count what happens to them."""

from __future__ import annotations

import asyncio
import typing
from collections.abc import AsyncIterator, Iterable

from kungfu import Error, Ok, Result

from seqcombinators import DONE, Step


class Boom(Exception):
    """Error raised on purpose by test sources and callbacks."""


class TrackingHandle:
    """
    Sync pull handle over a list.

    Counts pulls, close() calls and throw() notifications. `fail_at`
    makes the pull at that position raise `error` instead.
    """

    def __init__(
        self,
        items: Iterable[typing.Any] = (),
        *,
        fail_at: int | None = None,
        error: Exception | None = None,
    ) -> None:
        self.items = list(items)
        self.position = 0
        self.pulled = 0
        self.closed = 0
        self.thrown: list[Exception] = []
        self.fail_at = fail_at
        self.error = error or Boom("boom")

    def _step(self) -> Step[typing.Any]:
        if self.position >= len(self.items):
            return DONE
        position = self.position
        self.position += 1
        self.pulled += 1
        if position == self.fail_at:
            raise self.error
        return Step(self.items[position])

    def next(self) -> Step[typing.Any] | typing.Awaitable[Step[typing.Any]]:
        return self._step()

    def close(self) -> Step[typing.Any] | typing.Awaitable[Step[typing.Any]]:
        self.closed += 1
        return DONE

    def throw(self, exc: Exception) -> typing.Any:
        self.thrown.append(exc)


class AsyncTrackingHandle(TrackingHandle):
    """Same as TrackingHandle, but next() and close() return awaitables."""

    def next(self) -> typing.Awaitable[Step[typing.Any]]:
        return self._pull()

    async def _pull(self) -> Step[typing.Any]:
        await asyncio.sleep(0)
        return self._step()

    def close(self) -> typing.Awaitable[Step[typing.Any]]:
        return self._close()

    async def _close(self) -> Step[typing.Any]:
        await asyncio.sleep(0)
        self.closed += 1
        return DONE


class SyncNextAsyncCloseHandle(TrackingHandle):
    """Immediate steps, but close() and throw() return awaitables."""

    def close(self) -> typing.Awaitable[Step[typing.Any]]:
        return self._close()

    async def _close(self) -> Step[typing.Any]:
        await asyncio.sleep(0)
        self.closed += 1
        return DONE

    def throw(self, exc: Exception) -> typing.Any:
        return self._throw(exc)

    async def _throw(self, exc: Exception) -> None:
        await asyncio.sleep(0)
        self.thrown.append(exc)


class MixedHandle(TrackingHandle):
    """Sync pull handle whose steps at `async_at` positions come back as awaitables."""

    def __init__(self, items: Iterable[typing.Any] = (), *, async_at: Iterable[int] = ()) -> None:
        super().__init__(items)
        self.async_at = set(async_at)

    def next(self) -> Step[typing.Any] | typing.Awaitable[Step[typing.Any]]:
        if self.position in self.async_at:
            return later(self._step())
        return self._step()


async def later[T](value: T) -> T:
    """Value after one trip through the event loop."""
    await asyncio.sleep(0)
    return value


async def agen[T](items: Iterable[T]) -> AsyncIterator[T]:
    for item in items:
        await asyncio.sleep(0)
        yield item


def unpack[T, E](result: Result[T, E]) -> tuple[str, T | E]:
    match result:
        case Ok(value):
            return ("ok", value)
        case Error(error):
            return ("error", error)
    raise AssertionError(f"not a Result: {result!r}")
