"""
Bridge from raising terminal operations to kungfu results.

Terminal operations raise on failure and may return a plain value or an
awaitable. `catching` runs one inside a LazyCoroResult, so the outcome
composes with Result-based code instead of propagating.

Example:
    from seqcombinators import ExtendedIterable, lift

    numbers = ExtendedIterable(fetch_numbers()).map(parse)
    result = await lift.catching(numbers.to_list)
    match result:
        case Ok(items): ...
        case Error(exc): ...
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from kungfu import Error, LazyCoroResult, Ok, Result

from ._helpers import identity, settle


def catching[T, E](
    thunk: Callable[[], T | Awaitable[T]],
    *,
    on_error: Callable[[Exception], E] = identity,
) -> LazyCoroResult[T, E]:
    """
    Run thunk lazily, awaiting its result if needed.

    Ok(value) on success, Error(on_error(exc)) when it raises or its
    awaitable fails. Nothing runs until the LazyCoroResult is awaited.

    NOTE: Catches all Exception subclasses. For specific exceptions,
          filter in on_error.
    """

    async def run() -> Result[T, E]:
        try:
            return Ok(await settle(thunk()))
        except Exception as exc:
            return Error(on_error(exc))

    return LazyCoroResult(run)


__all__ = ("catching",)
