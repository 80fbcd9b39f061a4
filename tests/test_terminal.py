"""Tests for terminal operations: every, some, find, for_each, reduce, to_list, at."""

from __future__ import annotations

import inspect

import pytest

from seqcombinators import EmptyReduceError, ExtendedIterable

from .helpers import AsyncTrackingHandle, Boom, MixedHandle, TrackingHandle, agen, later


class TestEveryAndSome:
    """Short-circuit on the first deciding element, releasing only then."""

    def test_every_empty_is_true(self) -> None:
        source = TrackingHandle([])
        assert ExtendedIterable(source).every(lambda x, i: False) is True
        assert source.closed == 0

    def test_every_all_pass(self) -> None:
        source = TrackingHandle([1, 2, 3])
        assert ExtendedIterable(source).every(lambda x, i: x > 0) is True
        assert source.closed == 0

    def test_every_stops_on_first_failure(self) -> None:
        source = TrackingHandle([1, 2, 3])
        assert ExtendedIterable(source).every(lambda x, i: x < 2) is False
        assert source.pulled == 2
        assert source.closed == 1

    def test_some_empty_is_false(self) -> None:
        source = TrackingHandle([])
        assert ExtendedIterable(source).some(lambda x, i: True) is False
        assert source.closed == 0

    def test_some_stops_on_first_match(self) -> None:
        source = TrackingHandle([1, 2, 3])
        assert ExtendedIterable(source).some(lambda x, i: x == 2) is True
        assert source.pulled == 2
        assert source.closed == 1

    def test_some_without_match(self) -> None:
        source = TrackingHandle([1, 2, 3])
        assert ExtendedIterable(source).some(lambda x, i: x > 5) is False
        assert source.closed == 0

    def test_callback_is_validated(self) -> None:
        with pytest.raises(TypeError, match="Callback is not a function"):
            ExtendedIterable([1]).every(None)
        with pytest.raises(TypeError, match="Callback is not a function"):
            ExtendedIterable([1]).some(None)

    @pytest.mark.asyncio
    async def test_async_predicate(self) -> None:
        result = ExtendedIterable([1, 2, 3]).every(lambda x, i: later(x < 3))
        assert inspect.isawaitable(result)
        assert await result is False

    @pytest.mark.asyncio
    async def test_async_source_released_once(self) -> None:
        source = AsyncTrackingHandle([1, 2, 3])
        assert await ExtendedIterable(source).some(lambda x, i: x == 1) is True
        assert source.closed == 1


class TestFind:
    """find returns the first matching transformed element, or None."""

    def test_found(self) -> None:
        source = TrackingHandle([1, 2, 3])
        assert ExtendedIterable(source).find(lambda x, i: x > 1) == 2
        assert source.closed == 1

    def test_not_found(self) -> None:
        source = TrackingHandle([1, 2, 3])
        assert ExtendedIterable(source).find(lambda x, i: x > 5) is None
        assert source.closed == 0

    def test_returns_transformed_element(self) -> None:
        assert ExtendedIterable([1, 2, 3], lambda x: x * 10).find(lambda x, i: x > 15) == 20

    def test_callback_error_reported(self) -> None:
        source = TrackingHandle([1, 2])

        def explode(x: int, i: int) -> bool:
            raise Boom("find")

        with pytest.raises(Boom):
            ExtendedIterable(source).find(explode)
        assert len(source.thrown) == 1
        assert source.closed == 0

    @pytest.mark.asyncio
    async def test_async_source(self) -> None:
        assert await ExtendedIterable(agen("abc")).find(lambda x, i: i == 2) == "c"


class TestForEach:
    """for_each drains the whole sequence and never releases it."""

    def test_visits_in_order(self) -> None:
        source = TrackingHandle("xyz")
        seen = []
        assert ExtendedIterable(source).for_each(lambda x, i: seen.append((x, i))) is None
        assert seen == [("x", 0), ("y", 1), ("z", 2)]
        assert source.closed == 0

    def test_callback_is_validated(self) -> None:
        with pytest.raises(TypeError, match="Callback is not a function"):
            ExtendedIterable([1]).for_each([])

    def test_callback_error_propagates(self) -> None:
        source = TrackingHandle([1, 2])

        def explode(x: int, i: int) -> None:
            raise Boom("for_each")

        with pytest.raises(Boom, match="for_each"):
            ExtendedIterable(source).for_each(explode)
        assert len(source.thrown) == 1

    @pytest.mark.asyncio
    async def test_async_callback_keeps_order(self) -> None:
        seen = []

        async def record(x: int, i: int) -> None:
            await later(None)
            seen.append(x)

        result = ExtendedIterable([1, 2, 3]).for_each(record)
        assert inspect.isawaitable(result)
        assert await result is None
        assert seen == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_mixed_source(self) -> None:
        seen = []
        result = ExtendedIterable(MixedHandle([1, 2, 3], async_at=[1])).for_each(lambda x, i: seen.append(x))
        await result
        assert seen == [1, 2, 3]


class TestReduce:
    """reduce folds left, seeding from the first element when no initial value is given."""

    def test_with_initial(self) -> None:
        assert ExtendedIterable([1, 2, 3]).reduce(lambda a, b, i: a + b, 0) == 6

    def test_without_initial(self) -> None:
        indices = []

        def add(a: int, b: int, i: int) -> int:
            indices.append(i)
            return a + b

        assert ExtendedIterable([1, 2, 3]).reduce(add) == 6
        assert indices == [1, 2]

    def test_initial_starts_index_at_zero(self) -> None:
        assert ExtendedIterable("ab").reduce(lambda acc, x, i: [*acc, i], []) == [0, 1]

    def test_empty_without_initial(self) -> None:
        with pytest.raises(EmptyReduceError, match="Reduce of empty iterable with no initial value"):
            ExtendedIterable([]).reduce(lambda a, b, i: a + b)

    def test_empty_with_initial(self) -> None:
        assert ExtendedIterable([]).reduce(lambda a, b, i: a + b, 0) == 0

    def test_none_is_a_valid_initial(self) -> None:
        assert ExtendedIterable([1]).reduce(lambda a, b, i: (a, b), None) == (None, 1)

    def test_never_releases(self) -> None:
        source = TrackingHandle([1, 2])
        ExtendedIterable(source).reduce(lambda a, b, i: a + b)
        assert source.closed == 0

    def test_callback_is_validated(self) -> None:
        with pytest.raises(TypeError, match="Callback is not a function"):
            ExtendedIterable([1]).reduce(1)

    @pytest.mark.asyncio
    async def test_async_empty_without_initial(self) -> None:
        result = ExtendedIterable(agen([])).reduce(lambda a, b, i: a + b)
        with pytest.raises(EmptyReduceError):
            await result

    @pytest.mark.asyncio
    async def test_async_reducer(self) -> None:
        async def add(a: int, b: int, i: int) -> int:
            return await later(a + b)

        assert await ExtendedIterable(range(5)).reduce(add, 10) == 20


class TestToListAndAt:
    """to_list and at release the source once they finish."""

    def test_to_list_releases(self) -> None:
        source = TrackingHandle([1, 2])
        assert ExtendedIterable(source).to_list() == [1, 2]
        assert source.closed == 1

    def test_to_list_empty(self) -> None:
        assert ExtendedIterable([]).to_list() == []

    def test_to_list_is_sync_for_sync_data(self) -> None:
        assert isinstance(ExtendedIterable([1]).map(lambda x, i: x).to_list(), list)

    def test_at_found(self) -> None:
        source = TrackingHandle([1, 2, 3])
        assert ExtendedIterable(source).at(1) == 2
        assert source.closed == 1

    def test_at_past_end(self) -> None:
        source = TrackingHandle([1, 2, 3])
        assert ExtendedIterable(source).at(5) is None
        assert source.closed == 1

    def test_at_transforms_only_target(self) -> None:
        seen = []
        iterable = ExtendedIterable([1, 2, 3], lambda x: seen.append(x) or x * 10)
        assert iterable.at(2) == 30
        assert seen == [3]

    @pytest.mark.parametrize(
        ("index", "error", "message"),
        [
            (1.5, TypeError, "index is not a number"),
            (-1, ValueError, "index must be a positive number"),
        ],
    )
    def test_at_validation(self, index: object, error: type[Exception], message: str) -> None:
        with pytest.raises(error, match=message):
            ExtendedIterable([1]).at(index)

    @pytest.mark.asyncio
    async def test_async_to_list(self) -> None:
        source = AsyncTrackingHandle([1, 2])
        assert await ExtendedIterable(source).to_list() == [1, 2]
        assert source.closed == 1

    @pytest.mark.asyncio
    async def test_async_at(self) -> None:
        source = AsyncTrackingHandle([1, 2, 3])
        assert await ExtendedIterable(source).at(1) == 2
        assert source.closed == 1

    @pytest.mark.asyncio
    async def test_async_at_past_end(self) -> None:
        assert await ExtendedIterable(agen([1])).at(3) is None
