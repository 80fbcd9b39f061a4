from __future__ import annotations


class NotIterableError(TypeError):
    """Source matches none of the shapes the resolver understands."""

    source: object

    def __init__(self, source: object) -> None:
        self.source = source
        super().__init__("Argument is not iterable")


class EmptyReduceError(TypeError):
    """reduce() reached the end without a single element to seed from."""

    def __init__(self) -> None:
        super().__init__("Reduce of empty iterable with no initial value")


class SyncIterationError(TypeError):
    """Plain `for` loop hit a step that has to be awaited."""

    source: object

    def __init__(self, source: object) -> None:
        self.source = source
        super().__init__(
            f"{type(source).__name__} produced an awaitable step; use 'async for' instead"
        )


__all__ = ("EmptyReduceError", "NotIterableError", "SyncIterationError")
