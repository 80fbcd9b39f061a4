"""Slice handle

slice(start, end) is drop(start) capped by take(end - start): the
skipping of drop and the early release of take, in one handle chain."""

from __future__ import annotations

import typing

from .._types import PullHandle, Transform
from .drop import DropHandle
from .map import MapHandle
from .take import TakeHandle


def slice_handle[T](
    upstream: PullHandle[typing.Any],
    start: int,
    end: int | None,
    *,
    transform: Transform[typing.Any, T] | None = None,
) -> PullHandle[T]:
    """
    Build the handle for elements [start, end) of upstream.

    The transform is applied by the outermost handle only, so skipped
    elements are never transformed. Callers handle start >= end.
    """
    if end is not None:
        inner = DropHandle(upstream, start) if start else upstream
        return TakeHandle(inner, end - start, transform=transform)
    if start:
        return DropHandle(upstream, start, transform=transform)
    return MapHandle(upstream, transform=transform)


__all__ = ("slice_handle",)
