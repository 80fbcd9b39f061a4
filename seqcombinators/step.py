"""
Step - one pull result
======================

A step is either a produced value or the end marker. Every handle,
adapter and terminal operation speaks in steps.
"""

from __future__ import annotations

import typing
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Step[T]:
    """
    Result of a single pull.

    Example:
        Step(1)            # produced 1
        Step(done=True)    # exhausted (see DONE)
    """

    value: T | None = None
    done: bool = False


# Shared end marker. A handle that reported DONE keeps reporting it.
DONE: Step[typing.Any] = Step(done=True)


__all__ = ("DONE", "Step")
