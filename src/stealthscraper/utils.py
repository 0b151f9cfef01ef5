"""Timing and batching helpers shared by the scraper facade."""

from __future__ import annotations

import asyncio
import math
import random
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


async def wait(time_ms: float) -> None:
    """Suspend the current task for *time_ms* milliseconds."""
    await asyncio.sleep(time_ms / 1000)


def random_wait_ms(min_ms: int, max_ms: int) -> int:
    """Draw a wait duration in milliseconds.

    The draw is ``min_ms + floor(random() * max_ms)``, so the result lies in
    ``[min_ms, min_ms + max_ms)`` rather than ``[min_ms, max_ms)``. Callers
    that pass (2000, 4000) therefore wait between 2 and 6 seconds.
    """
    return min_ms + math.floor(random.random() * max_ms)


async def wait_random(min_ms: int, max_ms: int) -> int:
    """Wait a random amount of time and return the milliseconds waited."""
    time_ms = random_wait_ms(min_ms, max_ms)
    await wait(time_ms)
    return time_ms


def array_chunk(items: Sequence[T], chunk_size: int) -> list[list[T]]:
    """Group *items* into contiguous chunks of *chunk_size*.

    The last chunk may be shorter; an empty input yields no chunks.

    Raises:
        ValueError: If *chunk_size* is lower than 1.
    """
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")
    return [list(items[i : i + chunk_size]) for i in range(0, len(items), chunk_size)]
