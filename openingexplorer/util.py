"""Small helpers shared across the package."""

from __future__ import annotations

import asyncio
import heapq
from dataclasses import dataclass
from typing import Any, AsyncIterable, AsyncIterator, Callable, Generic, TypeVar

from openingexplorer.uci import Color

T = TypeVar("T")
R = TypeVar("R")

_UNSET: Any = object()


@dataclass
class ByColor(Generic[T]):
    """One value for each color."""

    white: T
    black: T

    def get(self, color: Color) -> T:
        return self.white if color is Color.WHITE else self.black


def sort_by_key_and_truncate(items: list[T], num: int, key: Callable[[T], Any]) -> None:
    """Keep only the ``num`` smallest items by ``key``, in ascending order, in place."""
    items[:] = heapq.nsmallest(num, items, key=key)


def midpoint(a: int, b: int) -> int:
    return (a + b) // 2


async def dedup_by_key(stream: AsyncIterable[T], key: Callable[[T], Any]) -> AsyncIterator[T]:
    """Yield items from ``stream``, skipping those whose key equals the previous one."""
    latest = _UNSET
    async for item in stream:
        current = key(item)
        if latest is _UNSET or current != latest:
            yield item
        latest = current


async def spawn_blocking(semaphore: asyncio.Semaphore, func: Callable[[], R]) -> R:
    """Run ``func`` in a worker thread while holding a permit of ``semaphore``."""
    async with semaphore:
        return await asyncio.to_thread(func)