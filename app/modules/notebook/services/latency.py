"""
Simulated network latency for demo mode, and the cancellation token shared
with the real backend client.
"""

from __future__ import annotations

import asyncio
import contextlib
import random
import time
from dataclasses import dataclass
from typing import Awaitable, Optional, TypeVar

from app.modules.notebook.errors import RequestCancelled

T = TypeVar("T")


class CancellationToken:
    """Lets a caller abandon a pending call. Once cancelled, stays cancelled."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise RequestCancelled("Request was cancelled")

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless the token fires first, in which case it is discarded."""
        if self.cancelled:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            self.raise_if_cancelled()
        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            waiter.cancel()

        if task.done():
            return task.result()

        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        raise RequestCancelled("Request was cancelled")

    async def wait(self, delay: float) -> None:
        await self.run(asyncio.sleep(delay))


def draw_delay(low: float, high: Optional[float] = None) -> float:
    """Uniform delay in [low, high); a fixed delay when high is omitted or equal to low."""
    if high is None or high <= low:
        return low
    return low + random.random() * (high - low)


async def simulate_latency(
    low: float,
    high: Optional[float] = None,
    token: Optional[CancellationToken] = None,
) -> float:
    """Sleep for a drawn delay without blocking the loop and return the elapsed seconds."""
    delay = draw_delay(low, high)
    started = time.monotonic()
    if token is not None:
        await token.wait(delay)
    else:
        await asyncio.sleep(delay)
    return time.monotonic() - started


@dataclass(frozen=True)
class LatencyProfile:
    chat_min: float = 1.0
    chat_max: float = 2.0
    health: float = 0.3
    listing: float = 0.2
    indexing: float = 3.0

    @classmethod
    def from_settings(cls, settings) -> "LatencyProfile":
        return cls(
            chat_min=settings.DEMO_CHAT_LATENCY_MIN_S,
            chat_max=settings.DEMO_CHAT_LATENCY_MAX_S,
            health=settings.DEMO_HEALTH_LATENCY_S,
            listing=settings.DEMO_LIST_LATENCY_S,
            indexing=settings.DEMO_INDEX_LATENCY_S,
        )

    @classmethod
    def instant(cls) -> "LatencyProfile":
        return cls(chat_min=0.0, chat_max=0.0, health=0.0, listing=0.0, indexing=0.0)
