"""
ChartChat Charts - Request serializer.

The visual is a single shared mutable resource; two interleaved runs could
remove each other's fields. Runs for a session are therefore executed one at
a time, in arrival order.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RequestSerializer:
    """At most one in-flight run; later runs queue behind it (FIFO)."""

    def __init__(self, name: str = "chart"):
        self.name = name
        self._lock = asyncio.Lock()
        self._waiting = 0

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    @property
    def waiting(self) -> int:
        return self._waiting

    async def run(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Execute ``operation`` once every earlier run has finished."""
        if self._lock.locked():
            logger.info(f"[{self.name}] run queued behind in-flight request ({self._waiting} already waiting)")
        self._waiting += 1
        try:
            await self._lock.acquire()
        finally:
            self._waiting -= 1
        try:
            return await operation()
        finally:
            self._lock.release()
