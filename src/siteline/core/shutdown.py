"""In-flight request tracking so shutdown can drain before closing pools."""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from src.siteline.core.logging import get_logger

logger = get_logger(__name__)


class RequestTracker:
    """Counts requests in flight and signals once they reach zero after shutdown starts."""

    def __init__(self) -> None:
        self._in_flight = 0
        self._shutting_down = False
        self._lock = asyncio.Lock()
        self._drained = asyncio.Event()

    @property
    def is_shutting_down(self) -> bool:
        return self._shutting_down

    @property
    def in_flight_count(self) -> int:
        return self._in_flight

    @asynccontextmanager
    async def track_request(self) -> AsyncGenerator[None]:
        async with self._lock:
            self._in_flight += 1
        try:
            yield
        finally:
            async with self._lock:
                self._in_flight -= 1
                if self._shutting_down and self._in_flight == 0:
                    logger.info("All requests drained")
                    self._drained.set()

    async def start_shutdown(self) -> None:
        self._shutting_down = True
        async with self._lock:
            logger.info("Request tracker entering shutdown mode", in_flight=self._in_flight)
            if self._in_flight == 0:
                self._drained.set()

    async def wait_for_drain(self, timeout: float) -> bool:
        """Wait until every tracked request finished. False if the timeout hit first."""
        try:
            await asyncio.wait_for(self._drained.wait(), timeout=timeout)
            return True
        except TimeoutError:
            logger.warning(
                "Shutdown drain timed out", timeout=timeout, in_flight=self._in_flight
            )
            return False

    def reset(self) -> None:
        """For tests."""
        self._in_flight = 0
        self._shutting_down = False
        self._drained = asyncio.Event()


request_tracker = RequestTracker()
