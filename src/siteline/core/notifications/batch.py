"""Best-effort batches: run independent deliveries, isolating each failure."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from src.siteline.core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class BatchOutcome:
    succeeded: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def attempted(self) -> int:
        return len(self.succeeded) + len(self.failed)


class BestEffortBatch:
    """Attempt every item exactly once; a failing item never cancels the others.

    An item fails when its callable raises or returns False. Failures are
    logged and reported in the outcome, never re-raised.
    """

    def __init__(self, name: str, max_concurrency: int = 4):
        self.name = name
        self._items: list[tuple[str, Callable[[], Awaitable[bool]]]] = []
        self._semaphore = asyncio.Semaphore(max_concurrency)

    def __len__(self) -> int:
        return len(self._items)

    def add(self, key: str, deliver: Callable[[], Awaitable[bool]]) -> None:
        self._items.append((key, deliver))

    async def _attempt(self, key: str, deliver: Callable[[], Awaitable[bool]]) -> str | None:
        async with self._semaphore:
            try:
                delivered = await deliver()
            except Exception as e:
                logger.error("Delivery failed", batch=self.name, key=key, error=str(e))
                return str(e) or type(e).__name__
        if delivered is False:
            logger.warning("Delivery not accepted", batch=self.name, key=key)
            return "not delivered"
        return None

    async def run(self) -> BatchOutcome:
        outcome = BatchOutcome()
        errors = await asyncio.gather(*(self._attempt(key, fn) for key, fn in self._items))
        for (key, _), error in zip(self._items, errors, strict=True):
            if error is None:
                outcome.succeeded.append(key)
            else:
                outcome.failed[key] = error
        return outcome
