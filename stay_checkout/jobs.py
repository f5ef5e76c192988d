from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable

from stay_checkout.schemas.lead import DeliveryResult

logger = logging.getLogger(__name__)


class DeliveryJobs:
    """Tracks detached lead deliveries so none is launched and forgotten.

    Each task logs its outcome when it finishes; `drain()` waits for whatever
    is still in flight (used at shutdown and in tests).
    """

    def __init__(self) -> None:
        self._tasks: dict[asyncio.Task, str] = {}

    def __len__(self) -> int:
        return len(self._tasks)

    def schedule(self, booking_ref: str, delivery: Awaitable[DeliveryResult]) -> asyncio.Task:
        task = asyncio.ensure_future(delivery)
        self._tasks[task] = booking_ref
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        booking_ref = self._tasks.pop(task, "?")
        if task.cancelled():
            logger.warning("Background lead delivery for %s was cancelled", booking_ref)
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Background lead delivery for %s crashed",
                booking_ref, exc_info=(type(exc), exc, exc.__traceback__),
            )
            return
        result: DeliveryResult = task.result()
        if result.succeeded:
            logger.info(
                "Background lead delivery for %s done (status=%d)", booking_ref, result.status
            )
        else:
            logger.warning(
                "Background lead delivery for %s failed (status=%d): %s",
                booking_ref, result.status, result.error or result.raw,
            )

    async def drain(self, timeout: float | None = None) -> None:
        if not self._tasks:
            return
        pending = list(self._tasks)
        logger.info("Waiting for %d background lead deliveries", len(pending))
        _, still_pending = await asyncio.wait(pending, timeout=timeout)
        for task in still_pending:
            task.cancel()
