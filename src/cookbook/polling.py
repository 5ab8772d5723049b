"""Polling feed of recently added recipes."""

import asyncio
from collections.abc import Awaitable, Callable

from cookbook.config import get_settings
from cookbook.dispatcher import EntityDispatcher
from cookbook.errors import CookbookError
from cookbook.logging_config import LoggingContext, get_logger
from cookbook.models import GenericRecord

logger = get_logger(__name__)

RecipeCallback = Callable[[list[GenericRecord]], Awaitable[None]]


class RecentlyAddedPoller:
    """Poll the service for recently added recipes and hand them to a callback.

    Each tick is a single round trip followed by the callback; the next tick
    starts only after the previous one has finished.
    """

    def __init__(
        self,
        dispatcher: EntityDispatcher,
        callback: RecipeCallback,
        interval: float | None = None,
    ):
        self.dispatcher = dispatcher
        self.callback = callback
        self.interval = interval if interval is not None else get_settings().poll_interval
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        """Check whether the background task is active."""
        return self._task is not None and not self._task.done()

    async def poll_once(self) -> bool:
        """
        Run a single poll tick.

        Service errors are logged and swallowed so the feed keeps going;
        errors raised by the callback propagate.

        Returns:
            True if recipes were fetched and delivered, False otherwise.
        """
        with LoggingContext(operation="poll"):
            try:
                records = await self.dispatcher.get_recently_added()
            except CookbookError as e:
                logger.warning(f"Polling recently added recipes failed: {e}")
                return False

            logger.debug(f"Delivering {len(records)} recently added recipes")
            await self.callback(records)
            return True

    async def run(self, max_ticks: int | None = None) -> int:
        """
        Poll until stopped or ``max_ticks`` ticks have run.

        Returns:
            Number of ticks run.
        """
        ticks = 0
        logger.info(f"Starting recently added feed (interval={self.interval}s)")

        while not self._stop_event.is_set():
            await self.poll_once()
            ticks += 1
            if max_ticks is not None and ticks >= max_ticks:
                break
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                continue

        logger.info(f"Recently added feed stopped after {ticks} ticks")
        return ticks

    def start(self) -> asyncio.Task:
        """Run the poller as a background task on the current loop."""
        if self.is_running:
            raise RuntimeError("Poller is already running")
        self._stop_event.clear()
        self._task = asyncio.create_task(self.run())
        return self._task

    async def stop(self) -> None:
        """Signal the poller to stop and wait for the current tick to finish."""
        self._stop_event.set()
        if self._task is not None:
            await self._task
            self._task = None
