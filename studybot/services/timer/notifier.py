"""Deferred Notifier - one-shot timer end callbacks"""
import asyncio
import logging
from typing import Awaitable, Callable

from .models.timer_state import TimerEntry, TimerStatus

logger = logging.getLogger(__name__)

FireCallback = Callable[[TimerEntry], Awaitable[None]]


class DeferredNotifier:
    """
    Schedules a single callback per timer entry.

    The scheduled asyncio.Task is stored on entry.pending_callback and is
    the handle used for cancellation.
    """

    def __init__(self, on_fire: FireCallback):
        self._on_fire = on_fire

    def arm(self, entry: TimerEntry, seconds_from_now: float) -> asyncio.Task:
        """Schedule the callback, replacing any pending one for this entry"""
        self.cancel(entry)
        task = asyncio.create_task(
            self._fire_later(entry, seconds_from_now),
            name=f"timer-end-{entry.key}",
        )
        entry.pending_callback = task
        logger.debug(f"Armed timer {entry.key} for {seconds_from_now}s")
        return task

    def cancel(self, entry: TimerEntry) -> None:
        """Cancel and clear the pending callback. No-op if absent or finished."""
        handle = entry.pending_callback
        entry.pending_callback = None
        if handle is None or handle.done():
            return
        if handle is asyncio.current_task():
            # Called from inside the callback itself
            return
        handle.cancel()
        logger.debug(f"Cancelled pending callback for timer {entry.key}")

    async def _fire_later(self, entry: TimerEntry, seconds_from_now: float) -> None:
        if seconds_from_now > 0:
            await asyncio.sleep(seconds_from_now)

        # The timer may have been paused or stopped since it was armed
        if entry.status != TimerStatus.RUNNING:
            logger.debug(f"Timer {entry.key} is {entry.status.value}, skipping notification")
            return

        try:
            await self._on_fire(entry)
        except Exception as e:
            logger.error(f"Error in timer end callback for {entry.key}: {e}", exc_info=True)
