"""Timer state models"""
import asyncio
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class TimerStatus(str, Enum):
    """Timer status"""
    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"
    COMPLETED = "completed"


TERMINAL_STATUSES = (TimerStatus.STOPPED, TimerStatus.COMPLETED)


def make_timer_key(owner: str, group_context: str) -> str:
    """Registry key for a user's timer within a guild or channel"""
    return f"{owner}_{group_context}"


class TimerEntry(BaseModel):
    """
    In-memory state of one study timer.

    All timestamps are unix seconds, matching Discord's <t:...> markup.
    scheduled_end_at is authoritative while RUNNING, remaining_seconds
    while PAUSED.
    """
    owner: str
    owner_name: str
    group_context: str
    destination_context: str  # channel the completion prompt is posted to
    label: str
    planned_duration_seconds: int
    started_at: int
    scheduled_end_at: int
    remaining_seconds: Optional[int] = None
    paused_at: Optional[int] = None
    status: TimerStatus = TimerStatus.RUNNING
    persisted: bool = False
    expired: bool = False  # notifier fired, awaiting completion confirmation
    prompt_message_id: Optional[str] = None
    pending_callback: Optional[asyncio.Task] = Field(default=None, exclude=True)

    class Config:
        arbitrary_types_allowed = True

    @property
    def key(self) -> str:
        return make_timer_key(self.owner, self.group_context)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def pause(self, now: int) -> bool:
        """Running -> Paused. Returns False (no change) from any other state."""
        if self.status != TimerStatus.RUNNING:
            return False
        self.remaining_seconds = max(0, self.scheduled_end_at - now)
        self.paused_at = now
        self.status = TimerStatus.PAUSED
        return True

    def resume(self, now: int) -> bool:
        """Paused -> Running. Returns False (no change) from any other state."""
        if self.status != TimerStatus.PAUSED:
            return False
        self.scheduled_end_at = now + (self.remaining_seconds or 0)
        self.remaining_seconds = None
        self.paused_at = None
        self.status = TimerStatus.RUNNING
        return True

    def seconds_until_end(self, now: int) -> int:
        if self.status == TimerStatus.PAUSED:
            return self.remaining_seconds or 0
        return max(0, self.scheduled_end_at - now)

    def elapsed_seconds(self, now: int) -> int:
        """
        Seconds actually spent on the timer, clamped to [0, planned duration].

        Paused time is not counted: for a timer that was never paused this
        is min(now, scheduled_end_at) - started_at.
        """
        elapsed = self.planned_duration_seconds - self.seconds_until_end(now)
        return max(0, min(elapsed, self.planned_duration_seconds))

    def claim_persistence(self) -> bool:
        """
        Flip persisted from False to True.

        Returns True only for the first caller. There is no await between
        the check and the write, so concurrent handlers on the event loop
        cannot both claim it.
        """
        if self.persisted:
            return False
        self.persisted = True
        return True
