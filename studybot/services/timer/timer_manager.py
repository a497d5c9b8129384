"""Timer Manager - Manages timer lifecycle"""
import logging
import time
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol

from pydantic import BaseModel

from studybot.config import MIN_SAVABLE_SECONDS
from studybot.features.study_sessions.domain import UserStats
from studybot.utils.duration_helper import parse_timer_input
from .messages import completion_prompt
from .models.timer_state import TimerEntry, TimerStatus, make_timer_key
from .notifier import DeferredNotifier
from .registry import TimerRegistry

logger = logging.getLogger(__name__)


class SessionStore(Protocol):
    async def save_session(self, user_id: str, task_name: str, duration_seconds: int, guild_id: str) -> int:
        ...

    async def get_user_stats(self, user_id: str) -> UserStats:
        ...


class MessageSender(Protocol):
    async def create_message(self, channel_id: str, content: str, components: Optional[List[dict]] = None) -> Dict[str, Any]:
        ...


class TimerActionStatus(str, Enum):
    """Outcome of a timer command"""
    OK = "ok"
    NO_ACTIVE_TIMER = "no_active_timer"
    NOT_OWNER = "not_owner"
    ALREADY_SAVED = "already_saved"
    TOO_SHORT = "too_short"
    SAVE_FAILED = "save_failed"


class TimerActionResult(BaseModel):
    """Result returned by every TimerManager command"""
    status: TimerActionStatus
    entry: Optional[TimerEntry] = None
    changed: bool = False
    elapsed_seconds: Optional[int] = None
    saved: bool = False
    session_id: Optional[int] = None
    stats: Optional[UserStats] = None

    @property
    def ok(self) -> bool:
        return self.status == TimerActionStatus.OK


def _unix_now() -> int:
    return int(time.time())


class TimerManager:
    """
    Owns the timer registry and drives every state transition.

    Validation problems (missing timer, wrong user, duplicate save) are
    reported through TimerActionResult.status and never raised.
    Persistence and delivery failures are logged and swallowed.
    """

    def __init__(
        self,
        session_store: SessionStore,
        messenger: MessageSender,
        min_savable_seconds: int = MIN_SAVABLE_SECONDS,
        clock: Callable[[], int] = _unix_now,
        registry: Optional[TimerRegistry] = None,
    ):
        self.session_store = session_store
        self.messenger = messenger
        self.min_savable_seconds = min_savable_seconds
        self.clock = clock
        self.registry = registry if registry is not None else TimerRegistry()
        self.notifier = DeferredNotifier(self._on_timer_end)

    def get_timer(self, owner: str, group_context: str) -> Optional[TimerEntry]:
        return self.registry.get(make_timer_key(owner, group_context))

    async def start_timer(
        self,
        owner: str,
        owner_name: str,
        group_context: str,
        destination_context: str,
        text: str = ""
    ) -> TimerActionResult:
        """
        Start a new timer, replacing any timer the user already has in this group.

        Args:
            owner: User ID
            owner_name: Display name used for the default label
            group_context: Guild ID (or channel ID outside guilds)
            destination_context: Channel the time's-up prompt is posted to
            text: Raw "<number><unit> <label>" input
        """
        duration, label = parse_timer_input(text, owner_name)
        key = make_timer_key(owner, group_context)

        existing = self.registry.get(key)
        if existing is not None:
            self.notifier.cancel(existing)
            if not existing.is_terminal:
                existing.status = TimerStatus.STOPPED

        now = self.clock()
        entry = TimerEntry(
            owner=owner,
            owner_name=owner_name,
            group_context=group_context,
            destination_context=destination_context,
            label=label,
            planned_duration_seconds=duration,
            started_at=now,
            scheduled_end_at=now + duration,
        )
        self.registry.put(key, entry)
        self.notifier.arm(entry, duration)

        logger.info(f"Timer started: {duration}sec for {key}, ends at {entry.scheduled_end_at}")
        return TimerActionResult(status=TimerActionStatus.OK, entry=entry, changed=True)

    def _find_active(self, owner: str, group_context: str, requester: str):
        entry = self.registry.get(make_timer_key(owner, group_context))
        if entry is None or entry.is_terminal:
            return None, TimerActionResult(status=TimerActionStatus.NO_ACTIVE_TIMER)
        if entry.owner != requester:
            return None, TimerActionResult(status=TimerActionStatus.NOT_OWNER)
        return entry, None

    async def pause_timer(self, owner: str, group_context: str, requester: str) -> TimerActionResult:
        entry, rejection = self._find_active(owner, group_context, requester)
        if rejection:
            return rejection

        # Once the prompt is out the timer can only be answered or stopped
        changed = not entry.expired and entry.pause(self.clock())
        if changed:
            self.notifier.cancel(entry)
            logger.info(f"Timer paused: {entry.key} with {entry.remaining_seconds}s remaining")

        return TimerActionResult(status=TimerActionStatus.OK, entry=entry, changed=changed)

    async def resume_timer(self, owner: str, group_context: str, requester: str) -> TimerActionResult:
        entry, rejection = self._find_active(owner, group_context, requester)
        if rejection:
            return rejection

        now = self.clock()
        changed = entry.resume(now)
        if changed:
            self.notifier.arm(entry, entry.seconds_until_end(now))
            logger.info(f"Timer resumed: {entry.key}, ends at {entry.scheduled_end_at}")

        return TimerActionResult(status=TimerActionStatus.OK, entry=entry, changed=changed)

    async def stop_timer(self, owner: str, group_context: str, requester: str) -> TimerActionResult:
        """
        Stop a running or paused timer and record it when long enough.

        The entry leaves the registry whatever the outcome. The returned
        status is OK, TOO_SHORT, ALREADY_SAVED or SAVE_FAILED for a stopped
        timer; the entry is stopped in all four cases.
        """
        entry, rejection = self._find_active(owner, group_context, requester)
        if rejection:
            return rejection

        self.notifier.cancel(entry)
        elapsed = entry.elapsed_seconds(self.clock())
        entry.status = TimerStatus.STOPPED
        self.registry.remove(entry.key, expected=entry)
        logger.info(f"Timer stopped: {entry.key} after {elapsed}s")

        if elapsed < self.min_savable_seconds:
            return TimerActionResult(
                status=TimerActionStatus.TOO_SHORT, entry=entry, changed=True, elapsed_seconds=elapsed
            )
        if not entry.claim_persistence():
            return TimerActionResult(
                status=TimerActionStatus.ALREADY_SAVED, entry=entry, changed=True, elapsed_seconds=elapsed
            )

        return await self._persist(entry, elapsed)

    async def complete_timer(
        self,
        owner: str,
        group_context: str,
        requester: str,
        completed: bool = True
    ) -> TimerActionResult:
        """
        Answer the time's-up prompt and record the session.

        `completed` only changes the wording shown to the user; both answers
        record the time spent.
        """
        entry = self.registry.get(make_timer_key(owner, group_context))
        if entry is None or entry.status == TimerStatus.STOPPED:
            return TimerActionResult(status=TimerActionStatus.NO_ACTIVE_TIMER)
        if entry.owner != requester:
            return TimerActionResult(status=TimerActionStatus.NOT_OWNER)
        if entry.persisted or entry.status == TimerStatus.COMPLETED:
            return TimerActionResult(status=TimerActionStatus.ALREADY_SAVED, entry=entry)

        elapsed = entry.elapsed_seconds(self.clock())
        if elapsed < self.min_savable_seconds:
            return TimerActionResult(status=TimerActionStatus.TOO_SHORT, entry=entry, elapsed_seconds=elapsed)

        if not entry.claim_persistence():
            return TimerActionResult(status=TimerActionStatus.ALREADY_SAVED, entry=entry)

        self.notifier.cancel(entry)
        entry.status = TimerStatus.COMPLETED
        logger.info(f"Timer completed: {entry.key} ({'done' if completed else 'not done'}) after {elapsed}s")

        result = await self._persist(entry, elapsed)
        if not result.saved:
            # No retry: drop the entry unless a newer timer already replaced it
            self.registry.remove(entry.key, expected=entry)
        return result

    async def _persist(self, entry: TimerEntry, elapsed: int) -> TimerActionResult:
        try:
            session_id = await self.session_store.save_session(
                entry.owner,
                entry.label,
                elapsed,
                entry.group_context
            )
        except Exception as e:
            logger.error(f"Error saving session for timer {entry.key}: {e}")
            return TimerActionResult(
                status=TimerActionStatus.SAVE_FAILED, entry=entry, changed=True, elapsed_seconds=elapsed
            )

        stats = None
        try:
            stats = await self.session_store.get_user_stats(entry.owner)
        except Exception as e:
            logger.warning(f"Error fetching stats for user {entry.owner}: {e}")

        return TimerActionResult(
            status=TimerActionStatus.OK,
            entry=entry,
            changed=True,
            elapsed_seconds=elapsed,
            saved=True,
            session_id=session_id,
            stats=stats,
        )

    async def _on_timer_end(self, entry: TimerEntry) -> None:
        """Post the time's-up prompt. The entry stays registered for the answer."""
        if self.registry.get(entry.key) is not entry or entry.status != TimerStatus.RUNNING:
            return

        entry.expired = True
        content, components = completion_prompt(entry)
        try:
            message = await self.messenger.create_message(entry.destination_context, content, components)
            if message and message.get("id"):
                entry.prompt_message_id = str(message["id"])
            logger.info(f"Timer ended: {entry.key}, prompt sent to channel {entry.destination_context}")
        except Exception as e:
            logger.error(f"Error sending timer completion message for {entry.key}: {e}")

    def shutdown(self) -> None:
        """Cancel every pending callback. In-flight timers are lost."""
        for entry in self.registry:
            self.notifier.cancel(entry)
        if len(self.registry):
            logger.warning(f"Shutting down with {self.registry.active_count()} active timers")
