"""Chat message rendering for timers"""
from typing import List, Optional, Tuple

from studybot.features.study_sessions.domain import UserStats
from studybot.features.study_sessions.formatting import render_stats_summary
from studybot.services.discord.constants import ButtonStyle, action_row, button
from studybot.utils.duration_helper import format_duration_display
from .models.timer_state import TimerEntry, TimerStatus

TIMER_PAUSE = "timer_pause"
TIMER_RESUME = "timer_resume"
TIMER_STOP = "timer_stop"
TASK_COMPLETE = "task_complete"
TASK_INCOMPLETE = "task_incomplete"


def component_id(action: str, owner: str) -> str:
    """Custom id carrying the timer owner, e.g. "timer_pause:1234" """
    return f"{action}:{owner}"


def parse_component_id(custom_id: str) -> Tuple[str, Optional[str]]:
    action, _, owner = custom_id.partition(":")
    return action, owner or None


def render_timer_message(entry: TimerEntry) -> str:
    if entry.status == TimerStatus.PAUSED:
        return (
            f"⏸️ **Timer Paused**\n\n"
            f"👤 <@{entry.owner}>\n"
            f"⏰ Started: <t:{entry.started_at}:R>\n"
            f"⏰ Paused: <t:{entry.paused_at}:R>\n"
            f"⏰ Time Remaining: {format_duration_display(entry.remaining_seconds or 0)}\n"
            f"📝 Task: {entry.label}"
        )

    return (
        f"⏱️ **Timer Running**\n\n"
        f"👤 <@{entry.owner}>\n"
        f"⏰ Started: <t:{entry.started_at}:R>\n"
        f"⏰ Ends: <t:{entry.scheduled_end_at}:R>\n"
        f"⏰ Duration: {format_duration_display(entry.planned_duration_seconds)}\n"
        f"📝 Task: {entry.label}"
    )


def timer_controls(entry: TimerEntry) -> List[dict]:
    """Pause or Resume depending on state, plus Stop"""
    if entry.is_terminal:
        return []

    buttons = []
    if entry.status == TimerStatus.RUNNING:
        buttons.append(button(component_id(TIMER_PAUSE, entry.owner), "⏸️ Pause", ButtonStyle.PRIMARY))
    else:
        buttons.append(button(component_id(TIMER_RESUME, entry.owner), "▶️ Resume", ButtonStyle.SUCCESS))
    buttons.append(button(component_id(TIMER_STOP, entry.owner), "⏹️ Stop", ButtonStyle.DANGER))

    return [action_row(*buttons)]


def completion_prompt(entry: TimerEntry) -> Tuple[str, List[dict]]:
    content = (
        f"<@{entry.owner}> ⏰ **Time's up!** Did you complete your task?\n"
        f"⏱️ Duration: {format_duration_display(entry.planned_duration_seconds)}\n"
        f"📝 Task: {entry.label}"
    )
    components = [action_row(
        button(component_id(TASK_COMPLETE, entry.owner), "Yes, completed! ✅", ButtonStyle.SUCCESS),
        button(component_id(TASK_INCOMPLETE, entry.owner), "Not yet ❌", ButtonStyle.SECONDARY),
    )]
    return content, components


def render_stop_summary(
    entry: TimerEntry,
    elapsed_seconds: int,
    note: str
) -> str:
    return (
        f"⏹️ **Timer Stopped**\n\n"
        f"👤 <@{entry.owner}>\n"
        f"⏱️ Duration: {format_duration_display(elapsed_seconds)}\n"
        f"📝 Task: {entry.label}\n\n"
        f"{note}"
    )


def render_saved_note(stats: Optional[UserStats]) -> str:
    if stats is None:
        return "✅ Session saved!"
    return f"✅ Session saved! Your updated stats:\n{render_stats_summary(stats)}"


def render_completion_summary(entry: TimerEntry, elapsed_seconds: int, completed: bool) -> str:
    """Final text of the time's-up prompt once the owner has answered"""
    status = "✅ **Task Completed**" if completed else "📝 **Session Recorded**"
    return (
        f"{status}\n\n"
        f"👤 <@{entry.owner}>\n"
        f"⏱️ Duration: {format_duration_display(elapsed_seconds)}\n"
        f"📝 Task: {entry.label}"
    )


def render_completion_reply(stats: Optional[UserStats], completed: bool) -> str:
    message = "🎉 Great job completing your task!" if completed else "💪 Progress is still progress!"
    if stats is not None:
        message += f"\n\nYour updated stats:\n{render_stats_summary(stats)}"
    if not completed:
        message += "\n\nWould you like to start another timer?"
    return message
