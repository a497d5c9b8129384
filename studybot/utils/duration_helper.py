"""Timer input parsing and duration formatting helpers"""
import re
from typing import Tuple

from studybot.config import DEFAULT_TIMER_SECONDS

DURATION_PATTERN = re.compile(r"^(\d+)\s*([hms])", re.IGNORECASE)

UNIT_SECONDS = {
    "h": 3600,
    "m": 60,
    "s": 1,
}


def default_task_label(username: str) -> str:
    return f"{username}'s timer"


def parse_timer_input(text: str, username: str) -> Tuple[int, str]:
    """
    Parse "/timer" input into a duration and a task label.

    Accepted form is "<number><unit> <label>" with unit one of h, m, s.
    Input without a leading duration is used entirely as the label.

    Args:
        text: Raw option value (may be empty)
        username: Name used to build the default label

    Returns:
        (duration_seconds, task_label)
    """
    duration = DEFAULT_TIMER_SECONDS
    task = default_task_label(username)

    if not text:
        return duration, task

    match = DURATION_PATTERN.match(text)
    if match:
        duration = int(match.group(1)) * UNIT_SECONDS[match.group(2).lower()]
        task = text[match.end():].strip() or default_task_label(username)
    else:
        task = text.strip() or default_task_label(username)

    return duration, task


def _plural(value: int, unit: str) -> str:
    return f"{value} {unit}{'' if value == 1 else 's'}"


def format_duration_display(seconds: int) -> str:
    """
    Format a duration in seconds for display.

    Examples:
        45 -> "45 seconds", 90 -> "1 minute", 3900 -> "1 hour 5 minutes"
    """
    if seconds < 60:
        return _plural(seconds, "second")
    if seconds < 3600:
        return _plural(seconds // 60, "minute")

    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    if minutes > 0:
        return f"{_plural(hours, 'hour')} {_plural(minutes, 'minute')}"
    return _plural(hours, "hour")
