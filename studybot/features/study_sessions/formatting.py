"""Chat formatting for study statistics"""

from typing import Dict, List

from studybot.features.study_sessions.domain import LeaderboardEntry, UserStats
from studybot.features.study_sessions.service import WEEKDAYS

TIME_BLOCKS = [
    "12am-4am",
    "4am-8am",
    "8am-12pm",
    "12pm-4pm",
    "4pm-8pm",
    "8pm-12am",
]

MEDALS = ["🥇", "🥈", "🥉"]


def _plural(value: int, unit: str) -> str:
    return f"{value} {unit}{'' if value == 1 else 's'}"


def format_total_time(total_minutes: float) -> str:
    """Format accumulated minutes as "H hours M minutes" """
    if not total_minutes:
        return "0 minutes"

    hours = int(total_minutes // 60)
    minutes = int(total_minutes % 60)

    if hours == 0:
        return _plural(minutes, "minute")
    if minutes == 0:
        return _plural(hours, "hour")
    return f"{_plural(hours, 'hour')} {_plural(minutes, 'minute')}"


def leaderboard_medal(position: int) -> str:
    if position < len(MEDALS):
        return MEDALS[position]
    return f"{position + 1}."


def _heat_emoji(value: float) -> str:
    if not value:
        return "⬜"
    if value < 30:
        return "🟦"
    if value < 60:
        return "🟪"
    return "⬛"


def render_heatmap(data: Dict[str, float]) -> str:
    """6x7 grid of 4-hour blocks by weekday, shaded by average minutes per hour"""
    lines = ["📊 **Your Study Pattern (Last 30 Days)**", "", "```"]
    lines.append(" " * 10 + "".join(f"{day} " for day in WEEKDAYS))

    for i, block in enumerate(TIME_BLOCKS):
        row = block.ljust(10)
        for day in WEEKDAYS:
            total = sum(data.get(f"{day}-{hour}", 0) for hour in range(i * 4, (i + 1) * 4))
            row += _heat_emoji(total / 4) + " "
        lines.append(row)

    lines.append("```")
    lines.append("Legend:")
    lines.append("⬜ No study  🟦 < 30m/hr  🟪 30-60m/hr  ⬛ > 60m/hr")
    return "\n".join(lines)


def render_user_stats(stats: UserStats, heatmap: Dict[str, float]) -> str:
    last_session = stats.last_session.strftime("%b %d, %Y") if stats.last_session else "No sessions yet"
    return (
        f"📊 **Your Study Statistics**\n\n"
        f"• Total sessions: {stats.total_sessions}\n"
        f"• Total time: {format_total_time(stats.total_minutes)}\n"
        f"• Last session: {last_session}\n\n"
        f"{render_heatmap(heatmap)}"
    )


def render_stats_summary(stats: UserStats) -> str:
    return (
        f"• Total sessions: {stats.total_sessions}\n"
        f"• Total time: {format_total_time(stats.total_minutes)}"
    )


def render_leaderboard(entries: List[LeaderboardEntry]) -> str:
    if not entries:
        return "📊 No study sessions have been recorded in this server yet!"

    rows = "\n".join(
        f"{leaderboard_medal(i)} <@{entry.user_id}>: {format_total_time(entry.total_minutes)} "
        f"({entry.sessions_completed} sessions)"
        for i, entry in enumerate(entries)
    )
    return f"📊 **Study Leaderboard**\n\n{rows}"
