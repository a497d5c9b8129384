"""Business logic for Study Sessions"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, List

from sqlalchemy.ext.asyncio import async_sessionmaker

from studybot.features.study_sessions.domain import (
    LeaderboardEntry,
    StudySessionCreate,
    UserStats,
)
from studybot.features.study_sessions.repository import StudySessionRepository

logger = logging.getLogger(__name__)

WEEKDAYS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
HEATMAP_DAYS = 30


def _weekday_name(dt: datetime) -> str:
    # datetime.weekday() is Monday=0
    return WEEKDAYS[(dt.weekday() + 1) % 7]


def build_heatmap(sessions, now: datetime) -> Dict[str, float]:
    """
    Minutes studied per "<Day>-<hour>" bucket (UTC).

    Each session is spread backwards from completed_at over its duration,
    so a session crossing an hour boundary lands in both hours.
    """
    data: Dict[str, float] = {}
    for session in sessions:
        end = session.completed_at
        if end.tzinfo is None:
            end = end.replace(tzinfo=timezone.utc)
        end = min(end.astimezone(timezone.utc), now)
        cursor = end - timedelta(seconds=session.duration_seconds)

        while cursor < end:
            hour_end = cursor.replace(minute=0, second=0, microsecond=0) + timedelta(hours=1)
            chunk_end = min(hour_end, end)
            key = f"{_weekday_name(cursor)}-{cursor.hour}"
            data[key] = data.get(key, 0) + (chunk_end - cursor).total_seconds() / 60
            cursor = chunk_end

    return data


class StudySessionService:
    """
    Service layer for study session persistence and statistics.

    Opens one database session per call so it can be used from deferred
    timer callbacks as well as request handlers.
    """

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    async def save_session(
        self,
        user_id: str,
        task_name: str,
        duration_seconds: int,
        guild_id: str
    ) -> int:
        """
        Record a finished study session.

        Returns:
            The new session ID
        """
        async with self.session_factory() as db:
            repo = StudySessionRepository(db)
            session = await repo.create(StudySessionCreate(
                user_id=user_id,
                task_name=task_name,
                duration_seconds=duration_seconds,
                guild_id=guild_id,
            ))

        logger.info(f"Saved study session {session.id}: {duration_seconds}s for user {user_id} in {guild_id}")
        return session.id

    async def get_user_stats(self, user_id: str) -> UserStats:
        async with self.session_factory() as db:
            return await StudySessionRepository(db).get_user_stats(user_id)

    async def get_guild_leaderboard(self, guild_id: str, limit: int = 10) -> List[LeaderboardEntry]:
        async with self.session_factory() as db:
            return await StudySessionRepository(db).get_guild_leaderboard(guild_id, limit)

    async def get_user_heatmap(self, user_id: str, days: int = HEATMAP_DAYS) -> Dict[str, float]:
        """Study minutes per weekday/hour bucket over the last `days` days"""
        now = datetime.now(timezone.utc)
        async with self.session_factory() as db:
            sessions = await StudySessionRepository(db).find_user_sessions_since(
                user_id, now - timedelta(days=days)
            )
        return build_heatmap(sessions, now)
