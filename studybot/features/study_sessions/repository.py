"""SQLAlchemy repository for Study Sessions"""

import logging
from datetime import datetime
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import func, select

from studybot.db.models.study_session import StudySession as StudySessionORM
from studybot.features.study_sessions.domain import (
    LeaderboardEntry,
    StudySession,
    StudySessionCreate,
    UserStats,
)

logger = logging.getLogger(__name__)


class StudySessionRepository:
    """Repository for study session operations using SQLAlchemy"""

    def __init__(self, db: AsyncSession):
        """
        Initialize the repository with a database session.

        Args:
            db: SQLAlchemy async database session
        """
        self.db = db

    async def create(self, data: StudySessionCreate) -> StudySession:
        session = StudySessionORM(**data.model_dump())
        self.db.add(session)
        await self.db.commit()
        await self.db.refresh(session)
        return StudySession.model_validate(session)

    async def get_user_stats(self, user_id: str) -> UserStats:
        """Session count, total seconds and last session time for a user"""
        stmt = select(
            func.count(StudySessionORM.id),
            func.coalesce(func.sum(StudySessionORM.duration_seconds), 0),
            func.max(StudySessionORM.completed_at),
        ).where(StudySessionORM.user_id == user_id)
        result = await self.db.execute(stmt)
        total_sessions, total_seconds, last_session = result.one()

        return UserStats(
            total_sessions=total_sessions or 0,
            total_seconds=int(total_seconds or 0),
            last_session=last_session,
        )

    async def get_guild_leaderboard(self, guild_id: str, limit: int = 10) -> List[LeaderboardEntry]:
        """Top users in a guild by total study time"""
        total = func.sum(StudySessionORM.duration_seconds).label("total_seconds")
        stmt = (
            select(
                StudySessionORM.user_id,
                func.count(StudySessionORM.id).label("sessions_completed"),
                total,
            )
            .where(StudySessionORM.guild_id == guild_id)
            .group_by(StudySessionORM.user_id)
            .order_by(total.desc())
            .limit(limit)
        )
        result = await self.db.execute(stmt)

        return [
            LeaderboardEntry(
                user_id=row.user_id,
                sessions_completed=row.sessions_completed,
                total_seconds=int(row.total_seconds or 0),
            )
            for row in result.all()
        ]

    async def find_user_sessions_since(self, user_id: str, since: datetime) -> List[StudySession]:
        stmt = (
            select(StudySessionORM)
            .where(
                StudySessionORM.user_id == user_id,
                StudySessionORM.completed_at >= since,
            )
            .order_by(StudySessionORM.completed_at.asc())
        )
        result = await self.db.execute(stmt)
        return [StudySession.model_validate(row) for row in result.scalars().all()]
