"""Domain models for Study Sessions feature"""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class StudySessionCreate(BaseModel):
    """Study session creation model"""
    user_id: str
    task_name: str
    duration_seconds: int
    guild_id: str


class StudySession(StudySessionCreate):
    """Complete study session domain model"""
    id: int
    completed_at: datetime

    class Config:
        from_attributes = True


class UserStats(BaseModel):
    """Aggregated statistics for one user"""
    total_sessions: int = 0
    total_seconds: int = 0
    last_session: Optional[datetime] = None

    @property
    def total_minutes(self) -> float:
        return self.total_seconds / 60


class LeaderboardEntry(BaseModel):
    """Per-user totals within a guild"""
    user_id: str
    sessions_completed: int
    total_seconds: int

    @property
    def total_minutes(self) -> float:
        return self.total_seconds / 60
