"""SQLAlchemy ORM model for study_sessions table"""

from sqlalchemy import Column, Integer, String, DateTime, Text, Index
from sqlalchemy.sql import func

from studybot.db.base import Base


class StudySession(Base):
    """
    SQLAlchemy ORM model for the study_sessions table.
    One row per stopped or confirmed timer.
    """
    __tablename__ = "study_sessions"
    __table_args__ = (
        Index("idx_user_sessions", "user_id", "completed_at"),
        Index("idx_guild_sessions", "guild_id", "completed_at"),
    )

    id = Column(Integer, primary_key=True, index=True)

    # Discord snowflakes
    user_id = Column(String(255), nullable=False)
    guild_id = Column(String(255), nullable=False)

    task_name = Column(Text, nullable=False)
    duration_seconds = Column(Integer, nullable=False)

    completed_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    def __repr__(self) -> str:
        return f"<StudySession(id={self.id}, user_id={self.user_id}, duration={self.duration_seconds}s)>"
