"""SQLAlchemy ORM models"""

from studybot.db.models.study_session import StudySession

__all__ = ["StudySession"]
