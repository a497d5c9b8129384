"""Study Sessions feature module"""

from studybot.features.study_sessions.repository import StudySessionRepository
from studybot.features.study_sessions.service import StudySessionService
from studybot.features.study_sessions.domain import (
    LeaderboardEntry,
    StudySession,
    StudySessionCreate,
    UserStats,
)

__all__ = [
    "StudySessionRepository",
    "StudySessionService",
    "LeaderboardEntry",
    "StudySession",
    "StudySessionCreate",
    "UserStats",
]
