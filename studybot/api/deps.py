"""FastAPI dependency providers for app-wide collaborators"""

from fastapi import Request

from studybot.features.study_sessions import StudySessionService
from studybot.services.discord import DiscordClient
from studybot.services.timer import TimerManager


def get_timer_manager(request: Request) -> TimerManager:
    return request.app.state.timer_manager


def get_study_session_service(request: Request) -> StudySessionService:
    return request.app.state.study_session_service


def get_discord_client(request: Request) -> DiscordClient:
    return request.app.state.discord_client
