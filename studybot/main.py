import logging

# Log configuration (before other imports)
# ruff: noqa: E402
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    force=True
)

from contextlib import asynccontextmanager  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from studybot.api.base import api_router  # noqa: E402
from studybot.config import validate_discord_token  # noqa: E402
from studybot.db.session import dispose_engine, get_sessionmaker  # noqa: E402
from studybot.features.study_sessions import StudySessionService  # noqa: E402
from studybot.services.discord import DiscordClient  # noqa: E402
from studybot.services.timer import TimerManager  # noqa: E402

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    validate_discord_token()

    # Collaborators already set (e.g. by tests) are left alone
    if not hasattr(app.state, "discord_client"):
        app.state.discord_client = DiscordClient()
    if not hasattr(app.state, "study_session_service"):
        app.state.study_session_service = StudySessionService(get_sessionmaker())
    if not hasattr(app.state, "timer_manager"):
        app.state.timer_manager = TimerManager(
            session_store=app.state.study_session_service,
            messenger=app.state.discord_client,
        )

    logger.info("Study Bot server started")
    yield

    app.state.timer_manager.shutdown()
    await dispose_engine()


app = FastAPI(
    title="Study Bot API",
    description="Discord interactions endpoint for the study timer bot",
    version="1.0.0",
    lifespan=lifespan,
)

# Include all API routes
app.include_router(api_router)


@app.get("/")
def read_root():
    return {
        "message": "Study Bot API",
        "docs": "/docs",
        "version": "1.0.0"
    }
