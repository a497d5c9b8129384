from datetime import datetime, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from studybot.db.base import Base
from studybot.db.session import to_async_url
from studybot.features.study_sessions import StudySessionService
from studybot.features.study_sessions.service import build_heatmap
from studybot.features.study_sessions.domain import StudySession


@pytest.fixture
async def service():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    yield StudySessionService(factory)
    await engine.dispose()


async def test_save_session_and_user_stats(service):
    first_id = await service.save_session("u1", "reading", 1500, "g1")
    second_id = await service.save_session("u1", "essay", 600, "g2")

    assert second_id != first_id

    stats = await service.get_user_stats("u1")
    assert stats.total_sessions == 2
    assert stats.total_seconds == 2100
    assert stats.total_minutes == 35
    assert stats.last_session is not None


async def test_user_stats_without_sessions(service):
    stats = await service.get_user_stats("nobody")
    assert stats.total_sessions == 0
    assert stats.total_seconds == 0
    assert stats.last_session is None


async def test_guild_leaderboard_ordering(service):
    await service.save_session("u1", "a", 600, "g1")
    await service.save_session("u2", "b", 3000, "g1")
    await service.save_session("u1", "c", 600, "g1")
    await service.save_session("u3", "d", 9999, "other-guild")

    leaderboard = await service.get_guild_leaderboard("g1")

    assert [(e.user_id, e.sessions_completed, e.total_seconds) for e in leaderboard] == [
        ("u2", 1, 3000),
        ("u1", 2, 1200),
    ]


async def test_user_heatmap_includes_recent_sessions(service):
    await service.save_session("u1", "reading", 1800, "g1")

    heatmap = await service.get_user_heatmap("u1")

    assert heatmap
    assert sum(heatmap.values()) == pytest.approx(30, abs=1)


def test_build_heatmap_splits_across_hours():
    # Monday 2026-10-12 10:30 UTC, 60 minutes long -> 09:30-10:30
    session = StudySession(
        id=1,
        user_id="u1",
        task_name="reading",
        duration_seconds=3600,
        guild_id="g1",
        completed_at=datetime(2026, 10, 12, 10, 30, tzinfo=timezone.utc),
    )
    now = datetime(2026, 10, 13, tzinfo=timezone.utc)

    assert build_heatmap([session], now) == {"Mon-9": 30.0, "Mon-10": 30.0}


@pytest.mark.parametrize("url,expected", [
    ("postgresql://u:p@host/db", "postgresql+psycopg://u:p@host/db"),
    ("postgresql+asyncpg://u:p@host/db", "postgresql+psycopg://u:p@host/db"),
    ("postgresql+psycopg://u:p@host/db", "postgresql+psycopg://u:p@host/db"),
    ("sqlite+aiosqlite:///local.db", "sqlite+aiosqlite:///local.db"),
])
def test_to_async_url(url, expected):
    assert to_async_url(url) == expected


def test_to_async_url_rejects_unknown_scheme():
    with pytest.raises(ValueError):
        to_async_url("mysql://u:p@host/db")
