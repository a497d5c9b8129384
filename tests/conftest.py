import asyncio
from typing import List, Optional

import pytest

from studybot.features.study_sessions.domain import UserStats
from studybot.services.timer import TimerManager

START_TIME = 1_700_000_000


class FakeClock:
    """Manually advanced unix-seconds clock"""

    def __init__(self, now: int = START_TIME):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


class FakeSessionStore:
    def __init__(self):
        self.saved = []
        self.fail_save = False
        self.fail_stats = False

    async def save_session(self, user_id, task_name, duration_seconds, guild_id):
        # Suspension point, like a real database round trip
        await asyncio.sleep(0)
        if self.fail_save:
            raise RuntimeError("database unavailable")
        self.saved.append({
            "user_id": user_id,
            "task_name": task_name,
            "duration_seconds": duration_seconds,
            "guild_id": guild_id,
        })
        return len(self.saved)

    async def get_user_stats(self, user_id):
        if self.fail_stats:
            raise RuntimeError("database unavailable")
        mine = [s for s in self.saved if s["user_id"] == user_id]
        return UserStats(
            total_sessions=len(mine),
            total_seconds=sum(s["duration_seconds"] for s in mine),
        )


class FakeMessenger:
    def __init__(self):
        self.created = []
        self.updated = []
        self.fail = False

    async def create_message(self, channel_id: str, content: str, components: Optional[List[dict]] = None):
        if self.fail:
            raise RuntimeError("discord unavailable")
        self.created.append({"channel_id": channel_id, "content": content, "components": components})
        return {"id": f"msg-{len(self.created)}", "channel_id": channel_id}

    async def update_message(self, channel_id: str, message_id: str, content: str, components=None):
        if self.fail:
            raise RuntimeError("discord unavailable")
        self.updated.append({"channel_id": channel_id, "message_id": message_id, "content": content})
        return {"id": message_id}


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return FakeSessionStore()


@pytest.fixture
def messenger():
    return FakeMessenger()


@pytest.fixture
async def manager(store, messenger, clock):
    timer_manager = TimerManager(
        session_store=store,
        messenger=messenger,
        min_savable_seconds=60,
        clock=clock,
    )
    yield timer_manager
    timer_manager.shutdown()
