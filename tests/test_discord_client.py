import json

import httpx
import pytest

from studybot.commands import ALL_COMMANDS, register_commands
from studybot.services.discord import DiscordAPIError, DiscordClient


def make_client(handler):
    return DiscordClient(
        token="a.b.c",
        base_url="https://discord.test/api/v10/",
        transport=httpx.MockTransport(handler),
    )


async def test_create_message_posts_to_channel():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"id": "m1"})

    client = make_client(handler)
    result = await client.create_message("c1", "hello", [{"type": 1, "components": []}])

    assert result == {"id": "m1"}
    request = requests[0]
    assert request.method == "POST"
    assert str(request.url) == "https://discord.test/api/v10/channels/c1/messages"
    assert request.headers["Authorization"] == "Bot a.b.c"
    assert json.loads(request.content) == {"content": "hello", "components": [{"type": 1, "components": []}]}


async def test_update_message_removes_buttons_by_default():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"id": "m1"})

    await make_client(handler).update_message("c1", "m1", "done")

    assert requests[0].method == "PATCH"
    assert requests[0].url.path == "/api/v10/channels/c1/messages/m1"
    assert json.loads(requests[0].content) == {"content": "done", "components": []}


async def test_error_status_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"message": "Missing Access", "code": 50001})

    with pytest.raises(DiscordAPIError) as exc_info:
        await make_client(handler).create_message("c1", "hello")

    assert exc_info.value.status_code == 403
    assert exc_info.value.detail["code"] == 50001


async def test_register_commands_bulk_overwrites():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=[])

    await register_commands(make_client(handler), "app-1")

    assert requests[0].method == "PUT"
    assert requests[0].url.path == "/api/v10/applications/app-1/commands"
    names = [command["name"] for command in json.loads(requests[0].content)]
    assert names == [command["name"] for command in ALL_COMMANDS] == ["timer", "stats", "leaderboard"]
