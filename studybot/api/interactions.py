"""Discord interactions webhook"""

import asyncio
import logging
from typing import List, Optional, Tuple
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from studybot.api.deps import get_discord_client, get_study_session_service, get_timer_manager
from studybot.features.study_sessions import StudySessionService
from studybot.features.study_sessions.formatting import render_leaderboard, render_user_stats
from studybot.middleware.signature import verify_discord_request
from studybot.services.discord import DiscordClient
from studybot.services.discord.constants import (
    InteractionResponseFlags,
    InteractionResponseType,
    InteractionType,
)
from studybot.services.timer import TimerActionResult, TimerActionStatus, TimerManager
from studybot.services.timer.messages import (
    TASK_COMPLETE,
    TASK_INCOMPLETE,
    TIMER_PAUSE,
    TIMER_RESUME,
    TIMER_STOP,
    parse_component_id,
    render_completion_reply,
    render_completion_summary,
    render_saved_note,
    render_stop_summary,
    render_timer_message,
    timer_controls,
)
from studybot.utils.duration_helper import format_duration_display

logger = logging.getLogger(__name__)

router = APIRouter(tags=["interactions"])

CONTROL_REJECTIONS = {
    TimerActionStatus.NO_ACTIVE_TIMER: "⚠️ This timer doesn't exist or has already expired.",
    TimerActionStatus.NOT_OWNER: "⚠️ You can only control your own timers!",
}

COMPLETION_REJECTIONS = {
    TimerActionStatus.NO_ACTIVE_TIMER: "⚠️ Couldn't find your timer session.",
    TimerActionStatus.NOT_OWNER: "⚠️ You can only respond to your own timers!",
    TimerActionStatus.ALREADY_SAVED: "⚠️ This session has already been saved.",
    TimerActionStatus.SAVE_FAILED: "❌ Error saving your session. Your stats may not include it.",
}


def channel_message(content: str, components: Optional[List[dict]] = None, ephemeral: bool = False) -> dict:
    data = {"content": content}
    if components is not None:
        data["components"] = components
    if ephemeral:
        data["flags"] = InteractionResponseFlags.EPHEMERAL
    return {"type": InteractionResponseType.CHANNEL_MESSAGE_WITH_SOURCE, "data": data}


def update_message(content: str, components: Optional[List[dict]] = None) -> dict:
    return {
        "type": InteractionResponseType.UPDATE_MESSAGE,
        "data": {"content": content, "components": components or []},
    }


def error_response(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": message})


def interaction_user(body: dict) -> Tuple[str, str]:
    """(user_id, username) of whoever triggered the interaction"""
    member = body.get("member") or {}
    user = member.get("user") or body.get("user") or {}
    return str(user.get("id", "")), user.get("username", "")


def group_context(body: dict) -> str:
    # Outside a guild the channel stands in for the group
    return str(body.get("guild_id") or body.get("channel_id") or "")


def command_input(data: dict) -> str:
    options = data.get("options") or []
    for option in options:
        if option.get("name") == "input":
            return str(option.get("value") or "")
    if options:
        return str(options[0].get("value") or "")
    return ""


@router.post("/interactions", dependencies=[Depends(verify_discord_request)])
async def handle_interaction(
    request: Request,
    timer_manager: TimerManager = Depends(get_timer_manager),
    sessions: StudySessionService = Depends(get_study_session_service),
    discord: DiscordClient = Depends(get_discord_client),
):
    """
    Entry point for every interaction Discord delivers.

    Slash commands: /timer, /stats, /leaderboard.
    Buttons: timer_pause, timer_resume, timer_stop, task_complete, task_incomplete.
    """
    body = await request.json()
    interaction_type = body.get("type")
    data = body.get("data") or {}

    if interaction_type == InteractionType.PING:
        return {"type": InteractionResponseType.PONG}

    if interaction_type == InteractionType.APPLICATION_COMMAND:
        name = data.get("name")
        if name == "timer":
            return await handle_timer_command(body, timer_manager)
        if name == "stats":
            return await handle_stats_command(body, sessions)
        if name == "leaderboard":
            return await handle_leaderboard_command(body, sessions)

        logger.error(f"Unknown command: {name}")
        return error_response("Unknown command")

    if interaction_type == InteractionType.MESSAGE_COMPONENT:
        action, owner = parse_component_id(data.get("custom_id", ""))
        if action in (TIMER_PAUSE, TIMER_RESUME, TIMER_STOP):
            return await handle_timer_control(body, action, owner, timer_manager)
        if action in (TASK_COMPLETE, TASK_INCOMPLETE):
            return await handle_task_completion(body, action, owner, timer_manager, discord)

        logger.error(f"Unknown component: {data.get('custom_id')}")
        return error_response("Unknown command")

    logger.error(f"Unknown interaction type: {interaction_type}")
    return error_response("Unknown interaction type")


async def handle_timer_command(body: dict, timer_manager: TimerManager) -> dict:
    user_id, username = interaction_user(body)
    result = await timer_manager.start_timer(
        owner=user_id,
        owner_name=username,
        group_context=group_context(body),
        destination_context=str(body.get("channel_id", "")),
        text=command_input(body.get("data") or {}),
    )
    return channel_message(render_timer_message(result.entry), timer_controls(result.entry))


async def handle_stats_command(body: dict, sessions: StudySessionService) -> dict:
    user_id, _ = interaction_user(body)
    try:
        stats, heatmap = await asyncio.gather(
            sessions.get_user_stats(user_id),
            sessions.get_user_heatmap(user_id),
        )
        return channel_message(render_user_stats(stats, heatmap), ephemeral=True)
    except Exception as e:
        logger.error(f"Error fetching user stats: {e}")
        return channel_message("❌ There was an error fetching your statistics.", ephemeral=True)


async def handle_leaderboard_command(body: dict, sessions: StudySessionService) -> dict:
    try:
        entries = await sessions.get_guild_leaderboard(group_context(body))
        return channel_message(render_leaderboard(entries))
    except Exception as e:
        logger.error(f"Error fetching leaderboard: {e}")
        return channel_message("❌ There was an error fetching the leaderboard.")


async def handle_timer_control(
    body: dict,
    action: str,
    owner: Optional[str],
    timer_manager: TimerManager
) -> dict:
    user_id, _ = interaction_user(body)
    owner = owner or user_id
    group = group_context(body)

    if action == TIMER_PAUSE:
        result = await timer_manager.pause_timer(owner, group, user_id)
    elif action == TIMER_RESUME:
        result = await timer_manager.resume_timer(owner, group, user_id)
    else:
        result = await timer_manager.stop_timer(owner, group, user_id)

    if result.status in CONTROL_REJECTIONS:
        return channel_message(CONTROL_REJECTIONS[result.status], ephemeral=True)

    if action == TIMER_STOP:
        note = stop_note(result, timer_manager.min_savable_seconds)
        return update_message(render_stop_summary(result.entry, result.elapsed_seconds, note))

    return update_message(render_timer_message(result.entry), timer_controls(result.entry))


def stop_note(result: TimerActionResult, min_savable_seconds: int) -> str:
    if result.saved:
        return render_saved_note(result.stats)
    if result.status == TimerActionStatus.TOO_SHORT:
        return f"Note: Sessions under {format_duration_display(min_savable_seconds)} are not saved."
    if result.status == TimerActionStatus.ALREADY_SAVED:
        return "Note: This session was already saved."
    return "(Note: There was an error saving your stats)"


async def handle_task_completion(
    body: dict,
    action: str,
    owner: Optional[str],
    timer_manager: TimerManager,
    discord: DiscordClient
) -> dict:
    user_id, _ = interaction_user(body)
    completed = action == TASK_COMPLETE
    result = await timer_manager.complete_timer(owner or user_id, group_context(body), user_id, completed)

    if result.status == TimerActionStatus.TOO_SHORT:
        return channel_message(
            f"⚠️ Sessions under {format_duration_display(timer_manager.min_savable_seconds)} are not saved.",
            ephemeral=True,
        )
    if result.status in COMPLETION_REJECTIONS:
        return channel_message(COMPLETION_REJECTIONS[result.status], ephemeral=True)

    message = body.get("message") or {}
    if message.get("id"):
        summary = render_completion_summary(result.entry, result.elapsed_seconds, completed)
        try:
            await discord.update_message(str(message.get("channel_id") or body.get("channel_id")), str(message["id"]), summary)
        except Exception as e:
            logger.error(f"Error updating completion message: {e}")

    return channel_message(render_completion_reply(result.stats, completed), ephemeral=True)
