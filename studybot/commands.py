"""Slash command definitions and registration"""
import asyncio
import logging

from studybot.config import get_discord_app_id
from studybot.services.discord import DiscordClient
from studybot.services.discord.constants import CommandOptionType

logger = logging.getLogger(__name__)

CHAT_INPUT = 1

TIMER_COMMAND = {
    "name": "timer",
    "description": "Start a study timer",
    "type": CHAT_INPUT,
    "options": [
        {
            "type": CommandOptionType.STRING,
            "name": "input",
            "description": "Duration and task, e.g. \"25m Chapter 3\" (default: 25m)",
            "required": False,
        },
    ],
}

STATS_COMMAND = {
    "name": "stats",
    "description": "View your study statistics",
    "type": CHAT_INPUT,
}

LEADERBOARD_COMMAND = {
    "name": "leaderboard",
    "description": "View the server study leaderboard",
    "type": CHAT_INPUT,
}

ALL_COMMANDS = [TIMER_COMMAND, STATS_COMMAND, LEADERBOARD_COMMAND]


async def register_commands(client: DiscordClient, app_id: str) -> None:
    logger.info(f"Registering commands: {[command['name'] for command in ALL_COMMANDS]}")
    await client.install_global_commands(app_id, ALL_COMMANDS)


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )
    asyncio.run(register_commands(DiscordClient(), get_discord_app_id()))


if __name__ == "__main__":
    main()
