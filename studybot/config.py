import os
import logging
from dotenv import load_dotenv

load_dotenv(dotenv_path=".env")

logger = logging.getLogger(__name__)

# Discord application
DISCORD_API_BASE_URL = os.getenv("DISCORD_API_BASE_URL", "https://discord.com/api/v10/")
DISCORD_USER_AGENT = "StudyBotDiscord/1.0.0"

# Timer behaviour
DEFAULT_TIMER_SECONDS = int(os.getenv("DEFAULT_TIMER_SECONDS", "1500"))  # 25 minutes
MIN_SAVABLE_SECONDS = int(os.getenv("MIN_SAVABLE_SECONDS", "60"))


def get_discord_token() -> str:
    """Get the bot token from environment"""
    token = os.getenv("DISCORD_TOKEN")
    if not token:
        raise ValueError("DISCORD_TOKEN must be set")
    return token


def get_discord_public_key() -> str:
    """Get the application public key (hex) used to verify interactions"""
    public_key = os.getenv("DISCORD_PUBLIC_KEY")
    if not public_key:
        raise ValueError("DISCORD_PUBLIC_KEY must be set")
    return public_key


def get_discord_app_id() -> str:
    """Get the application ID used for command registration"""
    app_id = os.getenv("DISCORD_APP_ID")
    if not app_id:
        raise ValueError("DISCORD_APP_ID must be set")
    return app_id


def validate_discord_token() -> bool:
    """
    Check that DISCORD_TOKEN is present and looks like a bot token.

    Bot tokens have three parts separated by periods.
    """
    token = os.getenv("DISCORD_TOKEN")
    if not token:
        logger.error("DISCORD_TOKEN is missing in environment variables")
        return False

    if len(token.split(".")) != 3:
        logger.error("DISCORD_TOKEN has invalid format")
        return False

    return True
