from .client import DiscordAPIError, DiscordClient

__all__ = ["DiscordAPIError", "DiscordClient"]
