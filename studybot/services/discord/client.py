"""
Discord REST client

Thin wrapper over the Discord HTTP API used for messages posted outside of
an interaction response (timer end prompts, prompt updates, command setup).
"""

import httpx
import logging
from typing import Any, Dict, List, Optional

from studybot.config import DISCORD_API_BASE_URL, DISCORD_USER_AGENT, get_discord_token

logger = logging.getLogger(__name__)


class DiscordAPIError(Exception):
    """Non-2xx response from the Discord API"""

    def __init__(self, status_code: int, detail: Any):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Discord API error {status_code}: {detail}")


class DiscordClient:
    """Service for calling the Discord REST API"""

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: str = DISCORD_API_BASE_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ):
        self._token = token
        self.base_url = base_url
        self._transport = transport
        self._timeout = timeout

    def _headers(self) -> Dict[str, str]:
        token = self._token or get_discord_token()
        return {
            "Authorization": f"Bot {token}",
            "Content-Type": "application/json; charset=UTF-8",
            "User-Agent": DISCORD_USER_AGENT,
        }

    async def request(self, endpoint: str, method: str = "GET", body: Any = None) -> Any:
        """
        Make a request to the Discord API

        Args:
            endpoint: Path relative to the API base URL
            method: HTTP method
            body: JSON payload

        Returns:
            Decoded JSON response, or None for empty responses

        Raises:
            DiscordAPIError: If Discord answers with a non-2xx status
        """
        url = self.base_url + endpoint
        async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
            response = await client.request(method, url, json=body, headers=self._headers())

        if response.status_code >= 400:
            try:
                detail = response.json()
            except ValueError:
                detail = response.text
            logger.error(f"Discord API Error: {response.status_code} {method} {endpoint}: {detail}")
            raise DiscordAPIError(response.status_code, detail)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    async def create_message(
        self,
        channel_id: str,
        content: str,
        components: Optional[List[dict]] = None
    ) -> Dict[str, Any]:
        """Post a new message to a channel"""
        return await self.request(
            f"channels/{channel_id}/messages",
            method="POST",
            body={"content": content, "components": components or []},
        )

    async def update_message(
        self,
        channel_id: str,
        message_id: str,
        content: str,
        components: Optional[List[dict]] = None
    ) -> Dict[str, Any]:
        """Edit an existing message. Buttons are removed unless components are given."""
        return await self.request(
            f"channels/{channel_id}/messages/{message_id}",
            method="PATCH",
            body={"content": content, "components": components or []},
        )

    async def install_global_commands(self, app_id: str, commands: List[dict]) -> Any:
        """Bulk overwrite the application's global slash commands"""
        result = await self.request(f"applications/{app_id}/commands", method="PUT", body=commands)
        logger.info(f"Registered {len(commands)} global commands")
        return result
