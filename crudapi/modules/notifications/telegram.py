"""Telegram Bot API provider."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from .manager import NotificationError

logger = logging.getLogger(__name__)

# Bot API rejects longer messages.
MAX_MESSAGE_LENGTH = 4096


class TelegramProvider:
    def __init__(
        self,
        bot_token: Optional[str],
        *,
        api_url: str = "https://api.telegram.org",
        timeout: float = 5.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._bot_token = bot_token
        self._api_url = api_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)
        if not bot_token:
            logger.warning("Telegram bot token not configured; Telegram provider is disabled")

    @property
    def enabled(self) -> bool:
        return bool(self._bot_token)

    async def send_message(self, recipient: str, message: str) -> None:
        if not self._bot_token:
            raise NotificationError("Telegram bot is not initialized")
        if len(message) > MAX_MESSAGE_LENGTH:
            # HTML cannot be cut safely here.
            raise NotificationError(f"Telegram message too long: {len(message)} characters")

        url = f"{self._api_url}/bot{self._bot_token}/sendMessage"
        payload = {
            "chat_id": recipient,
            "text": message,
            "parse_mode": "HTML",
            "disable_web_page_preview": True,
        }
        try:
            response = await self._client.post(url, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Error sending message via Telegram: %s", exc)
            raise NotificationError("Telegram delivery failed") from exc
        logger.info("Message sent to %s", recipient)

    async def aclose(self) -> None:
        await self._client.aclose()
