"""Provider registry dispatching messages by provider name."""

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class NotificationError(Exception):
    """Raised when a notification cannot be delivered."""


class NotificationProvider(Protocol):
    async def send_message(self, recipient: str, message: str) -> None:
        ...

    async def aclose(self) -> None:
        ...


class NotificationManager:
    def __init__(self) -> None:
        self._providers: dict[str, NotificationProvider] = {}

    def register_provider(self, name: str, provider: NotificationProvider) -> None:
        self._providers[name] = provider
        logger.info("Notification provider %r registered", name)

    def has_provider(self, name: str) -> bool:
        return name in self._providers

    async def send_notification(self, provider: str, recipient: str, message: str) -> None:
        selected = self._providers.get(provider)
        if selected is None:
            logger.error("Notification provider %r not found", provider)
            raise NotificationError(f"Notification provider '{provider}' not found")
        await selected.send_message(recipient, message)

    async def aclose(self) -> None:
        for provider in self._providers.values():
            await provider.aclose()
