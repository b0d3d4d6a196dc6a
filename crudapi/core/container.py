"""Dependency container wiring core services from settings."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from crudapi.core.config import Settings
from crudapi.core.crypto import PasswordHasher
from crudapi.core.security import TokenService
from crudapi.infrastructure.database import Database
from crudapi.modules.error_reporting import ErrorReportingService
from crudapi.modules.notifications import NotificationManager, TelegramProvider

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RequestStats:
    requests: int = 0
    errors: int = 0


@dataclass(slots=True)
class ApplicationContainer:
    settings: Settings
    database: Database
    tokens: TokenService
    hasher: PasswordHasher
    notifications: NotificationManager
    error_reporter: ErrorReportingService
    stats: RequestStats = field(default_factory=RequestStats)
    started_at: float = field(default_factory=time.monotonic)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ApplicationContainer":
        notifications = NotificationManager()
        config = settings.notifications
        if config.telegram_bot_token:
            notifications.register_provider(
                "telegram",
                TelegramProvider(
                    config.telegram_bot_token,
                    api_url=config.telegram_api_url,
                    timeout=config.timeout,
                ),
            )

        reporting = settings.error_reporting
        error_reporter = ErrorReportingService(
            notifications,
            enabled=reporting.enabled and notifications.has_provider("telegram"),
            chat_id=config.telegram_chat_id,
            severity_threshold=reporting.severity_threshold,
            sensitive_fields=tuple(reporting.sensitive_fields),
            max_reports_per_minute=reporting.max_reports_per_minute,
        )
        if reporting.enabled and not error_reporter.enabled:
            logger.warning("Error reporting requested but no Telegram bot token is configured")

        return cls(
            settings=settings,
            database=Database(settings.database, debug=settings.debug),
            tokens=TokenService.from_settings(settings),
            hasher=PasswordHasher(rounds=settings.security.bcrypt_rounds),
            notifications=notifications,
            error_reporter=error_reporter,
        )

    @property
    def uptime(self) -> float:
        return time.monotonic() - self.started_at

    async def startup(self) -> None:
        await self.database.connect()
        if self.settings.database.create_tables:
            await self.database.create_all()
        logger.info("%s started (%s)", self.settings.project_name, self.settings.environment)

    async def shutdown(self) -> None:
        await self.notifications.aclose()
        await self.database.dispose()


__all__ = ["ApplicationContainer", "RequestStats"]
