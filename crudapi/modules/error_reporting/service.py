"""Formats unexpected errors and forwards them to a notification channel.

Reporting is best effort: ``report_error`` logs its own failures and never
raises, so a broken chat integration cannot fail the request that triggered
the report.
"""

from __future__ import annotations

import html
import json
import logging
import time
import traceback
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError

from crudapi.modules.common.exceptions import AppError, UnauthorizedError, ValidationFailedError
from crudapi.modules.notifications import NotificationManager

logger = logging.getLogger(__name__)

Severity = Literal["low", "medium", "high", "critical"]
Category = Literal["validation", "database", "authentication", "authorization", "external", "internal", "unknown"]

SEVERITY_LEVELS: dict[str, int] = {"low": 0, "medium": 1, "high": 2, "critical": 3}
SEVERITY_EMOJI = {"low": "🟢", "medium": "🟡", "high": "🟠", "critical": "🔴"}
CATEGORY_EMOJI = {
    "validation": "📝",
    "database": "🗄️",
    "authentication": "🔐",
    "authorization": "🚫",
    "external": "🌐",
    "internal": "⚙️",
    "unknown": "❓",
}
REDACTED = "[REDACTED]"
MAX_BODY_LENGTH = 500
MAX_USER_AGENT_LENGTH = 100
STACK_LINES = 5
# Telegram allows 4096 characters; emoji count double, so keep some room.
MAX_MESSAGE_LENGTH = 4000
OMITTED_NOTE = "\n\n<i>(further details omitted)</i>"


@dataclass(slots=True)
class RequestInfo:
    method: str = "UNKNOWN"
    url: str = "/unknown"
    ip: str = "unknown"
    user_agent: str = "Unknown"
    referer: str = "Direct access"
    headers: dict[str, str] = field(default_factory=dict)
    query: dict[str, Any] = field(default_factory=dict)
    body: Any = None


@dataclass(slots=True)
class ErrorDetails:
    error: BaseException
    request: RequestInfo = field(default_factory=RequestInfo)
    environment: str = "development"
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    additional_info: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class ErrorReport:
    title: str
    message: str
    severity: Severity
    category: Category


def error_status(error: BaseException) -> Optional[int]:
    if isinstance(error, AppError):
        return error.status_code
    return getattr(error, "status_code", None)


def analyze_error(error: BaseException) -> ErrorReport:
    """Classify an exception into title, severity and category."""
    status = error_status(error)
    message = getattr(error, "message", None) or str(error) or "Unknown error occurred"

    if isinstance(error, ValidationFailedError) or type(error).__name__ == "RequestValidationError":
        return ErrorReport("📝 Validation Error", message, "low", "validation")
    if isinstance(error, SQLAlchemyError):
        return ErrorReport("🗄️ Database Error", message, "high", "database")
    if isinstance(error, UnauthorizedError):
        return ErrorReport("🔐 Authentication Error", message, "medium", "authentication")
    if status == 403:
        return ErrorReport("🚫 Authorization Error", message, "medium", "authorization")
    if status is None or status >= 500:
        return ErrorReport("💥 Critical Error", message, "critical", "internal")
    if status >= 400:
        return ErrorReport("⚠️ Client Error", message, "medium", "external")
    return ErrorReport("🚨 API Error", message, "medium", "unknown")


def sanitize(value: Any, sensitive_fields: tuple[str, ...]) -> Any:
    """Recursively redact values whose key contains a sensitive word."""
    if isinstance(value, Mapping):
        cleaned: dict[str, Any] = {}
        for key, item in value.items():
            lowered = str(key).lower()
            if any(word in lowered for word in sensitive_fields):
                cleaned[key] = REDACTED
            else:
                cleaned[key] = sanitize(item, sensitive_fields)
        return cleaned
    if isinstance(value, (list, tuple)):
        return [sanitize(item, sensitive_fields) for item in value]
    return value


def _escape(text: str, limit: int) -> str:
    """HTML-escape ``text``, cutting it so the escaped form fits in ``limit``."""
    escaped = html.escape(text)
    if len(escaped) <= limit:
        return escaped
    pieces: list[str] = []
    size = 0
    for char in text:
        piece = html.escape(char)
        if size + len(piece) > limit - 1:
            break
        pieces.append(piece)
        size += len(piece)
    return "".join(pieces) + "…"


def _dump(value: Any, limit: int) -> str:
    return _escape(json.dumps(value, indent=2, default=str, ensure_ascii=False), limit)


class ErrorReportingService:
    def __init__(
        self,
        notifications: NotificationManager,
        *,
        enabled: bool = False,
        chat_id: Optional[str] = None,
        provider: str = "telegram",
        severity_threshold: Severity = "low",
        sensitive_fields: tuple[str, ...] = ("password", "token", "secret", "authorization"),
        max_reports_per_minute: int = 10,
    ) -> None:
        self._notifications = notifications
        self._enabled = enabled
        self._chat_id = chat_id
        self._provider = provider
        self._threshold = SEVERITY_LEVELS[severity_threshold]
        self._sensitive_fields = tuple(word.lower() for word in sensitive_fields)
        self._max_reports_per_minute = max_reports_per_minute
        self._sent_at: deque[float] = deque()

    @property
    def enabled(self) -> bool:
        return self._enabled

    def enable(self) -> None:
        self._enabled = True
        logger.info("Error reporting enabled")

    def disable(self) -> None:
        self._enabled = False
        logger.info("Error reporting disabled")

    def should_report(self, report: ErrorReport) -> bool:
        return SEVERITY_LEVELS[report.severity] >= self._threshold

    async def report_error(self, details: ErrorDetails) -> None:
        if not self._enabled:
            logger.debug("Error reporting is disabled")
            return
        try:
            report = analyze_error(details.error)
            if not self.should_report(report):
                return
            if not self._chat_id:
                logger.warning("Error reporting chat id not configured, error not sent")
                return
            if self._rate_limited():
                logger.warning("Error report dropped by rate limit: %s", report.title)
                return
            message = self.format_error_message(details, report)
            await self._notifications.send_notification(self._provider, self._chat_id, message)
            logger.info("Error reported via %s: %s", self._provider, report.title)
        except Exception:
            logger.exception("Failed to report error")

    def format_error_message(self, details: ErrorDetails, report: ErrorReport) -> str:
        """Render ``details`` as Telegram HTML no longer than ``MAX_MESSAGE_LENGTH``.

        Free-form values are shortened before they are wrapped in tags, so a
        long report loses detail but never ends inside a tag or an entity.
        Optional sections that do not fit are left out whole.
        """
        request = details.request
        error = details.error
        critical_or_dev = report.severity == "critical" or details.environment == "development"

        user_agent = request.user_agent
        if len(user_agent) > MAX_USER_AGENT_LENGTH:
            user_agent = user_agent[:MAX_USER_AGENT_LENGTH] + "..."

        lines = [
            report.title,
            f"{SEVERITY_EMOJI[report.severity]} <b>Severity:</b> {report.severity.upper()}",
            f"{CATEGORY_EMOJI[report.category]} <b>Category:</b> {report.category.upper()}",
            "",
            f"📅 <b>Timestamp:</b> {details.timestamp.isoformat()}",
            f"🌍 <b>Environment:</b> {_escape(details.environment, 50)}",
            "",
            "🔗 <b>Request Details:</b>",
            f"• <b>Method:</b> {_escape(request.method, 20)}",
            f"• <b>URL:</b> {_escape(request.url, 300)}",
            f"• <b>IP:</b> {_escape(request.ip, 100)}",
            f"• <b>User Agent:</b> {_escape(user_agent, 300)}",
            f"• <b>Referer:</b> {_escape(request.referer, 300)}",
            "",
            "💬 <b>Error Message:</b>",
            f"<code>{_escape(report.message, 1000)}</code>",
            "",
            f"🔢 <b>Error Code:</b> {error_status(error) or 'N/A'}",
        ]
        message = "\n".join(lines)

        sections: list[str] = []
        if request.body:
            body = json.dumps(sanitize(request.body, self._sensitive_fields), indent=2, default=str)
            if len(body) < MAX_BODY_LENGTH:
                sections.append(f"\n\n📦 <b>Request Body:</b>\n<code>{_escape(body, 1000)}</code>")
            else:
                sections.append("\n\n📦 <b>Request Body:</b> <i>(truncated - too large)</i>")

        if request.query:
            sections.append(
                f"\n\n🔍 <b>Query Parameters:</b>\n<code>{_dump(sanitize(request.query, self._sensitive_fields), 800)}</code>"
            )

        if critical_or_dev and error.__traceback__ is not None:
            stack = traceback.format_exception(type(error), error, error.__traceback__)
            tail = "".join(stack).strip().splitlines()[-STACK_LINES:]
            sections.append(f"\n\n📚 <b>Stack Trace:</b>\n<code>{_escape(chr(10).join(tail), 1500)}</code>")

        if details.additional_info:
            sections.append(
                f"\n\nℹ️ <b>Additional Info:</b>\n<code>{_dump(sanitize(details.additional_info, self._sensitive_fields), 800)}</code>"
            )

        if critical_or_dev:
            relevant = {
                key: request.headers[key]
                for key in ("content-type", "x-forwarded-for", "host")
                if request.headers.get(key)
            }
            if request.headers.get("authorization"):
                relevant["authorization"] = REDACTED
            if relevant:
                sections.append(f"\n\n📋 <b>Relevant Headers:</b>\n<code>{_dump(relevant, 500)}</code>")

        omitted = False
        for section in sections:
            if len(message) + len(section) + len(OMITTED_NOTE) > MAX_MESSAGE_LENGTH:
                omitted = True
                continue
            message += section
        if omitted:
            message += OMITTED_NOTE
        return message

    def _rate_limited(self) -> bool:
        now = time.monotonic()
        while self._sent_at and now - self._sent_at[0] > 60:
            self._sent_at.popleft()
        if len(self._sent_at) >= self._max_reports_per_minute:
            return True
        self._sent_at.append(now)
        return False


__all__ = [
    "ErrorDetails",
    "ErrorReport",
    "ErrorReportingService",
    "RequestInfo",
    "analyze_error",
    "sanitize",
]
