"""Tests for error analysis, formatting and delivery through Telegram."""
import json

import httpx
import pytest
from sqlalchemy.exc import OperationalError

from crudapi.modules.common import NotFoundError, UnauthorizedError, ValidationFailedError
from crudapi.modules.error_reporting import (
    ErrorDetails,
    ErrorReportingService,
    RequestInfo,
    analyze_error,
    sanitize,
)
from crudapi.modules.error_reporting.service import MAX_MESSAGE_LENGTH
from crudapi.modules.notifications import NotificationError, NotificationManager, TelegramProvider


class RecordingTransport:
    """Collects outgoing requests and answers with a fixed status."""

    def __init__(self, status_code: int = 200):
        self.status_code = status_code
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json={"ok": self.status_code == 200})


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
async def notifications(transport):
    manager = NotificationManager()
    client = httpx.AsyncClient(transport=httpx.MockTransport(transport))
    manager.register_provider("telegram", TelegramProvider("123:abc", api_url="https://telegram.test", client=client))
    yield manager
    await manager.aclose()


def _details(error: BaseException, **request) -> ErrorDetails:
    return ErrorDetails(error=error, request=RequestInfo(**request), environment="production")


def _raised(error: BaseException) -> BaseException:
    try:
        raise error
    except BaseException as exc:
        return exc


@pytest.mark.parametrize(
    "error, severity, category",
    [
        (ValidationFailedError(), "low", "validation"),
        (OperationalError("SELECT 1", {}, Exception("locked")), "high", "database"),
        (UnauthorizedError(), "medium", "authentication"),
        (NotFoundError(), "medium", "external"),
        (RuntimeError("boom"), "critical", "internal"),
    ],
)
def test_analyze_error(error, severity, category):
    report = analyze_error(error)

    assert report.severity == severity
    assert report.category == category


def test_sanitize_redacts_nested_sensitive_keys():
    cleaned = sanitize(
        {"email": "a@example.com", "Password": "x", "profile": {"apiToken": "t"}, "items": [{"secret": 1}]},
        ("password", "token", "secret"),
    )

    assert cleaned == {
        "email": "a@example.com",
        "Password": "[REDACTED]",
        "profile": {"apiToken": "[REDACTED]"},
        "items": [{"secret": "[REDACTED]"}],
    }


def test_format_error_message_escapes_and_redacts(notifications):
    service = ErrorReportingService(notifications, enabled=True, chat_id="42")
    error = _raised(RuntimeError("<script>alert(1)</script>"))
    details = _details(
        error,
        method="POST",
        url="/api/v1/bots",
        body={"name": "x", "password": "hunter2"},
        headers={"authorization": "Bearer abc", "host": "api.test"},
    )

    message = service.format_error_message(details, analyze_error(error))

    assert "💥 Critical Error" in message
    assert "&lt;script&gt;" in message
    assert "<script>" not in message
    assert "hunter2" not in message
    assert "Bearer abc" not in message
    assert "Stack Trace" in message
    assert "/api/v1/bots" in message


async def test_report_error_posts_to_telegram(notifications, transport):
    service = ErrorReportingService(notifications, enabled=True, chat_id="42")

    await service.report_error(_details(_raised(RuntimeError("boom")), method="GET", url="/api/health"))

    assert len(transport.requests) == 1
    request = transport.requests[0]
    assert request.url.path == "/bot123:abc/sendMessage"
    payload = json.loads(request.content)
    assert payload["chat_id"] == "42"
    assert payload["parse_mode"] == "HTML"
    assert "boom" in payload["text"]


async def test_report_error_respects_threshold(notifications, transport):
    service = ErrorReportingService(notifications, enabled=True, chat_id="42", severity_threshold="high")

    await service.report_error(_details(NotFoundError()))
    await service.report_error(_details(RuntimeError("boom")))

    assert len(transport.requests) == 1


async def test_disabled_service_sends_nothing(notifications, transport):
    service = ErrorReportingService(notifications, enabled=False, chat_id="42")

    await service.report_error(_details(RuntimeError("boom")))
    service.enable()
    await service.report_error(_details(RuntimeError("boom")))
    service.disable()
    await service.report_error(_details(RuntimeError("boom")))

    assert len(transport.requests) == 1


async def test_rate_limit(notifications, transport):
    service = ErrorReportingService(notifications, enabled=True, chat_id="42", max_reports_per_minute=2)

    for _ in range(4):
        await service.report_error(_details(RuntimeError("boom")))

    assert len(transport.requests) == 2


async def test_delivery_failure_never_raises():
    transport = RecordingTransport(status_code=500)
    manager = NotificationManager()
    client = httpx.AsyncClient(transport=httpx.MockTransport(transport))
    manager.register_provider("telegram", TelegramProvider("123:abc", client=client))
    service = ErrorReportingService(manager, enabled=True, chat_id="42")

    await service.report_error(_details(RuntimeError("boom")))

    assert len(transport.requests) == 1
    await manager.aclose()


async def test_provider_errors_surface_from_the_manager():
    manager = NotificationManager()

    with pytest.raises(NotificationError):
        await manager.send_notification("telegram", "42", "hello")

    manager.register_provider("telegram", TelegramProvider(None))
    with pytest.raises(NotificationError):
        await manager.send_notification("telegram", "42", "hello")
    await manager.aclose()


def test_long_reports_are_shortened_without_breaking_markup(notifications):
    service = ErrorReportingService(notifications, enabled=True, chat_id="42")
    error = _raised(RuntimeError("<&>" * 3000))
    details = _details(
        error,
        url="/api/v1/bots?" + "q=<b>" * 500,
        query={"filter": "&" * 5000},
        headers={"host": "api.test"},
    )
    details.additional_info = {"note": "<i>" * 2000}

    message = service.format_error_message(details, analyze_error(error))

    assert len(message) <= MAX_MESSAGE_LENGTH
    assert message.count("<code>") == message.count("</code>")
    assert "<&>" not in message
    for chunk in message.split("&")[1:]:
        assert chunk.startswith(("lt;", "gt;", "amp;", "quot;", "#x27;"))


async def test_telegram_refuses_overlong_messages(notifications, transport):
    with pytest.raises(NotificationError):
        await notifications.send_notification("telegram", "42", "x" * 5000)

    assert transport.requests == []
