"""Translate exceptions into the ``{"errors": {"msg": ...}}`` envelope.

Unexpected failures are reported through the error reporting service as a
background task, so the report runs after the response has been sent.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.background import BackgroundTask
from starlette.exceptions import HTTPException as StarletteHTTPException

from crudapi.core.container import ApplicationContainer
from crudapi.modules.common.exceptions import AppError
from crudapi.modules.error_reporting import ErrorDetails, RequestInfo

logger = logging.getLogger(__name__)


def error_body(message: str) -> dict[str, Any]:
    return {"errors": {"msg": message}}


def _request_info(request: Request, body: Any = None) -> RequestInfo:
    headers = request.headers
    client_ip = headers.get("x-forwarded-for") or (request.client.host if request.client else "unknown")
    return RequestInfo(
        method=request.method,
        url=str(request.url),
        ip=client_ip,
        user_agent=headers.get("user-agent", "Unknown"),
        referer=headers.get("referer", "Direct access"),
        headers={key.lower(): value for key, value in headers.items()},
        query=dict(request.query_params),
        body=body,
    )


def _respond(
    request: Request,
    exc: BaseException,
    status_code: int,
    message: str,
    *,
    body: Any = None,
) -> JSONResponse:
    container: Optional[ApplicationContainer] = getattr(request.app.state, "container", None)
    background = None
    if container is not None:
        container.stats.errors += 1
        if container.error_reporter.enabled:
            details = ErrorDetails(
                error=exc,
                request=_request_info(request, body),
                environment=container.settings.environment,
            )
            background = BackgroundTask(container.error_reporter.report_error, details)
    return JSONResponse(status_code=status_code, content=error_body(message), background=background)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return _respond(request, exc, exc.status_code, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug("Request validation failed: %s", exc.errors())
    return _respond(
        request,
        exc,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "VALIDATION_FAILED",
        body=exc.body,
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "HTTP_ERROR"
    response = _respond(request, exc, exc.status_code, message)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _respond(request, exc, status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


__all__ = ["error_body", "register_error_handlers"]
