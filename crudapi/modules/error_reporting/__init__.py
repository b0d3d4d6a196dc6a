"""Error reporting over the notification channel."""

from .service import ErrorDetails, ErrorReport, ErrorReportingService, RequestInfo, analyze_error, sanitize

__all__ = ["ErrorDetails", "ErrorReport", "ErrorReportingService", "RequestInfo", "analyze_error", "sanitize"]
