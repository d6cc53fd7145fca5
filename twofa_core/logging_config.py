"""
Structured Logging
==================
One log stream for the service: structlog events from ``twofa_core`` modules
and plain stdlib records from uvicorn/fastapi are rendered by the same root
handler, as JSON in production or as a single readable line locally.

Usage:
    from twofa_core.logging_config import setup_logging, RequestLoggingMiddleware

    setup_logging(service_name="twofa-core")
    app.add_middleware(RequestLoggingMiddleware)

Fields named like credentials (``password``, ``otp``, ``code`` ...) are
replaced with ``[redacted]`` before rendering. The console OTP delivery line
is the one place a code is written, and it goes through the message text.
"""

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import structlog

request_id_var: ContextVar[str] = ContextVar("request_id", default="")
service_name_var: ContextVar[str] = ContextVar("service_name", default="twofa-core")

SENSITIVE_FIELDS = frozenset({
    "password",
    "password_hash",
    "otp",
    "code",
    "code_hash",
    "salt",
})
REDACTED = "[redacted]"


def _scrub(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {
        key: REDACTED if key in SENSITIVE_FIELDS else value
        for key, value in fields.items()
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per line; ``extra_data`` fields are merged in."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": service_name_var.get(),
            "request_id": request_id_var.get() or None,
        }
        entry.update(_scrub(getattr(record, "extra_data", None) or {}))

        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """``time LEVEL [logger] message key=value ...`` for local runs."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)-7s [%(name)s] %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = _scrub(getattr(record, "extra_data", None) or {})
        request_id = request_id_var.get()
        if request_id:
            fields.setdefault("request_id", request_id)
        if fields:
            line += " " + " ".join(f"{key}={value}" for key, value in fields.items())
        return line


def _redact(logger, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    return _scrub(event_dict)


def _to_stdlib(logger, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Last processor: the event becomes the record message, the rest ``extra_data``."""
    message = event_dict.pop("event", "")
    exc_info = event_dict.pop("exc_info", None)
    kwargs: Dict[str, Any] = {"msg": message, "extra": {"extra_data": event_dict}}
    if exc_info:
        kwargs["exc_info"] = exc_info
    return kwargs


def setup_logging(
    service_name: str,
    level: str = "INFO",
    json_output: bool = True,
) -> logging.Logger:
    """
    Route structlog through stdlib and install a single stdout handler.

    Args:
        service_name: Stamped on every JSON line as ``service``
        level: Root level name (DEBUG, INFO, WARNING ...)
        json_output: JSON lines when True, ``ConsoleFormatter`` otherwise

    Returns:
        The root logger
    """
    service_name_var.set(service_name)
    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if json_output else ConsoleFormatter())

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(log_level)

    # Requests are logged once by RequestLoggingMiddleware.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            _redact,
            _to_stdlib,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    structlog.get_logger(__name__).info(
        "Logging configured", json_output=json_output, level=logging.getLevelName(log_level)
    )
    return root


def log_audit(
    action: str,
    username: Optional[str] = None,
    outcome: str = "success",
    **details: Any,
) -> None:
    """
    Record an authentication decision on the ``audit`` logger.

    Failures are logged at WARNING. ``details`` carries non-secret context
    such as ``reason`` or ``challenge_id``.

    Example:
        log_audit("auth.login", "alice", "failure", reason="invalid_credentials")
    """
    level = logging.INFO if outcome == "success" else logging.WARNING
    structlog.get_logger("audit").log(
        level,
        f"Audit: {action} ({outcome})",
        audit=True,
        action=action,
        username=username,
        outcome=outcome,
        **details,
    )


def log_error(error: Exception, context: Optional[str] = None, **fields: Any) -> None:
    """
    Log a caught exception on the ``errors`` logger with its traceback.

    ``AuthError`` subclasses contribute their ``code``, and storage failures
    also name the failing ``store``.
    """
    error_fields: Dict[str, Any] = {
        "error_type": type(error).__name__,
        "error_message": str(error),
        "context": context,
    }
    if hasattr(error, "code"):
        error_fields["error_code"] = error.code
    if hasattr(error, "store"):
        error_fields["store"] = error.store

    structlog.get_logger("errors").error(
        f"Error: {context or type(error).__name__}",
        exc_info=error,
        **error_fields,
        **fields,
    )


class RequestLoggingMiddleware:
    """
    Pure ASGI middleware: one access line per request, an ``x-request-id``
    response header, and the id available to every log line in between.
    """

    def __init__(self, app):
        self.app = app
        self.logger = structlog.get_logger("twofa_core.http")

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = uuid.uuid4().hex[:8]
        token = request_id_var.set(request_id)
        method = scope.get("method", "")
        path = scope.get("path", "")
        started = time.perf_counter()
        status_code = 500

        async def send_with_request_id(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message.get("status", 500)
                message["headers"] = list(message.get("headers", [])) + [
                    (b"x-request-id", request_id.encode())
                ]
            await send(message)

        try:
            await self.app(scope, receive, send_with_request_id)
        except Exception as e:
            log_error(e, context=f"{method} {path}")
            raise
        finally:
            duration_ms = round((time.perf_counter() - started) * 1000, 1)
            if status_code >= 500:
                level = logging.ERROR
            elif status_code >= 400:
                level = logging.WARNING
            else:
                level = logging.INFO
            self.logger.log(
                level,
                f"{method} {path} -> {status_code}",
                method=method,
                path=path,
                status_code=status_code,
                duration_ms=duration_ms,
            )
            request_id_var.reset(token)


__all__ = [
    "JSONFormatter",
    "ConsoleFormatter",
    "SENSITIVE_FIELDS",
    "setup_logging",
    "log_audit",
    "log_error",
    "RequestLoggingMiddleware",
    "request_id_var",
    "service_name_var",
]
