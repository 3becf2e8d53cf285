"""
Request logging middleware.

One log line per request with:
- Correlation id (X-Request-ID, generated when absent)
- Method, path, status and duration, with slow requests flagged
- Optional request body, with credential fields redacted
"""

import json
import logging
import time
import uuid
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Set
from urllib.parse import parse_qsl

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

logger = logging.getLogger("librarydesk.api")

REDACTED = "[REDACTED]"


@dataclass
class LoggingConfig:
    """Configuration for request logging."""

    enabled: bool = True

    # Request bodies are only logged when asked for (debug)
    log_request_body: bool = False
    max_body_log_size: int = 4096

    excluded_paths: Set[str] = field(default_factory=lambda: {
        "/health",
        "/favicon.ico",
    })

    # Form and JSON fields never written to the log
    redacted_fields: Set[str] = field(default_factory=lambda: {
        "password",
        "password_hash",
    })

    slow_request_threshold: float = 1.0

    request_id_header: str = "X-Request-ID"


class StructuredLogFormatter(logging.Formatter):
    """JSON formatter for log aggregators."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = request_id_var.get()
        if request_id:
            log_data["request_id"] = request_id

        for attr in ("method", "path", "status_code", "duration_ms", "client_ip", "body"):
            if hasattr(record, attr):
                log_data[attr] = getattr(record, attr)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def redact_sensitive_data(data: Any, redacted_fields: Set[str]) -> Any:
    """
    Recursively replace values of sensitive keys.

    Args:
        data: dict, list or primitive
        redacted_fields: lower-case key names to hide

    Returns:
        Copy of ``data`` with sensitive values replaced.
    """
    if isinstance(data, dict):
        return {
            key: REDACTED if key.lower() in redacted_fields else redact_sensitive_data(value, redacted_fields)
            for key, value in data.items()
        }
    if isinstance(data, list):
        return [redact_sensitive_data(item, redacted_fields) for item in data]
    return data


def get_request_id() -> str:
    """Get current request ID from context."""
    return request_id_var.get()


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs every request that is not excluded."""

    def __init__(self, app: FastAPI, config: Optional[LoggingConfig] = None):
        super().__init__(app)
        self.config = config or LoggingConfig()

    async def _read_body(self, request: Request) -> Optional[str]:
        """Body as text with credentials redacted; forms and JSON are understood."""
        body = await request.body()
        if not body:
            return None
        if len(body) > self.config.max_body_log_size:
            return f"[BODY TOO LARGE: {len(body)} bytes]"

        content_type = request.headers.get("content-type", "")
        text = body.decode("utf-8", errors="replace")

        if content_type.startswith("application/x-www-form-urlencoded"):
            fields: Dict[str, str] = dict(parse_qsl(text, keep_blank_values=True))
            return json.dumps(redact_sensitive_data(fields, self.config.redacted_fields))

        if content_type.startswith("application/json"):
            try:
                parsed = json.loads(text)
            except json.JSONDecodeError:
                return text
            return json.dumps(redact_sensitive_data(parsed, self.config.redacted_fields))

        return f"[{content_type or 'unknown'} body: {len(body)} bytes]"

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(
            self.config.request_id_header,
            str(uuid.uuid4())[:8],
        )
        request_id_var.set(request_id)

        if not self.config.enabled or request.url.path in self.config.excluded_paths:
            response = await call_next(request)
            response.headers[self.config.request_id_header] = request_id
            return response

        start_time = time.time()

        extra: Dict[str, Any] = {
            "method": request.method,
            "path": request.url.path,
            "client_ip": request.client.host if request.client else None,
        }
        if self.config.log_request_body:
            body = await self._read_body(request)
            if body:
                extra["body"] = body

        response = await call_next(request)

        duration = time.time() - start_time
        extra["duration_ms"] = round(duration * 1000, 2)
        extra["status_code"] = response.status_code
        response.headers[self.config.request_id_header] = request_id

        if response.status_code >= 500:
            log_level = logging.ERROR
        elif response.status_code >= 400 or duration > self.config.slow_request_threshold:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        message = f"{request.method} {request.url.path} -> {response.status_code} ({extra['duration_ms']}ms)"
        if duration > self.config.slow_request_threshold:
            message = f"[SLOW] {message}"

        logger.log(log_level, message, extra=extra)

        return response


def setup_logging(
    app: FastAPI,
    config: Optional[LoggingConfig] = None,
    structured: bool = True,
) -> None:
    """
    Install the request logging middleware.

    Args:
        app: FastAPI application instance.
        config: Logging configuration.
        structured: Emit JSON lines from the ``librarydesk`` logger.
    """
    if config is None:
        config = LoggingConfig()

    if structured:
        library_logger = logging.getLogger("librarydesk")
        if not any(isinstance(h.formatter, StructuredLogFormatter) for h in library_logger.handlers):
            handler = logging.StreamHandler()
            handler.setFormatter(StructuredLogFormatter())
            library_logger.addHandler(handler)
        library_logger.setLevel(logging.INFO)

    app.add_middleware(RequestLoggingMiddleware, config=config)
