"""
Single-line JSON logs tagged with the request they belong to.

    {"ts": "2026-02-01T10:00:00.123Z", "level": "INFO", "logger": "leaddesk.services.lead_store",
     "msg": "Lead stored", "request_id": "9f...", "method": "POST", "path": "/api/leads", "lead_id": 3}

The request fields come from a RequestContext bound by the HTTP middleware; log lines
written outside a request (startup, shutdown) simply omit them.
"""
import json
import logging
import uuid
from contextvars import ContextVar, Token
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

# Whitelisted `extra=` keys; anything else passed to a log call is dropped
EXTRA_FIELDS = ("lead_id", "source", "error_code", "status", "duration_ms")

NOISY_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "aiosqlite", "httpcore", "httpx")


@dataclass(frozen=True)
class RequestContext:
    request_id: str
    method: str
    path: str


_request_ctx: ContextVar[Optional[RequestContext]] = ContextVar("leaddesk_request", default=None)


def new_request_id() -> str:
    return uuid.uuid4().hex


def bind_request(request_id: str, method: str, path: str) -> Token:
    """Attach request info to every log line in the current context. Pass the token to unbind_request."""
    return _request_ctx.set(RequestContext(request_id, method, path))


def unbind_request(token: Token) -> None:
    _request_ctx.reset(token)


def current_request() -> Optional[RequestContext]:
    return _request_ctx.get()


class JsonLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry = {
            "ts": created.strftime("%Y-%m-%dT%H:%M:%S.") + f"{int(record.msecs):03d}Z",
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        ctx = current_request()
        if ctx is not None:
            entry["request_id"] = ctx.request_id
            entry["method"] = ctx.method
            entry["path"] = ctx.path

        for key in EXTRA_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                entry[key] = value

        if record.exc_info and record.exc_info[0] is not None:
            entry["exc"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def configure_structured_logging(log_level: str = "INFO") -> None:
    """Route every logger through one stderr handler with JSON output. Safe to call repeatedly."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for handler in root.handlers[:]:
        root.removeHandler(handler)
    handler = logging.StreamHandler()
    handler.setFormatter(JsonLogFormatter())
    root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
