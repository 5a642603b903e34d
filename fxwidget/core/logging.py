import json
import logging
import re
import sys
import time
import uuid
from contextvars import ContextVar
from typing import Any, Dict, IO, Optional

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)

# Structured attributes callers may pass through `extra=`
CONTEXT_FIELDS = ("pair", "seq", "method", "path", "status_code", "duration_ms")

# httpx logs every upstream request at INFO; the access line below covers ours
NOISY_LOGGERS = ("httpx", "httpcore", "uvicorn.access")

_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9._\-]{1,64}$")

access_logger = logging.getLogger("fxwidget.access")


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        record.request_id = request_id_ctx.get() or "-"
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line; context fields are emitted only when set."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        created = time.gmtime(record.created)
        base: Dict[str, Any] = {
            "time": time.strftime("%Y-%m-%dT%H:%M:%S", created) + f".{int(record.msecs):03d}Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", "-"),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                base[field] = value
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(base, ensure_ascii=False, default=str)


def init_logging(debug: bool = False, stream: Optional[IO[str]] = None) -> None:
    root = logging.getLogger()
    root.handlers.clear()
    level = logging.DEBUG if debug else logging.INFO
    root.setLevel(level)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(level)
    handler.addFilter(RequestIdFilter())
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def resolve_request_id(header_value: Optional[str]) -> str:
    """Reuse a caller-supplied X-Request-ID when it is a plain token."""
    if header_value and _REQUEST_ID_RE.match(header_value):
        return header_value
    return uuid.uuid4().hex


async def request_context_middleware(request, call_next):  # type: ignore
    rid = resolve_request_id(request.headers.get("x-request-id"))
    token = request_id_ctx.set(rid)
    started = time.perf_counter()
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        response.headers["X-Request-ID"] = rid
        return response
    finally:
        access_logger.info(
            "%s %s -> %d",
            request.method,
            request.url.path,
            status_code,
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": status_code,
                "duration_ms": round((time.perf_counter() - started) * 1000, 1),
            },
        )
        request_id_ctx.reset(token)
