import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from typing import Any, Dict, Optional

request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
owner_id_ctx: ContextVar[Optional[str]] = ContextVar("owner_id", default=None)

# record attribute -> context variable feeding it
_CONTEXT_FIELDS = {"request_id": request_id_ctx, "owner_id": owner_id_ctx}
# extra= keys copied into the JSON payload when present
_EXTRA_FIELDS = ("method", "path", "status", "duration_ms")

access_logger = logging.getLogger("pesotrack.access")


class RequestContextFilter(logging.Filter):
    """Copy per-request context (or '-') onto every record."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        for attr, var in _CONTEXT_FIELDS.items():
            setattr(record, attr, var.get() or "-")
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        stamp = time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
        payload: Dict[str, Any] = {
            "time": f"{stamp}.{int(record.msecs):03d}Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for attr in _CONTEXT_FIELDS:
            payload[attr] = getattr(record, attr, "-")
        for attr in _EXTRA_FIELDS:
            if hasattr(record, attr):
                payload[attr] = getattr(record, attr)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def init_logging(debug: bool = False) -> None:
    level = logging.DEBUG if debug else logging.INFO
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(RequestContextFilter())
    handler.setFormatter(JsonFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    root.addHandler(handler)


async def request_context_middleware(request, call_next):  # type: ignore
    """Tag the request with an id, echo it back and write one access line."""
    rid = uuid.uuid4().hex
    rid_token = request_id_ctx.set(rid)
    # Owner is resolved later by the auth dependency.
    owner_token = owner_id_ctx.set(None)
    started = time.perf_counter()
    status = 500
    try:
        response = await call_next(request)
        status = response.status_code
        response.headers["X-Request-ID"] = rid
        return response
    finally:
        # Endpoints run in a child context; pick the owner up from request.state.
        owner_id_ctx.set(getattr(request.state, "owner_id", None))
        access_logger.info(
            "%s %s -> %s",
            request.method,
            request.url.path,
            status,
            extra={
                "method": request.method,
                "path": request.url.path,
                "status": status,
                "duration_ms": round((time.perf_counter() - started) * 1000, 1),
            },
        )
        owner_id_ctx.reset(owner_token)
        request_id_ctx.reset(rid_token)
