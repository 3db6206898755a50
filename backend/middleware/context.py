import logging
import re
import time
import uuid
from contextvars import ContextVar
from typing import Optional
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from config import logger

REQUEST_ID_HEADER = "X-Request-ID"
# Caller-supplied ids are echoed into headers and logs.
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def resolve_request_id(header_value: Optional[str]) -> str:
    """Reuse a well-formed incoming id, otherwise mint a short one."""
    if header_value and _VALID_REQUEST_ID.match(header_value):
        return header_value
    return uuid.uuid4().hex[:12]


class RequestIdFilter(logging.Filter):
    """Stamps ``record.request_id`` so handlers can format it."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get() or "-"
        return True


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        token = request_id_var.set(request_id)
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "[%s] %s %s raised after %.2f ms",
                request_id, request.method, request.url.path,
                (time.perf_counter() - started) * 1000
            )
            raise
        finally:
            request_id_var.reset(token)

        elapsed = time.perf_counter() - started
        logger.info(
            "[%s] %s %s -> %s in %.2f ms",
            request_id, request.method, request.url.path, response.status_code, elapsed * 1000
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Response-Time"] = f"{elapsed:.3f}s"
        return response


def get_request_id() -> Optional[str]:
    return request_id_var.get()


logger.addFilter(RequestIdFilter())
