from .context import RequestContextMiddleware, RequestIdFilter, get_request_id, resolve_request_id

__all__ = [
    "RequestContextMiddleware",
    "RequestIdFilter",
    "get_request_id",
    "resolve_request_id",
]
