from urllib.parse import unquote

from flask import request

from models import db
from models.operation_log import describe_operation

OPERATION_HEADER = "X-Operation-Desc"


def client_ip() -> str:
    # Behind a trusted proxy ProxyFix has already rewritten remote_addr
    return request.remote_addr or "unknown"


def log_operation() -> str:
    """Record the current request in the operation log. Returns its description."""
    raw = request.headers.get(OPERATION_HEADER)
    operation = describe_operation(request.method, request.path, unquote(raw) if raw else None)

    db.operation_log.record(
        ip=client_ip(),
        operation=operation,
        method=request.method,
        path=request.path,
        user_agent=request.headers.get("User-Agent"),
    )
    return operation
