from functools import wraps

from flask import g, jsonify, make_response, request

from models import db
from models.rate_limit import RateLimitDecision
from utils.audit import client_ip, log_operation
from utils.log import get_logger

logger = get_logger(__name__)


def check_and_record_operation() -> RateLimitDecision:
    """Apply the per-IP operation limit to the current request."""
    return db.rate_limiter.check_and_record(client_ip(), request.method, request.path)


def _too_many_operations(decision: RateLimitDecision):
    hours = int(db.rate_limiter.window.total_seconds() // 3600)
    resp = jsonify(
        error="Too many operations",
        message=f"A single IP can perform at most {decision.limit} operations within {hours} hours",
        remaining=0,
        resetTime=decision.retry_after,
    )
    resp.status_code = 429
    resp.headers["Retry-After"] = str(decision.retry_after)
    resp.headers["X-RateLimit-Limit"] = str(decision.limit)
    resp.headers["X-RateLimit-Remaining"] = "0"
    return resp


def rate_limited_operation(fn):
    """
    Usage: @rate_limited_operation on create/update/delete views.

    Order: limit check, then operation log, then the view. Rejected requests
    are not written to the operation log. The view can read the logged
    description from ``g.operation_desc``.
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        decision = check_and_record_operation()
        if not decision.allowed:
            logger.warning(
                "operation_rate_limited",
                ip=client_ip(),
                method=request.method,
                path=request.path,
                retry_after=decision.retry_after,
            )
            return _too_many_operations(decision)

        g.operation_desc = log_operation()

        resp = make_response(fn(*args, **kwargs))
        resp.headers["X-RateLimit-Limit"] = str(decision.limit)
        resp.headers["X-RateLimit-Remaining"] = str(decision.remaining)
        return resp
    return wrapper
