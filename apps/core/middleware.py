import contextvars
import logging
import time
import uuid

logger = logging.getLogger(__name__)

_current_request = contextvars.ContextVar("current_request", default=None)


def get_current_request():
    """Request being handled by this thread/task, or None outside a request."""
    return _current_request.get()


class RequestLogMiddleware:
    """
    Tags each request with an id (X-Request-ID header or a new uuid4), exposes
    it to logging filters through get_current_request() and logs one line per
    response.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        token = _current_request.set(request)
        started = time.monotonic()
        try:
            response = self.get_response(request)
        finally:
            _current_request.reset(token)

        duration_ms = (time.monotonic() - started) * 1000
        logger.info(
            "%s %s -> %s (%.1f ms)",
            request.method,
            request.path,
            response.status_code,
            duration_ms,
            extra={"request_id": request.id, "status_code": response.status_code},
        )
        response["X-Request-ID"] = request.id
        return response
