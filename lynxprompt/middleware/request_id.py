"""
Tags every request with an id so log lines from one request can be grouped.
"""
import logging
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from ..utils.log_sanitizer import sanitize_for_log

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        # Reuse the id set by the proxy when there is one
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id

        logger.info(f"[REQUEST] {request.method} {sanitize_for_log(request.url.path)} [ID: {sanitize_for_log(request_id)}]")

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
