from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from ..core.config import settings

BODYLESS_METHODS = ("GET", "HEAD", "OPTIONS")


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Rejects bodies over the configured limit, declared or streamed."""

    def __init__(self, app, max_bytes: int = None):
        super().__init__(app)
        self.max_bytes = max_bytes or settings.max_request_size_mb * 1024 * 1024

    def _too_large(self, detail: str) -> JSONResponse:
        return JSONResponse(status_code=413, content={"detail": detail})

    async def dispatch(self, request: Request, call_next):
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.max_bytes:
            return self._too_large("Request too large")

        if request.method in BODYLESS_METHODS:
            return await call_next(request)

        # Chunked uploads carry no Content-Length, so count what actually arrives
        chunks = []
        received = 0
        async for chunk in request.stream():
            received += len(chunk)
            if received > self.max_bytes:
                return self._too_large("Request body too large")
            chunks.append(chunk)
        body = b"".join(chunks)

        # Hand the buffered body on to the route
        request._body = body
        body_sent = False

        async def receive():
            nonlocal body_sent
            if not body_sent:
                body_sent = True
                return {"type": "http.request", "body": body, "more_body": False}
            return {"type": "http.request", "body": b"", "more_body": False}

        request._receive = receive
        return await call_next(request)
