"""
Redirects anonymous visitors away from account pages.

Only the presence of a session cookie is checked here. The page handlers
validate the session itself against the users database.
"""
from urllib.parse import urlencode

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse

from ..core.auth import session_cookie

PROTECTED_PREFIXES = ("/dashboard", "/settings")
SIGN_IN_PATH = "/auth/signin"


class AuthGuardMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if path.startswith(PROTECTED_PREFIXES) and not session_cookie(request):
            return RedirectResponse(f"{SIGN_IN_PATH}?{urlencode({'callbackUrl': path})}")
        return await call_next(request)
