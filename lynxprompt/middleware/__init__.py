from .auth_guard import AuthGuardMiddleware
from .request_id import RequestIDMiddleware
from .request_size_limit import RequestSizeLimitMiddleware
from .security_headers import SecurityHeadersMiddleware

__all__ = ["AuthGuardMiddleware", "RequestIDMiddleware", "RequestSizeLimitMiddleware", "SecurityHeadersMiddleware"]
