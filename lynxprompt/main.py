import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from .core.auth import ensure_access_declared
from .core.config import settings
from .core.database import create_databases
from .middleware import (
    AuthGuardMiddleware,
    RequestIDMiddleware,
    RequestSizeLimitMiddleware,
    SecurityHeadersMiddleware,
)
from .routers import (
    blog_routes,
    blueprint_routes,
    cli_auth_routes,
    config_routes,
    pages,
    support_routes,
    template_redirects,
    user_routes,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(title="LynxPrompt API")

app.state.limiter = cli_auth_routes.limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.base_url] + (["http://localhost:3000"] if settings.is_development else []),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept", "X-Request-ID"],
    max_age=600,
)

app.add_middleware(AuthGuardMiddleware)
app.add_middleware(RequestSizeLimitMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestIDMiddleware)


@app.on_event("startup")
async def startup():
    # Tests replace get_databases through dependency_overrides and never start up
    app.state.databases = create_databases(settings)
    await app.state.databases.connect()
    logger.info("Successfully connected to all databases")


@app.on_event("shutdown")
async def shutdown():
    databases = getattr(app.state, "databases", None)
    if databases is not None:
        await databases.disconnect()


app.include_router(config_routes.router)
app.include_router(support_routes.router)
app.include_router(template_redirects.router)
app.include_router(blueprint_routes.router)
app.include_router(blog_routes.router)
app.include_router(user_routes.router)
app.include_router(user_routes.api_v1_router)
app.include_router(cli_auth_routes.router)
app.include_router(cli_auth_routes.callback_router)
app.include_router(pages.router)

ensure_access_declared(app)


@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": "LynxPrompt API"}


@app.get("/readiness")
async def readiness_check():
    databases = getattr(app.state, "databases", None)
    if databases is None:
        return JSONResponse(status_code=503, content={"status": "not ready", "databases": {}})

    status = await databases.ping()
    if all(status.values()):
        return {"status": "ready", "databases": status}
    return JSONResponse(status_code=503, content={"status": "not ready", "databases": status})


@app.get("/liveness")
async def liveness_check():
    return {"status": "alive", "service": "LynxPrompt API"}
