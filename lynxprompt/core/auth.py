import hashlib
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Iterator, Optional, Tuple

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.routing import APIRoute

from .config import settings
from .database import Databases, get_databases

logger = logging.getLogger(__name__)

# API tokens look like lp_<64 hex chars>; only the SHA-256 hash is stored
TOKEN_PREFIX = "lp_"
TOKEN_RANDOM_BYTES = 32

ROLE_PERMISSIONS = {
    "FULL": {"blueprints:read", "blueprints:write", "profile:read", "profile:write"},
    "BLUEPRINTS_FULL": {"blueprints:read", "blueprints:write"},
    "BLUEPRINTS_READONLY": {"blueprints:read"},
    "PROFILE_FULL": {"profile:read", "profile:write"},
}

EXPIRED_TOKEN_MESSAGE = (
    "Your API token has expired. Please generate a new token at "
    "https://lynxprompt.com/settings?tab=api-tokens"
)


@dataclass
class ApiTokenContext:
    user_id: str
    token_id: str
    role: str
    user: Any


def generate_token() -> Tuple[str, str, str]:
    """Return (raw_token, token_hash, last_four_chars). The raw token is shown once."""
    random_part = secrets.token_hex(TOKEN_RANDOM_BYTES)
    raw_token = f"{TOKEN_PREFIX}{random_part}"
    return raw_token, hash_token(raw_token), random_part[-4:]


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def is_valid_token_format(token: str) -> bool:
    return token.startswith(TOKEN_PREFIX) and len(token) == len(TOKEN_PREFIX) + TOKEN_RANDOM_BYTES * 2


def has_permission(role: str, action: str) -> bool:
    return action in ROLE_PERMISSIONS.get(str(role), set())


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization or not authorization.startswith("Bearer "):
        return None
    raw_token = authorization[len("Bearer "):].strip()
    if not is_valid_token_format(raw_token):
        return None
    return raw_token


async def token_expired_at(users_db, authorization: Optional[str]) -> Optional[datetime]:
    """Expiry timestamp of a well-formed, unrevoked but expired token, else None."""
    raw_token = _bearer_token(authorization)
    if raw_token is None:
        return None

    token = await users_db.apitoken.find_unique(where={"token_hash": hash_token(raw_token)})
    if token is None or token.revoked_at is not None:
        return None
    if token.expires_at < datetime.now(timezone.utc):
        return token.expires_at
    return None


async def validate_api_token(users_db, authorization: Optional[str]) -> Optional[ApiTokenContext]:
    raw_token = _bearer_token(authorization)
    if raw_token is None:
        return None

    token = await users_db.apitoken.find_unique(
        where={"token_hash": hash_token(raw_token)},
        include={"user": True},
    )
    if token is None or token.revoked_at is not None:
        return None
    if token.expires_at < datetime.now(timezone.utc):
        return None

    try:
        await users_db.apitoken.update(
            where={"id": token.id},
            data={"last_used_at": datetime.now(timezone.utc)},
        )
    except Exception as e:
        logger.warning(f"[AUTH] Could not record token usage for token={token.id}: {e}")

    return ApiTokenContext(
        user_id=token.user_id,
        token_id=token.id,
        role=str(token.role),
        user=token.user,
    )


def session_cookie(request: Request) -> Optional[str]:
    name = settings.session_cookie_name
    return request.cookies.get(f"__Secure-{name}") or request.cookies.get(name)


async def optional_session_user(
    request: Request,
    databases: Databases = Depends(get_databases),
):
    """Signed-in web user, or None when there is no valid session cookie."""
    session_token = session_cookie(request)
    if not session_token:
        return None

    session = await databases.users.session.find_unique(
        where={"session_token": session_token},
        include={"user": True},
    )
    if session is None or session.user is None:
        return None
    if session.expires < datetime.now(timezone.utc):
        return None
    return session.user


# ---------------------------------------------------------------------------
# Access policies. Every /api router declares exactly one of these in its
# dependencies; ensure_access_declared() rejects routes that declare none.
# ---------------------------------------------------------------------------

async def public_access() -> None:
    return None


async def require_session_user(user=Depends(optional_session_user)):
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return user


async def require_api_user(
    request: Request,
    databases: Databases = Depends(get_databases),
) -> ApiTokenContext:
    authorization = request.headers.get("authorization")

    expired_at = await token_expired_at(databases.users, authorization)
    if expired_at is not None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": "Token expired",
                "expired_at": expired_at.isoformat(),
                "message": EXPIRED_TOKEN_MESSAGE,
            },
        )

    context = await validate_api_token(databases.users, authorization)
    if context is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return context


ACCESS_POLICIES = (public_access, require_session_user, require_api_user)


def declared_access(dependencies: Iterable[Any]) -> Optional[str]:
    for dependency in dependencies:
        if getattr(dependency, "dependency", None) in ACCESS_POLICIES:
            return dependency.dependency.__name__
    return None


def _str_attr(obj: Any, name: str) -> str:
    value = getattr(obj, name, "")
    return value if isinstance(value, str) else ""


def iter_api_routes(
    routes: Iterable[Any],
    prefix: str = "",
    inherited: Tuple[Any, ...] = (),
    router_prefix: str = "",
) -> Iterator[Tuple[str, APIRoute, Tuple[Any, ...]]]:
    """
    Yield ``(path, route, dependencies)`` for every API route, descending into
    included routers.

    Older FastAPI releases copy included routes onto the app; newer ones keep
    the included router as a single entry. Either way the prefixes and
    dependencies of every enclosing router are carried down to the leaf route.
    """
    for item in routes:
        if isinstance(item, APIRoute):
            path = item.path
            # APIRouter bakes its own prefix into the paths it registers
            if router_prefix and path.startswith(router_prefix):
                path = path[len(router_prefix):]
            yield prefix + path, item, inherited + tuple(item.dependencies)
            continue

        router = getattr(item, "router", None)
        inner = router if router is not None else item
        nested = getattr(inner, "routes", None)
        if nested is None:
            nested = getattr(item, "routes", None)
        if nested is None:
            continue

        dependencies = tuple(getattr(item, "dependencies", None) or ())
        if inner is not item:
            dependencies += tuple(getattr(inner, "dependencies", None) or ())

        own_prefix = _str_attr(inner, "prefix")
        include_prefix = _str_attr(item, "prefix") if inner is not item else ""
        if include_prefix == own_prefix:
            include_prefix = ""

        yield from iter_api_routes(
            nested,
            prefix + include_prefix + own_prefix,
            inherited + dependencies,
            own_prefix,
        )


def access_table(app: FastAPI) -> Dict[Tuple[str, str], Optional[str]]:
    """Map ``(method, path)`` of every API route to the policy it declares."""
    table = {}
    for path, route, dependencies in iter_api_routes(app.router.routes):
        for method in route.methods:
            table[(method, path)] = declared_access(dependencies)
    return table


def ensure_access_declared(app: FastAPI, prefixes: Iterable[str] = ("/api",)) -> None:
    prefixes = tuple(prefixes)
    undeclared = sorted(
        f"{method} {path}"
        for (method, path), policy in access_table(app).items()
        if path.startswith(prefixes) and policy is None
    )
    if undeclared:
        raise RuntimeError(f"Routes without an access policy: {', '.join(undeclared)}")
