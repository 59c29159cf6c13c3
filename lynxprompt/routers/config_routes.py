from fastapi import APIRouter, Depends

from ..core.auth import public_access
from ..core.config import settings
from ..schemas.config import PublicConfig

router = APIRouter(
    prefix="/api/config",
    tags=["config"],
    dependencies=[Depends(public_access)],
)


@router.get("/public", response_model=PublicConfig)
async def public_config():
    """Values the browser bundle reads at runtime instead of at build time."""
    return PublicConfig(
        turnstile_site_key=settings.next_public_turnstile_site_key or None,
        umami_website_id=settings.next_public_umami_website_id or None,
    )
