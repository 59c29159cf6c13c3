import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from ..core.auth import ApiTokenContext, has_permission, require_api_user, require_session_user
from ..core.database import Databases, get_databases
from ..schemas.favorites import FavoriteOut, FavoriteToggleRequest, FavoriteToggleResponse
from ..schemas.user import AccountResponse
from ..services.account_service import AccountService
from ..services.composition import DanglingReferenceError
from ..services.favorites_service import FavoritesService
from ..utils.errors import internal_error, not_found

logger = logging.getLogger(__name__)

# Web session routes
router = APIRouter(
    prefix="/api/user",
    tags=["user"],
    dependencies=[Depends(require_session_user)],
)

# API token routes used by the CLI
api_v1_router = APIRouter(
    prefix="/api/v1/user",
    tags=["api-v1"],
    dependencies=[Depends(require_api_user)],
)


@router.get("/favorites", response_model=List[FavoriteOut])
async def list_favorites(
    user=Depends(require_session_user),
    databases: Databases = Depends(get_databases),
):
    try:
        return await FavoritesService(databases).list_for_user(user.id)
    except Exception as e:
        raise internal_error(f"[FAVORITES] Error fetching favorites for user={user.id}: {e}", user_message="Failed to fetch favorites")


@router.post("/favorites", response_model=FavoriteToggleResponse)
async def toggle_favorite(
    payload: FavoriteToggleRequest,
    user=Depends(require_session_user),
    databases: Databases = Depends(get_databases),
):
    try:
        favorited = await FavoritesService(databases).toggle(user.id, payload.blueprint_id)
    except DanglingReferenceError:
        raise not_found("Blueprint not found")
    except Exception as e:
        raise internal_error(f"[FAVORITES] Error toggling favorite for user={user.id}: {e}", user_message="Failed to toggle favorite")
    return FavoriteToggleResponse(favorited=favorited)


@api_v1_router.get("", response_model=AccountResponse)
async def current_account(
    context: ApiTokenContext = Depends(require_api_user),
    databases: Databases = Depends(get_databases),
):
    if not has_permission(context.role, "profile:read") and not has_permission(context.role, "blueprints:read"):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Token does not have permission to read user info")

    if context.user is None:
        raise not_found("User not found")

    try:
        return await AccountService(databases).summary(context.user)
    except Exception as e:
        raise internal_error(f"[API_V1] Error fetching account for user={context.user_id}: {e}", user_message="Failed to fetch user info")
