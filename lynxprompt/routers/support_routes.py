import logging
from typing import List

from fastapi import APIRouter, Depends

from ..core.auth import public_access
from ..core.database import Databases, get_databases
from ..schemas.support import SupportCategoryOut, SupportTagOut
from ..services.support_service import SupportService
from ..utils.errors import internal_error

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/support",
    tags=["support"],
    dependencies=[Depends(public_access)],
)


@router.get("/tags", response_model=List[SupportTagOut])
async def list_tags(databases: Databases = Depends(get_databases)):
    try:
        return await SupportService(databases.support).active_tags()
    except Exception as e:
        raise internal_error(f"[SUPPORT] Error fetching tags: {e}", user_message="Failed to fetch tags")


@router.get("/categories", response_model=List[SupportCategoryOut])
async def list_categories(databases: Databases = Depends(get_databases)):
    try:
        return await SupportService(databases.support).active_categories()
    except Exception as e:
        raise internal_error(
            f"[SUPPORT] Error fetching categories: {e}",
            user_message="Failed to fetch categories",
        )
