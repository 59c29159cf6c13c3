import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..core.auth import optional_session_user, public_access
from ..core.database import Databases, get_databases
from ..schemas.blueprint import BlueprintDetail, BlueprintListResponse
from ..services.blueprint_service import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, BlueprintService
from ..utils.errors import internal_error, not_found
from ..utils.log_sanitizer import sanitize_for_log

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/blueprints",
    tags=["blueprints"],
    dependencies=[Depends(public_access)],
)


@router.get("", response_model=BlueprintListResponse)
async def list_blueprints(
    search: Optional[str] = Query(None, max_length=200),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    databases: Databases = Depends(get_databases),
):
    try:
        blueprints, total = await BlueprintService(databases).list_public(search, limit, offset)
    except Exception as e:
        raise internal_error(f"[BLUEPRINTS] Error listing blueprints: {e}", user_message="Failed to fetch blueprints")

    return BlueprintListResponse(
        blueprints=blueprints,
        total=total,
        limit=limit,
        offset=offset,
        has_more=offset + len(blueprints) < total,
    )


@router.get("/{blueprint_id}", response_model=BlueprintDetail)
async def get_blueprint(
    blueprint_id: str,
    databases: Databases = Depends(get_databases),
    viewer=Depends(optional_session_user),
):
    service = BlueprintService(databases)
    try:
        blueprint = await service.get(blueprint_id, viewer_id=viewer.id if viewer else None)
    except Exception as e:
        raise internal_error(f"[BLUEPRINTS] Error fetching blueprint {sanitize_for_log(blueprint_id)}: {e}", user_message="Failed to fetch blueprint")

    if blueprint is None:
        raise not_found("Blueprint not found")

    try:
        await service.record_view(blueprint.id)
        blueprint.downloads += 1
    except Exception as e:
        logger.warning(f"[BLUEPRINTS] Could not record view for {blueprint.id}: {e}")

    return blueprint
