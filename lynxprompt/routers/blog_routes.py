from fastapi import APIRouter, Depends, Query

from ..core.auth import public_access
from ..core.database import Databases, get_databases
from ..schemas.blog import BlogListResponse
from ..services.blog_service import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, BlogService
from ..utils.errors import internal_error

router = APIRouter(
    prefix="/api/blog",
    tags=["blog"],
    dependencies=[Depends(public_access)],
)


@router.get("", response_model=BlogListResponse)
async def list_posts(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    databases: Databases = Depends(get_databases),
):
    try:
        return await BlogService(databases).list_published(page=page, limit=limit)
    except Exception as e:
        raise internal_error(f"[BLOG] Error fetching blog posts: {e}", user_message="Failed to fetch blog posts")
