import math
from typing import Any, List, Optional

from ..core.database import Databases
from ..schemas.blog import BlogAuthor, BlogListResponse, BlogPostOut
from ..utils.enums import PostStatusEnum, enum_value
from .composition import MissingReference, merge_by_id

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 50


def to_post(post: Any, user: Optional[Any]) -> BlogPostOut:
    # author_name is copied onto the post when it is written
    author = BlogAuthor(
        id=post.author_id,
        name=(user.name if user is not None else None) or post.author_name,
        display_name=(user.display_name if user is not None else None) or post.author_name,
        image=user.image if user is not None else None,
    )
    return BlogPostOut(
        id=post.id,
        slug=post.slug,
        title=post.title,
        excerpt=post.excerpt,
        cover_image=post.cover_image,
        status=enum_value(post.status),
        tags=list(post.tags or []),
        published_at=post.published_at,
        created_at=post.created_at,
        author_id=post.author_id,
        author_name=post.author_name,
        author=author,
    )


class BlogService:

    def __init__(self, databases: Databases):
        self.databases = databases

    async def _fetch_authors(self, ids: List[str]) -> List[Any]:
        return await self.databases.users.user.find_many(where={"id": {"in": ids}})

    async def list_published(self, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> BlogListResponse:
        page = max(1, page)
        limit = max(1, min(limit, MAX_PAGE_SIZE))
        skip = (page - 1) * limit
        where = {"status": PostStatusEnum.PUBLISHED.value}

        total = await self.databases.blog.blogpost.count(where=where)
        posts = await self.databases.blog.blogpost.find_many(
            where=where,
            order={"published_at": "desc"},
            skip=skip,
            take=limit,
        )

        merged = await merge_by_id(
            posts,
            key=lambda post: post.author_id,
            fetch=self._fetch_authors,
            attach=to_post,
            policy=MissingReference.NULL,
            schema="users",
        )

        return BlogListResponse(
            posts=merged,
            total=total,
            has_more=skip + len(posts) < total,
            page=page,
            total_pages=math.ceil(total / limit),
        )
