from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .base import CamelModel


class BlogAuthor(CamelModel):
    id: str
    name: Optional[str] = None
    display_name: Optional[str] = None
    image: Optional[str] = None


class BlogPostOut(CamelModel):
    id: str
    slug: str
    title: str
    excerpt: Optional[str] = None
    cover_image: Optional[str] = None
    status: str
    tags: List[str] = Field(default_factory=list)
    published_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    author_id: str
    author_name: str
    author: BlogAuthor


class BlogListResponse(CamelModel):
    posts: List[BlogPostOut]
    total: int
    has_more: bool
    page: int
    total_pages: int
