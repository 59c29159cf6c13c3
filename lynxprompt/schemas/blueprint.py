from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .base import CamelModel


class OwnerProfile(CamelModel):
    """Public slice of a users-schema profile attached to app-schema rows."""
    id: str
    name: Optional[str] = None
    display_name: Optional[str] = None
    image: Optional[str] = None


class BlueprintSummary(CamelModel):
    id: str
    name: str
    description: str = ""
    type: str
    tier: str
    visibility: str
    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    platforms: List[str] = Field(default_factory=list)
    author: str
    author_id: Optional[str] = None
    owner: Optional[OwnerProfile] = None
    downloads: int = 0
    favorites: int = 0
    is_official: bool = False
    created_at: Optional[datetime] = None


class BlueprintDetail(BlueprintSummary):
    content: str
    target_platform: Optional[str] = None
    compatible_with: List[str] = Field(default_factory=list)


class BlueprintListResponse(CamelModel):
    blueprints: List[BlueprintSummary]
    total: int
    limit: int
    offset: int
    has_more: bool
