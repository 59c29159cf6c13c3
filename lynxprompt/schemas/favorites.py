from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import CamelModel


class FavoriteOut(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    downloads: int = 0
    favorites: int = 0
    tier: str
    author: str
    is_official: bool = False
    favorited_at: datetime


class FavoriteToggleRequest(CamelModel):
    blueprint_id: str = Field(..., min_length=1)


class FavoriteToggleResponse(CamelModel):
    favorited: bool
