from datetime import datetime
from typing import Optional

from .base import CamelModel


class SupportTagOut(CamelModel):
    id: str
    name: str
    slug: str
    color: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None


class SupportCategoryOut(CamelModel):
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    order: int
    is_active: bool
    created_at: Optional[datetime] = None
