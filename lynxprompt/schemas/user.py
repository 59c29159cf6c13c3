"""
Schemas for the token-authenticated account endpoint.
"""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class SubscriptionInfo(BaseModel):
    plan: str
    status: Optional[str] = None
    interval: Optional[str] = None
    current_period_end: Optional[datetime] = None


class AccountStats(BaseModel):
    blueprints_count: int


class AccountInfo(BaseModel):
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    display_name: Optional[str] = None
    persona: Optional[str] = None
    skill_level: Optional[str] = None
    subscription: SubscriptionInfo
    stats: AccountStats
    created_at: datetime


class AccountResponse(BaseModel):
    user: AccountInfo


class PageUser(BaseModel):
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    display_name: Optional[str] = None
    plan: str


class PageResponse(BaseModel):
    page: str
    user: PageUser
