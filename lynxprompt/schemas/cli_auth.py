"""
Schemas for the browser-assisted CLI login flow.

The CLI reads these with snake_case keys, so no alias generator here.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from ..utils.enums import CliPollStatusEnum


class CliInitResponse(BaseModel):
    session_id: str
    auth_url: str
    expires_at: datetime


class CliUser(BaseModel):
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    plan: str


class CliPollResponse(BaseModel):
    status: CliPollStatusEnum
    token: Optional[str] = None
    user: Optional[CliUser] = None


class CliCallbackRequest(BaseModel):
    session_id: Optional[str] = None


class CliCallbackResponse(BaseModel):
    success: bool
    message: str
