"""
Account pages. AuthGuardMiddleware has already redirected visitors without a
session cookie; here the session is checked against the users database.
"""
from fastapi import APIRouter, Depends

from ..core.auth import require_session_user
from ..schemas.user import PageResponse, PageUser
from ..utils.enums import SubscriptionPlanEnum, enum_value

router = APIRouter(tags=["pages"], dependencies=[Depends(require_session_user)])


def _page(name: str, user) -> PageResponse:
    return PageResponse(
        page=name,
        user=PageUser(
            id=user.id,
            email=user.email,
            name=user.name,
            display_name=user.display_name,
            plan=enum_value(user.subscription_plan) or SubscriptionPlanEnum.FREE.value,
        ),
    )


@router.get("/dashboard", response_model=PageResponse)
async def dashboard(user=Depends(require_session_user)):
    return _page("dashboard", user)


@router.get("/settings", response_model=PageResponse)
async def account_settings(user=Depends(require_session_user)):
    return _page("settings", user)
