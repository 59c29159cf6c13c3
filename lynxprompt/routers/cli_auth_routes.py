import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from slowapi import Limiter
from slowapi.util import get_remote_address

from ..core.auth import public_access, require_session_user
from ..core.database import Databases, get_databases
from ..schemas.cli_auth import (
    CliCallbackRequest,
    CliCallbackResponse,
    CliInitResponse,
    CliPollResponse,
)
from ..services.cli_session_service import CliSessionError, CliSessionService
from ..utils.errors import internal_error

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)

# Called by the CLI before the user has any credentials
router = APIRouter(
    prefix="/api/auth/cli",
    tags=["cli-auth"],
    dependencies=[Depends(public_access)],
)

# Called by the browser once the user has signed in
callback_router = APIRouter(
    prefix="/api/cli-auth",
    tags=["cli-auth"],
    dependencies=[Depends(require_session_user)],
)


@router.post("/init", response_model=CliInitResponse)
@limiter.limit("10/minute")
async def init_cli_session(request: Request, databases: Databases = Depends(get_databases)):
    try:
        return await CliSessionService(databases.users).start()
    except Exception as e:
        raise internal_error(f"[CLI_AUTH] Error creating CLI session: {e}", user_message="Failed to initialize CLI session")


@router.get("/poll", response_model=CliPollResponse, response_model_exclude_none=True)
@limiter.limit("60/minute")
async def poll_cli_session(
    request: Request,
    session: str = Query(None),
    databases: Databases = Depends(get_databases),
):
    if not session:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing session parameter")

    try:
        return await CliSessionService(databases.users).poll(session)
    except CliSessionError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        raise internal_error(f"[CLI_AUTH] Error polling CLI session: {e}", user_message="Failed to poll session")


@callback_router.post("/callback", response_model=CliCallbackResponse)
async def complete_cli_session(
    payload: CliCallbackRequest,
    user=Depends(require_session_user),
    databases: Databases = Depends(get_databases),
):
    if not payload.session_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing session_id")

    try:
        await CliSessionService(databases.users).complete(payload.session_id, user.id)
    except CliSessionError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        raise internal_error(
            f"[CLI_AUTH] Error completing CLI session for user={user.id}: {e}",
            user_message="Failed to complete CLI authentication",
        )
    return CliCallbackResponse(success=True, message="CLI authentication completed")
