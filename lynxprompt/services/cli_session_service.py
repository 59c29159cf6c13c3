import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict
from urllib.parse import quote

from fastapi import status

from ..core.auth import generate_token
from ..core.config import settings
from ..utils.enums import ApiTokenRoleEnum, CliPollStatusEnum, CliSessionStatusEnum, enum_value

logger = logging.getLogger(__name__)

CLI_TOKEN_NAME = "LynxPrompt CLI"
SESSION_ID_BYTES = 32


class CliSessionError(Exception):
    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(message)


class CliSessionService:
    """
    Device-style login for the command line.

    The CLI opens a session, the user approves it in the browser (which mints
    an API token through ``complete``), and the CLI polls until the token shows
    up. A completed session is deleted on the poll that returns its token, so
    the raw token is handed out once.
    """

    def __init__(self, users_db):
        self.users_db = users_db

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    async def start(self) -> Dict[str, Any]:
        session_id = secrets.token_hex(SESSION_ID_BYTES)
        expires_at = self._now() + timedelta(minutes=settings.cli_session_ttl_minutes)

        await self.users_db.clisession.create(
            data={
                "session_id": session_id,
                "status": CliSessionStatusEnum.PENDING.value,
                "expires_at": expires_at,
            }
        )
        logger.info(f"[CLI_AUTH] Started session {session_id[:8]}...")

        return {
            "session_id": session_id,
            "auth_url": f"{settings.base_url}/auth/signin?cli_session={quote(session_id)}",
            "expires_at": expires_at,
        }

    async def poll(self, session_id: str) -> Dict[str, Any]:
        session = await self.users_db.clisession.find_unique(
            where={"session_id": session_id},
            include={"user": True},
        )
        if session is None:
            raise CliSessionError(status.HTTP_404_NOT_FOUND, "Session not found")

        if session.expires_at < self._now():
            try:
                await self.users_db.clisession.delete(where={"id": session.id})
            except Exception as e:
                logger.warning(f"[CLI_AUTH] Could not delete expired session {session_id[:8]}...: {e}")
            return {"status": CliPollStatusEnum.EXPIRED}

        if enum_value(session.status) != CliSessionStatusEnum.COMPLETED.value or not session.token:
            return {"status": CliPollStatusEnum.PENDING}

        user = session.user
        await self.users_db.clisession.delete(where={"id": session.id})
        logger.info(f"[CLI_AUTH] Session {session_id[:8]}... handed its token to the CLI")

        return {
            "status": CliPollStatusEnum.COMPLETED,
            "token": session.token,
            "user": {
                "id": user.id,
                "email": user.email,
                "name": user.name,
                "plan": enum_value(user.subscription_plan),
            } if user is not None else None,
        }

    async def complete(self, session_id: str, user_id: str) -> None:
        session = await self.users_db.clisession.find_unique(where={"session_id": session_id})
        if session is None:
            raise CliSessionError(status.HTTP_404_NOT_FOUND, "Session not found")
        if session.expires_at < self._now():
            raise CliSessionError(status.HTTP_410_GONE, "Session expired")
        if enum_value(session.status) != CliSessionStatusEnum.PENDING.value:
            raise CliSessionError(status.HTTP_409_CONFLICT, "Session already completed")

        raw_token, token_hash, last_four = generate_token()
        api_token = await self.users_db.apitoken.create(
            data={
                "user_id": user_id,
                "name": CLI_TOKEN_NAME,
                "token_hash": token_hash,
                "last_four_chars": last_four,
                "role": ApiTokenRoleEnum.BLUEPRINTS_FULL.value,
                "expires_at": self._now() + timedelta(days=settings.cli_token_ttl_days),
            }
        )

        await self.users_db.clisession.update(
            where={"id": session.id},
            data={
                "status": CliSessionStatusEnum.COMPLETED.value,
                "token": raw_token,
                "user_id": user_id,
                "api_token_id": api_token.id,
            },
        )
        logger.info(f"[CLI_AUTH] Session {session_id[:8]}... approved by user={user_id}")
