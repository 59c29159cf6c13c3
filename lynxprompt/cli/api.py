import logging
from typing import Any, Dict, Optional

import httpx

from .credentials import CredentialStore

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_S = 30.0


class ApiRequestError(Exception):
    def __init__(self, message: str, status_code: int, body: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body or {}


def _error_message(body: Any) -> str:
    if not isinstance(body, dict):
        return "Request failed"
    detail = body.get("detail", body)
    if isinstance(detail, dict):
        return detail.get("message") or detail.get("error") or "Request failed"
    if isinstance(detail, str):
        return detail
    return body.get("message") or body.get("error") or "Request failed"


class ApiClient:
    """Thin async client for the endpoints the CLI talks to."""

    def __init__(self, store: CredentialStore, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.store = store
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        token = self.store.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def request(self, method: str, endpoint: str, **kwargs) -> Dict[str, Any]:
        async with httpx.AsyncClient(
            base_url=self.store.get_api_url(),
            headers=self._headers(),
            timeout=REQUEST_TIMEOUT_S,
            transport=self.transport,
        ) as client:
            response = await client.request(method, endpoint, **kwargs)

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.status_code >= 400:
            logger.debug(f"[API] {method} {endpoint} failed with {response.status_code}: {body}")
            raise ApiRequestError(_error_message(body), response.status_code, body)
        return body

    async def init_cli_session(self) -> Dict[str, Any]:
        return await self.request("POST", "/api/auth/cli/init")

    async def poll_cli_session(self, session_id: str) -> Dict[str, Any]:
        return await self.request("GET", "/api/auth/cli/poll", params={"session": session_id})

    async def get_user(self) -> Dict[str, Any]:
        return await self.request("GET", "/api/v1/user")
