import pytest
from unittest.mock import MagicMock
from fastapi import FastAPI, Request, status
from fastapi.testclient import TestClient
from ...main import app
from ...core.database import Databases, get_databases
from ...middleware import RequestSizeLimitMiddleware

LIMIT = 16


def chunked(total: int, chunk_size: int = 1024 * 1024):
    """Body without a Content-Length header; httpx sends it chunked."""
    sent = 0
    while sent < total:
        size = min(chunk_size, total - sent)
        sent += size
        yield b"x" * size


@pytest.fixture
def small_client():
    small_app = FastAPI()
    small_app.add_middleware(RequestSizeLimitMiddleware, max_bytes=LIMIT)

    @small_app.post("/echo")
    async def echo(request: Request):
        body = await request.body()
        return {"size": len(body)}

    return TestClient(small_app)


@pytest.fixture(autouse=True)
def setup_dependency_override():
    databases = Databases(app=MagicMock(), users=MagicMock(), blog=MagicMock(), support=MagicMock())
    app.dependency_overrides[get_databases] = lambda: databases
    yield
    app.dependency_overrides.clear()


class TestRequestSizeLimit:
    """Bodies over the limit are rejected with 413"""

    def test_declared_length_over_limit(self, small_client):
        response = small_client.post("/echo", content=b"x" * (LIMIT + 1))

        assert response.status_code == status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
        assert response.json()["detail"] == "Request too large"

    def test_chunked_body_over_limit(self, small_client):
        response = small_client.post("/echo", content=chunked(LIMIT + 1, chunk_size=4))

        assert response.status_code == status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
        assert response.json()["detail"] == "Request body too large"

    def test_body_within_limit_reaches_route(self, small_client):
        response = small_client.post("/echo", content=chunked(LIMIT, chunk_size=4))

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"size": LIMIT}

    def test_chunked_upload_to_callback_is_rejected(self):
        client = TestClient(app)
        oversized = 10 * 1024 * 1024 + 1

        response = client.post(
            "/api/cli-auth/callback",
            content=chunked(oversized),
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
