import pytest
from unittest.mock import patch
from fastapi.testclient import TestClient
from fastapi import status
from ...main import app


@pytest.fixture
def client():
    return TestClient(app)


class TestPublicConfig:
    """Tests for GET /api/config/public"""

    def test_returns_configured_values(self, client):
        with patch('lynxprompt.routers.config_routes.settings') as mock_settings:
            mock_settings.next_public_turnstile_site_key = "0x4AAAAAAA"
            mock_settings.next_public_umami_website_id = "umami-123"

            response = client.get("/api/config/public")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"turnstileSiteKey": "0x4AAAAAAA", "umamiWebsiteId": "umami-123"}

    def test_unset_values_are_null(self, client):
        with patch('lynxprompt.routers.config_routes.settings') as mock_settings:
            mock_settings.next_public_turnstile_site_key = None
            mock_settings.next_public_umami_website_id = None

            response = client.get("/api/config/public")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"turnstileSiteKey": None, "umamiWebsiteId": None}

    def test_empty_values_are_null(self, client):
        with patch('lynxprompt.routers.config_routes.settings') as mock_settings:
            mock_settings.next_public_turnstile_site_key = ""
            mock_settings.next_public_umami_website_id = "umami-123"

            response = client.get("/api/config/public")

        assert response.json() == {"turnstileSiteKey": None, "umamiWebsiteId": "umami-123"}

    def test_response_carries_security_headers(self, client):
        response = client.get("/api/config/public")

        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert "frame-ancestors 'none'" in response.headers["Content-Security-Policy"]
        assert "X-Request-ID" in response.headers
