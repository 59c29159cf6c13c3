import pytest
from fastapi.testclient import TestClient
from ...main import app


@pytest.fixture
def client():
    return TestClient(app)


class TestTemplateRedirects:
    """Old /templates URLs redirect permanently to /blueprints"""

    def test_template_page_redirects(self, client):
        response = client.get("/templates/abc123", follow_redirects=False)

        assert response.status_code == 308
        assert response.headers["location"] == "/blueprints/abc123"

    def test_template_index_redirects(self, client):
        response = client.get("/templates", follow_redirects=False)

        assert response.status_code == 308
        assert response.headers["location"] == "/blueprints"

    def test_template_id_is_escaped(self, client):
        response = client.get("/templates/a%3Fc%20d", follow_redirects=False)

        assert response.status_code == 308
        assert response.headers["location"] == "/blueprints/a%3Fc%20d"

    def test_template_id_is_a_single_segment(self, client):
        response = client.get("/templates/a/b", follow_redirects=False)

        assert response.status_code == 404
        assert "location" not in response.headers

    def test_api_redirect_keeps_query_string(self, client):
        response = client.get("/api/templates/bp_123?format=raw&v=2", follow_redirects=False)

        assert response.status_code == 308
        assert response.headers["location"] == "/api/blueprints/bp_123?format=raw&v=2"

    def test_api_post_redirect_keeps_method_semantics(self, client):
        response = client.post("/api/templates/bp_123/download", follow_redirects=False)

        assert response.status_code == 308
        assert response.headers["location"] == "/api/blueprints/bp_123/download"
