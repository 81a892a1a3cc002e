"""App-level routes, middlewares and error translation."""

import pytest
from fastapi.testclient import TestClient

from school_cms.app.settings import AppSettings


@pytest.mark.api
class TestAppRoutes:
    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.text == "Backend server is running"

    def test_db_health(self, client):
        assert client.get("/_db/health").status_code == 200

    def test_unknown_route_uses_error_shape(self, client):
        response = client.get("/api/nope")

        assert response.status_code == 404
        assert response.json() == {"error": "Not Found"}

    def test_all_resources_are_mounted(self, client):
        paths = {route.path for route in client.app.routes}
        for path in (
            "/api/hero",
            "/api/news",
            "/api/announcements",
            "/api/extracurriculars",
            "/api/kalender",
            "/api/alumni",
            "/api/galeri",
            "/api/sarana",
            "/api/headmaster-message",
            "/api/sejarah",
            "/api/visi-misi",
            "/api/schoolinfo",
            "/api/strukturOrganisasi",
            "/api/staffandteachers",
            "/api/contacts",
        ):
            assert path in paths

    def test_cors_exposes_warning_header(self, client):
        response = client.get("/api/news", headers={"Origin": "http://localhost:3000"})

        assert response.headers["access-control-allow-origin"] == "*"
        assert "X-Attachment-Warning" in response.headers["access-control-expose-headers"]


@pytest.mark.api
class TestRequestSizeLimit:
    def test_oversized_body_rejected(self, make_app):
        app = make_app(app_settings=AppSettings(env="test", max_request_bytes=1000))
        with TestClient(app) as client:
            response = client.post("/api/galeri", data={"title": "x"}, files={"image": ("a.png", b"x" * 2000, "image/png")})

        assert response.status_code == 413
        assert response.json()["error"] == "Payload Too Large"

    def test_small_body_passes(self, make_app):
        app = make_app(app_settings=AppSettings(env="test", max_request_bytes=1000))
        with TestClient(app) as client:
            assert client.post("/api/galeri", json={"title": "x"}).status_code == 201


@pytest.mark.api
class TestCatchAll:
    def test_unhandled_error_is_500_json(self, make_app):
        app = make_app()

        @app.get("/boom")
        async def boom():
            raise ValueError("kaboom")

        with TestClient(app) as client:
            response = client.get("/boom")

        assert response.status_code == 500
        assert response.json() == {"error": "ValueError", "detail": "kaboom"}
