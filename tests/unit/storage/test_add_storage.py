"""Unit tests for the FastAPI storage integration."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from school_cms.storage import StorageDep, add_storage
from school_cms.storage.backends import LocalBackend, MemoryBackend


@pytest.mark.storage
class TestAddStorage:
    def test_registers_backend(self):
        app = FastAPI()
        backend = MemoryBackend()

        assert add_storage(app, backend) is backend
        assert app.state.storage is backend

    def test_dependency_returns_backend(self):
        app = FastAPI()
        backend = MemoryBackend()
        add_storage(app, backend)

        @app.get("/which")
        async def which(storage: StorageDep):
            return {"backend": type(storage).__name__}

        assert TestClient(app).get("/which").json() == {"backend": "MemoryBackend"}

    def test_memory_backend_mounts_no_route(self):
        app = FastAPI()
        add_storage(app, MemoryBackend())

        assert TestClient(app).get("/uploads/a.txt").status_code == 404

    def test_serves_local_files(self, tmp_path):
        app = FastAPI()
        backend = LocalBackend(base_path=tmp_path)
        add_storage(app, backend)
        client = TestClient(app)

        (tmp_path / "news").mkdir()
        (tmp_path / "news" / "a.png").write_bytes(b"png-bytes")

        response = client.get("/uploads/news/a.png")
        assert response.status_code == 200
        assert response.content == b"png-bytes"
        assert response.headers["content-type"] == "image/png"

    def test_missing_local_file(self, tmp_path):
        app = FastAPI()
        add_storage(app, LocalBackend(base_path=tmp_path))

        assert TestClient(app).get("/uploads/missing.png").status_code == 404

    def test_signed_urls_are_verified(self, tmp_path):
        app = FastAPI()
        backend = LocalBackend(base_path=tmp_path, signing_secret="test-secret")
        add_storage(app, backend)
        (tmp_path / "a.txt").write_bytes(b"secret")
        client = TestClient(app)

        assert client.get("/uploads/a.txt").status_code == 403

        url = backend._build_url("a.txt", 60, False)
        response = client.get(url)
        assert response.status_code == 200
        assert response.content == b"secret"

    def test_serve_files_disabled(self, tmp_path):
        app = FastAPI()
        add_storage(app, LocalBackend(base_path=tmp_path), serve_files=False)
        (tmp_path / "a.txt").write_bytes(b"data")

        assert TestClient(app).get("/uploads/a.txt").status_code == 404
