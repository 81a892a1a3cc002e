"""Unit tests for LocalBackend."""

import json
import time

import aiofiles.os
import pytest

from school_cms.storage.backends.local import LocalBackend
from school_cms.storage.base import FileNotFoundError, InvalidKeyError, StorageBackend, StorageError


@pytest.mark.storage
@pytest.mark.asyncio
class TestLocalBackend:
    @pytest.fixture
    def backend(self, tmp_path):
        return LocalBackend(base_path=tmp_path, base_url="/uploads")

    @pytest.fixture
    def signed_backend(self, tmp_path):
        return LocalBackend(base_path=tmp_path, base_url="/uploads", signing_secret="test-secret")

    async def test_satisfies_protocol(self, backend):
        assert isinstance(backend, StorageBackend)

    async def test_put_and_get(self, backend):
        url = await backend.put("news/photo.png", b"\x89PNG" * 10, "image/png")

        assert url == "/uploads/news/photo.png"
        assert await backend.get("news/photo.png") == b"\x89PNG" * 10

    async def test_put_writes_metadata_sidecar(self, backend, tmp_path):
        await backend.put("doc.pdf", b"%PDF", "application/pdf", metadata={"original_filename": "Kalender.pdf"})

        sidecar = json.loads((tmp_path / "doc.pdf.meta.json").read_text())
        assert sidecar["content_type"] == "application/pdf"
        assert sidecar["original_filename"] == "Kalender.pdf"
        assert sidecar["size"] == 4

    async def test_put_leaves_no_temp_file(self, backend, tmp_path):
        await backend.put("a/b.txt", b"data", "text/plain")

        assert not list(tmp_path.rglob("*.tmp"))

    async def test_failed_put_removes_temp_file(self, backend, tmp_path, monkeypatch):
        async def disk_full(*args, **kwargs):
            raise OSError("No space left on device")

        monkeypatch.setattr(aiofiles.os, "replace", disk_full)

        with pytest.raises(StorageError, match="news/a.png"):
            await backend.put("news/a.png", b"data", "image/png")

        assert not list(tmp_path.rglob("*.tmp"))
        assert not (tmp_path / "news" / "a.png").exists()

    async def test_metadata_without_sidecar(self, backend, tmp_path):
        (tmp_path / "manual.png").write_bytes(b"abc")

        meta = await backend.get_metadata("manual.png")
        assert meta["size"] == 3
        assert meta["content_type"] == "image/png"

    async def test_get_missing(self, backend):
        with pytest.raises(FileNotFoundError):
            await backend.get("missing.txt")

    async def test_delete_removes_file_and_sidecar(self, backend, tmp_path):
        await backend.put("a.txt", b"data", "text/plain")

        assert await backend.delete("a.txt") is True
        assert not (tmp_path / "a.txt").exists()
        assert not (tmp_path / "a.txt.meta.json").exists()
        assert await backend.delete("a.txt") is False

    async def test_traversal_rejected(self, backend):
        with pytest.raises(InvalidKeyError):
            await backend.put("../escape.txt", b"data", "text/plain")

    async def test_list_keys_skips_sidecars(self, backend):
        await backend.put("news/1.png", b"x", "image/png")
        await backend.put("news/2.png", b"x", "image/png")
        await backend.put("hero/1.png", b"x", "image/png")

        assert await backend.list_keys(prefix="news/") == ["news/1.png", "news/2.png"]

    async def test_signed_url_roundtrip(self, signed_backend):
        await signed_backend.put("a.txt", b"data", "text/plain")
        url = await signed_backend.get_url("a.txt", expires_in=60)

        query = dict(part.split("=", 1) for part in url.split("?", 1)[1].split("&"))
        assert signed_backend.verify_url("a.txt", query["expires"], query["signature"])
        assert not signed_backend.verify_url("a.txt", query["expires"], "0" * 64)
        assert not signed_backend.verify_url("b.txt", query["expires"], query["signature"])

    async def test_expired_signature_rejected(self, signed_backend):
        expires = int(time.time()) - 1
        signature = signed_backend._sign("a.txt", expires, False)

        assert not signed_backend.verify_url("a.txt", str(expires), signature)

    async def test_unsigned_backend_accepts_any_url(self, backend):
        assert backend.verify_url("a.txt", "", "")
