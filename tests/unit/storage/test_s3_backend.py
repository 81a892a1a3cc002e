"""Unit tests for S3Backend that do not talk to a real bucket."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from botocore.exceptions import ClientError

from school_cms.attachments import AttachmentManager
from school_cms.storage.backends.s3 import S3Backend
from school_cms.storage.base import (
    FileNotFoundError,
    InvalidKeyError,
    PermissionDeniedError,
    QuotaExceededError,
    StorageError,
)


def _client_error(code: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, "HeadObject")


def _mock_client(backend: S3Backend, s3: MagicMock) -> None:
    ctx = MagicMock()
    ctx.__aenter__ = AsyncMock(return_value=s3)
    ctx.__aexit__ = AsyncMock(return_value=False)
    backend._client = MagicMock(return_value=ctx)


@pytest.mark.storage
class TestS3Translate:
    @pytest.fixture
    def backend(self):
        return S3Backend(bucket="school", access_key="key", secret_key="secret")

    @pytest.mark.parametrize(
        "code, expected",
        [
            ("NoSuchKey", FileNotFoundError),
            ("404", FileNotFoundError),
            ("AccessDenied", PermissionDeniedError),
            ("EntityTooLarge", QuotaExceededError),
            ("SlowDown", StorageError),
        ],
    )
    def test_client_errors(self, backend, code, expected):
        err = backend._translate(_client_error(code), "news/a.png")
        assert type(err) is expected

    def test_other_errors_are_storage_errors(self, backend):
        err = backend._translate(RuntimeError("boom"), "news/a.png")
        assert type(err) is StorageError
        assert err.status_code == 502


@pytest.mark.storage
@pytest.mark.asyncio
class TestS3Operations:
    async def test_public_url(self):
        backend = S3Backend(bucket="school", public_url="https://cdn.example.com/school/")
        s3 = MagicMock()
        s3.head_object = AsyncMock(return_value={"ContentLength": 3})
        _mock_client(backend, s3)

        url = await backend.get_url("news/a b.png")
        assert url == "https://cdn.example.com/school/news/a%20b.png"

    async def test_get_url_nonexistent(self):
        backend = S3Backend(bucket="school", public_url="https://cdn.example.com")
        s3 = MagicMock()
        s3.head_object = AsyncMock(side_effect=_client_error("404"))
        s3.generate_presigned_url = AsyncMock()
        _mock_client(backend, s3)

        with pytest.raises(FileNotFoundError):
            await backend.get_url("news/gone.png")
        with pytest.raises(FileNotFoundError):
            await backend.get_url("news/gone.png", download=True)
        s3.generate_presigned_url.assert_not_awaited()

    async def test_presigned_url_for_existing_object(self):
        backend = S3Backend(bucket="school")
        s3 = MagicMock()
        s3.head_object = AsyncMock(return_value={"ContentLength": 3})
        s3.generate_presigned_url = AsyncMock(return_value="https://s3.example.com/signed")
        _mock_client(backend, s3)

        assert await backend.get_url("news/a.png", expires_in=60) == "https://s3.example.com/signed"
        s3.generate_presigned_url.assert_awaited_once_with(
            "get_object", Params={"Bucket": "school", "Key": "news/a.png"}, ExpiresIn=60
        )

    async def test_missing_object_has_no_attachment_url(self):
        backend = S3Backend(bucket="school", public_url="https://cdn.example.com")
        s3 = MagicMock()
        s3.head_object = AsyncMock(side_effect=_client_error("404"))
        _mock_client(backend, s3)

        assert await AttachmentManager(backend).url_for("news/gone.png") is None

    async def test_invalid_key_rejected_before_network(self):
        backend = S3Backend(bucket="school")

        with pytest.raises(InvalidKeyError):
            await backend.get_url("../x.png")

    async def test_put_sends_object(self):
        backend = S3Backend(bucket="school", public_url="https://cdn.example.com")
        s3 = MagicMock()
        s3.put_object = AsyncMock()
        s3.head_object = AsyncMock(return_value={"ContentLength": 3})
        _mock_client(backend, s3)

        url = await backend.put("news/a.png", b"img", "image/png", metadata={"original_filename": "a.png"})

        assert url == "https://cdn.example.com/news/a.png"
        s3.put_object.assert_awaited_once()
        kwargs = s3.put_object.await_args.kwargs
        assert kwargs["Bucket"] == "school"
        assert kwargs["ContentType"] == "image/png"
        assert kwargs["Metadata"] == {"original_filename": "a.png"}

    async def test_put_translates_denied(self):
        backend = S3Backend(bucket="school")
        s3 = MagicMock()
        s3.put_object = AsyncMock(side_effect=_client_error("AccessDenied"))
        _mock_client(backend, s3)

        with pytest.raises(PermissionDeniedError):
            await backend.put("news/a.png", b"img", "image/png")

    async def test_delete_missing_returns_false(self):
        backend = S3Backend(bucket="school")
        s3 = MagicMock()
        s3.head_object = AsyncMock(side_effect=_client_error("404"))
        s3.delete_object = AsyncMock()
        _mock_client(backend, s3)

        assert await backend.delete("news/a.png") is False
        s3.delete_object.assert_not_awaited()

    async def test_delete_existing(self):
        backend = S3Backend(bucket="school")
        s3 = MagicMock()
        s3.head_object = AsyncMock(return_value={"ContentLength": 3})
        s3.delete_object = AsyncMock()
        _mock_client(backend, s3)

        assert await backend.delete("news/a.png") is True
        s3.delete_object.assert_awaited_once_with(Bucket="school", Key="news/a.png")
