"""Tests for S3 résumé storage."""

import pytest
from unittest.mock import patch, AsyncMock, MagicMock
from botocore.exceptions import ClientError

from core.config import Settings
from core.storage.s3 import S3Storage


def make_settings(**overrides) -> Settings:
    values = {
        "S3_ENDPOINT": "http://minio:9000",
        "S3_REGION": "eu-west-1",
        "S3_ACCESS_KEY_ID": "key",
        "S3_SECRET_ACCESS_KEY": "secret",
        "S3_BUCKET": "resumes",
        "S3_FORCE_PATH_STYLE": True,
    }
    values.update(overrides)
    return Settings(**values)


def mock_client():
    client = AsyncMock()
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=None)
    return client


class TestS3Storage:
    """Test S3Storage against a mocked aioboto3 session."""

    def test_init_from_settings(self):
        storage = S3Storage(config=make_settings())

        assert storage.bucket_name == "resumes"
        assert storage.endpoint_url == "http://minio:9000"
        assert storage.credentials == {
            "region_name": "eu-west-1",
            "aws_access_key_id": "key",
            "aws_secret_access_key": "secret",
        }

    def test_explicit_bucket_wins(self):
        storage = S3Storage(bucket_name="other", config=make_settings())
        assert storage.bucket_name == "other"

    def test_missing_bucket(self):
        with pytest.raises(ValueError, match="S3 bucket name not provided"):
            S3Storage(config=make_settings(S3_BUCKET=""))

    @pytest.mark.asyncio
    async def test_upload(self):
        client = mock_client()

        with patch("core.storage.s3.aioboto3.Session") as mock_session:
            mock_session.return_value.client.return_value = client
            storage = S3Storage(config=make_settings())
            key = await storage.upload(b"%PDF-1.4", "123_cv.pdf", content_type="application/pdf")

        assert key == "123_cv.pdf"
        client.put_object.assert_awaited_once_with(
            Bucket="resumes", Key="123_cv.pdf", ContentType="application/pdf", Body=b"%PDF-1.4"
        )
        _, kwargs = mock_session.return_value.client.call_args
        assert kwargs["endpoint_url"] == "http://minio:9000"

    @pytest.mark.asyncio
    async def test_download(self):
        stream = AsyncMock()
        stream.read = AsyncMock(return_value=b"%PDF-1.4 data")
        stream.__aenter__ = AsyncMock(return_value=stream)
        stream.__aexit__ = AsyncMock(return_value=None)

        client = mock_client()
        client.get_object = AsyncMock(return_value={"Body": stream})

        with patch("core.storage.s3.aioboto3.Session") as mock_session:
            mock_session.return_value.client.return_value = client
            data = await S3Storage(config=make_settings()).download("123_cv.pdf")

        assert data == b"%PDF-1.4 data"
        client.get_object.assert_awaited_once_with(Bucket="resumes", Key="123_cv.pdf")

    @pytest.mark.asyncio
    async def test_delete(self):
        client = mock_client()

        with patch("core.storage.s3.aioboto3.Session") as mock_session:
            mock_session.return_value.client.return_value = client
            assert await S3Storage(config=make_settings()).delete("123_cv.pdf") is True

        client.delete_object.assert_awaited_once_with(Bucket="resumes", Key="123_cv.pdf")

    @pytest.mark.asyncio
    async def test_download_error_propagates(self):
        client = mock_client()
        client.get_object = AsyncMock(
            side_effect=ClientError({"Error": {"Code": "NoSuchKey", "Message": "gone"}}, "GetObject")
        )

        with patch("core.storage.s3.aioboto3.Session") as mock_session:
            mock_session.return_value.client.return_value = client
            with pytest.raises(ClientError):
                await S3Storage(config=make_settings()).download("missing.pdf")
