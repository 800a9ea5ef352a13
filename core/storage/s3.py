"""S3 storage utilities for résumé files."""

import aioboto3
from botocore.config import Config
from typing import Optional, BinaryIO
import logging

from core.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


def _get_credentials(config: Settings) -> dict:
    """Build session credentials from settings."""
    credentials = {"region_name": config.s3_region}
    if config.s3_access_key_id and config.s3_secret_access_key:
        credentials["aws_access_key_id"] = config.s3_access_key_id
        credentials["aws_secret_access_key"] = config.s3_secret_access_key
    return credentials


class S3Storage:
    """S3 storage handler for async operations.

    Works against AWS S3 or any S3 compatible endpoint such as MinIO.
    One instance is created at startup and shared by every request.
    """

    def __init__(self, bucket_name: Optional[str] = None, config: Optional[Settings] = None):
        """
        Initialize S3 storage.

        Args:
            bucket_name: S3 bucket name (uses S3_BUCKET if not provided)
            config: Settings to read endpoint and credentials from
        """
        config = config or default_settings
        self.bucket_name = bucket_name or config.s3_bucket
        if not self.bucket_name:
            raise ValueError("S3 bucket name not provided and S3_BUCKET not set")

        self.endpoint_url = config.s3_endpoint
        self.credentials = _get_credentials(config)
        self.client_config = Config(
            s3={"addressing_style": "path" if config.s3_force_path_style else "auto"}
        )

    def _client(self):
        session = aioboto3.Session(**self.credentials)
        return session.client(
            "s3", endpoint_url=self.endpoint_url, config=self.client_config
        )

    async def upload(
        self,
        file_data: bytes | BinaryIO,
        key: str,
        content_type: Optional[str] = None,
        metadata: Optional[dict] = None
    ) -> str:
        """
        Upload file to S3.

        Args:
            file_data: File data (bytes or file-like object)
            key: S3 object key (path)
            content_type: MIME type of the file
            metadata: Optional metadata dictionary

        Returns:
            S3 object key
        """
        async with self._client() as client:
            upload_args = {
                "Bucket": self.bucket_name,
                "Key": key,
            }

            if content_type:
                upload_args["ContentType"] = content_type

            if metadata:
                upload_args["Metadata"] = metadata

            if isinstance(file_data, bytes):
                upload_args["Body"] = file_data
            else:
                upload_args["Body"] = file_data.read()

            await client.put_object(**upload_args)

            logger.info(f"Uploaded file to S3: {self.bucket_name}/{key}")
            return key

    async def download(self, key: str) -> bytes:
        """
        Download file from S3.

        Args:
            key: S3 object key

        Returns:
            File contents as bytes
        """
        async with self._client() as client:
            response = await client.get_object(Bucket=self.bucket_name, Key=key)

            async with response["Body"] as stream:
                data = await stream.read()

            logger.debug(f"Downloaded file from S3: {self.bucket_name}/{key}")
            return data

    async def delete(self, key: str) -> bool:
        """
        Delete file from S3.

        Args:
            key: S3 object key

        Returns:
            True if deleted successfully
        """
        async with self._client() as client:
            await client.delete_object(Bucket=self.bucket_name, Key=key)

            logger.info(f"Deleted file from S3: {self.bucket_name}/{key}")
            return True
