"""
S3 object store.

Stores uploaded files, reads them back for ingestion, and issues presigned
download URLs for citations. boto3 calls are blocking, so they run in the
threadpool.

Dependencies: boto3, botocore, fastapi.concurrency
System role: Object storage adapter
"""

import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from fastapi.concurrency import run_in_threadpool

from docchat.core.exceptions import StorageError

logger = logging.getLogger(__name__)


class S3ObjectStore:
    """S3 client for the documents bucket."""

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        client=None,
    ) -> None:
        """
        Initialize S3 client for document bucket.

        Args:
            bucket: S3 bucket name for document storage
            region: AWS region for S3 bucket
            endpoint_url: Custom endpoint (MinIO, LocalStack)
            client: Preconfigured boto3 S3 client (tests)
        """
        self._bucket = bucket
        self._s3_client = client or boto3.client(
            "s3",
            region_name=region,
            endpoint_url=endpoint_url,
        )

    async def put(self, key: str, data: bytes, content_type: str) -> None:
        """
        Upload bytes to the bucket.

        Raises:
            StorageError: If the upload fails
        """
        try:
            await run_in_threadpool(
                self._s3_client.put_object,
                Bucket=self._bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"Upload failed: {e}", operation="put", key=key) from e

    async def get(self, key: str) -> bytes:
        """
        Download an object's bytes.

        Raises:
            StorageError: If the object is missing or the download fails
        """
        try:
            response = await run_in_threadpool(
                self._s3_client.get_object,
                Bucket=self._bucket,
                Key=key,
            )
            return await run_in_threadpool(response["Body"].read)
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"Download failed: {e}", operation="get", key=key) from e

    async def signed_url(self, key: str, expires_in: int = 3600) -> str:
        """
        Generate a presigned GET URL.

        Args:
            key: Object key
            expires_in: URL lifetime in seconds

        Returns:
            str: Presigned URL

        Raises:
            StorageError: If signing fails
        """
        try:
            return await run_in_threadpool(
                self._s3_client.generate_presigned_url,
                ClientMethod="get_object",
                Params={"Bucket": self._bucket, "Key": key},
                ExpiresIn=expires_in,
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"Signing failed: {e}", operation="sign", key=key) from e
