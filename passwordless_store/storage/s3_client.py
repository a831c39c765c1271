# passwordless_store/storage/s3_client.py
import asyncio
import logging
from typing import Any, Optional, Sequence

import boto3
from botocore.exceptions import ClientError

from .errors import ObjectNotFoundError, StorageBackendError, StorageConfigurationError
from .interfaces import AbstractObjectStorageClient, ObjectListing, ObjectSummary

logger = logging.getLogger(__name__)

# Error codes S3 (and S3-compatible services) use for a missing object
_NOT_FOUND_CODES = frozenset({"NoSuchKey", "404", "NotFound"})


class S3ObjectStorageClient(AbstractObjectStorageClient):
    """
    S3 implementation of the object storage primitives, backed by a boto3 client.

    boto3 is blocking, so every request runs in a worker thread to keep the
    event loop free. Retry and timeout behaviour is whatever the boto3
    client is configured with.
    """

    def __init__(
        self,
        bucket: Optional[str],
        *,
        client: Optional[Any] = None,
        page_size: Optional[int] = None,
        region_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        profile_name: Optional[str] = None,
    ):
        """
        Initialize the S3 client wrapper.

        Args:
            bucket: Name of the bucket holding token records (mandatory)
            client: Preconfigured boto3 S3 client, built from the other options when omitted
            page_size: MaxKeys for listing requests, S3 defaults to 1000
            region_name: AWS region of the bucket
            endpoint_url: Endpoint override for S3-compatible services
            profile_name: Named AWS credentials profile

        Raises:
            StorageConfigurationError: If no bucket name is provided
        """
        if not bucket:
            raise StorageConfigurationError("A bucket name must be provided")
        self.bucket = bucket
        self._page_size = page_size

        if client is None:
            session = boto3.session.Session(profile_name=profile_name)
            client = session.client("s3", region_name=region_name, endpoint_url=endpoint_url)
        self._client = client
        logger.info(f"S3ObjectStorageClient created for bucket '{self.bucket}'.")

    async def initialize(self) -> None:
        """Verify the bucket is reachable with the configured credentials."""
        try:
            await asyncio.to_thread(self._client.head_bucket, Bucket=self.bucket)
            logger.info(f"S3 bucket '{self.bucket}' is reachable.")
        except ClientError as e:
            logger.error(f"Failed to access S3 bucket '{self.bucket}': {e}", exc_info=True)
            raise

    async def teardown(self) -> None:
        """Close the underlying HTTP connection pool."""
        logger.info(f"Closing S3 client for bucket '{self.bucket}'.")
        self._client.close()

    async def get_object(self, key: str) -> bytes:
        try:
            response = await asyncio.to_thread(self._client.get_object, Bucket=self.bucket, Key=key)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in _NOT_FOUND_CODES:
                raise ObjectNotFoundError(key) from e
            raise
        body = response["Body"]
        try:
            return await asyncio.to_thread(body.read)
        finally:
            body.close()

    async def put_object(self, key: str, body: bytes) -> None:
        await asyncio.to_thread(
            self._client.put_object,
            Bucket=self.bucket,
            Key=key,
            Body=body,
            ContentType="application/json",
        )
        logger.debug(f"Put object '{key}' ({len(body)} bytes) into bucket '{self.bucket}'.")

    async def delete_object(self, key: str) -> None:
        # S3 answers 204 for missing keys as well, so no NoSuchKey handling is needed
        await asyncio.to_thread(self._client.delete_object, Bucket=self.bucket, Key=key)
        logger.debug(f"Deleted object '{key}' from bucket '{self.bucket}'.")

    async def delete_objects(self, keys: Sequence[str]) -> int:
        if not keys:
            return 0
        response = await asyncio.to_thread(
            self._client.delete_objects,
            Bucket=self.bucket,
            Delete={"Objects": [{"Key": key} for key in keys]},
        )
        errors = response.get("Errors") or []
        if errors:
            failed_keys = tuple(error.get("Key", "") for error in errors)
            first = errors[0]
            raise StorageBackendError(
                f"Batch delete in bucket '{self.bucket}' failed for {len(errors)} of {len(keys)} keys "
                f"(first error: {first.get('Code')}: {first.get('Message')})",
                failed_keys=failed_keys,
            )
        deleted = len(response.get("Deleted") or [])
        logger.debug(f"Batch delete removed {deleted} objects from bucket '{self.bucket}'.")
        return deleted

    async def list_objects(self, marker: Optional[str] = None) -> ObjectListing:
        params = {"Bucket": self.bucket}
        if marker:
            params["Marker"] = marker
        if self._page_size:
            params["MaxKeys"] = self._page_size
        response = await asyncio.to_thread(self._client.list_objects, **params)
        return ObjectListing(
            objects=[ObjectSummary(key=item["Key"]) for item in response.get("Contents") or []],
            is_truncated=bool(response.get("IsTruncated", False)),
            next_marker=response.get("NextMarker"),
        )
