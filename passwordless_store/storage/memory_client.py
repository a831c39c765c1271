# passwordless_store/storage/memory_client.py
"""In-memory implementation of the object storage primitives."""

import logging
from typing import Dict, Optional, Sequence

from .errors import ObjectNotFoundError, StorageBackendError, StorageConfigurationError
from .interfaces import AbstractObjectStorageClient, ObjectListing, ObjectSummary

logger = logging.getLogger(__name__)


class InMemoryObjectStorageClient(AbstractObjectStorageClient):
    """
    Dict-backed object storage for the lifetime of the process.

    Mimics the S3 request limits: listings return at most ``page_size`` keys
    in lexicographic order, and a batch delete of more than ``delete_cap``
    keys is rejected. With ``emit_next_marker=False`` truncated pages carry
    no marker, as with S3 ListObjects (v1) without a delimiter.

    Safe for use from a single event loop; not shared across threads.
    """

    def __init__(self, page_size: int = 1000, delete_cap: int = 1000, emit_next_marker: bool = True):
        if page_size <= 0 or delete_cap <= 0:
            raise StorageConfigurationError("page_size and delete_cap must be positive")
        self.page_size = page_size
        self.delete_cap = delete_cap
        self.emit_next_marker = emit_next_marker
        self._objects: Dict[str, bytes] = {}

    async def initialize(self) -> None:
        logger.info(
            f"InMemoryObjectStorageClient initialized (page_size={self.page_size}, "
            f"delete_cap={self.delete_cap})."
        )

    async def teardown(self) -> None:
        logger.info("InMemoryObjectStorageClient teardown.")

    async def get_object(self, key: str) -> bytes:
        try:
            return self._objects[key]
        except KeyError:
            raise ObjectNotFoundError(key) from None

    async def put_object(self, key: str, body: bytes) -> None:
        self._objects[key] = bytes(body)

    async def delete_object(self, key: str) -> None:
        self._objects.pop(key, None)

    async def delete_objects(self, keys: Sequence[str]) -> int:
        if len(keys) > self.delete_cap:
            raise StorageBackendError(
                f"Batch delete accepts at most {self.delete_cap} keys, got {len(keys)}",
                failed_keys=tuple(keys),
            )
        deleted = 0
        for key in keys:
            if self._objects.pop(key, None) is not None:
                deleted += 1
        return deleted

    async def list_objects(self, marker: Optional[str] = None) -> ObjectListing:
        keys = sorted(key for key in self._objects if marker is None or key > marker)
        page = keys[:self.page_size]
        is_truncated = len(keys) > self.page_size
        next_marker = page[-1] if is_truncated and self.emit_next_marker else None
        return ObjectListing(
            objects=[ObjectSummary(key=key) for key in page],
            is_truncated=is_truncated,
            next_marker=next_marker,
        )
