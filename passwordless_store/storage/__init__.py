# passwordless_store/storage/__init__.py

"""Storage module initialization.

This module provides the object storage abstraction the token store is
built on, along with S3, SQLite and in-memory implementations.
"""

from .errors import (
    ObjectStorageError,
    ObjectNotFoundError,
    StorageConfigurationError,
    StorageBackendError
)
from .interfaces import (
    AbstractObjectStorageClient,
    ObjectListing,
    ObjectSummary
)
from .s3_client import S3ObjectStorageClient
from .sqlite_client import SQLiteObjectStorageClient
from .memory_client import InMemoryObjectStorageClient
from .factory import create_object_storage_client

# Export public API for object storage
__all__ = [
    "ObjectStorageError",
    "ObjectNotFoundError",
    "StorageConfigurationError",
    "StorageBackendError",
    "AbstractObjectStorageClient",
    "ObjectListing",
    "ObjectSummary",
    "S3ObjectStorageClient",
    "SQLiteObjectStorageClient",
    "InMemoryObjectStorageClient",
    "create_object_storage_client"
]
