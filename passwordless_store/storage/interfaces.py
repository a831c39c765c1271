# passwordless_store/storage/interfaces.py
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field


class ObjectSummary(BaseModel):
    """A single entry of an object listing page."""
    key: str


class ObjectListing(BaseModel):
    """One page of a bucket listing."""
    objects: List[ObjectSummary] = Field(default_factory=list)
    is_truncated: bool = False
    # Some backends omit the marker on truncated pages; callers fall back to the last key
    next_marker: Optional[str] = None

    @property
    def keys(self) -> List[str]:
        return [obj.key for obj in self.objects]


class AbstractObjectStorageClient(ABC):
    """
    Abstract base class defining the object storage primitives used by the token store.

    Implementations wrap a flat key/body namespace (an S3 bucket, a SQLite
    table, a dict). Keys are opaque strings and bodies are raw bytes.
    Backend failures other than a missing key are raised as the backend's
    own exceptions.
    """

    @abstractmethod
    async def get_object(self, key: str) -> bytes:
        """Return the body stored under ``key``, raising ObjectNotFoundError if there is none."""
        pass

    @abstractmethod
    async def put_object(self, key: str, body: bytes) -> None:
        """Store ``body`` under ``key``, replacing any existing object."""
        pass

    @abstractmethod
    async def delete_object(self, key: str) -> None:
        """Remove the object under ``key``. Removing a missing key is not an error."""
        pass

    @abstractmethod
    async def delete_objects(self, keys: Sequence[str]) -> int:
        """Remove a batch of objects in one request and return how many were deleted."""
        pass

    @abstractmethod
    async def list_objects(self, marker: Optional[str] = None) -> ObjectListing:
        """Return one page of keys, starting after ``marker`` when given."""
        pass

    @abstractmethod
    async def initialize(self) -> None:
        """Prepare the underlying client or connection for operations."""
        pass

    @abstractmethod
    async def teardown(self) -> None:
        """Release client resources."""
        pass
