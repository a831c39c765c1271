# passwordless_store/tokens/storage_interfaces.py
from abc import ABC, abstractmethod
from typing import Optional

from .models import AuthenticationResult


class AbstractTokenStore(ABC):
    """
    Abstract base class defining the interface for passwordless token storage.

    A store keeps at most one active token per user. Implementations handle
    the underlying storage mechanism (object storage, database, cache) and
    can be swapped without changing callers.
    """

    @abstractmethod
    async def authenticate(self, token: str, uid: str) -> AuthenticationResult:
        """Check ``token`` against the stored token of ``uid`` and its time-to-live."""
        pass

    @abstractmethod
    async def store_or_update(
        self, token: str, uid: str, ms_to_live: int, origin_url: Optional[str] = None
    ) -> None:
        """Store a new token for ``uid``, replacing any token it already had."""
        pass

    @abstractmethod
    async def invalidate_user(self, uid: str) -> None:
        """Remove the token of ``uid``. Invalidating an unknown user is not an error."""
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Remove every stored token."""
        pass

    @abstractmethod
    async def length(self) -> int:
        """Return the number of stored tokens, expired ones included."""
        pass

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the storage system and prepare for operations."""
        pass

    @abstractmethod
    async def teardown(self) -> None:
        """Clean up resources and gracefully shutdown the storage system."""
        pass
