# passwordless_store/tokens/object_token_store.py
import logging
import secrets
import time
from typing import Callable, List, Optional

from .errors import InvalidTokenStoreArgumentsError, TokenStoreConfigurationError
from .models import AuthenticationResult, TokenRecord, decode_token_record, encode_token_record
from .storage_interfaces import AbstractTokenStore
from ..storage.errors import ObjectNotFoundError, StorageBackendError
from ..storage.interfaces import AbstractObjectStorageClient
from ..utils.hashing import identity_hash

logger = logging.getLogger(__name__)

# S3 DeleteObjects accepts at most 1000 keys per request
DEFAULT_DELETE_BATCH_CAP = 1000


def epoch_millis() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return int(time.time() * 1000)


def _require_text(operation: str, **values: object) -> None:
    """Reject missing, empty or non-string arguments before any storage request."""
    for name, value in values.items():
        if not isinstance(value, str) or not value:
            raise InvalidTokenStoreArgumentsError(operation, f"'{name}' must be a non-empty string")


class ObjectStorageTokenStore(AbstractTokenStore):
    """
    Token store keeping one JSON object per user in an object storage bucket.

    The object key is the identity hash of the user id and the body holds the
    hashed token, the uid, the expiry instant and the optional origin URL.
    Nothing is cached in memory: every operation is a fresh round trip to
    the storage backend, and backend errors propagate to the caller
    unchanged.

    ``clear`` removes every object in the bucket, including objects that were
    not written by this store.
    """

    def __init__(
        self,
        client: AbstractObjectStorageClient,
        *,
        delete_batch_cap: int = DEFAULT_DELETE_BATCH_CAP,
        clock: Optional[Callable[[], int]] = None,
    ):
        """
        Initialize the token store.

        Args:
            client: Object storage client holding the token records
            delete_batch_cap: Maximum number of keys sent in one batch delete request
            clock: Returns the current time in epoch milliseconds, defaults to the wall clock

        Raises:
            TokenStoreConfigurationError: If the client is missing or the cap is not positive
        """
        if client is None:
            raise TokenStoreConfigurationError("An object storage client must be provided")
        if delete_batch_cap <= 0:
            raise TokenStoreConfigurationError(
                f"delete_batch_cap must be positive, got {delete_batch_cap}"
            )
        self._client = client
        self._delete_batch_cap = delete_batch_cap
        self._clock = clock or epoch_millis

    async def initialize(self) -> None:
        await self._client.initialize()
        logger.info(f"ObjectStorageTokenStore initialized (delete_batch_cap={self._delete_batch_cap}).")

    async def teardown(self) -> None:
        await self._client.teardown()
        logger.info("ObjectStorageTokenStore teardown.")

    async def authenticate(self, token: str, uid: str) -> AuthenticationResult:
        """
        Check whether ``token`` is the current, unexpired token of ``uid``.

        An expired record is revoked as a side effect and reported as invalid
        without comparing the token. A failure to revoke it is logged and does
        not change the result.

        Returns:
            AuthenticationResult with valid=True and the stored origin URL
            ("" when none was stored), or valid=False and no URL

        Raises:
            InvalidTokenStoreArgumentsError: If token or uid is missing
            TokenRecordDecodeError: If the stored object is not a token record
        """
        _require_text("authenticate", token=token, uid=uid)
        key = identity_hash(uid)

        try:
            body = await self._client.get_object(key)
        except ObjectNotFoundError:
            logger.debug(f"No token record stored under key {key}.")
            return AuthenticationResult(valid=False)

        record = decode_token_record(key, body)

        if record.is_expired(self._clock()):
            logger.info(f"Token record {key} expired at {record.ttl}; revoking it.")
            await self._revoke_expired(uid, key)
            return AuthenticationResult(valid=False)

        presented = identity_hash(token).encode("utf-8")
        # compare_digest rejects str arguments holding non-ASCII characters
        if not secrets.compare_digest(presented, record.hashed_token.encode("utf-8")):
            logger.debug(f"Presented token does not match record {key}.")
            return AuthenticationResult(valid=False)

        return AuthenticationResult(valid=True, origin_url=record.origin_url or "")

    async def _revoke_expired(self, uid: str, key: str) -> None:
        try:
            await self.invalidate_user(uid)
        except Exception as e:
            logger.warning(f"Failed to revoke expired token record {key}: {e}", exc_info=True)

    async def store_or_update(
        self, token: str, uid: str, ms_to_live: int, origin_url: Optional[str] = None
    ) -> None:
        """
        Store ``token`` as the only valid token of ``uid`` for ``ms_to_live`` milliseconds.

        The record is overwritten unconditionally, so any token issued earlier
        for the same user stops being valid. Last writer wins.
        """
        _require_text("store_or_update", token=token, uid=uid)
        if isinstance(ms_to_live, bool) or not isinstance(ms_to_live, int) or ms_to_live <= 0:
            raise InvalidTokenStoreArgumentsError(
                "store_or_update", "'ms_to_live' must be a positive integer (milliseconds)"
            )
        if origin_url is not None and not isinstance(origin_url, str):
            raise InvalidTokenStoreArgumentsError("store_or_update", "'origin_url' must be a string or None")

        key = identity_hash(uid)
        record = TokenRecord(
            hashed_token=identity_hash(token),
            uid=uid,
            ttl=self._clock() + ms_to_live,
            origin_url=origin_url,
        )
        await self._client.put_object(key, encode_token_record(record))
        logger.debug(f"Stored token record {key} valid until {record.ttl}.")

    async def invalidate_user(self, uid: str) -> None:
        _require_text("invalidate_user", uid=uid)
        key = identity_hash(uid)
        await self._client.delete_object(key)
        logger.debug(f"Invalidated token record {key}.")

    async def clear(self) -> None:
        """
        Delete every object in the bucket, however many there are.

        Each cycle lists the first page of the bucket and deletes its keys in
        batches of at most ``delete_batch_cap``. The listing is restarted from
        the beginning rather than continued with a marker while the last batch
        removed a full cap of objects or the listing was truncated. Deletions
        are not rolled back when a later request fails.
        """
        total_deleted = 0
        cycles = 0
        while True:
            listing = await self._client.list_objects()
            keys = listing.keys
            if not keys:
                break

            cycles += 1
            last_batch_deleted = 0
            for batch in self._batches(keys):
                last_batch_deleted = await self._client.delete_objects(batch)
                total_deleted += last_batch_deleted

            if not listing.is_truncated and last_batch_deleted < self._delete_batch_cap:
                break

        logger.info(f"Cleared token store: {total_deleted} objects deleted in {cycles} cycles.")

    def _batches(self, keys: List[str]) -> List[List[str]]:
        cap = self._delete_batch_cap
        return [keys[start:start + cap] for start in range(0, len(keys), cap)]

    async def length(self) -> int:
        """Count all stored objects by following the listing cursor to the last page."""
        total = 0
        marker: Optional[str] = None
        while True:
            listing = await self._client.list_objects(marker)
            total += len(listing.objects)
            if not listing.is_truncated:
                return total

            # Listings without a delimiter may omit NextMarker; resume after the last key instead
            marker = listing.next_marker or (listing.objects[-1].key if listing.objects else None)
            if not marker:
                raise StorageBackendError("Truncated listing returned neither objects nor a continuation marker")
