# passwordless_store/tokens/models.py
from typing import NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import TokenRecordDecodeError


class TokenRecord(BaseModel):
    """
    Per-user token record persisted as the body of one storage object.

    Serialized as a UTF-8 JSON object with exactly four fields:
    ``hashedToken``, ``uid``, ``ttl`` (absolute expiry in epoch milliseconds)
    and ``originUrl`` (``null`` when no URL was given).
    """
    model_config = ConfigDict(populate_by_name=True)

    hashed_token: str = Field(alias="hashedToken")
    uid: str  # Stored for auditability only, lookups go through the hashed key
    ttl: int = Field(description="Expiry instant in milliseconds since the epoch.")
    origin_url: Optional[str] = Field(default=None, alias="originUrl")

    def is_expired(self, now_ms: int) -> bool:
        """A record is stale once the current time is past its ttl."""
        return now_ms > self.ttl


class AuthenticationResult(NamedTuple):
    """Outcome of a token check: validity plus the stored origin URL when valid."""
    valid: bool
    origin_url: Optional[str] = None


def encode_token_record(record: TokenRecord) -> bytes:
    """Serialize a token record into the storage object body."""
    return record.model_dump_json(by_alias=True).encode('utf-8')


def decode_token_record(key: str, body: bytes) -> TokenRecord:
    """
    Deserialize a storage object body into a token record.

    Raises:
        TokenRecordDecodeError: If the body is not valid JSON or misses required fields
    """
    try:
        return TokenRecord.model_validate_json(body)
    except ValidationError as e:
        raise TokenRecordDecodeError(key, str(e)) from e
