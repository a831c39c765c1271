# passwordless_store/tokens/__init__.py
"""
Passwordless token module initialization.

This module provides the token store used for magic-link logins: the
persisted token record, the abstract store interface, its object storage
implementation and the related error classes.
"""

# Persisted record and operation results
from .models import (
    TokenRecord,
    AuthenticationResult,
    encode_token_record,
    decode_token_record
)

# Token store error classes
from .errors import (
    TokenStoreError,
    InvalidTokenStoreArgumentsError,
    TokenStoreConfigurationError,
    TokenRecordDecodeError
)

# Storage abstraction layer for token persistence
from .storage_interfaces import AbstractTokenStore

# Object storage implementation of the token store
from .object_token_store import (
    ObjectStorageTokenStore,
    DEFAULT_DELETE_BATCH_CAP,
    epoch_millis
)

__all__ = [
    # Data models
    "TokenRecord",
    "AuthenticationResult",
    "encode_token_record",
    "decode_token_record",

    # Exception classes
    "TokenStoreError",
    "InvalidTokenStoreArgumentsError",
    "TokenStoreConfigurationError",
    "TokenRecordDecodeError",

    # Storage interfaces
    "AbstractTokenStore",
    "ObjectStorageTokenStore",
    "DEFAULT_DELETE_BATCH_CAP",
    "epoch_millis"
]
