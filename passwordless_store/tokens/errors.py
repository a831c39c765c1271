# passwordless_store/tokens/errors.py


class TokenStoreError(Exception):
    """Base exception class for token store errors."""


class InvalidTokenStoreArgumentsError(TokenStoreError, ValueError):
    """Raised when a token store operation is called with missing or invalid arguments.

    Validation happens before any storage request is issued, so the store
    is left untouched.
    """

    def __init__(self, operation: str, detail: str):
        self.operation = operation
        super().__init__(f"TokenStore:{operation} called with invalid parameters: {detail}")


class TokenStoreConfigurationError(TokenStoreError, ValueError):
    """Raised when the token store or its backend cannot be built from the given configuration."""


class TokenRecordDecodeError(TokenStoreError):
    """Raised when a stored object body is not a valid token record.

    This usually means the bucket holds objects that were not written by
    this store.
    """

    def __init__(self, key: str, detail: str):
        self.key = key
        super().__init__(f"Object '{key}' does not contain a valid token record: {detail}")
