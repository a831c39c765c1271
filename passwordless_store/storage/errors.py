# passwordless_store/storage/errors.py


class ObjectStorageError(Exception):
    """Base exception class for object storage adapter errors."""


class ObjectNotFoundError(ObjectStorageError):
    """Raised when a requested object key does not exist in the bucket or container.

    Callers treat this as an expected outcome rather than a failure.
    """

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"No object stored under key '{key}'.")


class StorageConfigurationError(ObjectStorageError, ValueError):
    """Raised when a storage client is constructed with missing or invalid parameters."""


class StorageBackendError(ObjectStorageError):
    """Raised when the backend reports a failure that has no native exception.

    S3 batch deletes, for example, answer with HTTP 200 and a list of per-key
    errors; those are surfaced through this exception.
    """

    def __init__(self, message: str, failed_keys: tuple = ()):
        self.failed_keys = tuple(failed_keys)
        super().__init__(message)
