# passwordless_store/storage/factory.py
import logging

from ..settings import Settings
from .errors import StorageConfigurationError
from .interfaces import AbstractObjectStorageClient
from .memory_client import InMemoryObjectStorageClient
from .s3_client import S3ObjectStorageClient
from .sqlite_client import SQLiteObjectStorageClient

logger = logging.getLogger(__name__)

SUPPORTED_BACKENDS = ("s3", "sqlite", "memory")


def create_object_storage_client(app_settings: Settings) -> AbstractObjectStorageClient:
    """
    Build the object storage client selected by ``storage_backend``.

    Raises:
        StorageConfigurationError: For an unknown backend or missing backend parameters
    """
    backend = app_settings.storage_backend.strip().lower()
    logger.info(f"Creating object storage client for backend '{backend}'.")

    if backend == "s3":
        return S3ObjectStorageClient(
            app_settings.s3_bucket,
            page_size=app_settings.s3_list_page_size,
            region_name=app_settings.s3_region,
            endpoint_url=app_settings.s3_endpoint_url,
            profile_name=app_settings.s3_profile,
        )
    if backend == "sqlite":
        return SQLiteObjectStorageClient(app_settings.sqlite_db_path)
    if backend == "memory":
        return InMemoryObjectStorageClient(delete_cap=app_settings.delete_batch_cap)

    raise StorageConfigurationError(
        f"Unsupported storage_backend '{app_settings.storage_backend}'. "
        f"Expected one of: {', '.join(SUPPORTED_BACKENDS)}"
    )
