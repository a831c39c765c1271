# passwordless_store/dependencies.py
from .settings import Settings
from .storage.factory import create_object_storage_client
from .tokens.object_token_store import ObjectStorageTokenStore


def create_token_store(app_settings: Settings) -> ObjectStorageTokenStore:
    """Build an uninitialized token store on the backend selected by ``app_settings``."""
    client = create_object_storage_client(app_settings)
    return ObjectStorageTokenStore(client, delete_batch_cap=app_settings.delete_batch_cap)
