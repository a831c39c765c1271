# tests/conftest.py
import pytest

from passwordless_store.tokens.object_token_store import ObjectStorageTokenStore

from .fakes import FakeClock, RecordingStorageClient


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def storage_client() -> RecordingStorageClient:
    return RecordingStorageClient()


@pytest.fixture
def store(storage_client: RecordingStorageClient, clock: FakeClock) -> ObjectStorageTokenStore:
    return ObjectStorageTokenStore(storage_client, clock=clock)
