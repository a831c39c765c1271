# tests/test_sqlite_client.py
import sqlite3

import pytest

from passwordless_store.storage.errors import ObjectNotFoundError, StorageConfigurationError
from passwordless_store.storage.sqlite_client import SQLiteObjectStorageClient
from passwordless_store.tokens.object_token_store import ObjectStorageTokenStore

from .fakes import FakeClock


@pytest.fixture
async def sqlite_storage(tmp_path):
    storage = SQLiteObjectStorageClient(str(tmp_path / "data" / "tokens.sqlite3"), page_size=10)
    await storage.initialize()
    yield storage
    await storage.teardown()


async def test_put_get_and_overwrite(sqlite_storage):
    await sqlite_storage.put_object("abc", b"first")
    await sqlite_storage.put_object("abc", b"second")

    assert await sqlite_storage.get_object("abc") == b"second"
    assert (await sqlite_storage.list_objects()).keys == ["abc"]


async def test_get_missing_object_raises_not_found(sqlite_storage):
    with pytest.raises(ObjectNotFoundError):
        await sqlite_storage.get_object("missing")


async def test_delete_object_is_idempotent(sqlite_storage):
    await sqlite_storage.put_object("abc", b"body")

    await sqlite_storage.delete_object("abc")
    await sqlite_storage.delete_object("abc")

    with pytest.raises(ObjectNotFoundError):
        await sqlite_storage.get_object("abc")


async def test_delete_objects_counts_only_existing_keys(sqlite_storage):
    for key in ("a", "b", "c"):
        await sqlite_storage.put_object(key, b"x")

    assert await sqlite_storage.delete_objects(["a", "c", "zzz"]) == 2
    assert (await sqlite_storage.list_objects()).keys == ["b"]


async def test_list_objects_paginates_in_key_order(sqlite_storage):
    keys = [f"key-{index:02d}" for index in range(25)]
    for key in reversed(keys):
        await sqlite_storage.put_object(key, b"x")

    first = await sqlite_storage.list_objects()
    second = await sqlite_storage.list_objects(first.next_marker)
    third = await sqlite_storage.list_objects(second.next_marker)

    assert first.keys == keys[:10] and first.is_truncated
    assert second.keys == keys[10:20] and second.is_truncated
    assert third.keys == keys[20:] and not third.is_truncated
    assert third.next_marker is None


async def test_data_survives_reconnect(tmp_path):
    db_path = str(tmp_path / "tokens.sqlite3")
    first = SQLiteObjectStorageClient(db_path)
    await first.put_object("abc", b"persisted")
    await first.teardown()

    second = SQLiteObjectStorageClient(db_path)
    assert await second.get_object("abc") == b"persisted"
    await second.teardown()


async def test_token_store_lifecycle_on_sqlite(sqlite_storage):
    store = ObjectStorageTokenStore(sqlite_storage, delete_batch_cap=10, clock=FakeClock())
    for index in range(35):
        await store.store_or_update(f"token-{index}", f"user-{index}", 60_000)

    assert (await store.authenticate("token-7", "user-7")).valid is True
    assert await store.length() == 35

    await store.clear()

    assert await store.length() == 0


async def test_errors_propagate_as_sqlite_errors(sqlite_storage):
    await sqlite_storage.teardown()
    sqlite_storage._conn = sqlite3.connect(":memory:")

    with pytest.raises(sqlite3.Error):
        await sqlite_storage.get_object("abc")


@pytest.mark.parametrize("db_path, page_size", [("", 10), ("tokens.sqlite3", 0)])
def test_invalid_configuration(db_path, page_size):
    with pytest.raises(StorageConfigurationError):
        SQLiteObjectStorageClient(db_path, page_size=page_size)
