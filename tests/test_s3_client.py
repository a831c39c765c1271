# tests/test_s3_client.py
import io

import boto3
import pytest
from botocore.exceptions import ClientError
from botocore.response import StreamingBody
from botocore.stub import Stubber

from passwordless_store.storage.errors import (
    ObjectNotFoundError,
    StorageBackendError,
    StorageConfigurationError,
)
from passwordless_store.storage.s3_client import S3ObjectStorageClient
from passwordless_store.tokens.object_token_store import ObjectStorageTokenStore
from passwordless_store.utils.hashing import identity_hash

from .fakes import FakeClock

BUCKET = "passwordless-tokens"


@pytest.fixture
def s3():
    client = boto3.client(
        "s3",
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )
    with Stubber(client) as stubber:
        yield client, stubber
        stubber.assert_no_pending_responses()


@pytest.fixture
def storage(s3):
    client, _ = s3
    return S3ObjectStorageClient(BUCKET, client=client)


def _streaming(body: bytes) -> StreamingBody:
    return StreamingBody(io.BytesIO(body), len(body))


@pytest.mark.parametrize("bucket", [None, ""])
def test_bucket_is_mandatory(bucket):
    with pytest.raises(StorageConfigurationError, match="bucket"):
        S3ObjectStorageClient(bucket)


async def test_get_object_returns_body(s3, storage):
    _, stubber = s3
    stubber.add_response(
        "get_object",
        {"Body": _streaming(b'{"hello": "world"}')},
        {"Bucket": BUCKET, "Key": "abc"},
    )

    assert await storage.get_object("abc") == b'{"hello": "world"}'


async def test_get_object_maps_no_such_key_to_not_found(s3, storage):
    _, stubber = s3
    stubber.add_client_error(
        "get_object",
        service_error_code="NoSuchKey",
        http_status_code=404,
        expected_params={"Bucket": BUCKET, "Key": "missing"},
    )

    with pytest.raises(ObjectNotFoundError) as exc_info:
        await storage.get_object("missing")
    assert exc_info.value.key == "missing"


async def test_get_object_propagates_other_client_errors(s3, storage):
    _, stubber = s3
    stubber.add_client_error("get_object", service_error_code="AccessDenied", http_status_code=403)

    with pytest.raises(ClientError) as exc_info:
        await storage.get_object("abc")
    assert exc_info.value.response["Error"]["Code"] == "AccessDenied"


async def test_put_object_writes_json_body(s3, storage):
    _, stubber = s3
    stubber.add_response(
        "put_object",
        {},
        {"Bucket": BUCKET, "Key": "abc", "Body": b"{}", "ContentType": "application/json"},
    )

    await storage.put_object("abc", b"{}")


async def test_delete_object(s3, storage):
    _, stubber = s3
    stubber.add_response("delete_object", {}, {"Bucket": BUCKET, "Key": "abc"})

    await storage.delete_object("abc")


async def test_delete_objects_returns_deleted_count(s3, storage):
    _, stubber = s3
    stubber.add_response(
        "delete_objects",
        {"Deleted": [{"Key": "a"}, {"Key": "b"}]},
        {"Bucket": BUCKET, "Delete": {"Objects": [{"Key": "a"}, {"Key": "b"}]}},
    )

    assert await storage.delete_objects(["a", "b"]) == 2


async def test_delete_objects_with_no_keys_sends_no_request(storage):
    assert await storage.delete_objects([]) == 0


async def test_delete_objects_raises_on_per_key_errors(s3, storage):
    _, stubber = s3
    stubber.add_response(
        "delete_objects",
        {
            "Deleted": [{"Key": "a"}],
            "Errors": [{"Key": "b", "Code": "AccessDenied", "Message": "Access Denied"}],
        },
    )

    with pytest.raises(StorageBackendError) as exc_info:
        await storage.delete_objects(["a", "b"])
    assert exc_info.value.failed_keys == ("b",)


async def test_list_objects_maps_page(s3, storage):
    _, stubber = s3
    stubber.add_response(
        "list_objects",
        {"Contents": [{"Key": "a"}, {"Key": "b"}], "IsTruncated": True},
        {"Bucket": BUCKET, "Marker": "0"},
    )

    listing = await storage.list_objects("0")

    assert listing.keys == ["a", "b"]
    assert listing.is_truncated is True
    assert listing.next_marker is None


async def test_list_objects_of_empty_bucket(s3, storage):
    _, stubber = s3
    stubber.add_response("list_objects", {"IsTruncated": False}, {"Bucket": BUCKET})

    listing = await storage.list_objects()

    assert listing.keys == []
    assert listing.is_truncated is False


async def test_list_objects_sends_page_size(s3):
    client, stubber = s3
    storage = S3ObjectStorageClient(BUCKET, client=client, page_size=2)
    stubber.add_response(
        "list_objects",
        {"Contents": [{"Key": "a"}], "IsTruncated": False},
        {"Bucket": BUCKET, "MaxKeys": 2},
    )

    assert (await storage.list_objects()).keys == ["a"]


async def test_initialize_checks_bucket_access(s3, storage):
    _, stubber = s3
    stubber.add_client_error("head_bucket", service_error_code="403", http_status_code=403)

    with pytest.raises(ClientError):
        await storage.initialize()


async def test_token_store_round_trip_over_s3(s3, storage):
    _, stubber = s3
    clock = FakeClock()
    store = ObjectStorageTokenStore(storage, clock=clock)
    key = identity_hash("alice@example.com")
    body = (
        '{"hashedToken":"%s","uid":"alice@example.com","ttl":%d,"originUrl":"https://app.example.com"}'
        % (identity_hash("token-123"), clock.now_ms + 60_000)
    ).encode("utf-8")

    stubber.add_response(
        "put_object",
        {},
        {"Bucket": BUCKET, "Key": key, "Body": body, "ContentType": "application/json"},
    )
    stubber.add_response("get_object", {"Body": _streaming(body)}, {"Bucket": BUCKET, "Key": key})

    await store.store_or_update("token-123", "alice@example.com", 60_000, "https://app.example.com")
    result = await store.authenticate("token-123", "alice@example.com")

    assert result.valid is True
    assert result.origin_url == "https://app.example.com"


async def test_token_store_length_uses_last_key_when_next_marker_missing(s3, storage):
    _, stubber = s3
    stubber.add_response(
        "list_objects",
        {"Contents": [{"Key": "a"}, {"Key": "b"}], "IsTruncated": True},
        {"Bucket": BUCKET},
    )
    stubber.add_response(
        "list_objects",
        {"Contents": [{"Key": "c"}], "IsTruncated": False},
        {"Bucket": BUCKET, "Marker": "b"},
    )

    assert await ObjectStorageTokenStore(storage).length() == 3


async def test_token_store_clear_relists_after_full_batch(s3):
    client, stubber = s3
    storage = S3ObjectStorageClient(BUCKET, client=client)
    store = ObjectStorageTokenStore(storage, delete_batch_cap=2)

    stubber.add_response(
        "list_objects", {"Contents": [{"Key": "a"}, {"Key": "b"}], "IsTruncated": False}, {"Bucket": BUCKET}
    )
    stubber.add_response("delete_objects", {"Deleted": [{"Key": "a"}, {"Key": "b"}]})
    stubber.add_response("list_objects", {"Contents": [{"Key": "c"}], "IsTruncated": False}, {"Bucket": BUCKET})
    stubber.add_response("delete_objects", {"Deleted": [{"Key": "c"}]})

    await store.clear()
