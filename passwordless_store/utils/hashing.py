# passwordless_store/utils/hashing.py
import hashlib


def identity_hash(value: str) -> str:
    """
    Create the deterministic hex digest used for storage keys and token comparison.

    The same input always yields the same 32-character MD5 hex string. No salt
    is applied: user ids must map to stable keys, and presented tokens must
    compare equal to the digest stored when they were issued. Plaintext tokens
    are therefore never persisted.
    """
    return hashlib.md5(value.encode('utf-8'), usedforsecurity=False).hexdigest()
