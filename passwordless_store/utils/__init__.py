# passwordless_store/utils/__init__.py

"""
Utility module initialization file.

Exposes the identity hash shared by the token store and its storage keys.
"""

from .hashing import identity_hash

# Export public API for the utils package
__all__ = ["identity_hash"]
