"""Exception hierarchy for the radix tree.

Lookups and deletions report misses through their return values; these
exceptions cover misuse of the API only.
"""

from __future__ import annotations


class RadixTreeError(Exception):
    """Base exception for all radix tree errors."""
    pass


class InvalidKeyError(RadixTreeError, TypeError):
    """Raised when a key is neither bytes-like nor str."""
    pass
