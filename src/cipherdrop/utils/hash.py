# src/cipherdrop/utils/hash.py
"""Hashing helpers built on BLAKE3."""

from __future__ import annotations

from blake3 import blake3

SHARD_KEY_BYTES = 8


def shard_index(key: str, shard_count: int) -> int:
    """Map a string key onto one of ``shard_count`` buckets.

    The first eight digest bytes are read as an unsigned integer so the
    distribution does not depend on the key alphabet.
    """
    if shard_count <= 0:
        raise ValueError("shard_count must be positive")
    digest = blake3(key.encode("utf-8")).digest(length=SHARD_KEY_BYTES)
    return int.from_bytes(digest, "big") % shard_count
