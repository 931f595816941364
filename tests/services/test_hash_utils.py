"""Tests for BLAKE3 hashing helpers."""

from collections import Counter

import pytest

from cipherdrop.utils.hash import shard_index


def test_shard_index_is_stable_and_in_range():
    """The same key always maps to the same shard."""
    for key in ("a", "abc", "Z" * 22):
        index = shard_index(key, 16)
        assert 0 <= index < 16
        assert shard_index(key, 16) == index


def test_shard_index_spreads_keys():
    """Sequential keys land on every shard."""
    counts = Counter(shard_index(f"paste-{i}", 8) for i in range(4000))
    assert set(counts) == set(range(8))
    assert min(counts.values()) > 300


def test_shard_index_rejects_zero_shards():
    """A shard count of zero is invalid."""
    with pytest.raises(ValueError):
        shard_index("key", 0)
