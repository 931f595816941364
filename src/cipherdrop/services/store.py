"""In-memory, time-bounded storage for encrypted pastes.

The store owns the lifecycle of every paste: insertion with a fresh id,
lazy expiry on read, optional burn-after-read, and eager purging for the
Reaper. Entries live in a fixed number of shards, each guarded by its own
lock, so operations on unrelated ids do not contend. Capacity accounting is
reserved before an insert and released after a removal so concurrent writers
can never push the store past its configured limits.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable
from dataclasses import dataclass
from threading import Lock
from typing import TYPE_CHECKING

from cipherdrop.services.ids import IdGenerator
from cipherdrop.utils.hash import shard_index

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from cipherdrop.core.settings import Settings

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class StoreError(Exception):
    """Base class for errors raised by the ephemeral store."""


class NotFoundError(StoreError):
    """The id is unknown, expired or already consumed.

    The message is identical in every case so callers cannot tell them apart.
    """

    def __init__(self) -> None:
        super().__init__("Paste not found")


class PayloadTooLargeError(StoreError):
    """The ciphertext and nonce together exceed the per-paste size limit."""

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"Payload of {size} bytes exceeds limit of {limit} bytes")
        self.size = size
        self.limit = limit


class CapacityExceededError(StoreError):
    """The store is full; the write was rejected and nothing was evicted."""


class IdCollisionRetryExhaustedError(CapacityExceededError):
    """Every generated id collided with a resident entry."""


@dataclass(frozen=True)
class Entry:
    """A single stored paste. Never mutated after creation."""

    id: str
    ciphertext: bytes
    nonce: bytes
    created_at: float
    expires_at: float

    @property
    def size(self) -> int:
        return len(self.ciphertext) + len(self.nonce)

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


@dataclass(frozen=True)
class StoreStats:
    """Point-in-time occupancy snapshot."""

    entries: int
    total_bytes: int
    shard_count: int
    max_entries: int | None
    max_total_bytes: int | None
    max_payload_bytes: int


class _Shard:
    __slots__ = ("entries", "lock")

    def __init__(self) -> None:
        self.lock = Lock()
        self.entries: dict[str, Entry] = {}


class EphemeralStore:
    """Concurrent map from paste id to :class:`Entry` with expiry and capacity limits."""

    def __init__(
        self,
        *,
        max_payload_bytes: int,
        max_entries: int | None = None,
        max_total_bytes: int | None = None,
        shard_count: int = 16,
        burn_after_read: bool = False,
        id_generator: IdGenerator | None = None,
        id_max_attempts: int = 5,
        clock: Clock = time.monotonic,
    ) -> None:
        """Initialize an empty store.

        Args:
            max_payload_bytes: Largest accepted ``len(ciphertext) + len(nonce)``
            max_entries: Resident entry limit, or None for no limit
            max_total_bytes: Resident byte limit, or None for no limit
            shard_count: Number of independently locked partitions
            burn_after_read: Remove an entry on its first successful read
            id_generator: Source of new ids; a default generator if omitted
            id_max_attempts: Ids tried before giving up on collisions
            clock: Monotonic time source in seconds, injectable for tests
        """
        if max_payload_bytes <= 0:
            raise ValueError("max_payload_bytes must be positive")
        if shard_count <= 0:
            raise ValueError("shard_count must be positive")
        if id_max_attempts <= 0:
            raise ValueError("id_max_attempts must be positive")

        self._max_payload_bytes = max_payload_bytes
        self._max_entries = max_entries
        self._max_total_bytes = max_total_bytes
        self._burn_after_read = burn_after_read
        self._ids = id_generator or IdGenerator()
        self._id_max_attempts = id_max_attempts
        self._clock = clock
        self._shards = [_Shard() for _ in range(shard_count)]

        self._capacity_lock = Lock()
        self._entry_count = 0
        self._total_bytes = 0
        # Lower bound on every resident expires_at; purges are skipped before it.
        self._earliest_expiry = math.inf

    @classmethod
    def from_settings(cls, settings: Settings, *, clock: Clock = time.monotonic) -> EphemeralStore:
        """Build a store configured from application settings."""
        return cls(
            max_payload_bytes=settings.max_payload_bytes,
            max_entries=settings.max_entries,
            max_total_bytes=settings.max_total_bytes,
            shard_count=settings.shard_count,
            burn_after_read=settings.burn_after_read,
            id_generator=IdGenerator(settings.id_length),
            id_max_attempts=settings.id_max_attempts,
            clock=clock,
        )

    @property
    def burn_after_read(self) -> bool:
        return self._burn_after_read

    def now(self) -> float:
        """Return the current reading of the store's clock."""
        return self._clock()

    # --- Public operations ----------------------------------------------------------
    def put(self, ciphertext: bytes, nonce: bytes, ttl: float) -> str:
        """Store a new paste and return its id.

        Args:
            ciphertext: Opaque encrypted payload
            nonce: Opaque nonce paired with the ciphertext
            ttl: Lifetime in seconds

        Returns:
            The freshly allocated id

        Raises:
            PayloadTooLargeError: If the payload exceeds the per-paste limit
            CapacityExceededError: If the store is full even after purging
                expired entries, or no unique id could be allocated
        """
        if ttl <= 0:
            raise ValueError("ttl must be positive")

        size = len(ciphertext) + len(nonce)
        if size > self._max_payload_bytes:
            raise PayloadTooLargeError(size, self._max_payload_bytes)

        if not self._reserve(size):
            # Expired entries nobody has read yet still hold capacity.
            if (
                not self._may_hold_expired()
                or self.purge_expired() == 0
                or not self._reserve(size)
            ):
                logger.warning(
                    "Store at capacity: %d entries, %d bytes",
                    self._entry_count,
                    self._total_bytes,
                )
                raise CapacityExceededError("Store capacity exceeded")

        try:
            return self._insert(bytes(ciphertext), bytes(nonce), ttl)
        except BaseException:
            self._release(1, size)
            raise

    def get(self, entry_id: str) -> tuple[bytes, bytes]:
        """Return ``(ciphertext, nonce)`` for a live entry.

        Expiry is checked here on every read, so an expired entry is never
        returned even if the Reaper has not swept it yet. When burn-after-read
        is enabled the entry is removed by the same read that returns it.

        Raises:
            NotFoundError: If the id is unknown, expired or already consumed
        """
        shard = self._shard_for(entry_id)
        now = self._clock()
        with shard.lock:
            entry = shard.entries.get(entry_id)
            if entry is None:
                raise NotFoundError()
            expired = entry.is_expired(now)
            if expired or self._burn_after_read:
                del shard.entries[entry_id]

        if expired or self._burn_after_read:
            self._release(1, entry.size)
        if expired:
            raise NotFoundError()
        return entry.ciphertext, entry.nonce

    def remove(self, entry_id: str) -> bool:
        """Remove an entry if present. Returns True if something was removed."""
        shard = self._shard_for(entry_id)
        with shard.lock:
            entry = shard.entries.pop(entry_id, None)
        if entry is None:
            return False
        self._release(1, entry.size)
        return True

    def purge_expired(self, now: float | None = None) -> int:
        """Remove every expired entry, one shard lock at a time.

        Args:
            now: Reference time; the store clock is read if omitted

        Returns:
            Number of entries removed
        """
        if now is None:
            now = self._clock()

        with self._capacity_lock:
            self._earliest_expiry = math.inf

        removed_count = 0
        for shard in self._shards:
            with shard.lock:
                expired = [
                    entry_id
                    for entry_id, entry in shard.entries.items()
                    if entry.is_expired(now)
                ]
                freed = sum(shard.entries.pop(entry_id).size for entry_id in expired)
                remaining = min((entry.expires_at for entry in shard.entries.values()), default=math.inf)
            self._note_expiry(remaining)
            if expired:
                self._release(len(expired), freed)
                removed_count += len(expired)
        return removed_count

    def stats(self) -> StoreStats:
        """Return current occupancy and limits."""
        with self._capacity_lock:
            entries, total_bytes = self._entry_count, self._total_bytes
        return StoreStats(
            entries=entries,
            total_bytes=total_bytes,
            shard_count=len(self._shards),
            max_entries=self._max_entries,
            max_total_bytes=self._max_total_bytes,
            max_payload_bytes=self._max_payload_bytes,
        )

    def __len__(self) -> int:
        with self._capacity_lock:
            return self._entry_count

    # --- Internals ------------------------------------------------------------------
    def _shard_for(self, entry_id: str) -> _Shard:
        return self._shards[shard_index(entry_id, len(self._shards))]

    def _insert(self, ciphertext: bytes, nonce: bytes, ttl: float) -> str:
        for _ in range(self._id_max_attempts):
            entry_id = self._ids.generate()
            shard = self._shard_for(entry_id)
            with shard.lock:
                if entry_id in shard.entries:
                    logger.error("Paste id collision detected, retrying")
                    continue
                created_at = self._clock()
                shard.entries[entry_id] = Entry(
                    id=entry_id,
                    ciphertext=ciphertext,
                    nonce=nonce,
                    created_at=created_at,
                    expires_at=created_at + ttl,
                )
            self._note_expiry(created_at + ttl)
            return entry_id
        raise IdCollisionRetryExhaustedError(
            f"Could not allocate a unique id after {self._id_max_attempts} attempts"
        )

    def _note_expiry(self, expires_at: float) -> None:
        with self._capacity_lock:
            self._earliest_expiry = min(self._earliest_expiry, expires_at)

    def _may_hold_expired(self) -> bool:
        with self._capacity_lock:
            earliest = self._earliest_expiry
        return self._clock() >= earliest

    def _reserve(self, size: int) -> bool:
        with self._capacity_lock:
            if self._max_entries is not None and self._entry_count + 1 > self._max_entries:
                return False
            if self._max_total_bytes is not None and self._total_bytes + size > self._max_total_bytes:
                return False
            self._entry_count += 1
            self._total_bytes += size
            return True

    def _release(self, count: int, size: int) -> None:
        with self._capacity_lock:
            self._entry_count -= count
            self._total_bytes -= size
