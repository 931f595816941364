"""Create and retrieve operations for encrypted pastes."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from cipherdrop.core.settings import Settings
from cipherdrop.services.store import EphemeralStore

logger = logging.getLogger(__name__)


class InvalidTtlError(ValueError):
    """The requested lifetime is not allowed by server policy."""


@dataclass(frozen=True)
class CreatedPaste:
    """Result of a successful create."""

    paste_id: str
    ttl_seconds: int


@dataclass(frozen=True)
class PastePayload:
    """Ciphertext and nonce returned to a reader."""

    ciphertext: bytes
    nonce: bytes


class PasteService:
    """Maps create/retrieve requests onto store operations.

    Payloads are opaque: no decryption or content inspection happens here.
    Store errors (``NotFoundError``, ``PayloadTooLargeError``,
    ``CapacityExceededError``) propagate to the transport layer unchanged.
    """

    def __init__(
        self,
        store: EphemeralStore,
        *,
        default_ttl_seconds: int,
        max_ttl_seconds: int,
        allow_ttl_override: bool = True,
    ) -> None:
        self.store = store
        self.default_ttl_seconds = default_ttl_seconds
        self.max_ttl_seconds = max_ttl_seconds
        self.allow_ttl_override = allow_ttl_override

    @classmethod
    def from_settings(cls, store: EphemeralStore, settings: Settings) -> PasteService:
        return cls(
            store,
            default_ttl_seconds=settings.default_ttl_seconds,
            max_ttl_seconds=settings.max_ttl_seconds,
            allow_ttl_override=settings.allow_ttl_override,
        )

    def resolve_ttl(self, ttl_seconds: int | None) -> int:
        """Return the lifetime to apply for a requested override.

        Raises:
            InvalidTtlError: If overrides are disabled or the value is out of range
        """
        if ttl_seconds is None:
            return self.default_ttl_seconds
        if not self.allow_ttl_override:
            raise InvalidTtlError("Custom expiry is not enabled on this server")
        if ttl_seconds <= 0:
            raise InvalidTtlError("ttl_seconds must be positive")
        if ttl_seconds > self.max_ttl_seconds:
            raise InvalidTtlError(f"ttl_seconds must not exceed {self.max_ttl_seconds}")
        return ttl_seconds

    def create(self, ciphertext: bytes, nonce: bytes, ttl_seconds: int | None = None) -> CreatedPaste:
        """Store an encrypted paste and return its id and effective lifetime."""
        ttl = self.resolve_ttl(ttl_seconds)
        paste_id = self.store.put(ciphertext, nonce, ttl)
        logger.info("Stored encrypted paste (%d bytes, ttl %ds)", len(ciphertext) + len(nonce), ttl)
        return CreatedPaste(paste_id=paste_id, ttl_seconds=ttl)

    def retrieve(self, paste_id: str) -> PastePayload:
        """Return the stored ciphertext and nonce for a live paste."""
        ciphertext, nonce = self.store.get(paste_id)
        return PastePayload(ciphertext=ciphertext, nonce=nonce)
