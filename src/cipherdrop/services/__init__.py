# src/cipherdrop/services/__init__.py
"""Storage and request-handling services for Cipherdrop."""

from .ids import IdGenerator, RandomnessUnavailableError
from .pastes import InvalidTtlError, PasteService
from .reaper import Reaper
from .store import (
    CapacityExceededError,
    EphemeralStore,
    IdCollisionRetryExhaustedError,
    NotFoundError,
    PayloadTooLargeError,
    StoreError,
)

__all__ = [
    "IdGenerator",
    "RandomnessUnavailableError",
    "EphemeralStore",
    "StoreError",
    "NotFoundError",
    "PayloadTooLargeError",
    "CapacityExceededError",
    "IdCollisionRetryExhaustedError",
    "PasteService",
    "InvalidTtlError",
    "Reaper",
]
