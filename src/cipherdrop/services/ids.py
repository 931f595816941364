"""Unguessable identifiers for stored pastes."""

from __future__ import annotations

import secrets
import string
from typing import Final

ID_ALPHABET: Final[str] = string.ascii_letters + string.digits
DEFAULT_ID_LENGTH: Final[int] = 22


class RandomnessUnavailableError(RuntimeError):
    """Raised when the operating system cannot supply secure random bytes."""


class IdGenerator:
    """Produce URL-safe alphanumeric ids from the system CSPRNG.

    Each character is drawn independently with ``secrets.choice`` so ids carry
    no information about earlier allocations. With the default length of 22
    the id space is 62**22 (about 131 bits).
    """

    def __init__(self, length: int = DEFAULT_ID_LENGTH) -> None:
        if length <= 0:
            raise ValueError("Id length must be positive")
        self._length = length

    @property
    def length(self) -> int:
        return self._length

    def generate(self) -> str:
        """Return a fresh random identifier."""
        return "".join(secrets.choice(ID_ALPHABET) for _ in range(self._length))

    def self_check(self) -> None:
        """Verify the randomness source works before the server accepts traffic.

        Raises:
            RandomnessUnavailableError: If the OS random source fails
        """
        try:
            secrets.token_bytes(16)
            self.generate()
        except (OSError, NotImplementedError) as exc:
            raise RandomnessUnavailableError(f"Secure randomness unavailable: {exc}") from exc
