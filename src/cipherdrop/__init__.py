"""Cipherdrop: ephemeral storage for client-side encrypted pastes."""

__version__ = "0.1.0"
