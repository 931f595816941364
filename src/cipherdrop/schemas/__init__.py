"""Pydantic schemas for the Cipherdrop HTTP API."""

from .paste import PasteCreate, PasteCreated, PasteResponse

__all__ = ["PasteCreate", "PasteCreated", "PasteResponse"]
