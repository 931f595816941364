# src/cipherdrop/schemas/paste.py
"""Paste-related Pydantic schemas."""

from pydantic import BaseModel, Field


class PasteCreate(BaseModel):
    """Schema for storing a new encrypted paste."""

    encrypted_data_b64: str = Field(..., description="Base64-encoded ciphertext")
    nonce_b64: str = Field(..., description="Base64-encoded nonce used for encryption")
    ttl_seconds: int | None = Field(
        None,
        description="Optional lifetime override, bounded by the server maximum",
    )


class PasteCreated(BaseModel):
    """Schema returned after a paste has been stored."""

    paste_id: str
    expires_in_seconds: int


class PasteResponse(BaseModel):
    """Schema for an encrypted paste returned to a reader."""

    encrypted_data_b64: str
    nonce_b64: str
