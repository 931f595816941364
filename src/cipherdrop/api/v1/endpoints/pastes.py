"""Paste create/retrieve endpoints for the Cipherdrop API."""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging

from fastapi import APIRouter, HTTPException, Path, status

from cipherdrop.schemas.paste import PasteCreate, PasteCreated, PasteResponse
from cipherdrop.services.pastes import InvalidTtlError
from cipherdrop.services.store import (
    CapacityExceededError,
    NotFoundError,
    PayloadTooLargeError,
)

from ..dependencies import PasteServiceDep, SettingsDep

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pastes"])


def _decode_b64(value: str, field: str) -> bytes:
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        logger.warning("Failed to decode %s base64: %s", field, exc)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {field} encoding",
        ) from exc


def _encode_b64(data: bytes) -> str:
    return base64.b64encode(data).decode()


@router.post("/create", status_code=status.HTTP_201_CREATED, response_model=PasteCreated)
async def create_paste(
    payload: PasteCreate,
    paste_service: PasteServiceDep,
    settings: SettingsDep,
) -> PasteCreated:
    """Store an encrypted paste and return its share id."""
    nonce = _decode_b64(payload.nonce_b64, "nonce")
    encrypted_data = _decode_b64(payload.encrypted_data_b64, "encrypted_data")

    if settings.nonce_length and len(nonce) != settings.nonce_length:
        logger.warning(
            "Received invalid nonce length: %d. Expected: %d",
            len(nonce),
            settings.nonce_length,
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid nonce length. Expected {settings.nonce_length}",
        )
    if not encrypted_data:
        logger.warning("Received paste with empty encrypted data")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Encrypted content is empty",
        )

    try:
        created = await asyncio.to_thread(
            paste_service.create, encrypted_data, nonce, payload.ttl_seconds
        )
    except InvalidTtlError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except PayloadTooLargeError as exc:
        logger.warning("Rejected paste: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="Encrypted content exceeds maximum size limit",
        ) from exc
    except CapacityExceededError as exc:
        raise HTTPException(
            status_code=status.HTTP_507_INSUFFICIENT_STORAGE,
            detail="Server is at capacity, please try again later",
        ) from exc

    return PasteCreated(paste_id=created.paste_id, expires_in_seconds=created.ttl_seconds)


@router.get("/api/paste/{paste_id}", response_model=PasteResponse)
async def get_paste(
    paste_service: PasteServiceDep,
    settings: SettingsDep,
    paste_id: str = Path(...),
) -> PasteResponse:
    """Return the ciphertext and nonce for a live paste."""
    if not paste_id or len(paste_id) > settings.max_id_length:
        logger.warning("Received get request with invalid paste_id format")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid paste id")

    try:
        payload = await asyncio.to_thread(paste_service.retrieve, paste_id)
    except NotFoundError as exc:
        logger.debug("Paste lookup missed")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Paste not found") from exc

    return PasteResponse(
        encrypted_data_b64=_encode_b64(payload.ciphertext),
        nonce_b64=_encode_b64(payload.nonce),
    )
