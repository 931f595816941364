"""Shared dependencies for API endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from cipherdrop.core.settings import Settings
from cipherdrop.services.pastes import PasteService
from cipherdrop.services.reaper import Reaper
from cipherdrop.services.store import EphemeralStore


def get_settings(request: Request) -> Settings:
    """Return the settings the running application was built with."""
    return request.app.state.settings


def get_store(request: Request) -> EphemeralStore:
    """Return the application's store instance."""
    return request.app.state.store


def get_paste_service(request: Request) -> PasteService:
    """Return the application's paste service."""
    return request.app.state.paste_service


def get_reaper(request: Request) -> Reaper:
    """Return the application's Reaper."""
    return request.app.state.reaper


SettingsDep = Annotated[Settings, Depends(get_settings)]
StoreDep = Annotated[EphemeralStore, Depends(get_store)]
PasteServiceDep = Annotated[PasteService, Depends(get_paste_service)]
ReaperDep = Annotated[Reaper, Depends(get_reaper)]
