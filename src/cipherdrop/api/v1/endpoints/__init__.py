# src/cipherdrop/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .pages import router as pages_router
from .pastes import router as pastes_router
from .system import router as system_router

__all__ = [
    "pages_router",
    "pastes_router",
    "system_router",
]
