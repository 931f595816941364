# src/cipherdrop/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import pages_router, pastes_router, system_router

__all__ = [
    "pages_router",
    "pastes_router",
    "system_router",
]
