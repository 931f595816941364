"""HTML pages for creating and opening pastes.

The pages and their client-side encryption code live in ``WEB_DIR``; the
server only hands them out and never interacts with the store here.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import HTMLResponse

from ..dependencies import SettingsDep

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pages"])

INDEX_PAGE = "index.html"
RETRIEVE_PAGE = "retrieve.html"


async def read_html_file(web_dir: str, filename: str) -> str:
    """Return the contents of a page template.

    Raises:
        HTTPException: 500 if the file cannot be read
    """
    path = Path(web_dir) / filename
    try:
        return await asyncio.to_thread(path.read_text, encoding="utf-8")
    except OSError as exc:
        logger.error("Failed to read HTML file %s: %s", path, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal error: Could not load page template.",
        ) from exc


@router.get("/", response_class=HTMLResponse)
async def index_page(settings: SettingsDep) -> HTMLResponse:
    """Serve the paste creation page."""
    return HTMLResponse(await read_html_file(settings.web_dir, INDEX_PAGE))


@router.get("/p/{path:path}", response_class=HTMLResponse)
async def retrieve_page(path: str, settings: SettingsDep) -> HTMLResponse:
    """Serve the retrieval page; decryption happens in the browser."""
    return HTMLResponse(await read_html_file(settings.web_dir, RETRIEVE_PAGE))
