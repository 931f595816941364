# tests/conftest.py
from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from cipherdrop.core.settings import Settings
from cipherdrop.main import create_app
from cipherdrop.services.pastes import PasteService
from cipherdrop.services.store import EphemeralStore

NONCE = b"\x00" * 12


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def web_dir(tmp_path: Path) -> Path:
    """Create minimal page templates."""
    (tmp_path / "index.html").write_text("<html>create</html>", encoding="utf-8")
    (tmp_path / "retrieve.html").write_text("<html>retrieve</html>", encoding="utf-8")
    return tmp_path


@pytest.fixture()
def test_settings(web_dir: Path) -> Settings:
    """Provide isolated settings with small, test-friendly limits."""
    return Settings(
        default_ttl_seconds=60,
        max_ttl_seconds=3600,
        max_payload_bytes=1024,
        max_entries=100,
        max_total_bytes=64 * 1024,
        shard_count=4,
        reaper_interval_seconds=3600,
        web_dir=str(web_dir),
        cors_origins=[],
    )


@pytest.fixture()
def store(clock: FakeClock) -> EphemeralStore:
    """Return a fresh store driven by the fake clock."""
    return EphemeralStore(
        max_payload_bytes=1024,
        max_entries=100,
        max_total_bytes=64 * 1024,
        shard_count=4,
        clock=clock,
    )


@pytest.fixture()
def paste_service(store: EphemeralStore) -> PasteService:
    return PasteService(store, default_ttl_seconds=60, max_ttl_seconds=3600)


@pytest.fixture()
def app(test_settings: Settings, clock: FakeClock) -> FastAPI:
    return create_app(test_settings, clock=clock)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client
