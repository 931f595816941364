"""Tests for application settings."""

import pytest
from pydantic import ValidationError

from cipherdrop.core.settings import Settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """Defaults follow the documented configuration."""
    for name in ("DEFAULT_TTL_SECONDS", "MAX_ENTRIES", "BURN_AFTER_READ", "BIND_ADDRESS"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)

    assert settings.default_ttl_seconds == 86_400
    assert settings.max_payload_bytes == 10 * 1024 * 1024
    assert settings.reaper_interval_seconds == 3600
    assert settings.id_length == 22
    assert settings.burn_after_read is False
    assert settings.tls_enabled is False
    assert settings.host_port == ("0.0.0.0", 8080)


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    """Environment variables use upper-case aliases."""
    monkeypatch.setenv("MAX_ENTRIES", "5")
    monkeypatch.setenv("BURN_AFTER_READ", "true")
    monkeypatch.setenv("CORS_ORIGINS", '["https://example.org"]')
    settings = Settings(_env_file=None)

    assert settings.max_entries == 5
    assert settings.burn_after_read is True
    assert settings.cors_origins == ["https://example.org"]


def test_default_ttl_cannot_exceed_maximum() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, default_ttl_seconds=100, max_ttl_seconds=10)


def test_non_positive_limits_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, shard_count=0)
    with pytest.raises(ValidationError):
        Settings(_env_file=None, max_payload_bytes=0)


def test_settings_are_immutable() -> None:
    settings = Settings(_env_file=None)
    with pytest.raises(ValidationError):
        settings.max_entries = 1  # type: ignore[misc]


@pytest.mark.parametrize(
    ("address", "expected"),
    [("127.0.0.1:9000", ("127.0.0.1", 9000)), ("[::1]:8443", ("::1", 8443))],
)
def test_host_port(address: str, expected: tuple[str, int]) -> None:
    assert Settings(_env_file=None, bind_address=address).host_port == expected


def test_host_port_requires_port() -> None:
    with pytest.raises(ValueError):
        Settings(_env_file=None, bind_address="localhost").host_port  # noqa: B018
