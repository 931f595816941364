"""Application settings and configuration.

This module defines all configuration options for the Cipherdrop server.
Settings are loaded from environment variables with sensible defaults and are
treated as immutable once the application has been built.
"""

from __future__ import annotations

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MIB = 1024 * 1024


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Cipherdrop", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Listener
    bind_address: str = Field(default="0.0.0.0:8080", alias="BIND_ADDRESS")
    tls_cert_path: str | None = Field(default=None, alias="TLS_CERT_PATH")
    tls_key_path: str | None = Field(default=None, alias="TLS_KEY_PATH")

    # Entry lifetime
    default_ttl_seconds: int = Field(default=24 * 60 * 60, gt=0, alias="DEFAULT_TTL_SECONDS")
    max_ttl_seconds: int = Field(default=7 * 24 * 60 * 60, gt=0, alias="MAX_TTL_SECONDS")
    allow_ttl_override: bool = Field(default=True, alias="ALLOW_TTL_OVERRIDE")
    burn_after_read: bool = Field(default=False, alias="BURN_AFTER_READ")

    # Store capacity (None disables the corresponding limit)
    max_payload_bytes: int = Field(default=10 * MIB, gt=0, alias="MAX_PAYLOAD_BYTES")
    max_entries: int | None = Field(default=100_000, gt=0, alias="MAX_ENTRIES")
    max_total_bytes: int | None = Field(default=1024 * MIB, gt=0, alias="MAX_TOTAL_BYTES")
    shard_count: int = Field(default=16, gt=0, alias="SHARD_COUNT")

    # Background expiry sweep
    reaper_interval_seconds: float = Field(default=60.0 * 60, gt=0, alias="REAPER_INTERVAL_SECONDS")

    # Identifiers and payload shape
    id_length: int = Field(default=22, ge=16, alias="PASTE_ID_LENGTH")
    id_max_attempts: int = Field(default=5, gt=0, alias="PASTE_ID_MAX_ATTEMPTS")
    max_id_length: int = Field(default=50, gt=0, alias="MAX_PASTE_ID_LENGTH")
    nonce_length: int = Field(default=12, ge=0, alias="NONCE_LENGTH")

    # Static pages
    web_dir: str = Field(default="./web", alias="WEB_DIR")

    # CORS configuration; middleware is only installed when origins are given
    cors_origins: list[str] = Field(default_factory=list, alias="CORS_ORIGINS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["Content-Type"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
        frozen=True,
    )

    @model_validator(mode="after")
    def _check_ttl_bounds(self) -> Settings:
        if self.default_ttl_seconds > self.max_ttl_seconds:
            raise ValueError("DEFAULT_TTL_SECONDS must not exceed MAX_TTL_SECONDS")
        return self

    @property
    def tls_enabled(self) -> bool:
        """Return True when both TLS certificate and key paths are configured."""
        return bool(self.tls_cert_path and self.tls_key_path)

    @property
    def host_port(self) -> tuple[str, int]:
        """Split ``bind_address`` into a ``(host, port)`` pair.

        Returns:
            Host string (IPv6 brackets stripped) and integer port

        Raises:
            ValueError: If the address has no port or the port is not numeric
        """
        host, sep, port = self.bind_address.rpartition(":")
        if not sep or not host:
            raise ValueError(f"Invalid bind address: {self.bind_address!r}")
        return host.strip("[]"), int(port)


settings = Settings()
