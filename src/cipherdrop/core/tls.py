"""TLS certificate and key loading for the HTTPS listener.

Material is loaded once at startup. Any problem here is fatal: the server
must not start serving when TLS was requested but cannot be configured.
"""

from __future__ import annotations

import logging
import ssl
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from cryptography import x509

logger = logging.getLogger(__name__)


class TlsConfigError(RuntimeError):
    """Raised when requested TLS material is missing or invalid."""


@dataclass(frozen=True)
class TlsMaterial:
    """Validated certificate/key pair ready to hand to the listener."""

    cert_path: Path
    key_path: Path
    subject: str
    not_valid_after: datetime


def resolve_tls_paths(cert: str | None, key: str | None) -> tuple[Path, Path] | None:
    """Apply the both-or-neither rule to the configured paths.

    Returns:
        ``(cert, key)`` when TLS is requested, None for plain HTTP

    Raises:
        TlsConfigError: If only one of the two paths was supplied
    """
    if cert and key:
        return Path(cert), Path(key)
    if cert or key:
        raise TlsConfigError(
            "Both --cert and --key must be provided for TLS, or neither for HTTP."
        )
    return None


def load_tls_material(cert_path: Path, key_path: Path) -> TlsMaterial:
    """Read and validate a PEM certificate and private key.

    The pair is loaded into an ``ssl.SSLContext`` to prove the key matches the
    certificate, and the certificate is parsed to report its subject and
    expiry.

    Raises:
        TlsConfigError: If either file is unreadable, malformed, mismatched or expired
    """
    try:
        cert_pem = cert_path.read_bytes()
        key_path.read_bytes()
    except OSError as exc:
        raise TlsConfigError(f"Failed to read TLS certificate/key: {exc}") from exc

    try:
        certificate = x509.load_pem_x509_certificate(cert_pem)
    except ValueError as exc:
        raise TlsConfigError(f"Invalid TLS certificate {cert_path}: {exc}") from exc

    context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    try:
        context.load_cert_chain(certfile=str(cert_path), keyfile=str(key_path))
    except ssl.SSLError as exc:
        raise TlsConfigError(f"TLS certificate and key do not form a valid pair: {exc}") from exc

    not_valid_after = certificate.not_valid_after_utc
    if not_valid_after <= datetime.now(UTC):
        raise TlsConfigError(f"TLS certificate {cert_path} expired at {not_valid_after.isoformat()}")

    material = TlsMaterial(
        cert_path=cert_path,
        key_path=key_path,
        subject=certificate.subject.rfc4514_string(),
        not_valid_after=not_valid_after,
    )
    logger.info(
        "Loaded TLS certificate for %s (valid until %s)",
        material.subject,
        material.not_valid_after.isoformat(),
    )
    return material
