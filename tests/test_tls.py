"""Tests for TLS material loading."""

from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from cipherdrop.core.tls import TlsConfigError, load_tls_material, resolve_tls_paths


def _write_key(path: Path, key: ec.EllipticCurvePrivateKey) -> Path:
    path.write_bytes(
        key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )
    )
    return path


def write_self_signed(directory: Path, *, days_valid: int = 30) -> tuple[Path, Path]:
    """Write a self-signed certificate and key for ``localhost``."""
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "localhost")])
    now = datetime.now(UTC)
    certificate = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=60))
        .not_valid_after(now + timedelta(days=days_valid))
        .sign(key, hashes.SHA256())
    )
    cert_path = directory / "cert.pem"
    cert_path.write_bytes(certificate.public_bytes(serialization.Encoding.PEM))
    return cert_path, _write_key(directory / "key.pem", key)


class TestResolveTlsPaths:
    """Both-or-neither rule."""

    def test_neither(self):
        assert resolve_tls_paths(None, None) is None

    def test_both(self):
        assert resolve_tls_paths("c.pem", "k.pem") == (Path("c.pem"), Path("k.pem"))

    @pytest.mark.parametrize(("cert", "key"), [("c.pem", None), (None, "k.pem")])
    def test_only_one(self, cert, key):
        with pytest.raises(TlsConfigError, match="Both --cert and --key"):
            resolve_tls_paths(cert, key)


class TestLoadTlsMaterial:
    """Certificate/key validation."""

    def test_valid_pair(self, tmp_path: Path):
        cert_path, key_path = write_self_signed(tmp_path)

        material = load_tls_material(cert_path, key_path)

        assert material.subject == "CN=localhost"
        assert material.not_valid_after > datetime.now(UTC)

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(TlsConfigError, match="Failed to read"):
            load_tls_material(tmp_path / "nope.pem", tmp_path / "nope.key")

    def test_garbage_certificate(self, tmp_path: Path):
        _, key_path = write_self_signed(tmp_path)
        bad_cert = tmp_path / "bad.pem"
        bad_cert.write_text("not a certificate")

        with pytest.raises(TlsConfigError, match="Invalid TLS certificate"):
            load_tls_material(bad_cert, key_path)

    def test_mismatched_key(self, tmp_path: Path):
        cert_path, _ = write_self_signed(tmp_path)
        other_key = _write_key(tmp_path / "other.pem", ec.generate_private_key(ec.SECP256R1()))

        with pytest.raises(TlsConfigError, match="valid pair"):
            load_tls_material(cert_path, other_key)

    def test_expired_certificate(self, tmp_path: Path):
        cert_path, key_path = write_self_signed(tmp_path, days_valid=-1)

        with pytest.raises(TlsConfigError, match="expired"):
            load_tls_material(cert_path, key_path)
