"""Command-line entry point: validate startup configuration and serve.

Usage:
    cipherdrop --addr 0.0.0.0:8443 --cert cert.pem --key key.pem
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

import uvicorn

from cipherdrop.core.logging import configure_logging
from cipherdrop.core.settings import Settings, settings as default_settings
from cipherdrop.core.tls import TlsConfigError, TlsMaterial, load_tls_material, resolve_tls_paths
from cipherdrop.main import create_app
from cipherdrop.services.ids import IdGenerator, RandomnessUnavailableError

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cipherdrop",
        description="Serve ephemeral, client-side encrypted pastes.",
    )
    parser.add_argument("--addr", default=settings.bind_address, help="host:port to listen on")
    parser.add_argument("--cert", default=settings.tls_cert_path, help="PEM certificate file")
    parser.add_argument("--key", default=settings.tls_key_path, help="PEM private key file")
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        type=str.upper,
        choices=LOG_LEVELS,
        help="Logging level",
    )
    return parser


def prepare(settings: Settings) -> TlsMaterial | None:
    """Run every fatal startup check.

    Returns:
        Loaded TLS material, or None when serving plain HTTP

    Raises:
        RandomnessUnavailableError: If ids cannot be generated securely
        TlsConfigError: If TLS was requested but cannot be loaded
    """
    IdGenerator(settings.id_length).self_check()

    paths = resolve_tls_paths(settings.tls_cert_path, settings.tls_key_path)
    if paths is None:
        logger.warning(
            "TLS not configured: running in HTTP mode. Traffic is unencrypted and "
            "potentially tamperable. Provide --cert and --key to enable HTTPS."
        )
        return None

    cert_path, key_path = paths
    logger.info("TLS enabled. Loading cert: %s, key: %s", cert_path, key_path)
    return load_tls_material(cert_path, key_path)


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments, run startup checks and start the listener."""
    args = build_parser(default_settings).parse_args(argv)
    try:
        configure_logging(args.log_level)
        settings = default_settings.model_copy(
            update={
                "bind_address": args.addr,
                "tls_cert_path": args.cert,
                "tls_key_path": args.key,
                "log_level": args.log_level,
            }
        )
        host, port = settings.host_port
        tls = prepare(settings)
    except (TlsConfigError, RandomnessUnavailableError, ValueError) as exc:
        logger.error("Startup failed: %s", exc)
        return 1

    scheme = "https" if tls else "http"
    logger.info("Listening on %s://%s:%d", scheme, host, port)

    uvicorn.run(
        create_app(settings),
        host=host,
        port=port,
        ssl_certfile=str(tls.cert_path) if tls else None,
        ssl_keyfile=str(tls.key_path) if tls else None,
        log_config=None,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
