"""Entry point for running the application directly."""

import uvicorn

from doh_gateway.core.config import get_settings


def main():
    """Run the application."""
    settings = get_settings()

    if not settings.insecure and not settings.use_tls:
        raise SystemExit("CERT_FILE and KEY_FILE are required unless INSECURE is set")

    uvicorn.run(
        "doh_gateway.app:app",
        host=settings.listen_host,
        port=settings.listen_port,
        ssl_certfile=settings.cert_file if settings.use_tls else None,
        ssl_keyfile=settings.key_file if settings.use_tls else None,
        log_level="warning",
    )


if __name__ == "__main__":
    main()
