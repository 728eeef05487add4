"""Centralized configuration using Pydantic BaseSettings."""

import ipaddress
from functools import lru_cache
from typing import Optional, Tuple

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DNS_PORT = 53


def split_host_port(addr: str, default_port: int = DEFAULT_DNS_PORT) -> Tuple[str, int]:
    """
    Split a "host:port" address into its parts.

    Accepts "1.2.3.4:53", "[2001:db8::1]:53", a bare IPv4/IPv6 address or
    ":53" (loopback). A missing port falls back to default_port.
    """
    addr = addr.strip()

    if addr.startswith("["):
        host, _, rest = addr[1:].partition("]")
        port = rest[1:] if rest.startswith(":") else ""
    elif addr.count(":") == 1:
        host, port = addr.split(":")
    else:
        # Bare IPv4 address, hostname, or unbracketed IPv6 address
        host, port = addr, ""

    if not host:
        host = "127.0.0.1"

    return host, int(port) if port else default_port


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # HTTP listener
    listen_host: str = "0.0.0.0"
    listen_port: int = 443

    # TLS; insecure serves plain HTTP (integration testing only)
    cert_file: Optional[str] = None
    key_file: Optional[str] = None
    insecure: bool = False

    # Upstream DNS resolver, "host:port"
    upstream: str = "8.8.8.8:53"
    upstream_timeout: float = 2.0

    log_level: str = "INFO"

    # Sentry configuration (optional)
    sentry_dsn: Optional[str] = None
    sentry_environment: str = "production"
    sentry_traces_sample_rate: float = 1.0

    @field_validator("upstream")
    @classmethod
    def _upstream_is_ip_literal(cls, value: str) -> str:
        """The upstream must be an IP address; hostnames are not resolved."""
        host, _ = split_host_port(value)
        ipaddress.ip_address(host)
        return value

    @property
    def use_tls(self) -> bool:
        """Check if the listener should terminate TLS."""
        return not self.insecure and bool(self.cert_file and self.key_file)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
