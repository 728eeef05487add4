"""Exchange of DNS messages with the upstream resolver."""

import logging
from dataclasses import dataclass, field
from typing import Optional, Protocol

import dns.asyncquery
import dns.message

from doh_gateway.core.config import Settings, get_settings, split_host_port
from doh_gateway.dns.builder import OutgoingDNSRequest

logger = logging.getLogger(__name__)


class UpstreamExchanger(Protocol):
    """Protocol for sending one DNS request to an upstream resolver."""

    async def exchange(
        self, request: OutgoingDNSRequest, upstream: str
    ) -> Optional[dns.message.Message]: ...


@dataclass
class UDPExchanger:
    """
    Default exchanger: a single UDP round-trip using dns.asyncquery.

    Replies are parsed one RR per RRset so answer order and per-record TTLs
    survive as they came off the wire. Any failure (timeout, socket error,
    malformed reply) propagates to the caller.
    """

    settings: Settings = field(default_factory=get_settings)

    async def exchange(
        self, request: OutgoingDNSRequest, upstream: str
    ) -> Optional[dns.message.Message]:
        host, port = split_host_port(upstream)
        query = request.to_message()

        logger.debug("Sending %s to %s:%d", query.question, host, port)

        return await dns.asyncquery.udp(
            query,
            host,
            timeout=self.settings.upstream_timeout,
            port=port,
            one_rr_per_rrset=True,
        )
