"""Pytest configuration and fixtures."""

# pylint: disable=redefined-outer-name

import os
from dataclasses import dataclass, field
from typing import Optional

import dns.flags
import dns.message
import dns.rrset
import pytest

from doh_gateway.core.config import Settings
from doh_gateway.dns.builder import OutgoingDNSRequest

# Set test environment variables before importing application code
os.environ.setdefault("UPSTREAM", "192.0.2.53:53")
os.environ.setdefault("INSECURE", "true")


@dataclass
class FakeExchanger:
    """Fake upstream exchanger that records requests and returns a canned reply."""

    reply: Optional[dns.message.Message] = None
    error: Optional[Exception] = None
    calls: list[tuple[OutgoingDNSRequest, str]] = field(default_factory=list)

    async def exchange(
        self, request: OutgoingDNSRequest, upstream: str
    ) -> Optional[dns.message.Message]:
        self.calls.append((request, upstream))
        if self.error is not None:
            raise self.error
        return self.reply


def make_reply(
    name: str = "example.com.",
    rdtype: str = "A",
    answers: Optional[list[tuple[str, int, str, str]]] = None,
    ra: bool = True,
) -> dns.message.Message:
    """
    Build an upstream reply for name/rdtype.

    answers holds (owner, ttl, type, rdata) tuples, each stored as its own
    RRset the way the UDP exchanger parses replies.
    """
    query = dns.message.make_query(name, rdtype)
    reply = dns.message.make_response(query)
    if ra:
        reply.flags |= dns.flags.RA

    for owner, ttl, rr_type, rdata in answers or []:
        reply.answer.append(dns.rrset.from_text(owner, ttl, "IN", rr_type, rdata))

    return reply


@pytest.fixture
def test_settings():
    """Provide test settings with predictable values."""
    return Settings(
        upstream="192.0.2.53:53",
        upstream_timeout=1.5,
        insecure=True,
        sentry_dsn=None,
        _env_file=None,
    )


@pytest.fixture
def reply_factory():
    """Factory for upstream replies."""
    return make_reply


@pytest.fixture
def a_reply():
    """Reply with a single A record for example.com."""
    return make_reply(answers=[("example.com.", 300, "A", "93.184.216.34")])


@pytest.fixture
def fake_exchanger(a_reply):
    """Exchanger answering every request with the example.com A reply."""
    return FakeExchanger(reply=a_reply)
