"""Construction of the outgoing DNS request for a validated lookup."""

import ipaddress
from dataclasses import dataclass
from typing import Optional, Union

import dns.edns
import dns.flags
import dns.message
import dns.rdataclass

from doh_gateway.core.query import IPNetwork, LookupRequest

FAMILY_IPV4 = 1
FAMILY_IPV6 = 2

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


@dataclass(frozen=True)
class ClientSubnet:
    """
    EDNS0 client-subnet option (RFC 7871) sent with the query.

    family mirrors the address version; dnspython derives the family it puts
    on the wire from the address itself.
    """

    family: int
    address: IPAddress
    source_netmask: int
    # Scope is set by resolvers, a querier always sends 0.
    scope_netmask: int = 0

    @classmethod
    def from_network(cls, network: IPNetwork) -> "ClientSubnet":
        """Build the option from a parsed CIDR network."""
        address = network.network_address
        prefixlen = network.prefixlen

        if isinstance(address, ipaddress.IPv6Address) and address.ipv4_mapped:
            return cls(
                family=FAMILY_IPV4,
                address=address.ipv4_mapped,
                source_netmask=max(prefixlen - 96, 0),
            )

        family = FAMILY_IPV4 if address.version == 4 else FAMILY_IPV6
        return cls(family=family, address=address, source_netmask=prefixlen)

    def to_edns_option(self) -> dns.edns.ECSOption:
        return dns.edns.ECSOption(
            str(self.address), self.source_netmask, self.scope_netmask
        )


@dataclass(frozen=True)
class OutgoingDNSRequest:
    """A DNS question ready to be sent upstream."""

    name: str
    rr_type: int
    checking_disabled: bool = False
    client_subnet: Optional[ClientSubnet] = None

    def to_message(self) -> dns.message.Message:
        """
        Render the request as a dnspython query message.

        Recursion desired is always set. EDNS0 is only enabled when a client
        subnet has to be carried.
        """
        options = None
        if self.client_subnet is not None:
            options = [self.client_subnet.to_edns_option()]

        message = dns.message.make_query(
            self.name,
            self.rr_type,
            rdclass=dns.rdataclass.IN,
            use_edns=0 if options else None,
            options=options,
        )

        if self.checking_disabled:
            message.flags |= dns.flags.CD

        return message


def fqdn(name: str) -> str:
    """Return name with a trailing dot."""
    if name.endswith("."):
        return name
    return name + "."


def build_request(lookup: LookupRequest) -> OutgoingDNSRequest:
    """Turn a validated lookup into the request sent to the upstream."""
    client_subnet = None
    if lookup.client_subnet is not None:
        client_subnet = ClientSubnet.from_network(lookup.client_subnet)

    return OutgoingDNSRequest(
        name=fqdn(lookup.name),
        rr_type=lookup.rr_type,
        checking_disabled=lookup.checking_disabled,
        client_subnet=client_subnet,
    )
