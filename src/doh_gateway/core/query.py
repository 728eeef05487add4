"""Parsing of /resolve query parameters into a validated lookup request."""

import ipaddress
import re
from dataclasses import dataclass
from typing import Mapping, Optional, Union

import dns.rdatatype

from doh_gateway.utils.exceptions import (
    EmptyNameError,
    IntOutOfRangeError,
    InvalidCheckingDisabledError,
    InvalidSubnetError,
    NameTooLongError,
    UnknownTypeError,
)

MAX_NAME_LENGTH = 253
DEFAULT_RR_TYPE = 1  # A

IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]

# Canonical mnemonic -> code, e.g. "AAAA" -> 28, "NSAP-PTR" -> 23.
RR_TYPE_CODES: dict[str, int] = {
    dns.rdatatype.to_text(rdtype): int(rdtype)
    for rdtype in dns.rdatatype.RdataType
    if rdtype != 0
}

_TRUE_VALUES = ("", "1", "true")
_FALSE_VALUES = ("0", "false")

_DECIMAL = re.compile(r"[+-]?[0-9]+")
_PREFIX_LENGTH = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class LookupRequest:
    """A validated DNS lookup, as requested over HTTP."""

    name: str
    rr_type: int = DEFAULT_RR_TYPE
    checking_disabled: bool = False
    client_subnet: Optional[IPNetwork] = None

    def __str__(self) -> str:
        return (
            f"{{{self.name} {self.rr_type} {self.checking_disabled} "
            f"{self.client_subnet}}}"
        )


def single_valued(query_params) -> dict[str, str]:
    """
    Collapse multi-valued query parameters to their first value.

    A key given without a value ("?cd") maps to the empty string.
    """
    values: dict[str, str] = {}

    for key in query_params.keys():
        found = query_params.getlist(key)
        values[key] = found[0] if found else ""

    return values


def string_to_rr_type(value: str) -> int:
    """
    Convert a string into a DNS record type code.

    The string can be a number in the [1, 65535] range, or a canonical type
    mnemonic (case-insensitive, such as "A" or "aaaa").
    """
    if _DECIMAL.fullmatch(value):
        # More than five significant digits is out of range, and too long for int()
        if len(value.lstrip("+-").lstrip("0")) > 5:
            raise IntOutOfRangeError()
        code = int(value, 10)
        if 1 <= code <= 65535:
            return code
        raise IntOutOfRangeError()

    try:
        return RR_TYPE_CODES[value.upper()]
    except KeyError:
        raise UnknownTypeError() from None


def string_to_bool(value: str) -> bool:
    """
    Convert a query string flag into a bool.

    The empty string counts as true: a flag present without a value is set.
    """
    lowered = value.lower()

    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False

    raise InvalidCheckingDisabledError()


def parse_subnet(value: str) -> IPNetwork:
    """Parse CIDR notation ("1.2.3.0/24", host bits allowed)."""
    _, slash, prefix = value.rpartition("/")
    if not slash or not _PREFIX_LENGTH.fullmatch(prefix):
        raise InvalidSubnetError()
    # IPv6 zone identifiers ("fe80::%eth0") have no meaning in a client subnet
    if "%" in value:
        raise InvalidSubnetError()

    try:
        return ipaddress.ip_network(value, strict=False)
    except ValueError:
        raise InvalidSubnetError() from None


def parse_query(params: Mapping[str, str]) -> LookupRequest:
    """
    Build a LookupRequest from single-valued query parameters.

    Raises a QueryError subclass on the first invalid parameter; unknown
    parameters are ignored.
    """
    name = params.get("name", "")

    if not name:
        raise EmptyNameError()
    if len(name) > MAX_NAME_LENGTH:
        raise NameTooLongError()

    rr_type = DEFAULT_RR_TYPE
    if "type" in params:
        rr_type = string_to_rr_type(params["type"])

    checking_disabled = False
    if "cd" in params:
        checking_disabled = string_to_bool(params["cd"])

    client_subnet = None
    if "edns_client_subnet" in params:
        client_subnet = parse_subnet(params["edns_client_subnet"])

    return LookupRequest(
        name=name,
        rr_type=rr_type,
        checking_disabled=checking_disabled,
        client_subnet=client_subnet,
    )
