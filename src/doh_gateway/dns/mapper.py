"""Mapping of upstream DNS replies to the DoH JSON response."""

import dns.flags
import dns.message
from pydantic_core import PydanticSerializationError

from doh_gateway.api.models import DoHAnswer, DoHQuestion, DoHResponse
from doh_gateway.utils.exceptions import SerializationFailedError


def _flag(message: dns.message.Message, flag: dns.flags.Flag) -> bool:
    return bool(message.flags & flag)


def to_doh_response(message: dns.message.Message) -> DoHResponse:
    """
    Convert a DNS reply into its DoH JSON representation.

    Header flags are copied verbatim. Every answer record becomes one entry
    whose data is the record in presentation format without its owner name,
    TTL, class and type.
    """
    questions = [
        DoHQuestion(name=rrset.name.to_text(), type=int(rrset.rdtype))
        for rrset in message.question
    ]

    answers = []
    for rrset in message.answer:
        name = rrset.name.to_text()
        for rdata in rrset:
            answers.append(
                DoHAnswer(
                    name=name,
                    type=int(rrset.rdtype),
                    ttl=rrset.ttl,
                    data=rdata.to_text(),
                )
            )

    return DoHResponse(
        status=int(message.rcode()),
        tc=_flag(message, dns.flags.TC),
        rd=_flag(message, dns.flags.RD),
        ra=_flag(message, dns.flags.RA),
        ad=_flag(message, dns.flags.AD),
        cd=_flag(message, dns.flags.CD),
        question=questions,
        answer=answers,
    )


def serialize_response(response: DoHResponse) -> bytes:
    """Encode the response as compact JSON using the wire field names."""
    try:
        return response.model_dump_json(by_alias=True).encode("utf-8")
    except (PydanticSerializationError, ValueError, TypeError) as e:
        raise SerializationFailedError(f"failed to marshal: {e}") from e
