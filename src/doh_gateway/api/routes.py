"""API routes for the DoH gateway."""

import logging
from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse, Response

from doh_gateway.api.models import DoHResponse
from doh_gateway.core.config import Settings, get_settings
from doh_gateway.core.query import parse_query, single_valued
from doh_gateway.dns.builder import build_request
from doh_gateway.dns.exchange import UDPExchanger, UpstreamExchanger
from doh_gateway.dns.mapper import serialize_response, to_doh_response
from doh_gateway.utils.decorators import sentry_exception_catcher
from doh_gateway.utils.exceptions import (
    DoHError,
    QueryError,
    SerializationFailedError,
    UpstreamExchangeFailedError,
    UpstreamNoReplyError,
    capture_exception,
    http_status_for,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@dataclass
class RouteDependencies:
    """Dependencies for route handlers."""

    settings: Settings = field(default_factory=get_settings)
    exchanger: Optional[UpstreamExchanger] = None
    serialize_fn: Callable[[DoHResponse], bytes] = serialize_response

    def __post_init__(self):
        if self.exchanger is None:
            self.exchanger = UDPExchanger(settings=self.settings)


# Global dependencies instance (can be overridden for testing)
_dependencies: Optional[RouteDependencies] = None


def get_dependencies() -> RouteDependencies:
    """Get the current route dependencies."""
    global _dependencies  # pylint: disable=global-statement
    if _dependencies is None:
        _dependencies = RouteDependencies()
    return _dependencies


def set_dependencies(deps: RouteDependencies) -> None:
    """Set custom dependencies (useful for testing)."""
    global _dependencies  # pylint: disable=global-statement
    _dependencies = deps


def reset_dependencies() -> None:
    """Reset dependencies to default (useful for testing)."""
    global _dependencies  # pylint: disable=global-statement
    _dependencies = None


async def _resolve(params: Mapping[str, str], deps: RouteDependencies) -> bytes:
    """
    Run one lookup: parse, build, exchange, map and serialize.

    Raises a DoHError for every failure. Exactly one upstream exchange is
    attempted, and only once the query has fully validated.
    """
    try:
        lookup = parse_query(params)
    except QueryError as e:
        logger.debug("Rejected query %s: %s", dict(params), e)
        raise

    request = build_request(lookup)
    upstream = deps.settings.upstream
    logger.debug("Resolving %s via %s", lookup, upstream)

    try:
        reply = await deps.exchanger.exchange(request, upstream)
    except Exception as e:  # pylint: disable=broad-exception-caught
        error = UpstreamExchangeFailedError(f"dns exchange error: {e}")
        capture_exception(
            error,
            {"name": request.name, "type": request.rr_type, "upstream": upstream},
            level="warning",
        )
        raise error from e

    if reply is None:
        error = UpstreamNoReplyError()
        capture_exception(
            error,
            {"name": request.name, "type": request.rr_type, "upstream": upstream},
            level="warning",
        )
        raise error

    response = to_doh_response(reply)
    logger.debug(
        "Answer for %s: status=%d answers=%d",
        request.name,
        response.status,
        len(response.answer),
    )

    try:
        return deps.serialize_fn(response)
    except SerializationFailedError as e:
        capture_exception(e, {"name": request.name, "type": request.rr_type})
        raise


@router.get("/resolve")
@sentry_exception_catcher
async def resolve(
    request: Request,
    deps: RouteDependencies = Depends(get_dependencies),
) -> Response:
    """DNS over HTTPS resolve endpoint (Google JSON API)."""
    logger.debug("from:%s", request.client.host if request.client else "-")

    try:
        body = await _resolve(single_valued(request.query_params), deps)
    except DoHError as e:
        return PlainTextResponse(e.message, status_code=http_status_for(e))

    return Response(content=body, media_type="application/json")
