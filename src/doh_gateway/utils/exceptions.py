"""Custom exceptions and error handling utilities."""

import logging
from enum import Enum
from typing import Optional

import sentry_sdk

from doh_gateway.core.config import get_settings

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    """Closed set of failures a /resolve request can end with."""

    EMPTY_NAME = "empty_name"
    NAME_TOO_LONG = "name_too_long"
    INT_OUT_OF_RANGE = "int_out_of_range"
    UNKNOWN_TYPE = "unknown_type"
    INVALID_CHECKING_DISABLED = "invalid_checking_disabled"
    INVALID_SUBNET = "invalid_subnet"
    UPSTREAM_EXCHANGE_FAILED = "upstream_exchange_failed"
    UPSTREAM_NO_REPLY = "upstream_no_reply"
    SERIALIZATION_FAILED = "serialization_failed"


class DoHError(Exception):
    """Base exception for DoH gateway errors."""

    kind: ErrorKind
    default_message: str = "dns over https error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class QueryError(DoHError):
    """The HTTP query parameters do not describe a valid lookup."""


class EmptyNameError(QueryError):
    """The name parameter is missing or empty."""

    kind = ErrorKind.EMPTY_NAME
    default_message = "empty name"


class NameTooLongError(QueryError):
    """The name parameter exceeds 253 characters."""

    kind = ErrorKind.NAME_TOO_LONG
    default_message = "name too long"


class IntOutOfRangeError(QueryError):
    """A numeric type parameter outside [1, 65535]."""

    kind = ErrorKind.INT_OUT_OF_RANGE
    default_message = "invalid type (int out of range)"


class UnknownTypeError(QueryError):
    """A type mnemonic that is not a known record type."""

    kind = ErrorKind.UNKNOWN_TYPE
    default_message = "invalid type (unknown string type)"


class InvalidCheckingDisabledError(QueryError):
    """The cd parameter is not a recognised boolean."""

    kind = ErrorKind.INVALID_CHECKING_DISABLED
    default_message = "invalid cd value"


class InvalidSubnetError(QueryError):
    """The edns_client_subnet parameter is not CIDR notation."""

    kind = ErrorKind.INVALID_SUBNET
    default_message = "invalid edns_client_subnet"


class UpstreamExchangeFailedError(DoHError):
    """The upstream exchange raised."""

    kind = ErrorKind.UPSTREAM_EXCHANGE_FAILED
    default_message = "dns exchange error"


class UpstreamNoReplyError(DoHError):
    """The upstream exchange completed without a reply."""

    kind = ErrorKind.UPSTREAM_NO_REPLY
    default_message = "no response from upstream"


class SerializationFailedError(DoHError):
    """The JSON response could not be encoded."""

    kind = ErrorKind.SERIALIZATION_FAILED
    default_message = "failed to marshal"


HTTP_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.EMPTY_NAME: 400,
    ErrorKind.NAME_TOO_LONG: 400,
    ErrorKind.INT_OUT_OF_RANGE: 400,
    ErrorKind.UNKNOWN_TYPE: 400,
    ErrorKind.INVALID_CHECKING_DISABLED: 400,
    ErrorKind.INVALID_SUBNET: 400,
    ErrorKind.UPSTREAM_EXCHANGE_FAILED: 424,
    ErrorKind.UPSTREAM_NO_REPLY: 408,
    ErrorKind.SERIALIZATION_FAILED: 500,
}


def http_status_for(error: DoHError) -> int:
    """Return the HTTP status code a DoH error is reported with."""
    return HTTP_STATUS_BY_KIND[error.kind]


def capture_exception(
    exception: Exception,
    context: Optional[dict] = None,
    level: str = "error",
) -> None:
    """
    Capture exception to Sentry if configured, otherwise log it.

    Args:
        exception: The exception to capture
        context: Additional context to include
        level: Log level ('error', 'warning', 'info')
    """
    settings = get_settings()

    # Log locally
    log_func = getattr(logger, level, logger.error)
    log_func("%s: %s", type(exception).__name__, exception, exc_info=True)

    # Send to Sentry if configured
    if settings.sentry_dsn:
        if context:
            with sentry_sdk.new_scope() as scope:
                for key, value in context.items():
                    scope.set_extra(key, value)
                sentry_sdk.capture_exception(exception)
        else:
            sentry_sdk.capture_exception(exception)
