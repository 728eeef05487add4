"""Decorators for error handling and monitoring."""

import functools
from typing import Awaitable, Callable, TypeVar

import sentry_sdk

from doh_gateway.core.config import get_settings

T = TypeVar("T")


def sentry_exception_catcher(
    func: Callable[..., Awaitable[T]],
) -> Callable[..., Awaitable[T]]:
    """
    Decorator to catch exceptions from an async handler and report to Sentry.

    Only reports if Sentry is configured (SENTRY_DSN is set).
    """

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except Exception as e:
            if get_settings().sentry_dsn:
                sentry_sdk.capture_exception(e)
            raise

    return wrapper


def init_sentry() -> None:
    """Initialize Sentry SDK if configured."""
    settings = get_settings()

    if not settings.sentry_dsn:
        return

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.sentry_environment,
        traces_sample_rate=settings.sentry_traces_sample_rate,
        send_default_pii=False,
    )
