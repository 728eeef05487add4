"""Tests for utils/exceptions.py."""

# pylint: disable=missing-function-docstring

from unittest.mock import MagicMock, patch

import pytest

from doh_gateway.core.config import Settings
from doh_gateway.utils.exceptions import (
    HTTP_STATUS_BY_KIND,
    EmptyNameError,
    ErrorKind,
    IntOutOfRangeError,
    InvalidCheckingDisabledError,
    InvalidSubnetError,
    NameTooLongError,
    QueryError,
    SerializationFailedError,
    UnknownTypeError,
    UpstreamExchangeFailedError,
    UpstreamNoReplyError,
    capture_exception,
    http_status_for,
)


class TestHttpStatus:
    """Tests for the error kind to HTTP status mapping."""

    def test_every_kind_has_a_status(self):
        assert set(HTTP_STATUS_BY_KIND) == set(ErrorKind)

    @pytest.mark.parametrize(
        "error_cls",
        [
            EmptyNameError,
            NameTooLongError,
            IntOutOfRangeError,
            UnknownTypeError,
            InvalidCheckingDisabledError,
            InvalidSubnetError,
        ],
    )
    def test_query_errors_are_bad_request(self, error_cls):
        error = error_cls()
        assert isinstance(error, QueryError)
        assert http_status_for(error) == 400

    def test_exchange_failure_is_failed_dependency(self):
        assert http_status_for(UpstreamExchangeFailedError()) == 424

    def test_no_reply_is_request_timeout(self):
        assert http_status_for(UpstreamNoReplyError()) == 408

    def test_serialization_failure_is_internal_error(self):
        assert http_status_for(SerializationFailedError()) == 500


class TestMessages:
    """Tests for default and custom error messages."""

    def test_default_message(self):
        assert str(InvalidSubnetError()) == "invalid edns_client_subnet"

    def test_custom_message(self):
        error = UpstreamExchangeFailedError("dns exchange error: timed out")
        assert error.message == "dns exchange error: timed out"
        assert str(error) == "dns exchange error: timed out"


class TestCaptureException:
    """Tests for capture_exception."""

    def test_logs_without_sentry(self, caplog):
        settings = Settings(sentry_dsn=None, _env_file=None)

        with (
            patch("doh_gateway.utils.exceptions.get_settings", return_value=settings),
            patch("doh_gateway.utils.exceptions.sentry_sdk") as mock_sentry,
            caplog.at_level("WARNING"),
        ):
            capture_exception(UpstreamNoReplyError(), level="warning")

        assert "UpstreamNoReplyError: no response from upstream" in caplog.text
        mock_sentry.capture_exception.assert_not_called()

    def test_reports_to_sentry_with_context(self):
        settings = Settings(sentry_dsn="https://key@example.invalid/1", _env_file=None)
        scope = MagicMock()
        error = UpstreamNoReplyError()

        with (
            patch("doh_gateway.utils.exceptions.get_settings", return_value=settings),
            patch("doh_gateway.utils.exceptions.sentry_sdk") as mock_sentry,
        ):
            mock_sentry.new_scope.return_value.__enter__.return_value = scope
            capture_exception(error, {"name": "example.com."})

        scope.set_extra.assert_called_once_with("name", "example.com.")
        mock_sentry.capture_exception.assert_called_once_with(error)
