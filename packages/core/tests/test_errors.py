"""Tests for failure classification."""

import httpx
import pytest

from prcomments_core.gh.errors import (
    AccessForbidden,
    AuthenticationFailed,
    FetchError,
    FetchTimeout,
    ProtocolViolation,
    ResourceNotFound,
    UnknownFailure,
    UpstreamError,
    ValidationError,
    classify_status,
    classify_transport_error,
)


class TestClassifyStatus:
    @pytest.mark.parametrize(
        "status, error_cls",
        [(401, AuthenticationFailed), (403, AccessForbidden), (404, ResourceNotFound)],
    )
    def test_known_statuses(self, status, error_cls):
        error = classify_status(status)
        assert type(error) is error_cls
        assert error.status_code == status

    @pytest.mark.parametrize("status", [400, 409, 422, 429, 500, 502, 503])
    def test_other_statuses_are_upstream_errors(self, status):
        error = classify_status(status)
        assert isinstance(error, UpstreamError)
        assert error.upstream_status == status
        assert error.status_code == status
        assert error.message == "GitHub API error. Please try again later."

    def test_non_error_status_reported_as_bad_gateway(self):
        error = classify_status(304)
        assert isinstance(error, UpstreamError)
        assert error.upstream_status == 304
        assert error.status_code == 502

    def test_only_authentication_failure_clears_credential(self):
        assert classify_status(401).clears_credential is True
        for status in (403, 404, 500):
            assert classify_status(status).clears_credential is False


class TestClassifyTransportError:
    def test_timeout(self):
        request = httpx.Request("GET", "https://api.github.com/")
        assert isinstance(classify_transport_error(httpx.ReadTimeout("slow", request=request)), FetchTimeout)
        assert isinstance(classify_transport_error(httpx.ConnectTimeout("slow", request=request)), FetchTimeout)

    def test_other_transport_errors_are_unknown(self):
        request = httpx.Request("GET", "https://api.github.com/")
        error = classify_transport_error(httpx.ConnectError("refused", request=request))
        assert isinstance(error, UnknownFailure)
        assert error.status_code == 500

    def test_fetch_errors_pass_through(self):
        original = ProtocolViolation()
        assert classify_transport_error(original) is original


class TestStatusCodes:
    @pytest.mark.parametrize(
        "error, status",
        [
            (ValidationError(), 400),
            (AuthenticationFailed(), 401),
            (AccessForbidden(), 403),
            (ResourceNotFound(), 404),
            (ProtocolViolation(), 500),
            (FetchTimeout(), 504),
            (UnknownFailure(), 500),
        ],
    )
    def test_http_status_per_kind(self, error, status):
        assert isinstance(error, FetchError)
        assert error.status_code == status

    def test_custom_message(self):
        error = ValidationError("Token is required")
        assert str(error) == "Token is required"
        assert error.kind == "ValidationError"
