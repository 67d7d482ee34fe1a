"""Failure taxonomy for comment fetching.

Every failure that can come out of a fetch is a FetchError subclass carrying
a user-facing message and the HTTP status the API layer should answer with.
Callers never need to inspect upstream responses themselves:

    upstream 401            → AuthenticationFailed (clears the stored credential)
    upstream 403            → AccessForbidden
    upstream 404            → ResourceNotFound
    any other non-2xx       → UpstreamError (keeps the upstream status)
    2xx with non-list body  → ProtocolViolation
    timeout / abort         → FetchTimeout
    other transport error   → UnknownFailure

ValidationError sits in the same hierarchy so that bad input and upstream
failures are reported through one code path.
"""

from __future__ import annotations

import httpx


class FetchError(Exception):
    """Base class for every classified fetch failure."""

    default_message = "Failed to fetch comments. Please try again."
    status_code = 500
    # Only an authentication failure proves the stored token is no longer usable.
    clears_credential = False

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    @property
    def kind(self) -> str:
        return type(self).__name__


class ValidationError(FetchError):
    default_message = (
        "Invalid parameters. Owner and repo must be valid GitHub identifiers, "
        "PR number must be a positive integer."
    )
    status_code = 400


class AuthenticationFailed(FetchError):
    default_message = "Authentication failed. Please check your token."
    status_code = 401
    clears_credential = True


class AccessForbidden(FetchError):
    default_message = "Access forbidden. Token may not have permission."
    status_code = 403


class ResourceNotFound(FetchError):
    default_message = "Pull request not found. Please verify the repository and PR number."
    status_code = 404


class UpstreamError(FetchError):
    default_message = "GitHub API error. Please try again later."

    def __init__(self, upstream_status: int, message: str | None = None):
        self.upstream_status = upstream_status
        # Pass the upstream status through when it is an error status; anything
        # else reaching here (1xx/3xx) is reported as a bad gateway.
        status = upstream_status if 400 <= upstream_status <= 599 else 502
        super().__init__(message, status_code=status)


class ProtocolViolation(FetchError):
    default_message = "Invalid response from GitHub API"
    status_code = 500


class FetchTimeout(FetchError):
    default_message = "Request timeout. Please try again."
    status_code = 504


class UnknownFailure(FetchError):
    status_code = 500


_STATUS_ERRORS: dict[int, type[FetchError]] = {
    401: AuthenticationFailed,
    403: AccessForbidden,
    404: ResourceNotFound,
}


def classify_status(status: int) -> FetchError:
    """Map a non-success HTTP status from the upstream API to a FetchError."""
    error_cls = _STATUS_ERRORS.get(status)
    if error_cls is not None:
        return error_cls()
    return UpstreamError(status)


def classify_transport_error(exc: Exception) -> FetchError:
    """Map an exception raised while talking to the upstream API to a FetchError."""
    if isinstance(exc, FetchError):
        return exc
    if isinstance(exc, httpx.TimeoutException):
        return FetchTimeout()
    return UnknownFailure()
