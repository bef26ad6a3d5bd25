"""Exception hierarchy for the Merchify SDK.

Every error raised by the SDK derives from :class:`MerchifyError`, so callers
can catch the whole family with a single ``except`` clause.
"""

from __future__ import annotations


class MerchifyError(Exception):
    """Base class for all SDK errors."""


class ValidationError(MerchifyError, ValueError):
    """Invalid client options or mockup request.

    Raised before any cache lookup or network call. The message is intended
    to be shown directly to the developer using the SDK.
    """


class InvalidUrlError(MerchifyError, ValueError):
    """An absolute URL was supplied where a relative one was required."""


class SigningError(MerchifyError):
    """The URL signer rejected the request or returned an unusable body.

    Attributes:
        status_code: HTTP status of the signer response, if one was received.
        body: Raw response body, if one was received.
    """

    def __init__(self, message: str, *, status_code: int | None = None, body: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class UnknownError(MerchifyError):
    """Wraps an unexpected exception raised while signing a URL."""
