from typing import Optional


class InvalidProxyRequest(ValueError):
    """Raised by the proxy when a request cannot be mapped to an upstream call."""


class ProxyClientError(Exception):
    """Base class for failures surfaced by the client aggregator."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UpstreamError(ProxyClientError):
    """The proxy answered with a non-success status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"Error {status_code} - {message}")
        self.status_code = status_code
        self.detail = message


class NetworkError(ProxyClientError):
    """The proxy could not be reached or returned an unreadable body."""

    status_code: Optional[int] = None


class RequestTimeoutError(ProxyClientError, TimeoutError):
    """The client-side deadline expired before the proxy answered."""


class EmptyResultError(Exception):
    """
    A well-formed listing with zero items. Not a failure: the UI shows a
    "no results" state instead of an error.
    """

    def __init__(self, media_type: str, query: str = ''):
        super().__init__(f"No {media_type} results for {query!r}")
        self.media_type = media_type
        self.query = query
