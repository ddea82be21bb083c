# src/umami_track/errors.py
"""Failure taxonomy for tracking calls.

Transport-level failures (DNS, TLS, connection, timeout) are NOT wrapped here.
They surface as the httpx exceptions raised by the network layer.
"""


class TrackerError(Exception):
    """Base class for failures raised by a tracking call."""


class InvalidEndpointError(TrackerError):
    """Raised when endpoint + send path cannot be resolved to an absolute URL.

    Raised before any network I/O takes place.

    Attributes:
        endpoint: Configured endpoint base URL
        send_path: Configured send path
    """

    def __init__(self, endpoint: str, send_path: str, reason: str | None = None) -> None:
        self.endpoint = endpoint
        self.send_path = send_path
        message = f"Cannot resolve send URL from endpoint {endpoint!r} and send path {send_path!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class InvalidResponseError(TrackerError):
    """Raised when the collector reply is not a usable HTTP response."""

    def __init__(self, detail: str = "response is not an HTTP response") -> None:
        self.detail = detail
        super().__init__(f"Invalid response from collector: {detail}")


class BadStatusError(TrackerError):
    """Raised when the collector answers with a status outside 200-299.

    Attributes:
        status_code: HTTP status code returned by the collector
    """

    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(f"Collector returned HTTP status {status_code}")
