# src/umami_track/transport.py
"""HTTP transport for send envelopes.

One call = one POST. No retries, no batching, no response-body parsing.
Transport-level failures raised by httpx (ConnectError, TimeoutException,
...) propagate unchanged; only the status code is interpreted here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import structlog

from umami_track.errors import BadStatusError, InvalidResponseError

if TYPE_CHECKING:
    from umami_track.config import TrackerConfig
    from umami_track.payload import SendEnvelope
    from umami_track.protocols import LoggingSink

logger = structlog.get_logger(__name__)

JSON_CONTENT_TYPE = "application/json"


def is_success_status(status_code: int) -> bool:
    """Collector accepted the request (2xx)."""
    return 200 <= status_code <= 299


def classify_status(status_code: int) -> None:
    """Raise BadStatusError for anything outside 200-299."""
    if not is_success_status(status_code):
        raise BadStatusError(status_code)


def build_headers(config: TrackerConfig) -> httpx.Headers:
    """Compose request headers from configuration.

    Order of application:
    1. Content-Type: application/json
    2. User-Agent, only when configured and non-empty (otherwise the
       httpx default User-Agent applies)
    3. additional_headers in mapping order; a later entry replaces any
       earlier header with the same (case-insensitive) name
    """
    headers = httpx.Headers({"Content-Type": JSON_CONTENT_TYPE})
    if config.user_agent:
        headers["User-Agent"] = config.user_agent
    for name, value in config.additional_headers.items():
        headers[name] = value
    return headers


class HttpTransport:
    """Delivers send envelopes to the collector over an httpx.AsyncClient.

    The client is injected and owned by the caller; connection reuse is
    whatever the client's pool provides.
    """

    def __init__(self, client: httpx.AsyncClient, sink: LoggingSink) -> None:
        self._client = client
        self._sink = sink

    async def send(self, url: str, envelope: SendEnvelope, config: TrackerConfig) -> None:
        """POST the envelope to url and classify the reply.

        Raises:
            InvalidResponseError: If the reply is not an HTTP response
            BadStatusError: If the status code is outside 200-299
            httpx.HTTPError: Transport-level failures, unchanged
        """
        headers = build_headers(config)
        body = envelope.to_json()

        response = await self._client.post(url, content=body, headers=headers)
        if not isinstance(response, httpx.Response):
            raise InvalidResponseError(f"expected httpx.Response, got {type(response).__name__}")

        status_code = response.status_code
        logger.debug(
            "Envelope sent",
            url=url,
            event_kind=envelope.kind.value,
            status_code=status_code,
        )

        try:
            classify_status(status_code)
        except BadStatusError:
            self._report(f"Umami send failed with statusCode={status_code}")
            raise

    def _report(self, message: str) -> None:
        """Forward a diagnostic to the sink without ever raising."""
        try:
            self._sink.log(message)
        except Exception as e:
            # Sink failures must not mask the failure being reported
            logger.warning(
                "Logging sink raised while reporting send failure",
                sink=type(self._sink).__name__,
                error=str(e),
            )
