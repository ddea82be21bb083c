# src/umami_track/tracker.py
"""Tracker facade: builds payloads and sends them to the collector.

Usage:
    config = TrackerConfig(endpoint="https://analytics.example.com", website_id="...")
    async with Tracker(config) as tracker:
        await tracker.track_pageview("app://home", title="Home")
        await tracker.track_event("signup", url="app://signup", value="1")

Each call is an independent request. Calls share no mutable state, so they
can be awaited concurrently; the order in which the collector receives them
is not guaranteed.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import TracebackType

import httpx
import structlog

from umami_track.config import TrackerConfig
from umami_track.device import NullScreenMetrics, screen_string
from umami_track.logging import NoopLogSink
from umami_track.payload import (
    BasePayload,
    SendEnvelope,
    build_event_payload,
    build_pageview_payload,
)
from umami_track.protocols import LoggingSink, ScreenMetricsProvider
from umami_track.transport import HttpTransport
from umami_track.urls import resolve_send_url

logger = structlog.get_logger(__name__)


class Tracker:
    """Client for page-view and custom-event tracking.

    Failures surface to the caller, who owns the resilience policy:
        - InvalidEndpointError: endpoint/send_path unusable (no request made)
        - InvalidResponseError: reply was not an HTTP response
        - BadStatusError: status outside 200-299 (also reported to the sink)
        - httpx.HTTPError: transport failure, propagated unchanged

    Args:
        config: Immutable tracker configuration
        client: Optional httpx.AsyncClient. When omitted the tracker creates
            one and closes it in aclose(); injected clients are left open.
        sink: Receives human-readable failure diagnostics (default: silent)
        screen_metrics: Source of screen dimensions (default: no display)
    """

    def __init__(
        self,
        config: TrackerConfig,
        *,
        client: httpx.AsyncClient | None = None,
        sink: LoggingSink | None = None,
        screen_metrics: ScreenMetricsProvider | None = None,
    ) -> None:
        self._config = config
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient()
        self._sink = sink if sink is not None else NoopLogSink()
        self._screen_metrics = screen_metrics if screen_metrics is not None else NullScreenMetrics()
        self._transport = HttpTransport(self._client, self._sink)

    @property
    def config(self) -> TrackerConfig:
        return self._config

    async def track_pageview(
        self,
        url: str,
        *,
        title: str | None = None,
        referrer: str | None = None,
    ) -> None:
        """Track a page view.

        Args:
            url: Stable virtual URL for the screen/route (e.g. "app://home")
            title: Screen title
            referrer: Optional referrer
        """
        payload = build_pageview_payload(
            self._config,
            url=url,
            title=title,
            referrer=referrer,
            screen=screen_string(self._screen_metrics),
        )
        await self._send(payload)

    async def track_event(
        self,
        name: str,
        *,
        url: str,
        value: str | None = None,
        title: str | None = None,
        referrer: str | None = None,
        tag: str | None = None,
        data: Mapping[str, str] | None = None,
    ) -> None:
        """Track a custom event.

        Args:
            name: Event name
            url: Screen/route the event belongs to (same semantics as pageviews)
            value: Convenience value, sent as event_value and data["value"]
            title: Screen title
            referrer: Optional referrer
            tag: Optional tag description
            data: Extra string properties
        """
        payload = build_event_payload(
            self._config,
            name=name,
            url=url,
            value=value,
            title=title,
            referrer=referrer,
            tag=tag,
            data=data,
            screen=screen_string(self._screen_metrics),
        )
        await self._send(payload)

    async def _send(self, payload: BasePayload) -> None:
        envelope = SendEnvelope.wrap(payload)
        # Raises before any network I/O
        url = resolve_send_url(self._config.endpoint, self._config.send_path)
        await self._transport.send(url, envelope, self._config)

    async def aclose(self) -> None:
        """Close the HTTP client if this tracker created it."""
        if self._owns_client:
            await self._client.aclose()
            logger.debug("Tracker client closed")

    async def __aenter__(self) -> Tracker:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
