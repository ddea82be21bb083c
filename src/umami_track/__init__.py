"""
umami-track: page-view and event telemetry for non-browser clients.

Formats tracking calls into the Umami send envelope and POSTs them to a
collector, synthesizing the fields a browser would normally supply
(hostname, language, screen, user agent).

Usage:
    from umami_track import Tracker, TrackerConfig

    config = TrackerConfig(endpoint="https://analytics.example.com", website_id="...")
    async with Tracker(config) as tracker:
        await tracker.track_pageview("app://home", title="Home")
"""

__version__ = "0.1.0"

from umami_track.config import TrackerConfig, load_config
from umami_track.device import NullScreenMetrics, StaticScreenMetrics
from umami_track.errors import (
    BadStatusError,
    InvalidEndpointError,
    InvalidResponseError,
    TrackerError,
)
from umami_track.identity import FileIdentifierStore
from umami_track.logging import NoopLogSink, StructlogSink, configure_logging
from umami_track.payload import EventKind
from umami_track.protocols import IdentifierStore, LoggingSink, ScreenMetricsProvider
from umami_track.tracker import Tracker

__all__ = [
    "BadStatusError",
    "EventKind",
    "FileIdentifierStore",
    "IdentifierStore",
    "InvalidEndpointError",
    "InvalidResponseError",
    "LoggingSink",
    "NoopLogSink",
    "NullScreenMetrics",
    "ScreenMetricsProvider",
    "StaticScreenMetrics",
    "StructlogSink",
    "Tracker",
    "TrackerConfig",
    "TrackerError",
    "__version__",
    "configure_logging",
    "load_config",
]
