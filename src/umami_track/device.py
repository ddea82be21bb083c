# src/umami_track/device.py
"""Screen-metrics providers.

Hosts without a display (servers, CLIs, most test environments) use
NullScreenMetrics, which makes the `screen` field disappear from payloads.
"""

from __future__ import annotations

from umami_track.protocols import ScreenMetricsProvider


def format_screen(dimensions: tuple[int, int] | None) -> str | None:
    """Render (width, height) as the wire-level `"<width>x<height>"` string."""
    if dimensions is None:
        return None
    width, height = dimensions
    return f"{int(width)}x{int(height)}"


def screen_string(provider: ScreenMetricsProvider) -> str | None:
    """Read the provider once and format the result."""
    return format_screen(provider.screen_dimensions())


class NullScreenMetrics:
    """Provider for hosts without display access."""

    def screen_dimensions(self) -> tuple[int, int] | None:
        return None


class StaticScreenMetrics:
    """Provider returning fixed dimensions supplied by the application.

    Useful when the embedding UI toolkit already knows the display size,
    e.g. StaticScreenMetrics(1170, 2532).
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Screen dimensions must be positive, got {width}x{height}")
        self._dimensions = (width, height)

    def screen_dimensions(self) -> tuple[int, int] | None:
        return self._dimensions
