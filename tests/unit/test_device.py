"""Tests for screen-metrics providers."""

import pytest

from umami_track.device import NullScreenMetrics, StaticScreenMetrics, format_screen, screen_string
from umami_track.protocols import ScreenMetricsProvider


def test_format_screen() -> None:
    assert format_screen((1170, 2532)) == "1170x2532"
    assert format_screen(None) is None


def test_null_provider_has_no_screen() -> None:
    provider = NullScreenMetrics()

    assert isinstance(provider, ScreenMetricsProvider)
    assert screen_string(provider) is None


def test_static_provider() -> None:
    provider = StaticScreenMetrics(1920, 1080)

    assert isinstance(provider, ScreenMetricsProvider)
    assert provider.screen_dimensions() == (1920, 1080)
    assert screen_string(provider) == "1920x1080"


@pytest.mark.parametrize(("width", "height"), [(0, 1080), (1920, -1)])
def test_static_provider_rejects_non_positive(width: int, height: int) -> None:
    with pytest.raises(ValueError, match="must be positive"):
        StaticScreenMetrics(width, height)
