# src/umami_track/protocols.py
"""Protocol definitions for the collaborators a Tracker consumes.

None of these are implemented by the tracking core itself. Built-in
implementations live in umami_track.logging, umami_track.identity and
umami_track.device; applications may inject their own.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class LoggingSink(Protocol):
    """Receives human-readable diagnostics from the tracker.

    Error handling:
        - log() should not raise. The tracker still guards every call, so a
          misbehaving sink cannot replace the failure being reported.
    """

    def log(self, message: str) -> None:
        """Record a diagnostic message (fire-and-forget)."""
        ...


@runtime_checkable
class IdentifierStore(Protocol):
    """Persistent storage for the per-installation user identifier."""

    def get_or_create(self, key: str) -> str:
        """Return the identifier stored under key, creating it if missing.

        Must be idempotent and survive process restarts. Two racing first
        calls must end up returning the same identifier.
        """
        ...


@runtime_checkable
class ScreenMetricsProvider(Protocol):
    """Reports physical screen dimensions, where the host has a display."""

    def screen_dimensions(self) -> tuple[int, int] | None:
        """Return (width, height) in physical pixels, or None if unavailable."""
        ...
