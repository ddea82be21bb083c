# tests/conftest.py
"""Shared test fixtures and helpers.

Isolation:
- Every test gets its own XDG_STATE_HOME, so the default user identifier
  is persisted under tmp_path instead of the real home directory.
- UMAMI_* variables from the developer's shell are removed so
  load_config() only sees what a test sets explicitly.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

import os
from collections.abc import Callable
from typing import Any

import pytest
from hypothesis import Phase, Verbosity, settings

from umami_track.config import TrackerConfig

ENDPOINT = "https://analytics.example.com"


class RecordingSink:
    """LoggingSink test double that keeps every message."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def log(self, message: str) -> None:
        self.messages.append(message)


def make_config(**overrides: Any) -> TrackerConfig:
    """TrackerConfig with host-independent values for every defaulted field."""
    values: dict[str, Any] = {
        "endpoint": ENDPOINT,
        "website_id": "website-123",
        "host_name": "com.example.app",
        "language": "zh-CN",
        "user_id": None,
        "user_agent": "TestUA/1.0",
    }
    values.update(overrides)
    return TrackerConfig(**values)


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch) -> None:
    """Point identifier storage at tmp_path and clear UMAMI_* variables."""
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "state"))
    for name in list(os.environ):
        if name.startswith("UMAMI_"):
            monkeypatch.delenv(name)


@pytest.fixture
def config_factory() -> Callable[..., TrackerConfig]:
    return make_config


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


# =============================================================================
# Hypothesis Configuration
# =============================================================================

settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))
