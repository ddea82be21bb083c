# src/umami_track/config.py
"""
Tracker configuration.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Configuration is frozen (immutable) after construction.
"""

import locale
import sys
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, Field, field_validator

from umami_track.identity import DEFAULT_USER_ID_KEY, FileIdentifierStore

DEFAULT_SEND_PATH = "/api/send"
ENV_PREFIX = "UMAMI"


def default_host_name() -> str:
    """Name of the running application, used as the `hostname` label.

    Mirrors what a browser reports as location.hostname: on a non-browser
    client the closest stable equivalent is the program name.
    """
    program = Path(sys.argv[0]).stem if sys.argv and sys.argv[0] else ""
    if not program or program.startswith("-"):
        return "python"
    return program


def default_language() -> str | None:
    """Preferred system language as a BCP-47 tag (e.g. "en-US"), if known."""
    language, _encoding = locale.getlocale()
    if not language or language in {"C", "POSIX"}:
        return None
    return language.replace("_", "-")


def default_user_id() -> str:
    """Persistent identifier for this installation, created on first use."""
    return FileIdentifierStore().get_or_create(DEFAULT_USER_ID_KEY)


class TrackerConfig(BaseModel):
    """Settings for a Tracker instance.

    Only endpoint and website_id are required. Every other field has a
    default derived from the host environment.

    Example YAML:
        endpoint: https://analytics.example.com
        website_id: 4fb7f4a4-1f2d-4f0e-9d1c-3f0a1b2c3d4e
        host_name: com.example.app
        user_agent: ExampleApp/2.1
        additional_headers:
          X-Gateway-Key: abc123
    """

    model_config = {"frozen": True, "coerce_numbers_to_str": True}

    endpoint: str = Field(description="Collector base URL, e.g. https://analytics.example.com")
    website_id: str = Field(description="Site identifier the events belong to")
    send_path: str = Field(default=DEFAULT_SEND_PATH, description="Path appended to the endpoint path")
    host_name: str = Field(default_factory=default_host_name, description="Sent as payload.hostname")
    language: str | None = Field(default_factory=default_language, description="Sent as payload.language")
    user_id: str | None = Field(
        default_factory=default_user_id,
        description="Stable identifier sent as payload.id; None disables it",
    )
    user_agent: str | None = Field(
        default=None,
        description="User-Agent header override; None keeps the HTTP client default",
    )
    additional_headers: Mapping[str, str] = Field(
        default_factory=dict,
        validate_default=True,
        description="Static headers added to every request, applied in order",
    )

    @field_validator("endpoint", "website_id")
    @classmethod
    def validate_required_text(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v

    @field_validator("additional_headers")
    @classmethod
    def freeze_headers(cls, v: Mapping[str, str]) -> Mapping[str, str]:
        # frozen=True only blocks reassignment; the mapping itself must be read-only too
        return MappingProxyType(dict(v))


def load_config(config_path: Path | None = None) -> TrackerConfig:
    """Load configuration from a YAML file with environment variable overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (UMAMI_*) - highest priority
    2. Config file (if given)
    3. Defaults from the Pydantic model - lowest priority

    Args:
        config_path: Optional path to a YAML configuration file

    Returns:
        Validated TrackerConfig instance

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config_path is given but doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if config_path is not None and not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix=ENV_PREFIX,
        settings_files=[str(config_path)] if config_path is not None else [],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config: dict[str, Any] = {
        k.lower(): v for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys
    }
    return TrackerConfig(**raw_config)
