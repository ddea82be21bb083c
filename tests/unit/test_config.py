"""Tests for TrackerConfig defaults, immutability and file/env loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from umami_track import config as config_module
from umami_track.config import (
    DEFAULT_SEND_PATH,
    TrackerConfig,
    default_host_name,
    default_language,
    load_config,
)
from umami_track.identity import DEFAULT_USER_ID_KEY, default_state_dir


class TestTrackerConfigDefaults:
    def test_minimal_config(self) -> None:
        config = TrackerConfig(endpoint="https://analytics.example.com", website_id="website-123")

        assert config.send_path == DEFAULT_SEND_PATH == "/api/send"
        assert config.user_agent is None
        assert config.additional_headers == {}
        assert config.host_name

    def test_default_user_id_persisted(self) -> None:
        first = TrackerConfig(endpoint="https://a.example.com", website_id="w")
        second = TrackerConfig(endpoint="https://a.example.com", website_id="w")

        assert first.user_id is not None
        assert first.user_id == second.user_id
        stored = (default_state_dir() / DEFAULT_USER_ID_KEY).read_text(encoding="utf-8")
        assert stored == first.user_id

    def test_explicit_none_disables_user_id(self) -> None:
        config = TrackerConfig(endpoint="https://a.example.com", website_id="w", user_id=None)

        assert config.user_id is None
        assert not (default_state_dir() / DEFAULT_USER_ID_KEY).exists()

    def test_additional_headers_keep_order(self) -> None:
        config = TrackerConfig(
            endpoint="https://a.example.com",
            website_id="w",
            user_id=None,
            additional_headers={"X-B": "2", "X-A": "1"},
        )
        assert list(config.additional_headers) == ["X-B", "X-A"]

    def test_additional_headers_read_only(self, config_factory) -> None:
        config = config_factory(additional_headers={"X-Test": "1"})

        with pytest.raises(TypeError):
            config.additional_headers["X-Injected"] = "1"  # type: ignore[index]
        assert dict(config.additional_headers) == {"X-Test": "1"}

    def test_caller_dict_not_shared(self, config_factory) -> None:
        headers = {"X-Test": "1"}
        config = config_factory(additional_headers=headers)

        headers["X-Injected"] = "1"

        assert "X-Injected" not in config.additional_headers


class TestTrackerConfigValidation:
    def test_frozen(self, config_factory) -> None:
        config = config_factory()
        with pytest.raises(ValidationError):
            config.endpoint = "https://other.example.com"

    @pytest.mark.parametrize("field", ["endpoint", "website_id"])
    def test_required_text_not_blank(self, config_factory, field: str) -> None:
        with pytest.raises(ValidationError, match=field):
            config_factory(**{field: "  "})

    def test_missing_required(self) -> None:
        with pytest.raises(ValidationError):
            TrackerConfig(endpoint="https://a.example.com")

    def test_numeric_website_id_coerced(self, config_factory) -> None:
        assert config_factory(website_id=12345).website_id == "12345"


class TestHostDefaults:
    @pytest.mark.parametrize(
        ("argv", "expected"),
        [
            (["/usr/local/bin/photo-sync"], "photo-sync"),
            (["app.py"], "app"),
            ([""], "python"),
            (["-c"], "python"),
            ([], "python"),
        ],
    )
    def test_default_host_name(self, monkeypatch, argv: list[str], expected: str) -> None:
        monkeypatch.setattr(config_module.sys, "argv", argv)
        assert default_host_name() == expected

    @pytest.mark.parametrize(
        ("locale_value", "expected"),
        [
            (("zh_CN", "UTF-8"), "zh-CN"),
            (("en_US", "ISO8859-1"), "en-US"),
            (("de", None), "de"),
            ((None, None), None),
            (("C", None), None),
        ],
    )
    def test_default_language(self, monkeypatch, locale_value, expected) -> None:
        monkeypatch.setattr(config_module.locale, "getlocale", lambda: locale_value)
        assert default_language() == expected


class TestLoadConfig:
    def test_from_yaml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "tracker.yaml"
        config_file.write_text(
            "endpoint: https://analytics.example.com\n"
            "website_id: website-123\n"
            "host_name: com.example.app\n"
            "language: zh-CN\n"
            "user_agent: TestUA/1.0\n"
            "additional_headers:\n"
            "  X-Gateway-Key: abc123\n",
            encoding="utf-8",
        )

        config = load_config(config_file)

        assert config.endpoint == "https://analytics.example.com"
        assert config.website_id == "website-123"
        assert config.host_name == "com.example.app"
        assert config.language == "zh-CN"
        assert config.user_agent == "TestUA/1.0"
        assert {k.lower(): v for k, v in config.additional_headers.items()} == {"x-gateway-key": "abc123"}

    def test_environment_overrides_file(self, tmp_path: Path, monkeypatch) -> None:
        config_file = tmp_path / "tracker.yaml"
        config_file.write_text(
            "endpoint: https://analytics.example.com\nwebsite_id: website-123\nuser_agent: FileUA/1.0\n",
            encoding="utf-8",
        )
        monkeypatch.setenv("UMAMI_USER_AGENT", "EnvUA/2.0")

        assert load_config(config_file).user_agent == "EnvUA/2.0"

    def test_environment_only(self, monkeypatch) -> None:
        monkeypatch.setenv("UMAMI_ENDPOINT", "https://analytics.example.com")
        monkeypatch.setenv("UMAMI_WEBSITE_ID", "12345")
        monkeypatch.setenv("UMAMI_SEND_PATH", "/collect")

        config = load_config()

        assert config.endpoint == "https://analytics.example.com"
        assert config.website_id == "12345"
        assert config.send_path == "/collect"

    def test_additional_headers_from_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("UMAMI_ENDPOINT", "https://analytics.example.com")
        monkeypatch.setenv("UMAMI_WEBSITE_ID", "website-123")
        monkeypatch.setenv("UMAMI_ADDITIONAL_HEADERS", '{"X-Key"="abc"}')

        config = load_config()

        assert dict(config.additional_headers) == {"X-Key": "abc"}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="missing.yaml"):
            load_config(tmp_path / "missing.yaml")

    def test_missing_required_values(self) -> None:
        with pytest.raises(ValidationError):
            load_config()
