"""Tests for configuration loading, saving and precedence."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from skillhub.config import (
    _atomic_write,
    config_file_path,
    get_config_dir,
    get_data_dir,
    load_global_config,
    load_project_config,
    resolve_config,
    save_global_config,
    set_config_value,
)
from skillhub.exceptions import ConfigError
from skillhub.models import DEFAULT_BACKEND, GlobalConfig


class TestPaths:
    def test_xdg_dirs(self, isolated_config: Path) -> None:
        assert get_config_dir() == isolated_config / "config" / "skillhub"
        assert get_data_dir() == isolated_config / "data" / "skillhub"
        assert get_config_dir().is_dir()

    def test_non_xdg_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("skillhub.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        assert get_config_dir() == tmp_path / ".skillhub"
        assert get_data_dir() == tmp_path / ".skillhub" / "data"


class TestAtomicWrite:
    def test_writes_and_leaves_no_temp(self, tmp_path: Path) -> None:
        target = tmp_path / "nested" / "config.json"
        _atomic_write(target, '{"a": 1}')
        assert target.read_text() == '{"a": 1}'
        assert [p.name for p in target.parent.iterdir()] == ["config.json"]

    def test_replaces_existing(self, tmp_path: Path) -> None:
        target = tmp_path / "config.json"
        target.write_text("old")
        _atomic_write(target, "new")
        assert target.read_text() == "new"


class TestGlobalConfig:
    def test_defaults_when_missing(self, isolated_config: Path) -> None:
        config = load_global_config()
        assert config == GlobalConfig()
        assert config.client.base_url == DEFAULT_BACKEND
        assert config.client.api_prefix == "/api/v1"
        assert [r.pattern for r in config.dev.proxy] == [r"^/api(/|$)", r"^/skill\.md$", r"^/skill/[^/]+\.md$"]
        assert config.build.out_dir == "web_dist"

    def test_save_and_load(self, isolated_config: Path) -> None:
        config = GlobalConfig()
        config.client.base_url = "http://registry.internal:9000"
        config.dev.port = 3000
        save_global_config(config)

        loaded = load_global_config()
        assert loaded.client.base_url == "http://registry.internal:9000"
        assert loaded.dev.port == 3000

    def test_invalid_json(self, isolated_config: Path) -> None:
        config_file_path().write_text("{not json")
        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()

    def test_not_an_object(self, isolated_config: Path) -> None:
        config_file_path().write_text("[1, 2]")
        with pytest.raises(ConfigError, match="expected a JSON object"):
            load_global_config()

    def test_failed_validation(self, isolated_config: Path) -> None:
        config_file_path().write_text(json.dumps({"dev": {"port": "not-a-port"}}))
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_global_config()


class TestResolveConfig:
    def test_defaults(self, isolated_config: Path) -> None:
        assert resolve_config().client.base_url == DEFAULT_BACKEND

    def test_project_overrides_user(self, isolated_config: Path) -> None:
        user = GlobalConfig()
        user.client.base_url = "http://user:8080"
        user.dev.port = 4000
        save_global_config(user)
        (isolated_config / "skillhub.json").write_text(
            json.dumps({"client": {"base_url": "http://project:8080"}})
        )

        config = resolve_config()
        assert config.client.base_url == "http://project:8080"
        # Untouched nested keys survive the merge.
        assert config.dev.port == 4000

    def test_env_overrides_project(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (isolated_config / "skillhub.json").write_text(
            json.dumps({"client": {"base_url": "http://project:8080"}})
        )
        monkeypatch.setenv("SKILLHUB_BASE_URL", "http://env:8080")
        monkeypatch.setenv("SKILLHUB_API_PREFIX", "/v2")

        config = resolve_config()
        assert config.client.base_url == "http://env:8080"
        assert config.client.api_prefix == "/v2"

    def test_cli_overrides_env(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SKILLHUB_BASE_URL", "http://env:8080")
        config = resolve_config(cli_base_url="http://cli:8080", cli_format="json")
        assert config.client.base_url == "http://cli:8080"
        assert config.output.format == "json"

    def test_invalid_cli_format(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError, match="Invalid output format"):
            resolve_config(cli_format="bogus")

    def test_invalid_format_in_user_config(self, isolated_config: Path) -> None:
        config_file_path().write_text(json.dumps({"output": {"format": "fancy"}}))
        with pytest.raises(ConfigError):
            resolve_config()

    def test_invalid_project_config(self, isolated_config: Path) -> None:
        (isolated_config / "skillhub.json").write_text('"just a string"')
        with pytest.raises(ConfigError, match="project config"):
            resolve_config()

    def test_no_project_config(self, isolated_config: Path) -> None:
        assert load_project_config() is None


class TestSetConfigValue:
    def test_string(self) -> None:
        config = set_config_value(GlobalConfig(), "client.base_url", "http://x:1")
        assert config.client.base_url == "http://x:1"

    def test_int(self) -> None:
        assert set_config_value(GlobalConfig(), "dev.port", "3000").dev.port == 3000

    def test_bool(self) -> None:
        config = set_config_value(GlobalConfig(), "build.empty_out_dir", "false")
        assert config.build.empty_out_dir is False

    def test_float(self) -> None:
        config = set_config_value(GlobalConfig(), "client.request.timeout", "2.5")
        assert config.client.request.timeout == 2.5

    def test_null_clears_optional(self) -> None:
        config = set_config_value(GlobalConfig(), "client.request.timeout", "null")
        assert config.client.request.timeout is None

    def test_original_untouched(self) -> None:
        original = GlobalConfig()
        set_config_value(original, "dev.port", "1")
        assert original.dev.port == 5173

    @pytest.mark.parametrize("key", ["nope", "client.nope", "nope.deeper", "dev.proxy", "client"])
    def test_unknown_or_structured_keys(self, key: str) -> None:
        with pytest.raises(ConfigError):
            set_config_value(GlobalConfig(), key, "x")

    def test_bad_int(self) -> None:
        with pytest.raises(ConfigError, match="Expected integer"):
            set_config_value(GlobalConfig(), "dev.port", "eighty")

    def test_output_format_choices(self) -> None:
        assert set_config_value(GlobalConfig(), "output.format", "json").output.format == "json"
        with pytest.raises(ConfigError, match="Invalid configuration"):
            set_config_value(GlobalConfig(), "output.format", "bogus")
