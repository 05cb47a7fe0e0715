"""Tests for VectorConfig and per-invocation context resolution."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from vector_cli.config import GlobalOptions, build_context, load_config
from vector_cli.errors import ConfigError
from vector_cli.services.output_mode import OutputMode
from vector_common import DEFAULT_API_URL, DEFAULT_MAX_RETRIES, DEFAULT_TIMEOUT, VectorConfig
from vector_common.models import FileSettings


def write_settings(config: VectorConfig, data: dict) -> None:
    config.config_dir.mkdir(parents=True, exist_ok=True)
    config.config_file.write_text(json.dumps(data))


class TestVectorConfig:
    def test_file_paths(self, tmp_config: VectorConfig):
        assert tmp_config.config_file == tmp_config.config_dir / "config.json"
        assert tmp_config.credentials_file == tmp_config.config_dir / "credentials.json"

    def test_default_dir_uses_xdg(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert VectorConfig().config_dir == tmp_path / "vector"

    def test_default_dir_falls_back_to_home(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert VectorConfig().config_dir == tmp_path / ".config" / "vector"

    def test_from_env(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("VECTOR_CONFIG_DIR", str(tmp_path))
        monkeypatch.setenv("VECTOR_API_KEY", "env-token")
        monkeypatch.setenv("VECTOR_API_URL", "https://staging.example.com")
        monkeypatch.setenv("VECTOR_TIMEOUT", "12.5")
        monkeypatch.setenv("VECTOR_MAX_RETRIES", "0")
        cfg = VectorConfig()
        assert cfg.config_dir == tmp_path
        assert cfg.api_key == "env-token"
        assert cfg.api_url == "https://staging.example.com"
        assert cfg.timeout == 12.5
        assert cfg.max_retries == 0

    def test_missing_settings_file(self, tmp_config: VectorConfig):
        assert tmp_config.load_settings() == FileSettings()

    def test_settings_file_ignores_unknown_keys(self, tmp_config: VectorConfig):
        write_settings(tmp_config, {"api_url": "https://file.example.com", "colour": "blue"})
        assert tmp_config.load_settings().api_url == "https://file.example.com"


class TestPrecedence:
    def test_defaults(self, tmp_config: VectorConfig):
        settings = FileSettings()
        assert tmp_config.resolve_api_url(settings) == DEFAULT_API_URL
        assert tmp_config.resolve_timeout(settings) == DEFAULT_TIMEOUT
        assert tmp_config.resolve_max_retries(settings) == DEFAULT_MAX_RETRIES

    def test_api_url_flag_beats_env_beats_file(self, tmp_path: Path, monkeypatch):
        settings = FileSettings(api_url="https://file.example.com")
        assert VectorConfig(config_dir=tmp_path).resolve_api_url(settings) == "https://file.example.com"

        monkeypatch.setenv("VECTOR_API_URL", "https://env.example.com")
        cfg = VectorConfig(config_dir=tmp_path)
        assert cfg.resolve_api_url(settings) == "https://env.example.com"
        assert cfg.resolve_api_url(settings, "https://flag.example.com/") == "https://flag.example.com"

    def test_env_beats_file_for_timeout_and_retries(self, tmp_path: Path, monkeypatch):
        settings = FileSettings(timeout=60, max_retries=5)
        cfg = VectorConfig(config_dir=tmp_path)
        assert cfg.resolve_timeout(settings) == 60
        assert cfg.resolve_max_retries(settings) == 5

        monkeypatch.setenv("VECTOR_TIMEOUT", "10")
        monkeypatch.setenv("VECTOR_MAX_RETRIES", "1")
        cfg = VectorConfig(config_dir=tmp_path)
        assert cfg.resolve_timeout(settings) == 10
        assert cfg.resolve_max_retries(settings) == 1


class TestBuildContext:
    def test_resolves_everything_once(self, tmp_config: VectorConfig):
        write_settings(tmp_config, {"api_url": "https://file.example.com/", "timeout": 9})
        ctx = build_context(GlobalOptions(compact=True), OutputMode.JSON, config=tmp_config)
        try:
            assert ctx.api_url == "https://file.example.com"
            assert ctx.transport.timeout == 9
            assert ctx.output_mode is OutputMode.JSON
            assert ctx.pretty is False
        finally:
            ctx.close()

    def test_flag_token_reaches_credentials(self, tmp_config: VectorConfig):
        ctx = build_context(GlobalOptions(token="abc"), OutputMode.TABLE, config=tmp_config)
        try:
            assert ctx.credentials.current_token() == "abc"
            assert ctx.credentials.source == "flag"
        finally:
            ctx.close()

    def test_malformed_settings_file_is_config_error(self, tmp_config: VectorConfig):
        tmp_config.config_dir.mkdir(parents=True)
        tmp_config.config_file.write_text("{not json")
        with pytest.raises(ConfigError, match="Invalid"):
            build_context(GlobalOptions(), OutputMode.TABLE, config=tmp_config)

    def test_invalid_env_value_is_config_error(self, monkeypatch):
        monkeypatch.setenv("VECTOR_TIMEOUT", "-1")
        with pytest.raises(ConfigError, match="VECTOR_TIMEOUT"):
            load_config()

    @pytest.mark.parametrize("url", ["http://[::1", "ftp://files.example.com", "not a url"])
    def test_malformed_api_url_is_config_error(self, tmp_config: VectorConfig, url):
        with pytest.raises(ConfigError, match="Invalid API URL"):
            build_context(GlobalOptions(api_url=url), OutputMode.TABLE, config=tmp_config)

    def test_malformed_env_api_url(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv("VECTOR_API_URL", "http://[::1")
        config = VectorConfig(config_dir=tmp_path)
        with pytest.raises(ConfigError, match="Invalid API URL"):
            build_context(GlobalOptions(), OutputMode.TABLE, config=config)
