"""
Tests for plugin configuration loading.

Test Classes:
    TestDefaults:           Built-in values
    TestIniLoading:         INI sections parsed into the dataclasses
    TestEnvOverrides:       Environment variables win over the file
    TestLoadConfig:         File discovery and priority
    TestConfigStatus:       Diagnostics never leak the key
"""

import configparser

import pytest

from hexchat_translator import config as config_module
from hexchat_translator.config import (
    PluginConfig,
    _apply_env_overrides,
    _load_from_ini,
    _mask_key,
    config_file_path,
    get_config_status,
    load_config,
    print_config_summary,
    reload_config,
)

INI_TEXT = """
[translation]
backend = DeepL
api_key = file-key:fx
api_url = http://localhost:9000/v2/translate
timeout_seconds = 2.5

[dispatch]
poll_interval_ms = 250
deactivate_on_part = no

[logging]
level = debug
format = detailed
file = /tmp/translator.log
"""


def _parser(text: str) -> configparser.ConfigParser:
    parser = configparser.ConfigParser()
    parser.read_string(text)
    return parser


@pytest.mark.unit
class TestDefaults:
    def test_defaults(self):
        cfg = PluginConfig()
        assert cfg.translation.backend == "deepl"
        assert cfg.translation.api_key is None
        assert cfg.translation.timeout_seconds == 5.0
        assert cfg.dispatch.poll_interval_ms == 100
        assert cfg.dispatch.deactivate_on_part is True
        assert cfg.logging.level == "WARNING"
        assert cfg.has_credentials is False


@pytest.mark.unit
class TestIniLoading:
    def test_all_sections(self):
        cfg = PluginConfig()
        _load_from_ini(_parser(INI_TEXT), cfg)

        assert cfg.translation.backend == "deepl"
        assert cfg.translation.api_key == "file-key:fx"
        assert cfg.translation.api_url == "http://localhost:9000/v2/translate"
        assert cfg.translation.timeout_seconds == 2.5
        assert cfg.dispatch.poll_interval_ms == 250
        assert cfg.dispatch.deactivate_on_part is False
        assert cfg.logging.level == "DEBUG"
        assert cfg.logging.format == "detailed"
        assert cfg.logging.file == "/tmp/translator.log"
        assert cfg.has_credentials

    def test_empty_values_mean_unset(self):
        cfg = PluginConfig()
        _load_from_ini(_parser("[translation]\napi_key =\napi_url =  \n"), cfg)
        assert cfg.translation.api_key is None
        assert cfg.translation.api_url is None

    def test_unknown_log_format_ignored(self):
        cfg = PluginConfig()
        _load_from_ini(_parser("[logging]\nformat = fancy\n"), cfg)
        assert cfg.logging.format == "simple"

    def test_missing_sections_keep_defaults(self):
        cfg = PluginConfig()
        _load_from_ini(_parser("[unrelated]\nx = 1\n"), cfg)
        assert cfg == PluginConfig()


@pytest.mark.unit
class TestEnvOverrides:
    def test_api_key(self, monkeypatch):
        monkeypatch.setenv("DEEPL_API_KEY", "env-key")
        cfg = PluginConfig()
        _apply_env_overrides(cfg)
        assert cfg.translation.api_key == "env-key"

    def test_all_variables(self, monkeypatch):
        monkeypatch.setenv("TRANSLATOR_BACKEND", " DEEPL ")
        monkeypatch.setenv("TRANSLATOR_API_URL", "http://proxy/v2/translate")
        monkeypatch.setenv("TRANSLATOR_TIMEOUT_SECONDS", "7.5")
        monkeypatch.setenv("TRANSLATOR_POLL_INTERVAL_MS", "50")
        monkeypatch.setenv("TRANSLATOR_DEACTIVATE_ON_PART", "false")
        monkeypatch.setenv("TRANSLATOR_LOG_LEVEL", "info")
        monkeypatch.setenv("TRANSLATOR_LOG_FILE", "/tmp/t.log")

        cfg = PluginConfig()
        _apply_env_overrides(cfg)

        assert cfg.translation.backend == "deepl"
        assert cfg.translation.api_url == "http://proxy/v2/translate"
        assert cfg.translation.timeout_seconds == 7.5
        assert cfg.dispatch.poll_interval_ms == 50
        assert cfg.dispatch.deactivate_on_part is False
        assert cfg.logging.level == "INFO"
        assert cfg.logging.file == "/tmp/t.log"

    def test_empty_variable_ignored(self, monkeypatch):
        monkeypatch.setenv("DEEPL_API_KEY", "")
        cfg = PluginConfig()
        _apply_env_overrides(cfg)
        assert cfg.translation.api_key is None


@pytest.mark.unit
class TestLoadConfig:
    def test_no_file_gives_defaults(self):
        assert load_config() == PluginConfig()

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "translator.ini"
        path.write_text(INI_TEXT)
        cfg = load_config(path)
        assert cfg.translation.api_key == "file-key:fx"

    def test_path_from_environment(self, tmp_path, monkeypatch):
        path = tmp_path / "elsewhere.ini"
        path.write_text("[dispatch]\npoll_interval_ms = 500\n")
        monkeypatch.setenv("TRANSLATOR_CONFIG", str(path))

        assert config_file_path() == path
        assert load_config().dispatch.poll_interval_ms == 500

    def test_environment_beats_file(self, tmp_path, monkeypatch):
        path = tmp_path / "translator.ini"
        path.write_text(INI_TEXT)
        monkeypatch.setenv("DEEPL_API_KEY", "env-key")
        assert load_config(path).translation.api_key == "env-key"

    def test_reload_replaces_singleton(self, monkeypatch):
        original = config_module.config
        monkeypatch.setenv("DEEPL_API_KEY", "reloaded")
        try:
            cfg = reload_config()
            assert cfg is config_module.config
            assert cfg.translation.api_key == "reloaded"
        finally:
            config_module.config = original


@pytest.mark.unit
class TestConfigStatus:
    def test_mask_key(self):
        assert _mask_key(None) == "(not set)"
        assert _mask_key("abc") == "****"
        masked = _mask_key("secret-key-1234")
        assert masked.endswith("1234")
        assert set(masked[:-4]) == {"*"}
        assert len(masked) == len("secret-key-1234")

    def test_status_omits_key(self):
        cfg = PluginConfig()
        cfg.translation.api_key = "super-secret"
        status = get_config_status(cfg)
        assert status["has_credentials"] is True
        assert "super-secret" not in repr(status)
        assert status["config_file_exists"] is False

    def test_status_reports_explicit_path(self, tmp_path):
        path = tmp_path / "other.ini"
        path.write_text("[translation]\nbackend = deepl\n")
        status = get_config_status(load_config(path), path)
        assert status["config_file_path"] == str(path)
        assert status["config_file_exists"] is True

    def test_status_defaults_to_configured_location(self):
        assert get_config_status(PluginConfig())["config_file_path"] == str(config_file_path())

    def test_summary_masks_key(self, capsys):
        cfg = PluginConfig()
        cfg.translation.api_key = "super-secret-9876"
        print_config_summary(cfg)
        out = capsys.readouterr().out
        assert "TRANSLATOR CONFIGURATION" in out
        assert "super-secret" not in out
        assert "9876" in out
