"""
Plugin configuration management.

Configuration is loaded from three sources with a clear priority order:

    1. Environment variables (highest priority) - set before starting HexChat
    2. Config file (~/.config/hexchat/translator.ini, or $TRANSLATOR_CONFIG)
    3. Built-in defaults (lowest priority) - sensible fallbacks

Configuration is loaded once at module import time and cached. The
PluginConfig dataclass provides typed access to all settings. The plugin
itself calls load_config() again on every load so that /RELOAD picks up
edits.

Usage:
    from hexchat_translator.config import config

    print(config.translation.timeout_seconds)
    print(config.has_credentials)

Environment Variable Mapping:
    DEEPL_API_KEY                   -> translation.api_key
    TRANSLATOR_BACKEND              -> translation.backend
    TRANSLATOR_API_URL              -> translation.api_url
    TRANSLATOR_TIMEOUT_SECONDS      -> translation.timeout_seconds
    TRANSLATOR_POLL_INTERVAL_MS     -> dispatch.poll_interval_ms
    TRANSLATOR_DEACTIVATE_ON_PART   -> dispatch.deactivate_on_part
    TRANSLATOR_LOG_LEVEL            -> logging.level
    TRANSLATOR_LOG_FILE             -> logging.file
"""

import configparser
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

# =============================================================================
# PATH CONFIGURATION
# =============================================================================

CONFIG_ENV_VAR = "TRANSLATOR_CONFIG"
DEFAULT_CONFIG_FILE = Path.home() / ".config" / "hexchat" / "translator.ini"


def config_file_path() -> Path:
    """Return the INI path in effect ($TRANSLATOR_CONFIG wins)."""
    if env_path := os.getenv(CONFIG_ENV_VAR):
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_FILE


# =============================================================================
# CONFIGURATION DATACLASSES
# =============================================================================


@dataclass
class TranslationSettings:
    """Translation provider configuration."""

    backend: str = "deepl"
    api_key: str | None = None
    api_url: str | None = None  # None = choose from the key type
    timeout_seconds: float = 5.0


@dataclass
class DispatchSettings:
    """Background dispatch configuration."""

    poll_interval_ms: int = 100
    deactivate_on_part: bool = True


@dataclass
class LoggingSettings:
    """Logging configuration."""

    level: str = "WARNING"
    format: Literal["simple", "detailed"] = "simple"
    file: str | None = None


@dataclass
class PluginConfig:
    """
    Complete plugin configuration.

    Aggregates all settings sections. Access via the module-level `config`
    singleton or build a fresh one with load_config().
    """

    translation: TranslationSettings = field(default_factory=TranslationSettings)
    dispatch: DispatchSettings = field(default_factory=DispatchSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    @property
    def has_credentials(self) -> bool:
        """True when an API key is configured."""
        return bool(self.translation.api_key)


# =============================================================================
# CONFIGURATION LOADING
# =============================================================================


def _parse_bool(value: str) -> bool:
    """Parse a string value to boolean."""
    return value.lower() in ("true", "yes", "1", "on", "enabled")


def _parse_optional(value: str) -> str | None:
    """Treat an empty string as unset."""
    value = value.strip()
    return value or None


def _load_from_ini(parser: configparser.ConfigParser, cfg: PluginConfig) -> None:
    """Load configuration from parsed INI file into PluginConfig."""
    # Translation section
    if parser.has_section("translation"):
        if parser.has_option("translation", "backend"):
            cfg.translation.backend = parser.get("translation", "backend").strip().lower()
        if parser.has_option("translation", "api_key"):
            cfg.translation.api_key = _parse_optional(parser.get("translation", "api_key"))
        if parser.has_option("translation", "api_url"):
            cfg.translation.api_url = _parse_optional(parser.get("translation", "api_url"))
        if parser.has_option("translation", "timeout_seconds"):
            cfg.translation.timeout_seconds = parser.getfloat("translation", "timeout_seconds")

    # Dispatch section
    if parser.has_section("dispatch"):
        if parser.has_option("dispatch", "poll_interval_ms"):
            cfg.dispatch.poll_interval_ms = parser.getint("dispatch", "poll_interval_ms")
        if parser.has_option("dispatch", "deactivate_on_part"):
            cfg.dispatch.deactivate_on_part = _parse_bool(
                parser.get("dispatch", "deactivate_on_part")
            )

    # Logging section
    if parser.has_section("logging"):
        if parser.has_option("logging", "level"):
            cfg.logging.level = parser.get("logging", "level").upper()
        if parser.has_option("logging", "format"):
            val = parser.get("logging", "format").lower()
            if val in ("simple", "detailed"):
                cfg.logging.format = val  # type: ignore[assignment]
        if parser.has_option("logging", "file"):
            cfg.logging.file = _parse_optional(parser.get("logging", "file"))


def _apply_env_overrides(cfg: PluginConfig) -> None:
    """Apply environment variable overrides to configuration."""
    # Translation settings
    if env_key := os.getenv("DEEPL_API_KEY"):
        cfg.translation.api_key = env_key
    if env_backend := os.getenv("TRANSLATOR_BACKEND"):
        cfg.translation.backend = env_backend.strip().lower()
    if env_url := os.getenv("TRANSLATOR_API_URL"):
        cfg.translation.api_url = env_url
    if env_timeout := os.getenv("TRANSLATOR_TIMEOUT_SECONDS"):
        cfg.translation.timeout_seconds = float(env_timeout)

    # Dispatch settings
    if env_poll := os.getenv("TRANSLATOR_POLL_INTERVAL_MS"):
        cfg.dispatch.poll_interval_ms = int(env_poll)
    if env_part := os.getenv("TRANSLATOR_DEACTIVATE_ON_PART"):
        cfg.dispatch.deactivate_on_part = _parse_bool(env_part)

    # Logging settings
    if env_log := os.getenv("TRANSLATOR_LOG_LEVEL"):
        cfg.logging.level = env_log.upper()
    if env_log_file := os.getenv("TRANSLATOR_LOG_FILE"):
        cfg.logging.file = env_log_file


def load_config(path: Path | str | None = None) -> PluginConfig:
    """
    Load configuration from all sources with proper priority.

    Priority (highest wins):
        1. Environment variables
        2. INI file (``path``, else $TRANSLATOR_CONFIG, else the default)
        3. Built-in defaults

    Args:
        path: Explicit INI file to read instead of the default location.

    Returns:
        PluginConfig: Fully populated configuration object.
    """
    cfg = PluginConfig()

    config_file = Path(path) if path is not None else config_file_path()
    if config_file.exists():
        parser = configparser.ConfigParser()
        parser.read(config_file)
        _load_from_ini(parser, cfg)

    _apply_env_overrides(cfg)

    return cfg


def reload_config() -> "PluginConfig":
    """
    Reload configuration from disk and environment.

    This updates the module-level `config` singleton.

    Returns:
        PluginConfig: The newly loaded configuration.
    """
    global config
    config = load_config()
    return config


# =============================================================================
# MODULE-LEVEL SINGLETON
# =============================================================================

config = load_config()


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def _mask_key(api_key: str | None) -> str:
    """Show only the last four characters of a key."""
    if not api_key:
        return "(not set)"
    if len(api_key) <= 4:
        return "****"
    return "*" * (len(api_key) - 4) + api_key[-4:]


def get_config_status(
    cfg: PluginConfig | None = None, path: Path | str | None = None
) -> dict:
    """
    Get configuration status for diagnostics.

    Returns a dictionary with configuration source information. The API key
    is never included, only whether one is set.

    Args:
        cfg:  Configuration to describe (default: the module singleton).
        path: INI file the configuration was loaded from, when it was not
              the default location.
    """
    cfg = cfg or config
    path = Path(path) if path is not None else config_file_path()
    return {
        "config_file_exists": path.exists(),
        "config_file_path": str(path),
        "backend": cfg.translation.backend,
        "has_credentials": cfg.has_credentials,
        "api_url": cfg.translation.api_url,
        "timeout_seconds": cfg.translation.timeout_seconds,
        "poll_interval_ms": cfg.dispatch.poll_interval_ms,
        "deactivate_on_part": cfg.dispatch.deactivate_on_part,
        "log_level": cfg.logging.level,
    }


def print_config_summary(
    cfg: PluginConfig | None = None, path: Path | str | None = None
) -> None:
    """Print a summary of the configuration to stdout."""
    cfg = cfg or config
    status = get_config_status(cfg, path)
    print("\n" + "=" * 60)
    print("TRANSLATOR CONFIGURATION")
    print("=" * 60)
    print(f"Config file: {status['config_file_path']}")
    print(f"File exists: {status['config_file_exists']}")
    print("-" * 60)
    print(f"Backend:     {status['backend']}")
    print(f"API key:     {_mask_key(cfg.translation.api_key)}")
    print(f"API URL:     {status['api_url'] or '(from key type)'}")
    print(f"Timeout:     {status['timeout_seconds']}s")
    print(f"Poll:        {status['poll_interval_ms']}ms")
    print(f"Auto-off on part: {status['deactivate_on_part']}")
    print(f"Log level:   {status['log_level']}")
    print("=" * 60 + "\n")
