"""Configuration management for podkit.

Handles TOML configuration loading from local and global paths,
with environment variable precedence for timeouts.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from podkit.core.errors import ConfigError

# Configuration file paths
LOCAL_CONFIG_PATH = Path(".podkit/config")
GLOBAL_CONFIG_PATH = Path.home() / ".podkit" / "config"

ITUNES_SEARCH_URL = "https://itunes.apple.com/search"
ITUNES_LOOKUP_URL = "https://itunes.apple.com/lookup"

# Timeouts are in seconds
DEFAULT_TIMEOUT = 30.0
DEFAULT_FEED_TIMEOUT = 30.0

ITUNES_TIMEOUT_ENV = "PODKIT_ITUNES_TIMEOUT"
FEED_TIMEOUT_ENV = "PODKIT_FEED_TIMEOUT"

DEFAULT_CONFIG: dict[str, Any] = {
    "itunes": {
        "search_url": ITUNES_SEARCH_URL,
        "lookup_url": ITUNES_LOOKUP_URL,
        "timeout": DEFAULT_TIMEOUT,
    },
    "feed": {
        "timeout": DEFAULT_FEED_TIMEOUT,
    },
}


@dataclass
class ITunesConfig:
    """iTunes Search/Lookup API settings."""

    search_url: str = ITUNES_SEARCH_URL
    lookup_url: str = ITUNES_LOOKUP_URL
    timeout: float = DEFAULT_TIMEOUT


@dataclass
class FeedConfig:
    """Podcast feed loader settings."""

    timeout: float = DEFAULT_FEED_TIMEOUT


@dataclass
class Config:
    """Main configuration container.

    Loaded from local and global config files; timeouts can be
    overridden through environment variables.
    """

    itunes: ITunesConfig = field(default_factory=ITunesConfig)
    feed: FeedConfig = field(default_factory=FeedConfig)

    def get_itunes_timeout(self) -> float:
        """Get the iTunes request timeout, preferring PODKIT_ITUNES_TIMEOUT."""
        return _env_timeout(ITUNES_TIMEOUT_ENV, self.itunes.timeout)

    def get_feed_timeout(self) -> float:
        """Get the feed fetch timeout, preferring PODKIT_FEED_TIMEOUT."""
        return _env_timeout(FEED_TIMEOUT_ENV, self.feed.timeout)


def _env_timeout(name: str, fallback: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return fallback
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value


def _generate_default_config_toml() -> str:
    """Generate default configuration as TOML string."""
    return f"""# podkit configuration file

[itunes]
# iTunes Search and Lookup API endpoints
search_url = "{ITUNES_SEARCH_URL}"
lookup_url = "{ITUNES_LOOKUP_URL}"
# Request timeout in seconds ({ITUNES_TIMEOUT_ENV} takes precedence)
timeout = {DEFAULT_TIMEOUT}

[feed]
# Podcast feed fetch timeout in seconds ({FEED_TIMEOUT_ENV} takes precedence)
timeout = {DEFAULT_FEED_TIMEOUT}
"""


def _ensure_local_config_exists(local_path: Path) -> None:
    """Create local config file with defaults if it doesn't exist."""
    if not local_path.exists():
        local_path.parent.mkdir(parents=True, exist_ok=True)
        local_path.write_text(_generate_default_config_toml())


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load and parse a TOML configuration file.

    Args:
        path: Path to the TOML file.

    Returns:
        Parsed configuration dictionary, empty if the file does not exist.

    Raises:
        ConfigError: If the file exists but cannot be parsed.
    """
    if not path.exists():
        return {}

    try:
        return tomllib.loads(path.read_text())
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in config file {path}: {e}") from e


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _validate_timeout(section: str, value: Any) -> None:
    # bool is an int subclass but never a valid timeout
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{section}.timeout must be a number, got {type(value).__name__}")
    if value <= 0:
        raise ConfigError(f"{section}.timeout must be positive, got {value}")


def _validate_config(config_dict: dict[str, Any]) -> None:
    """Validate configuration values.

    Raises:
        ConfigError: If configuration values are invalid.
    """
    for section in ("itunes", "feed"):
        if not isinstance(config_dict.get(section), dict):
            raise ConfigError(f"[{section}] must be a table")

    itunes_config = config_dict["itunes"]
    for key in ("search_url", "lookup_url"):
        value = itunes_config.get(key)
        if not isinstance(value, str) or not value.strip():
            raise ConfigError(f"itunes.{key} must be a non-empty string")
    _validate_timeout("itunes", itunes_config.get("timeout"))

    _validate_timeout("feed", config_dict["feed"].get("timeout"))


def _dict_to_config(config_dict: dict[str, Any]) -> Config:
    itunes_dict = config_dict["itunes"]
    feed_dict = config_dict["feed"]

    return Config(
        itunes=ITunesConfig(
            search_url=itunes_dict["search_url"],
            lookup_url=itunes_dict["lookup_url"],
            timeout=float(itunes_dict["timeout"]),
        ),
        feed=FeedConfig(
            timeout=float(feed_dict["timeout"]),
        ),
    )


def load_config(
    local_path: Path | None = None,
    global_path: Path | None = None,
    auto_create_local: bool = False,
) -> Config:
    """Load configuration from local and global config files.

    Configuration priority (highest to lowest):
    1. Local config file (.podkit/config in current directory)
    2. Global config file ($HOME/.podkit/config)
    3. Default values

    Args:
        local_path: Override path for local config file.
        global_path: Override path for global config file.
        auto_create_local: If True, create local config with defaults if no config exists.

    Returns:
        Config object with merged configuration values.

    Raises:
        ConfigError: If configuration files are invalid.
    """
    local_path = local_path or LOCAL_CONFIG_PATH
    global_path = global_path or GLOBAL_CONFIG_PATH

    merged_config = {
        "itunes": DEFAULT_CONFIG["itunes"].copy(),
        "feed": DEFAULT_CONFIG["feed"].copy(),
    }

    global_config = _load_toml_file(global_path)
    if global_config:
        merged_config = _deep_merge(merged_config, global_config)

    local_config = _load_toml_file(local_path)
    if local_config:
        merged_config = _deep_merge(merged_config, local_config)

    if auto_create_local and not local_config and not global_config:
        _ensure_local_config_exists(local_path)

    _validate_config(merged_config)

    return _dict_to_config(merged_config)


def get_config() -> Config:
    """Get the configuration using default paths."""
    return load_config()
