"""Application configuration management."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path

from cs2translator.translator import DEEPL_LANGUAGES

logger = logging.getLogger(__name__)

CONFIG_FILE = "config.json"

# Environment variable consulted when config.json has no API key
API_KEY_ENV = "DEEPL_API_KEY"

# Standard Steam library locations
_STEAM_PATHS = [
    Path("C:/Program Files (x86)/Steam"),
    Path("C:/Program Files/Steam"),
    Path("D:/SteamLibrary"),
    Path("D:/Steam"),
    Path.home() / ".steam/steam",
    Path.home() / ".local/share/Steam",
]

# console.log relative path inside a Steam library (written with -condebug)
_CONSOLE_LOG_RELATIVE = (
    "steamapps/common/Counter-Strike Global Offensive/game/csgo/console.log"
)


class ConfigError(Exception):
    """config.json is missing, malformed or incomplete."""


@dataclass
class AppConfig:
    """Application settings."""

    # API
    deepl_api_key: str = ""

    # Languages
    target_language: str = "EN"

    # Paths
    console_log_path: str = ""

    # Identity (own messages are never translated)
    own_name: str = ""

    # Filtering
    ignored_channels: list[str] = field(default_factory=list)
    skip_target_language: bool = False

    # Watching
    use_file_events: bool = True

    # Translation cache (0 disables)
    cache_size: int = 500

    # Debug
    debug: bool = False

    @classmethod
    def load(cls, path: str | Path = CONFIG_FILE) -> AppConfig:
        """Load config from JSON file.

        Raises:
            ConfigError: file missing, unreadable, not JSON or invalid.
        """
        try:
            text = Path(path).read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise ConfigError(f"Config file not found: {path}") from e
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Malformed JSON in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"{path} must contain a JSON object")
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> AppConfig:
        """Build a validated config from parsed JSON, using defaults for missing fields."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.debug("Ignoring unknown config keys: %s", ", ".join(unknown))

        kwargs = {}
        for name in known & set(data):
            kwargs[name] = _check_type(name, data[name])

        config = cls(**kwargs)
        if not config.deepl_api_key:
            config.deepl_api_key = os.environ.get(API_KEY_ENV, "")
        config.validate()
        return config

    def validate(self) -> None:
        """Check required values. Raises ConfigError."""
        if not self.deepl_api_key.strip():
            raise ConfigError(
                f"deepl_api_key is missing (set it in {CONFIG_FILE} or {API_KEY_ENV})"
            )
        if not self.target_language.strip():
            raise ConfigError("target_language is empty")
        base = self.target_language.strip().upper().split("-", 1)[0]
        if base not in DEEPL_LANGUAGES:
            raise ConfigError(
                f"target_language {self.target_language!r} is not a DeepL language code"
            )
        if self.cache_size < 0:
            raise ConfigError("cache_size must not be negative")


_FIELD_TYPES: dict[str, type] = {
    "deepl_api_key": str,
    "target_language": str,
    "console_log_path": str,
    "own_name": str,
    "ignored_channels": list,
    "skip_target_language": bool,
    "use_file_events": bool,
    "cache_size": int,
    "debug": bool,
}


def _check_type(name: str, value: object) -> object:
    expected = _FIELD_TYPES[name]
    # bool is an int subclass; reject true/false for numeric fields
    if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
        raise ConfigError(
            f"{name} must be {expected.__name__}, got {type(value).__name__}"
        )
    if expected is list and not all(isinstance(item, str) for item in value):
        raise ConfigError(f"{name} must be a list of strings")
    return value


def detect_console_log_path() -> str:
    """Try to find CS2's console.log in the standard Steam libraries."""
    for steam in _STEAM_PATHS:
        candidate = steam / _CONSOLE_LOG_RELATIVE
        if candidate.is_file():
            return str(candidate)
    return ""


def resolve_console_log_path(config: AppConfig) -> Path:
    """Resolve the console.log path from config.

    Raises:
        ConfigError: no path configured and none found.
    """
    if config.console_log_path:
        return Path(config.console_log_path).expanduser()

    detected = detect_console_log_path()
    if detected:
        logger.info("Found console log at %s", detected)
        return Path(detected)

    raise ConfigError(
        "console_log_path is not set and console.log was not found in the "
        "standard Steam locations (launch CS2 with -condebug)"
    )
