"""
================================================================================
Configuration Loader
================================================================================

Settings for the storefront suite come from three layers, highest first:

    1. environment variables named after the dotted key
       (storefront.base_url -> STOREFRONT_BASE_URL)
    2. config/config.yaml, or the file named by CONFIG_PATH
    3. the default passed by the caller

Environment values are strings; they are converted to the type of the
caller's default, so `get("waits.cart_update", 8000)` stays an int and
`get("browser.args", [])` splits BROWSER_ARGS on commas.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from loguru import logger


DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "config.yaml"

_TRUTHY = ("true", "1", "yes", "on")


class ConfigurationError(Exception):
    """The configuration file exists but is not valid YAML."""
    pass


def env_key(key: str) -> str:
    """`waits.cart_update` -> `WAITS_CART_UPDATE`."""
    return key.replace(".", "_").upper()


def coerce(raw: str, like: Any) -> Any:
    """Convert an environment string to the type of `like`; keep it as-is when that fails."""
    if like is None or isinstance(like, str):
        return raw
    if isinstance(like, bool):
        return raw.strip().lower() in _TRUTHY
    if isinstance(like, (list, tuple)):
        # comma separated: "--foo, --bar" -> ["--foo", "--bar"]
        return [part.strip() for part in raw.split(",") if part.strip()]
    for kind in (int, float):
        if isinstance(like, kind):
            try:
                return kind(raw)
            except ValueError:
                return raw
    return raw


class ConfigLoader:
    """
    Process-wide configuration (one instance per run).

    Usage:
        >>> config = ConfigLoader()
        >>> config.get("storefront.collection_path", "/collections/all")
        '/collections/all'
        >>> config.get_section("checkout")["city"]
        'London'

    Tests call `ConfigLoader.reset()` to start again from a different file or
    environment.
    """

    _instance: Optional["ConfigLoader"] = None

    def __new__(cls, config_path: Optional[Path] = None) -> "ConfigLoader":
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._ready = False
            cls._instance = instance
        return cls._instance

    def __init__(self, config_path: Optional[Path] = None) -> None:
        if self._ready:
            return
        self._path = Path(config_path or os.environ.get("CONFIG_PATH") or DEFAULT_CONFIG_PATH)
        self._data: Dict[str, Any] = self._read()
        self._ready = True

    def _read(self) -> Dict[str, Any]:
        if not self._path.is_file():
            logger.warning(f"⚠️ No configuration file at {self._path}; using defaults and environment")
            return {}
        try:
            data = yaml.safe_load(self._path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {self._path}: {e}") from e
        logger.debug(f"Configuration loaded from {self._path}")
        return data or {}

    @property
    def config_path(self) -> Path:
        return self._path

    def get(self, key: str, default: Any = None) -> Any:
        """
        Value for a dotted key.

        Args:
            key: Dotted path such as "timeouts.checkout_button"
            default: Returned when the key is absent; also sets the type
                environment overrides are converted to

        Returns:
            Environment override, YAML value or `default`
        """
        raw = os.environ.get(env_key(key))
        if raw is not None:
            return coerce(raw, default)

        node: Any = self._data
        for part in key.split("."):
            node = node.get(part) if isinstance(node, dict) else None
            if node is None:
                return default
        return node

    def get_section(self, section: str) -> Dict[str, Any]:
        """Copy of a top-level section ({} when missing)."""
        return dict(self._data.get(section) or {})

    def reload(self) -> None:
        """Re-read the YAML file."""
        self._data = self._read()
        logger.info(f"🔄 Configuration reloaded from {self._path}")

    @classmethod
    def reset(cls) -> None:
        """Forget the shared instance; the next `ConfigLoader()` reads again."""
        cls._instance = None


__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "DEFAULT_CONFIG_PATH",
    "coerce",
    "env_key",
]
