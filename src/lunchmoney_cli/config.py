"""Configuration loading, API key lookup, and project initialization.

Reads TOML config files using stdlib ``tomllib``. Depends only on
``models.py`` and the client's error base class.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from lunchmoney_cli.client import LunchMoneyError
from lunchmoney_cli.models import (
    DEFAULT_API_KEY_ENV,
    DEFAULT_BASE_URL,
    DEFAULT_PAGE_SIZE,
    DEFAULT_TIMEOUT,
    AppConfig,
)

CONFIG_FILENAME = "lm.toml"

_DEFAULT_CONFIG_TOML = """\
# Lunch Money CLI configuration

[api]
base_url = "https://api.lunchmoney.dev/v2"
timeout = 30                        # seconds, per request
page_size = 1000                    # transactions per page
api_key_env = "LUNCHMONEY_API_KEY"  # Name of env var containing the API key
"""


class ConfigError(LunchMoneyError):
    """Configuration is missing or invalid."""


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(path: Path) -> AppConfig:
    """Load the ``[api]`` section of *path* into an :class:`AppConfig`.

    Missing keys take their defaults.

    Args:
        path: Path to an ``lm.toml`` file.

    Returns:
        A fully-populated :class:`AppConfig` instance.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ConfigError: If the file is not valid TOML or a value has the
            wrong type.
    """
    try:
        data = _read_toml(path)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc

    api = data.get("api", {})
    if not isinstance(api, dict):
        raise ConfigError(f"Invalid value in {path}: [api] must be a table")

    try:
        timeout = float(api.get("timeout", DEFAULT_TIMEOUT))
        page_size = int(api.get("page_size", DEFAULT_PAGE_SIZE))
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid value in {path}: {exc}") from exc

    return AppConfig(
        base_url=str(api.get("base_url", DEFAULT_BASE_URL)),
        timeout=timeout,
        page_size=page_size,
        api_key_env=str(api.get("api_key_env", DEFAULT_API_KEY_ENV)),
    )


def resolve_config(path: Path | None, root: Path) -> AppConfig:
    """Return the config at *path*, else ``root/lm.toml`` if present, else defaults."""
    if path is not None:
        return load_config(path)
    default_path = root / CONFIG_FILENAME
    if default_path.exists():
        return load_config(default_path)
    return AppConfig()


def load_api_key(config: AppConfig) -> str:
    """Read the API key from the environment variable named in *config*.

    Raises:
        ConfigError: If the variable is unset or blank.
    """
    api_key = os.environ.get(config.api_key_env, "").strip()
    if not api_key:
        raise ConfigError(f"{config.api_key_env} is not set")
    return api_key


def initialize(target_dir: Path) -> Path:
    """Write a default ``lm.toml`` into *target_dir*.

    Idempotent: an existing file is **not** overwritten.

    Returns:
        The path to the config file.
    """
    target_dir = Path(target_dir)
    target_dir.mkdir(parents=True, exist_ok=True)
    config_path = target_dir / CONFIG_FILENAME
    _write_if_missing(config_path, _DEFAULT_CONFIG_TOML)
    return config_path


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _read_toml(path: Path) -> dict:
    """Read and parse a TOML file."""
    with open(path, "rb") as f:
        return tomllib.load(f)


def _write_if_missing(path: Path, content: str) -> None:
    """Write *content* to *path* only if the file does not already exist."""
    if not path.exists():
        path.write_text(content, encoding="utf-8")
