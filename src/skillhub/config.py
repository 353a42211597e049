"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for skillhub:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.skillhub/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- A single :class:`~skillhub.models.GlobalConfig`
  JSON file storing the backend location, dev-server proxy rules, build
  output directory and output defaults.
* **Project config** -- an optional ``./skillhub.json`` with the same
  shape, merged over the user config. A web checkout pins its backend and
  build directory this way.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project-local config, and user config into the
  final effective configuration.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`).
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from skillhub.exceptions import ConfigError
from skillhub.models import GlobalConfig, OutputConfig

_APP_NAME = "skillhub"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "skillhub.json"

ENV_BASE_URL = "SKILLHUB_BASE_URL"
ENV_API_PREFIX = "SKILLHUB_API_PREFIX"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/skillhub/`` (default ``~/.config/skillhub/``).
    On macOS/Windows: ``~/.skillhub/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs, downloads), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/skillhub/`` (default ``~/.local/share/skillhub/``).
    On macOS/Windows: ``~/.skillhub/data/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "data"
    path.mkdir(parents=True, exist_ok=True)
    return path


def config_file_path() -> Path:
    """Path to the user config file."""
    return get_config_dir() / _CONFIG_FILENAME


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is cleaned up.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Loading ---


def _read_json(path: Path, label: str) -> Optional[dict[str, Any]]:
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid {label} at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid {label} at {path}: expected a JSON object")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _validate(data: dict[str, Any], source: str) -> GlobalConfig:
    try:
        return GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration ({source}): {exc}") from exc


def load_global_config() -> GlobalConfig:
    """Load the user configuration from the XDG config directory.

    Returns:
        The deserialised :class:`~skillhub.models.GlobalConfig`, or a
        default instance if the file does not exist.

    Raises:
        ConfigError: If the file contains invalid JSON or fails validation.
    """
    path = config_file_path()
    data = _read_json(path, "global config")
    if data is None:
        return GlobalConfig()
    return _validate(data, str(path))


def save_global_config(config: GlobalConfig) -> None:
    """Persist the user configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(config_file_path(), json.dumps(data, indent=2) + "\n")


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local overrides from ``./skillhub.json``.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    return _read_json(Path.cwd() / _PROJECT_CONFIG_FILENAME, "project config")


# --- Precedence resolution ---


def resolve_config(
    cli_base_url: Optional[str] = None,
    cli_format: Optional[str] = None,
) -> GlobalConfig:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. CLI flags (``cli_base_url``, ``cli_format``)
        2. Environment variables (``SKILLHUB_BASE_URL``, ``SKILLHUB_API_PREFIX``)
        3. Project config (``./skillhub.json``)
        4. User config (``~/.config/skillhub/config.json``)
        5. Defaults

    Raises:
        ConfigError: If any config layer is invalid.
    """
    user = load_global_config()
    project = load_project_config()
    if project is not None:
        merged = _deep_merge(user.model_dump(mode="json"), project)
        config = _validate(merged, _PROJECT_CONFIG_FILENAME)
    else:
        config = user

    env_base_url = os.environ.get(ENV_BASE_URL)
    if env_base_url:
        config.client.base_url = env_base_url
    env_prefix = os.environ.get(ENV_API_PREFIX)
    if env_prefix:
        config.client.api_prefix = env_prefix

    if cli_base_url is not None:
        config.client.base_url = cli_base_url
    if cli_format is not None:
        try:
            config.output = OutputConfig(format=cli_format)
        except ValidationError as exc:
            raise ConfigError(f"Invalid output format: {cli_format}") from exc

    return config


def set_config_value(config: GlobalConfig, key: str, value: str) -> GlobalConfig:
    """Return a copy of *config* with the dot-separated *key* set to *value*.

    The string value is coerced to the type of the current field (bool,
    int, float or str); ``null`` clears an optional field. The result is
    re-validated.

    Raises:
        ConfigError: If the key path is unknown or validation fails.
    """
    data = config.model_dump(mode="json")
    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if not isinstance(target.get(k), dict):
            raise ConfigError(f"Invalid config key: {key}")
        target = target[k]

    final_key = keys[-1]
    if final_key not in target or isinstance(target[final_key], (dict, list)):
        raise ConfigError(f"Unknown config key: {key}")

    current = target[final_key]
    coerced: Any
    if value.lower() == "null":
        coerced = None
    elif isinstance(current, bool):
        coerced = value.lower() in ("true", "1", "yes")
    elif isinstance(current, int):
        try:
            coerced = int(value)
        except ValueError:
            raise ConfigError(f"Expected integer for {key}, got: {value}") from None
    elif isinstance(current, float):
        try:
            coerced = float(value)
        except ValueError:
            raise ConfigError(f"Expected number for {key}, got: {value}") from None
    else:
        coerced = value

    target[final_key] = coerced
    return _validate(data, key)
