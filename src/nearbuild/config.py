"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for nearbuild:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.nearbuild/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- A single :class:`~nearbuild.models.GlobalConfig`
  JSON file storing the container image, tag, runtime and toolchain command.
* **Project config** -- An optional ``nearbuild.json`` in the contract's
  project root, so a repository can pin its own image version.
* **Precedence resolution** -- :func:`resolve_settings` merges CLI flags,
  environment variables, project-local config, and global config into the
  effective :class:`~nearbuild.models.BuildSettings`.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`) to prevent data loss on crash or power failure.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from nearbuild.exceptions import ConfigError
from nearbuild.models import BuildSettings, GlobalConfig

_APP_NAME = "nearbuild"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "nearbuild.json"

ENV_IMAGE = "NEARBUILD_IMAGE"
ENV_IMAGE_TAG = "NEARBUILD_IMAGE_TAG"
ENV_CONTAINER_RUNTIME = "NEARBUILD_CONTAINER_RUNTIME"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory layout (Linux/FreeBSD)."""
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

    On Linux/BSD: ``$XDG_CONFIG_HOME/nearbuild/`` (default ``~/.config/nearbuild/``).
    On macOS/Windows: ``~/.nearbuild/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/nearbuild/`` (default ``~/.local/share/nearbuild/``).
    On macOS/Windows: ``~/.nearbuild/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


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


# --- Global config ---


def global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the XDG config directory.

    Returns:
        The deserialised :class:`~nearbuild.models.GlobalConfig`, or a
        default instance when the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Project-local config ---


def load_project_config(project_root: Path) -> Optional[dict[str, Any]]:
    """Load project-local build settings from ``<project_root>/nearbuild.json``.

    The file holds a partial :class:`~nearbuild.models.BuildSettings`
    document, for example ``{"container": {"tag": "0.6.0"}}``.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = project_root / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return *base* with *override* merged in, recursing into nested dicts."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


# --- Precedence resolution ---


def resolve_settings(
    project_root: Path,
    cli_image: Optional[str] = None,
    cli_tag: Optional[str] = None,
) -> BuildSettings:
    """Resolve build settings with the full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_image``, ``cli_tag``)
        2. Environment variables (``NEARBUILD_IMAGE``,
           ``NEARBUILD_IMAGE_TAG``, ``NEARBUILD_CONTAINER_RUNTIME``)
        3. Project config (``<project_root>/nearbuild.json``)
        4. User config (``~/.config/nearbuild/config.json``)
        5. Defaults

    Raises:
        ConfigError: If any config layer is invalid.
    """
    data = load_global_config().build.model_dump(mode="json")

    project = load_project_config(project_root)
    if project is not None:
        data = _deep_merge(data, project)

    container = data.setdefault("container", {})
    if not isinstance(container, dict):
        raise ConfigError(
            f"Invalid build settings: 'container' must be an object, got {container!r}"
        )
    env_overrides = {
        "image": os.environ.get(ENV_IMAGE),
        "tag": os.environ.get(ENV_IMAGE_TAG),
        "runtime": os.environ.get(ENV_CONTAINER_RUNTIME),
    }
    for key, value in env_overrides.items():
        if value:
            container[key] = value

    if cli_image is not None:
        container["image"] = cli_image
    if cli_tag is not None:
        container["tag"] = cli_tag

    try:
        return BuildSettings.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid build settings: {exc}") from exc
