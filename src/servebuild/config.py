"""Configuration loading and precedence resolution.

* **Project config** -- an optional ``./servebuild.json`` in the project
  root, deserialised into :class:`~servebuild.models.BuildConfig`.
* **Precedence resolution** -- :func:`resolve_config` layers environment
  variables and CLI flags over the project file and the defaults.
* **Data directory** -- XDG-aware location for crash logs, see
  :func:`get_data_dir`.
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from servebuild.exceptions import ConfigError
from servebuild.models import BuildConfig

_APP_NAME = "servebuild"
PROJECT_CONFIG_FILENAME = "servebuild.json"

ENV_PROGRAM = "SERVEBUILD_PROGRAM"
ENV_BUILD_TOOL = "SERVEBUILD_BUILD_TOOL"
ENV_INSTALL_DIR = "SERVEBUILD_INSTALL_DIR"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/servebuild/`` (default
    ``~/.local/share/servebuild/``). On macOS/Windows: ``~/.servebuild/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_DATA_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".local" / "share"
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Project config ---


def load_project_config(project_dir: Optional[Path] = None) -> Optional[dict[str, Any]]:
    """Load ``servebuild.json`` from *project_dir* (default: the working directory).

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a valid JSON object.
    """
    path = (project_dir or Path.cwd()) / PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


# --- Precedence resolution ---


def resolve_config(
    cli_program: Optional[str] = None,
    cli_build_tool: Optional[str] = None,
    project_dir: Optional[Path] = None,
) -> BuildConfig:
    """Resolve the effective build configuration.

    Precedence (high to low):
        1. CLI flags (``cli_program``, ``cli_build_tool``)
        2. Environment variables (``SERVEBUILD_PROGRAM``,
           ``SERVEBUILD_BUILD_TOOL``, ``SERVEBUILD_INSTALL_DIR``)
        3. Project config (``./servebuild.json``)
        4. Defaults

    Raises:
        ConfigError: If the merged values fail validation.
    """
    values: dict[str, Any] = dict(load_project_config(project_dir) or {})

    for env_var, key in (
        (ENV_PROGRAM, "program_name"),
        (ENV_BUILD_TOOL, "build_tool"),
        (ENV_INSTALL_DIR, "install_dir"),
    ):
        env_value = os.environ.get(env_var)
        if env_value:
            values[key] = env_value

    if cli_program is not None:
        values["program_name"] = cli_program
    if cli_build_tool is not None:
        values["build_tool"] = cli_build_tool

    try:
        return BuildConfig.model_validate(values)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
