"""Persistent settings: the global config file and one JSON file per profile.

Files live under the XDG directories on Linux and the BSDs
(``$XDG_CONFIG_HOME/authweb``, ``$XDG_DATA_HOME/authweb``) and under
``~/.authweb`` elsewhere. Every write goes through a temp file and
``os.replace`` so a crash never leaves a half-written profile behind.

Once :func:`resolve_profile` returns, the profile is only read; the
verification engine never looks at environment or global settings itself.
"""

from __future__ import annotations

import getpass
import json
import os
import platform
import sys
import tempfile
from pathlib import Path
from typing import Optional, TypeVar

from pydantic import BaseModel

from authweb.exceptions import ConfigError, InvalidUsageError
from authweb.models import GlobalConfig, Profile

ENV_PROFILE = "AUTHWEB_PROFILE"
ENV_URL = "AUTHWEB_URL"

_M = TypeVar("_M", bound=BaseModel)


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _ensure(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def _xdg_home(env_var: str, *fallback: str) -> Path:
    return Path(os.environ.get(env_var) or Path.home().joinpath(*fallback))


def get_config_dir() -> Path:
    """``$XDG_CONFIG_HOME/authweb`` (default ``~/.config/authweb``) or ``~/.authweb``."""
    if _is_xdg_platform():
        return _ensure(_xdg_home("XDG_CONFIG_HOME", ".config") / "authweb")
    return _ensure(Path.home() / ".authweb")


def get_data_dir() -> Path:
    """Where crash logs go: ``$XDG_DATA_HOME/authweb`` or ``~/.authweb/logs``."""
    if _is_xdg_platform():
        return _ensure(_xdg_home("XDG_DATA_HOME", ".local", "share") / "authweb")
    return _ensure(Path.home() / ".authweb" / "logs")


def get_profiles_dir() -> Path:
    return _ensure(get_config_dir() / "profiles")


def _atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data*; on failure the old file is untouched."""
    _ensure(path.parent)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def _write_model(path: Path, model: BaseModel) -> None:
    _atomic_write(path, json.dumps(model.model_dump(mode="json"), indent=2) + "\n")


def _read_model(path: Path, model: type[_M], what: str) -> _M:
    try:
        return model.model_validate(json.loads(path.read_text(encoding="utf-8")))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid {what} at {path}: {exc}") from exc


# --- global config ---


def load_global_config() -> GlobalConfig:
    """Read ``config.json``; a missing file means all defaults.

    Raises:
        ConfigError: If the file is not valid JSON or fails validation.
    """
    path = get_config_dir() / "config.json"
    if not path.is_file():
        return GlobalConfig()
    return _read_model(path, GlobalConfig, "global config")


def save_global_config(config: GlobalConfig) -> None:
    _write_model(get_config_dir() / "config.json", config)


# --- profiles ---


def _profile_path(name: str) -> Path:
    if not name or name.startswith(".") or any(sep in name for sep in "/\\"):
        raise ConfigError(f"Invalid profile name: '{name}'")
    return get_profiles_dir() / f"{name}.json"


def _existing_profile_path(name: str) -> Path:
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    return path


def list_profiles() -> list[str]:
    return sorted(p.stem for p in get_profiles_dir().glob("*.json") if p.is_file())


def profile_exists(name: str) -> bool:
    return _profile_path(name).is_file()


def load_profile(name: str) -> Profile:
    """Read and validate profile *name*.

    Raises:
        ConfigError: If it does not exist or fails validation, which
            includes a bad ``url``, an empty ``failed_string`` and a
            ``user_regex`` that does not compile.
    """
    return _read_model(_existing_profile_path(name), Profile, f"profile '{name}'")


def save_profile(profile: Profile) -> None:
    _write_model(_profile_path(profile.name), profile)


def delete_profile(name: str) -> None:
    _existing_profile_path(name).unlink()


def resolve_profile(cli_profile: Optional[str] = None) -> Profile:
    """Pick and load the active profile.

    The name comes from ``--profile``, then ``AUTHWEB_PROFILE``, then
    ``default_profile``, then the only profile on disk when
    ``auto_select_single_profile`` is on. ``AUTHWEB_URL`` replaces the
    endpoint of whatever profile is chosen.

    Raises:
        ConfigError: If no name resolves or the profile cannot be loaded.
    """
    settings = load_global_config()
    name = cli_profile or os.environ.get(ENV_PROFILE) or settings.default_profile
    if name is None and settings.auto_select_single_profile:
        candidates = list_profiles()
        if len(candidates) == 1:
            name = candidates[0]
    if name is None:
        raise ConfigError(
            "No profile selected. Use --profile, set AUTHWEB_PROFILE, "
            "or create one with 'authweb profile create'"
        )

    profile = load_profile(name)
    override = os.environ.get(ENV_URL)
    if override:
        profile.verification.url = override
    return profile


# --- password sources ---


def resolve_credential(source: str) -> str:
    """Read the password named by *source*.

    ``env:VAR`` reads an environment variable, ``file:PATH`` reads a file
    (one trailing newline dropped) and ``prompt`` asks on the terminal.
    Undecodable bytes survive as surrogate escapes.

    Raises:
        ConfigError: If the variable, file or terminal is unavailable.
        InvalidUsageError: If the source descriptor is not recognised.
    """
    kind, _, target = source.partition(":")

    if kind == "env" and target:
        value = os.environ.get(target)
        if value is None:
            raise ConfigError(f"Environment variable '{target}' is not set (source: {source})")
        return value

    if kind == "file" and target:
        path = Path(target).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            text = path.read_text(encoding="utf-8", errors="surrogateescape")
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc
        return text.rstrip("\r\n")

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError("Cannot prompt for credentials: stdin is not a TTY (source: prompt)")
        return getpass.getpass("Password: ")

    raise InvalidUsageError(f"Unknown credential source format: {source}")
