"""``authweb config`` -- read and change the user-wide settings file."""

from __future__ import annotations

from typing import Any, Callable, Optional

import typer

from authweb.output import OutputFormat, error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


def _as_bool(raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in ("true", "1", "yes", "on"):
        return True
    if lowered in ("false", "0", "no", "off"):
        return False
    raise ValueError(f"expected true or false, got '{raw}'")


def _as_profile_name(raw: str) -> Optional[str]:
    return raw or None


def _as_output_format(raw: str) -> str:
    return OutputFormat(raw.lower()).value


# Settable keys, in dot notation, and how a command-line value is read.
_SETTABLE: dict[str, Callable[[str], Any]] = {
    "default_profile": _as_profile_name,
    "auto_select_single_profile": _as_bool,
    "output.format": _as_output_format,
}


@config_app.command("show")
def config_show() -> None:
    """Print the global configuration.

    Example::

        authweb --json config show
    """
    from authweb.config import get_config_dir, load_global_config

    info(f"Config directory: {get_config_dir()}")
    format_response(load_global_config().model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help=f"One of: {', '.join(_SETTABLE)}."),
    value: str = typer.Argument(help="New value. An empty default_profile clears it."),
) -> None:
    """Change one global setting.

    Example::

        authweb config set default_profile intranet
        authweb config set output.format json
    """
    from authweb.config import load_global_config, save_global_config
    from authweb.models import GlobalConfig

    convert = _SETTABLE.get(key)
    if convert is None:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)
    try:
        parsed = convert(value)
    except ValueError as exc:
        error(f"Bad value for {key}: {exc}")
        raise typer.Exit(code=2) from None

    data = load_global_config().model_dump(mode="json")
    *parents, leaf = key.split(".")
    section = data
    for part in parents:
        section = section[part]
    section[leaf] = parsed

    save_global_config(GlobalConfig.model_validate(data))
    success(f"Set {key} = {parsed}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation."),
) -> None:
    """Restore every global setting to its default."""
    from authweb.config import save_global_config
    from authweb.models import GlobalConfig

    if not force and not typer.confirm("Reset all config to defaults?"):
        info("Cancelled.")
        raise typer.Exit()
    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
