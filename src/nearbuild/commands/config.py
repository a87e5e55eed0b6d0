"""Config commands -- view and modify global configuration.

Provides the ``nearbuild config`` sub-command group for reading, updating,
and resetting the user's global configuration file
(:class:`~nearbuild.models.GlobalConfig`). The most common use is pinning
the SourceScan image version::

    nearbuild config set build.container.tag 0.6.0
"""

from __future__ import annotations

import shlex
from typing import Any

import typer

from nearbuild.exceptions import InvalidUsageError
from nearbuild.models import GlobalConfig
from nearbuild.output import error, format_response, info, print_data, success


config_app = typer.Typer(no_args_is_help=True)

_TRUE_WORDS = ("true", "1", "yes")
_FALSE_WORDS = ("false", "0", "no")
_NULL_WORDS = ("null", "none", "auto")


@config_app.command("show")
def config_show() -> None:
    """Show current configuration.

    Example::

        nearbuild config show
        nearbuild --json config show
    """
    from nearbuild.config import get_config_dir, load_global_config

    config = load_global_config()
    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("path")
def config_path() -> None:
    """Print the path of the global config file."""
    from nearbuild.config import global_config_path

    print_data(str(global_config_path()))


def _coerce(current: Any, value: str) -> Any:  # noqa: ANN401
    """Coerce *value* to the type of the field's *current* value."""
    lowered = value.lower()
    if isinstance(current, list):
        return shlex.split(value)
    if isinstance(current, bool) or current is None:
        if lowered in _NULL_WORDS:
            return None
        if lowered in _TRUE_WORDS:
            return True
        if lowered in _FALSE_WORDS:
            return False
    return value


def _assign(config: GlobalConfig, key: str, value: str) -> tuple[GlobalConfig, Any]:
    """Return a copy of *config* with the dot-notation *key* set to *value*.

    Raises:
        InvalidUsageError: If *key* does not name a leaf setting or the
            coerced value fails validation.
    """
    data = config.model_dump(mode="json")
    *parents, leaf = key.split(".")
    target = data
    for part in parents:
        if not isinstance(target.get(part), dict):
            raise InvalidUsageError(f"Invalid config key: {key}")
        target = target[part]

    if leaf not in target or isinstance(target[leaf], dict):
        raise InvalidUsageError(f"Unknown config key: {key}")

    coerced = _coerce(target[leaf], value)
    target[leaf] = coerced
    try:
        return GlobalConfig.model_validate(data), coerced
    except ValueError as exc:
        raise InvalidUsageError(f"Validation error: {exc}") from None


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'build.container.tag')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    Uses dot notation for nested keys. Booleans accept true/false, optional
    booleans also accept ``auto``; list values such as
    ``build.toolchain.command`` are split like a shell command line.

    Example::

        nearbuild config set build.container.tag 0.6.0
        nearbuild config set build.container.runtime podman
        nearbuild config set build.container.interactive false
        nearbuild config set build.toolchain.command "cargo near build"
    """
    from nearbuild.config import load_global_config, save_global_config

    try:
        new_config, coerced = _assign(load_global_config(), key, value)
    except InvalidUsageError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code)

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(ctx: typer.Context) -> None:
    """Reset configuration to defaults.

    Asks for confirmation unless ``--force`` is active.
    """
    from nearbuild.config import save_global_config

    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
