"""Config commands -- view and modify global configuration.

Provides the ``academy config`` sub-command group for reading, updating,
and resetting the user's global configuration file
(:class:`~academy.models.GlobalConfig`): the API base URL, request
timeouts and retries, cache tier durations, and the default output format.
"""

from __future__ import annotations

import typer
from pydantic import ValidationError as PydanticValidationError

from academy.exit_codes import EXIT_INVALID_USAGE
from academy.output import error, format_response, info, success

config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show current configuration.

    Example::

        academy config show
        academy --json config show
    """
    from academy.config import get_config_dir, load_global_config

    config = load_global_config()
    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'cache.short_ttl_seconds')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    The value is coerced to the type of the existing field (bool, int,
    float, or str) and the result is validated before saving.

    Example::

        academy config set api.base_url https://api.example-academy.in
        academy config set cache.enabled false
        academy config set api.request.max_retries 1
    """
    from academy.config import load_global_config, save_global_config
    from academy.models import GlobalConfig

    config = load_global_config()
    data = config.model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=EXIT_INVALID_USAGE)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target or isinstance(target[final_key], dict):
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    current = target[final_key]
    coerced: object
    if isinstance(current, bool):
        coerced = value.lower() in ("true", "1", "yes")
    elif isinstance(current, (int, float)):
        try:
            coerced = float(value) if "." in value else int(value)
        except ValueError:
            error(f"Expected a number for {key}, got: {value}")
            raise typer.Exit(code=EXIT_INVALID_USAGE) from None
    else:
        coerced = value

    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except PydanticValidationError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(ctx: typer.Context) -> None:
    """Reset configuration to defaults.

    Asks for confirmation unless ``--force`` is active.
    """
    from academy.commands import context_options
    from academy.config import save_global_config
    from academy.models import GlobalConfig

    if not context_options(ctx).get("force", False):
        if not typer.confirm("Reset all config to defaults?"):
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
