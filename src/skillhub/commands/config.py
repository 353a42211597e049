"""Config commands -- view and modify the user configuration.

Provides the ``skillhub config`` sub-command group for reading and
updating the user's configuration file
(:class:`~skillhub.models.GlobalConfig`): the backend location, the dev
server's proxy rules, the build output directory and output defaults.
"""

from __future__ import annotations

import typer

from skillhub.output import error, format_response, info, print_data, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(
    ctx: typer.Context,
    effective: bool = typer.Option(
        False,
        "--effective",
        "-e",
        help="Show the resolved config (project file, env and flags applied).",
    ),
) -> None:
    """Show the current configuration.

    Example::

        skillhub config show
        skillhub --base-url http://registry:8080 config show --effective --json
    """
    from skillhub.config import config_file_path, load_global_config

    if effective and ctx.obj and ctx.obj.get("config") is not None:
        config = ctx.obj["config"]
    else:
        config = load_global_config()
    info(f"Config file: {config_file_path()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g. 'client.base_url')."
    ),
    value: str = typer.Argument(help="Value to set ('null' clears optional fields)."),
) -> None:
    """Set a configuration value.

    The value is coerced to the existing field's type and the result is
    validated before it is saved.

    Example::

        skillhub config set client.base_url http://registry.internal:8080
        skillhub config set dev.port 3000
        skillhub config set client.request.timeout null
    """
    from skillhub.config import load_global_config, save_global_config, set_config_value
    from skillhub.exceptions import ConfigError

    try:
        config = set_config_value(load_global_config(), key, value)
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=2) from None

    save_global_config(config)
    success(f"Set {key} = {value}")


@config_app.command("path")
def config_path() -> None:
    """Print the path of the user config file."""
    from skillhub.config import config_file_path

    print_data(str(config_file_path()))
