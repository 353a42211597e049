"""Typer application and CLI entry point for skillhub.

This module wires together the top-level Typer application: the two views
of the registry (``list`` and ``show``), the Markdown endpoints
(``markdown``, ``guide``), ``download``, URL navigation (``open``,
``routes``) and the web tooling (``build``, ``dev``), plus the ``config``
sub-group.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. Unhandled exceptions are written to a crash log under
the data directory.

See Also:
    :mod:`skillhub.config`: Configuration resolution.
    :mod:`skillhub.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import asyncio
import signal
import sys
import traceback
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Iterator, Optional

import typer

from skillhub import __version__
from skillhub.exceptions import SkillhubError
from skillhub.exit_codes import EXIT_CANCELLED, EXIT_GENERIC_FAILURE
from skillhub.models import GlobalConfig

app = typer.Typer(
    name="skillhub",
    help="Browse a Skills Registry from the terminal.",
    no_args_is_help=True,
    add_completion=True,
    rich_markup_mode="rich",
)

from skillhub.commands.config import config_app  # noqa: E402

app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"skillhub {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", "-b", help="Backend origin, e.g. http://localhost:8080."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Print requests instead of sending them."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~skillhub.output.OutputManager` and
    logging from CLI flags, resolves the effective configuration, and
    stores it in the Typer context for sub-commands (``ctx.obj``).
    """
    from skillhub.config import resolve_config
    from skillhub.output import OutputFormat, OutputManager, configure_logging, set_output

    def _install(fmt: OutputFormat) -> None:
        output = OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
        set_output(output)
        configure_logging(output)

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    _install(fmt)

    with _handle_errors():
        config = resolve_config(cli_base_url=base_url)

    if fmt == OutputFormat.AUTO and config.output.format != OutputFormat.AUTO.value:
        _install(OutputFormat(config.output.format))

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["dry_run"] = dry_run


# ------------------------------------------------------------------ #
# Helpers
# ------------------------------------------------------------------ #


@contextmanager
def _handle_errors() -> Iterator[None]:
    """Report a :class:`SkillhubError` on stderr and exit with its code."""
    from skillhub.output import error

    try:
        yield
    except SkillhubError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def _config(ctx: typer.Context) -> GlobalConfig:
    obj = ctx.obj or {}
    return obj.get("config") or GlobalConfig()


@contextmanager
def _skills_api(ctx: typer.Context) -> Iterator[Any]:
    """Yield a :class:`~skillhub.api.SkillsAPI` bound to the configured backend."""
    from skillhub.api import SkillsAPI
    from skillhub.client import SyncClient

    config = _config(ctx)
    dry_run = bool((ctx.obj or {}).get("dry_run"))
    with _handle_errors(), SyncClient(config.client, dry_run=dry_run) as client:
        yield SkillsAPI(client)


# ------------------------------------------------------------------ #
# Views
# ------------------------------------------------------------------ #


@app.command("list")
def list_command(
    ctx: typer.Context,
    query: Optional[str] = typer.Argument(
        None, help="Search text matched against names and descriptions."
    ),
) -> None:
    """List skills, optionally filtered by QUERY."""
    from skillhub.views import render_listing

    with _skills_api(ctx) as api:
        skills = api.list_skills(query)
    render_listing(skills, query)


@app.command("show")
def show_command(
    ctx: typer.Context,
    name: str = typer.Argument(help="Skill name."),
) -> None:
    """Show one skill's detail page."""
    from skillhub.exceptions import NotFoundError
    from skillhub.output import suggest
    from skillhub.views import render_detail

    with _skills_api(ctx) as api:
        try:
            detail = api.get_skill_detail(name)
        except NotFoundError:
            suggest(f"Search for it: skillhub list {name}")
            raise
    render_detail(detail)


@app.command("markdown")
def markdown_command(
    ctx: typer.Context,
    name: str = typer.Argument(help="Skill name."),
) -> None:
    """Print the Markdown representation of a skill (what automated readers get)."""
    from skillhub.output import print_markdown

    with _skills_api(ctx) as api:
        text = api.get_skill_markdown(name)
    print_markdown(text)


@app.command("guide")
def guide_command(ctx: typer.Context) -> None:
    """Print the registry guide served at /skill.md."""
    from skillhub.output import print_markdown

    with _skills_api(ctx) as api:
        text = api.get_guide_markdown()
    print_markdown(text)


@app.command("download")
def download_command(
    ctx: typer.Context,
    name: str = typer.Argument(help="Skill name."),
    dest: Path = typer.Option(
        Path("."), "--dest", "-d", help="Directory to write NAME.zip into."
    ),
) -> None:
    """Download a skill directory as a zip archive."""
    from skillhub.output import success

    with _skills_api(ctx) as api:
        target = api.download_skill_to(name, dest)
    success(f"Saved {target}")


# ------------------------------------------------------------------ #
# Navigation
# ------------------------------------------------------------------ #


async def _navigate(config: GlobalConfig, url: str, query: Optional[str], dry_run: bool) -> Any:
    from skillhub.api import AsyncSkillsAPI
    from skillhub.client import AsyncClient
    from skillhub.navigation import Navigator

    async with AsyncClient(config.client, dry_run=dry_run) as client:
        navigator = Navigator(AsyncSkillsAPI(client))
        return await navigator.navigate(url, query=query)


@app.command("open")
def open_command(
    ctx: typer.Context,
    url: str = typer.Argument(help="Client URL, e.g. / or /skill/pdf."),
    query: Optional[str] = typer.Option(
        None, "--query", help="Search text for the listing view."
    ),
) -> None:
    """Resolve a web URL to its view and render it."""
    from skillhub.views import render_page

    config = _config(ctx)
    dry_run = bool((ctx.obj or {}).get("dry_run"))
    with _handle_errors():
        page = asyncio.run(_navigate(config, url, query, dry_run))
    render_page(page)


@app.command("routes")
def routes_command() -> None:
    """List the client URL patterns and the views they map to."""
    from skillhub.output import print_table
    from skillhub.router import Router

    rows = [[r.name, r.pattern, ", ".join(r.param_names) or "-"] for r in Router().routes]
    print_table(["Route", "Pattern", "Params"], rows, title="Routes")


# ------------------------------------------------------------------ #
# Web tooling
# ------------------------------------------------------------------ #


@app.command("build")
def build_command(
    ctx: typer.Context,
    out_dir: Optional[Path] = typer.Option(
        None, "--out-dir", "-o", help="Output directory. [default: build.out_dir]"
    ),
    no_empty: bool = typer.Option(
        False, "--no-empty", help="Keep existing files in the output directory."
    ),
) -> None:
    """Emit the web assets into the directory the backend embeds."""
    from skillhub.build import build_assets
    from skillhub.output import info, success

    build_cfg = _config(ctx).build.model_copy()
    if out_dir is not None:
        build_cfg.out_dir = str(out_dir)
    if no_empty:
        build_cfg.empty_out_dir = False

    with _handle_errors():
        files = build_assets(build_cfg)
    for f in files:
        info(f"  {f}")
    success(f"Built {len(files)} file(s) into {build_cfg.out_dir}")


@app.command("dev")
def dev_command(
    ctx: typer.Context,
    host: Optional[str] = typer.Option(None, "--host", help="Bind address."),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Bind port."),
    target: Optional[str] = typer.Option(
        None, "--target", "-t", help="Backend origin for every proxy rule."
    ),
    static_dir: Optional[Path] = typer.Option(
        None, "--static", help="Asset directory to serve. [default: build.out_dir]"
    ),
) -> None:
    """Run the development server with backend forwarding."""
    from skillhub.devserver import DevServer
    from skillhub.output import info

    config = _config(ctx)
    dev_cfg = config.dev.model_copy(deep=True)
    if host is not None:
        dev_cfg.host = host
    if port is not None:
        dev_cfg.port = port
    if target is not None:
        for rule in dev_cfg.proxy:
            rule.target = target

    static = static_dir if static_dir is not None else Path(config.build.out_dir)
    if not static.is_dir():
        info(f"No assets at {static}; run 'skillhub build' to serve the web client.")

    try:
        server = DevServer(dev_cfg, static_dir=static)
    except OSError as exc:
        from skillhub.output import error

        error(f"Cannot bind {dev_cfg.host}:{dev_cfg.port}: {exc}")
        raise typer.Exit(code=EXIT_GENERIC_FAILURE) from None

    info(f"Serving on {server.url} (Ctrl-C to stop)")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.shutdown()


# ------------------------------------------------------------------ #
# Entry point
# ------------------------------------------------------------------ #


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_CANCELLED)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from skillhub.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``skillhub`` console script.

    :class:`~skillhub.exceptions.SkillhubError` instances that escape a
    command cause a clean exit with the error's ``exit_code``. All other
    exceptions produce a crash log and a generic failure exit.
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_CANCELLED)
    except Exception as exc:
        from skillhub.output import error

        if isinstance(exc, SkillhubError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
