"""Typer application and CLI entry point for academy.

This module wires together the top-level Typer application and registers
the built-in sub-command groups (``courses``, ``placements``, ``blog``,
``content``, ``enquiry``, ``admin``, ``cache``, ``config``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
:class:`~academy.exceptions.AcademyError` exits with its own exit code;
anything else is written to a crash log under the data directory.

See Also:
    :mod:`academy.config`: Configuration resolution.
    :mod:`academy.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from academy import __version__
from academy.commands.admin import admin_app
from academy.commands.cache import cache_app
from academy.commands.config import config_app
from academy.commands.content import blog_app, content_app, courses_app, placements_app
from academy.commands.enquiry import enquiry_app
from academy.exit_codes import EXIT_GENERIC_FAILURE

app = typer.Typer(
    name="academy",
    help="Browse and manage the training institute's website content.",
    no_args_is_help=True,
    add_completion=True,
    rich_markup_mode="rich",
)

app.add_typer(courses_app, name="courses", help="Browse courses.")
app.add_typer(placements_app, name="placements", help="Browse placements and statistics.")
app.add_typer(blog_app, name="blog", help="Read blog posts.")
app.add_typer(content_app, name="content", help="Show site content blocks.")
app.add_typer(enquiry_app, name="enquiry", help="Submit an enquiry.")
app.add_typer(admin_app, name="admin", help="Admin session and maintenance.")
app.add_typer(cache_app, name="cache", help="Inspect the response cache.")
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"academy {__version__}")
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
        None, "--base-url", help="API base URL (overrides ACADEMY_API_URL and config)."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Print requests instead of sending them."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Skip confirmations."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~academy.output.OutputManager` and the
    ``logging`` level from CLI flags, and stores shared options
    (``base_url``, ``dry_run``, ``force``) in ``ctx.obj`` for sub-commands.

    Without ``--json`` or ``--plain`` the ``output.format`` value from the
    global config is used. A broken config file is reported by the command
    that needs it, so ``academy config reset`` still works.
    """
    from academy.config import load_global_config
    from academy.exceptions import ConfigError
    from academy.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        try:
            fmt = OutputFormat(load_global_config().output.format)
        except (ConfigError, ValueError):
            fmt = OutputFormat.AUTO

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))
    _configure_logging(verbose)

    ctx.ensure_object(dict)
    ctx.obj["base_url"] = base_url
    ctx.obj["dry_run"] = dry_run
    ctx.obj["force"] = force
    ctx.obj["verbose"] = verbose


def _configure_logging(verbose: bool) -> None:
    """Route library log records to stderr; DEBUG with ``--verbose``, else WARNING."""
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)
    logging.getLogger("academy").setLevel(logging.DEBUG if verbose else logging.WARNING)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from academy.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    )
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``academy`` console script.

    Unhandled :class:`~academy.exceptions.AcademyError` instances cause a
    clean exit with the error's ``exit_code``. All other exceptions produce
    a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from academy.exceptions import AcademyError
        from academy.output import error

        if isinstance(exc, AcademyError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
