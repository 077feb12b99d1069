"""Typer application and CLI entry point for servebuild.

The root callback initialises output and resolves configuration. Invoked
without a sub-command it performs the default release build; each named
operation (``build``, ``debug``, ``run``, ``install``, ``help``) is a thin
command that hands off to :class:`~servebuild.dispatcher.Dispatcher` and
exits with the status it returns. ``inspect`` reports what each operation
would do on this host.

:func:`main` is the console-script entry point declared in
``pyproject.toml``. Unhandled exceptions are written to a crash log under
the data directory.
"""

from __future__ import annotations

import json
import signal
import sys
import traceback
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

import typer

from servebuild import __version__
from servebuild.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INTERRUPTED, EXIT_SUCCESS

if TYPE_CHECKING:
    from servebuild.dispatcher import Dispatcher


app = typer.Typer(
    name="servebuild",
    help="Build, run and install the serve program.",
    invoke_without_command=True,
    no_args_is_help=False,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"servebuild {__version__}")
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
    program: Optional[str] = typer.Option(
        None, "--program", help="Program name (default: serve)."
    ),
    build_tool: Optional[str] = typer.Option(
        None, "--build-tool", help="Build tool executable (default: cargo)."
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
        False, "--dry-run", "-n", help="Show commands without running them."
    ),
) -> None:
    """Build, run and install the serve program.

    With no command, compiles the program in release mode.
    """
    from servebuild.config import resolve_config
    from servebuild.exceptions import ServeBuildError
    from servebuild.output import OutputFormat, OutputManager, error, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(
        OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    )

    try:
        config = resolve_config(cli_program=program, cli_build_tool=build_tool)
    except ServeBuildError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["dry_run"] = dry_run

    if ctx.invoked_subcommand is None:
        _dispatch(ctx, "build")


def _make_dispatcher(ctx: typer.Context) -> Dispatcher:
    from servebuild.dispatcher import Dispatcher
    from servebuild.invoker import DryRunInvoker, SubprocessInvoker

    obj = ctx.ensure_object(dict)
    invoker = DryRunInvoker() if obj.get("dry_run") else SubprocessInvoker()
    return Dispatcher(config=obj.get("config"), invoker=invoker)


def _dispatch(ctx: typer.Context, operation: str) -> None:
    """Run *operation* and exit with its status."""
    from servebuild.exceptions import ServeBuildError, ToolNotFoundError
    from servebuild.output import error, suggest

    try:
        dispatcher = _make_dispatcher(ctx)
        status = dispatcher.dispatch(operation)
    except ServeBuildError as exc:
        error(str(exc))
        if isinstance(exc, ToolNotFoundError):
            suggest(f"Check that '{exc.command}' is installed and on PATH.")
        raise typer.Exit(code=exc.exit_code)

    if status != EXIT_SUCCESS:
        error(f"{operation} failed with exit status {status}")
    elif operation == "install" and not ctx.obj.get("dry_run"):
        _report_install(dispatcher)
    raise typer.Exit(code=status)


def _report_install(dispatcher: Dispatcher) -> None:
    from servebuild.operations import install_target
    from servebuild.output import success

    target = install_target(dispatcher.platform, dispatcher.config)
    if target is not None:
        success(f"Installed: {target}")


@app.command("build")
def build_command(ctx: typer.Context) -> None:
    """Compile in release mode (same as running with no command)."""
    _dispatch(ctx, "build")


@app.command("debug")
def debug_command(ctx: typer.Context) -> None:
    """Compile in debug mode and run."""
    _dispatch(ctx, "debug")


@app.command("run")
def run_command(ctx: typer.Context) -> None:
    """Compile in release mode and run."""
    _dispatch(ctx, "run")


@app.command("install")
def install_command(ctx: typer.Context) -> None:
    """Compile in release mode, then install system-wide."""
    _dispatch(ctx, "install")


@app.command("help")
def help_command(ctx: typer.Context) -> None:
    """List the available invocations."""
    _dispatch(ctx, "help")


@app.command("inspect")
def inspect_command(ctx: typer.Context) -> None:
    """Show the resolved platform, paths and operation table."""
    from servebuild.dispatcher import Dispatcher
    from servebuild.invoker import DryRunInvoker
    from servebuild.operations import install_target
    from servebuild.output import OutputFormat, get_output, print_data, print_table
    from servebuild.paths import build_artifact_path

    dispatcher = Dispatcher(config=ctx.obj.get("config"), invoker=DryRunInvoker())
    config = dispatcher.config
    settings = {
        "platform": dispatcher.platform.value,
        "program": config.program_name,
        "build_tool": config.build_tool,
        "artifact": build_artifact_path(
            dispatcher.platform, config.program_name, release_dir=config.release_dir
        ),
        "install_target": install_target(dispatcher.platform, config) or "(manual)",
    }
    operations = [
        {
            "operation": spec.name.value,
            "action": spec.action.render(),
            "depends_on": ", ".join(dep.value for dep in spec.depends_on),
        }
        for spec in dispatcher.operations.values()
    ]

    if get_output().format == OutputFormat.JSON:
        print_data(
            json.dumps({**settings, "operations": operations}, indent=2, ensure_ascii=False)
        )
        return

    print_table(
        ["setting", "value"],
        [[key, value] for key, value in settings.items()],
        title="Settings",
    )
    print_table(
        ["operation", "action", "depends_on"],
        [[op["operation"], op["action"], op["depends_on"]] for op in operations],
        title="Operations",
    )


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from servebuild.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``servebuild`` console script.

    :class:`~servebuild.exceptions.ServeBuildError` instances cause a clean
    exit with the error's ``exit_code``. All other exceptions produce a
    crash log and a generic failure exit.

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
        sys.exit(EXIT_INTERRUPTED)
    except Exception as exc:
        from servebuild.exceptions import ServeBuildError
        from servebuild.output import error

        if isinstance(exc, ServeBuildError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
