"""wspack CLI application with Typer."""

import sys
from pathlib import Path
from typing import Annotated

import typer

from wspack import __version__
from wspack.app import StreamReport
from wspack.bootstrap import bootstrap_application
from wspack.config import get_settings, set_settings
from wspack.utils.logging import configure_logging, resolve_log_level

PACK_HELP = """Generate a tarball from the active workspace.

This command turns the active workspace into a compressed archive suitable
for publishing. The archive is stored at the root of the workspace
(package.tgz) by default.

If -o,--out is set the archive is created at the specified path, resolved
from the current directory. The %s and %v variables can be used within the
path and are replaced by the package name and version respectively.

\b
Examples:
  wspack pack
  wspack pack --dry-run
  wspack pack --out /artifacts/%s-%v.tgz
"""

app = typer.Typer(
    name="wspack",
    help="Pack project workspaces into publishable archives",
    add_completion=True,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"wspack version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
    data_dir: Annotated[
        Path | None,
        typer.Option("--data-dir", help="Override data directory"),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Logging level written to stderr (e.g. DEBUG)"),
    ] = None,
) -> None:
    """wspack - pack project workspaces into publishable archives."""
    # Update settings with CLI flags
    settings = get_settings()
    if data_dir:
        settings.data_dir = data_dir
    if log_level:
        settings.log_level = log_level
    set_settings(settings)

    try:
        level = resolve_log_level(settings.log_level)
    except ValueError as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2) from exc

    configure_logging(level)


@app.command("pack", help=PACK_HELP)
def pack(
    install_if_needed: Annotated[
        bool,
        typer.Option(
            "--install-if-needed",
            help="Run a preliminary install if the package contains pack scripts",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Print the file paths without actually generating the package archive",
        ),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Format the output as an NDJSON stream"),
    ] = False,
    out: Annotated[
        str | None,
        typer.Option(
            "--out",
            "-o",
            "--filename",
            help="Create the archive at the specified path (%s = name, %v = version)",
        ),
    ] = None,
    cwd: Annotated[
        Path | None,
        typer.Option("--cwd", help="Run as if invoked from this directory"),
    ] = None,
) -> None:
    """Generate a tarball from the active workspace."""
    container = bootstrap_application()
    invocation_cwd = cwd if cwd is not None else Path.cwd()

    with StreamReport.start(container.settings, stdout=sys.stdout, json=json_output) as report:
        container.pack_service.pack(
            invocation_cwd,
            out=out,
            dry_run=dry_run,
            install_if_needed=install_if_needed,
            report=report,
        )

    raise typer.Exit(code=report.exit_code())


@app.command("install")
def install(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Format the output as an NDJSON stream"),
    ] = False,
    cwd: Annotated[
        Path | None,
        typer.Option("--cwd", help="Run as if invoked from this directory"),
    ] = None,
) -> None:
    """Install project dependencies and record the install state used by pack."""
    container = bootstrap_application()
    invocation_cwd = cwd if cwd is not None else Path.cwd()

    with StreamReport.start(container.settings, stdout=sys.stdout, json=json_output) as report:
        container.pack_service.install(invocation_cwd, report=report)

    raise typer.Exit(code=report.exit_code())


if __name__ == "__main__":
    app()
