"""
GROMACS installer — CLI entrypoint.

Usage:
    gmx-install 2023.3
    gmx-install 2023.3 --dry-run
    python -m gmx_installer --help
"""

from __future__ import annotations

import json
import signal
import sys
from pathlib import Path

import click

from gmx_installer import __version__
from gmx_installer.core.observability.logging_config import resolve_level, setup_from_env

# Progress level → (prefix, colour)
_STYLES: dict[str, tuple[str, str | None]] = {
    "info": ("[INFO]", "blue"),
    "success": ("[SUCCESS]", "green"),
    "warning": ("[WARNING]", "yellow"),
    "error": ("[ERROR]", "red"),
    "dry_run": ("[DRY-RUN]", "yellow"),
}


def _make_reporter(quiet: bool, to_stderr: bool = False):
    """Build the ``on_progress`` callback that prints coloured lines."""

    def report(level: str, message: str) -> None:
        if quiet and level in ("info", "dry_run", "command", "output"):
            return
        if level == "output":
            click.echo(f"    {message}", err=to_stderr)
            return
        if level == "command":
            click.echo(f"  Command: {message}", err=to_stderr)
            return
        prefix, colour = _STYLES.get(level, ("[INFO]", None))
        err = to_stderr or level == "error"
        click.secho(prefix, fg=colour, bold=True, nl=False, err=err)
        click.echo(f" {message}", err=err)

    return report


def _terminate(signum, frame) -> None:
    # Turn SIGTERM into SystemExit so ``finally`` cleanup runs.
    raise SystemExit(128 + signum)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="gmx-install")
@click.argument("target_version", metavar="VERSION")
@click.option("--dry-run", is_flag=True, help="Show what would be done without executing.")
@click.option(
    "--verbose", "-v", is_flag=True,
    help="Enable verbose logging and show build output as it runs.",
)
@click.option("--quiet", "-q", is_flag=True, help="Only print warnings and errors.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to gmx-install.yml (default: auto-detect).",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Print the result as JSON.")
def cli(
    target_version: str,
    dry_run: bool,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
    as_json: bool,
) -> None:
    """Install GROMACS VERSION from source (e.g. 2023.3)."""
    setup_from_env(resolve_level(verbose=verbose, quiet=quiet, debug=debug))

    from gmx_installer.core.config.loader import ConfigError, load_config
    from gmx_installer.core.models.plan import RequestedInstall
    from gmx_installer.core.services.gromacs_install import install_gromacs
    from gmx_installer.core.services.gromacs_install.domain.errors import InstallerError

    try:
        request = RequestedInstall(version=target_version, preview_only=dry_run)
    except ValueError:
        raise click.BadParameter("version must not be empty", param_hint="VERSION")

    try:
        config = load_config(Path(config_path) if config_path else None)
    except ConfigError as e:
        click.secho(f"[ERROR] {e}", fg="red", err=True)
        sys.exit(1)

    if dry_run and not (quiet or as_json):
        click.secho("[DRY-RUN]", fg="yellow", bold=True, nl=False)
        click.echo(" DRY RUN MODE - No actual changes will be made")

    reporter = _make_reporter(quiet, to_stderr=as_json)
    previous = signal.signal(signal.SIGTERM, _terminate)
    try:
        result = install_gromacs(
            request, config, on_progress=reporter, stream_output=verbose and not quiet,
        )
    except InstallerError as e:
        click.secho(f"[ERROR] {e}", fg="red", err=True)
        for hint in e.hints:
            click.echo(f"  - {hint}", err=True)
        sys.exit(e.exit_code)
    finally:
        if previous is not None:
            signal.signal(signal.SIGTERM, previous)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))


if __name__ == "__main__":
    cli()
