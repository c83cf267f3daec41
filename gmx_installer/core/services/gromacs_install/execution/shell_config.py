"""
L4 Execution — Shell rc files and removal of an old install.

Writes are idempotent: the ``source .../GMXRC`` line is appended only
if missing.  Cleaning writes ``<file>.bak`` before removing lines.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from gmx_installer.core.config.settings import InstallerConfig
from gmx_installer.core.services.gromacs_install.data.constants import (
    BACKUP_SUFFIX,
    RC_CLEAN_MARKERS,
)
from gmx_installer.core.services.gromacs_install.domain.errors import StepFailedError
from gmx_installer.core.services.gromacs_install.execution.runner import CommandRunner

logger = logging.getLogger(__name__)


def _is_ours(line: str) -> bool:
    return any(marker in line for marker in RC_CLEAN_MARKERS)


def source_line(gmxrc: Path) -> str:
    return f"source {gmxrc}"


def clean_shell_config(path: Path, runner: CommandRunner) -> bool:
    """Drop GROMACS lines from one rc file, keeping a ``.bak`` copy.

    Returns:
        True if the file had lines to remove.
    """
    if not path.is_file():
        return False
    try:
        text = path.read_text(encoding="utf-8", errors="surrogateescape")
    except OSError as exc:
        logger.warning("Cannot read %s: %s", path, exc)
        return False

    lines = text.splitlines(keepends=True)
    kept = [ln for ln in lines if not _is_ours(ln)]
    if len(kept) == len(lines):
        return False

    description = f"Cleaning GROMACS references from {path.name}"
    backup = path.with_name(path.name + BACKUP_SUFFIX)
    if runner.dry_run:
        runner.preview(description, f"remove lines matching {'|'.join(RC_CLEAN_MARKERS)} from {path}")
        return True

    runner.report("info", description)
    shutil.copy2(path, backup)
    path.write_text("".join(kept), encoding="utf-8", errors="surrogateescape")
    runner.report("info", f"Backup created: {backup}")
    return True


def clean_shell_configs(paths: list[Path], runner: CommandRunner) -> list[Path]:
    """Clean every existing rc file in ``paths``; returns those changed."""
    runner.report("info", "Cleaning GROMACS paths from shell configuration files...")
    return [p for p in paths if clean_shell_config(p, runner)]


def ensure_source_line(rc_file: Path, gmxrc: Path, runner: CommandRunner) -> bool:
    """Append ``source <gmxrc>`` to ``rc_file`` unless already there.

    Returns:
        True if a line was (or, in preview, would be) added.
    """
    line = source_line(gmxrc)
    existing = ""
    if rc_file.is_file():
        try:
            existing = rc_file.read_text(encoding="utf-8", errors="surrogateescape")
        except OSError as exc:
            logger.warning("Cannot read %s: %s", rc_file, exc)

    if line in existing:
        runner.report("info", f"GROMACS environment already present in {rc_file}")
        return False

    if runner.dry_run:
        runner.preview(f"Adding GROMACS environment to {rc_file}", f"echo '{line}' >> {rc_file}")
        return True

    runner.report("info", f"Adding GROMACS environment to {rc_file}...")
    rc_file.parent.mkdir(parents=True, exist_ok=True)
    with open(rc_file, "a", encoding="utf-8", errors="surrogateescape") as f:
        if existing and not existing.endswith("\n"):
            f.write("\n")
        f.write(f"{line}\n")
    runner.report("success", f"GROMACS environment added to {rc_file}")
    return True


def remove_existing_install(config: InstallerConfig, runner: CommandRunner) -> None:
    """Delete the install prefix and scrub rc files of GROMACS lines.

    Raises:
        StepFailedError: The prefix could not be removed.
    """
    runner.report("info", "Removing existing GROMACS installation...")
    if config.install_dir.is_dir():
        result = runner.run(
            ["rm", "-rf", str(config.install_dir)],
            "Removing GROMACS installation directory",
            needs_sudo=True,
        )
        if result.failed:
            raise StepFailedError("Removing GROMACS installation directory", result.error or "")

    clean_shell_configs(config.shell_config_paths(), runner)
    runner.report("success", "Existing GROMACS installation and configuration cleaned")
