"""
L4 Execution — Apply the ``#include <limits>`` patch.

Each patched file gets a ``<name>.bak`` copy first.  Re-running on a
patched tree is a no-op because the scanner no longer flags it.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from gmx_installer.core.models.plan import PatchCandidate
from gmx_installer.core.services.gromacs_install.data.constants import (
    BACKUP_SUFFIX,
    PATCH_INCLUDE_LINE,
)
from gmx_installer.core.services.gromacs_install.detection.source_scan import (
    files_needing_header,
)
from gmx_installer.core.services.gromacs_install.domain.patching import insert_limits_header
from gmx_installer.core.services.gromacs_install.execution.runner import CommandRunner

logger = logging.getLogger(__name__)


def backup_path(path: Path) -> Path:
    return path.with_name(path.name + BACKUP_SUFFIX)


def apply_patch(candidate: PatchCandidate) -> str:
    """Back up and patch one file.

    Returns:
        Name of the anchor rule used for the insertion.
    """
    path = candidate.path
    shutil.copy2(path, backup_path(path))
    # newline="" keeps CRLF and stray CR bytes as they are on disk.
    with open(path, encoding="utf-8", errors="surrogateescape", newline="") as f:
        text = f.read()
    new_text, rule = insert_limits_header(text)
    with open(path, "w", encoding="utf-8", errors="surrogateescape", newline="") as f:
        f.write(new_text)
    logger.debug("Patched %s (%s)", path, rule)
    return rule


def apply_compatibility_patches(source_root: Path, runner: CommandRunner) -> list[Path]:
    """Patch every file under ``<source_root>/src`` that needs ``<limits>``.

    Returns:
        Paths that were patched (or would be, in preview mode).
    """
    src = source_root / "src"
    if not src.is_dir():
        runner.report("warning", "Source directory not found. Skipping compatibility patches.")
        return []

    runner.report("info", f"Scanning for files that need {PATCH_INCLUDE_LINE} patch...")
    candidates = files_needing_header(src)

    patched: list[Path] = []
    for candidate in candidates:
        name = candidate.path.name
        runner.report("info", f"Patching {name} for GCC compatibility...")
        if runner.dry_run:
            runner.preview(
                f"Adding missing {PATCH_INCLUDE_LINE} to {candidate.path}",
                f"Adding {PATCH_INCLUDE_LINE} after existing includes",
            )
        else:
            apply_patch(candidate)
            runner.report("success", f"Added {PATCH_INCLUDE_LINE} to {name}")
        patched.append(candidate.path)

    if not patched:
        runner.report("info", "No compatibility patches needed")
    elif runner.dry_run:
        runner.report("info", f"Compatibility patches would be applied to {len(patched)} files")
    else:
        runner.report("success", f"Compatibility patches applied to {len(patched)} files")
        runner.report("info", f"Backup files created with {BACKUP_SUFFIX} extension")
    return patched
