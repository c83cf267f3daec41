"""
L4 Execution — Source archive download, extraction and cleanup.

The archive is fetched with ``wget`` and unpacked with ``unzip``,
both installed as required build tools.  Failures here are fatal and
never retried.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from gmx_installer.core.config.settings import InstallerConfig
from gmx_installer.core.services.gromacs_install.data.constants import (
    ARCHIVE_NAME,
    EXTRACTED_DIR_NAME,
)
from gmx_installer.core.services.gromacs_install.domain.errors import StepFailedError
from gmx_installer.core.services.gromacs_install.execution.runner import CommandRunner

logger = logging.getLogger(__name__)


def archive_path(config: InstallerConfig, version: str) -> Path:
    return config.download_dir / ARCHIVE_NAME.format(version=version)


def source_dir(config: InstallerConfig, version: str) -> Path:
    return config.download_dir / EXTRACTED_DIR_NAME.format(version=version)


def fetch_source(config: InstallerConfig, version: str, runner: CommandRunner) -> Path:
    """Download and unpack the GROMACS ``version`` source tree.

    Returns:
        Path of the extracted source directory.

    Raises:
        StepFailedError: Directory creation, download or extraction failed.
    """
    download_dir = config.download_dir
    archive = archive_path(config, version)
    url = config.source_url_for(version)

    if runner.dry_run:
        runner.preview("Creating download directory", f"mkdir -p {download_dir}")
    else:
        runner.report("info", "Creating download directory")
        try:
            download_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StepFailedError("Creating download directory", str(e)) from e

    runner.report("info", f"Downloading GROMACS v{version} from GitHub...")
    result = runner.run(
        ["wget", "-O", str(archive), url],
        "Downloading GROMACS source archive",
        cwd=download_dir if not runner.dry_run else None,
    )
    if result.failed:
        raise StepFailedError("Downloading GROMACS source archive", result.error or "")

    result = runner.run(
        ["unzip", "-q", "-o", str(archive)],
        "Extracting GROMACS source archive",
        cwd=download_dir if not runner.dry_run else None,
    )
    if result.failed:
        raise StepFailedError("Extracting GROMACS source archive", result.error or "")

    extracted = source_dir(config, version)
    if not runner.dry_run and not extracted.is_dir():
        raise StepFailedError(
            "Entering GROMACS source directory", f"{extracted} does not exist",
        )
    return extracted


def cleanup_download_dir(config: InstallerConfig, runner: CommandRunner) -> None:
    """Remove the temporary download directory (preview: render only)."""
    target = config.download_dir
    if runner.dry_run:
        runner.preview("Cleaning up temporary files", f"rm -rf {target}")
        return
    remove_download_dir(target)
    runner.report("info", "Cleaning up temporary files")


def remove_download_dir(target: Path) -> None:
    """Best-effort removal; never raises."""
    if target.exists():
        shutil.rmtree(target, ignore_errors=True)
        logger.debug("Removed %s", target)
