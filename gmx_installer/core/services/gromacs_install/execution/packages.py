"""
L4 Execution — System package installs.

Runs a resolved ``InstallCommandSpec``: index refresh first (apt),
then the install.  Success/failure of the exit code is the only
signal consumed.
"""

from __future__ import annotations

from gmx_installer.core.models.plan import InstallCommandSpec
from gmx_installer.core.models.result import StepResult
from gmx_installer.core.services.gromacs_install.execution.runner import CommandRunner


def install_packages(spec: InstallCommandSpec, runner: CommandRunner) -> StepResult:
    """Install ``spec.packages``; the install step's result decides success."""
    if not spec.packages:
        return StepResult.skip("Install packages", "No packages to install")

    if spec.refresh_command:
        refreshed = runner.run(
            spec.refresh_command, "Updating package list", needs_sudo=True,
        )
        if refreshed.failed:
            # A stale index may still have the packages; let the install decide.
            runner.report("warning", f"Package list update failed: {refreshed.error}")

    return runner.run(
        spec.command,
        f"Installing packages: {' '.join(spec.packages)}",
        needs_sudo=True,
    )
