"""
L4 Execution — Configure, build, test and install.

CMake configure and ``make install`` failures are fatal at once.  A
failed parallel build gets exactly one retry with ``-j1``.  Test
failures are tolerated: regression data isn't downloaded, so some
tests are expected to be skipped or fail.
"""

from __future__ import annotations

import logging
from pathlib import Path

from gmx_installer.core.models.plan import BuildPlan
from gmx_installer.core.models.result import StepResult
from gmx_installer.core.services.gromacs_install.domain.error_analysis import (
    analyse_build_failure,
)
from gmx_installer.core.services.gromacs_install.domain.errors import (
    BuildFailureError,
    StepFailedError,
)
from gmx_installer.core.services.gromacs_install.execution.runner import CommandRunner

logger = logging.getLogger(__name__)


def _failure_text(result: StepResult) -> str:
    return (result.output or "") + (result.metadata.get("stderr") or "")


def prepare_build_dir(source_root: Path, runner: CommandRunner) -> Path:
    build_dir = source_root / "build"
    if runner.dry_run:
        runner.preview("Creating build directory", f"mkdir -p {build_dir}")
        return build_dir
    runner.report("info", "Creating build directory")
    try:
        build_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StepFailedError("Creating build directory", str(e)) from e
    return build_dir


def configure(build_dir: Path, plan: BuildPlan, runner: CommandRunner) -> StepResult:
    """Run ``cmake ..`` with the plan's flags.

    Raises:
        StepFailedError: CMake exited non-zero.
    """
    result = runner.run(
        ["cmake", ".."] + plan.cmake_args(),
        "Running CMake configuration",
        cwd=build_dir,
    )
    if result.failed:
        analysis = analyse_build_failure(_failure_text(result))
        err = StepFailedError("CMake configuration", result.error or "")
        if analysis:
            err.hints.append(f"{analysis['cause']}: {analysis['suggestion']}")
        raise err
    return result


def compile_sources(
    build_dir: Path, jobs: int, runner: CommandRunner, *, version: str = "",
) -> StepResult:
    """``make -jN``, then one ``make -j1`` retry if that fails.

    Raises:
        BuildFailureError: Both attempts failed.
    """
    runner.report("info", "Building GROMACS (this may take a while)...")
    runner.report(
        "warning",
        "Note: GCC version warnings and CMake policy warnings are normal and can be ignored",
    )

    result = runner.run(
        ["make", f"-j{jobs}"],
        f"Compiling GROMACS with {jobs} parallel jobs",
        cwd=build_dir,
    )
    if result.ok:
        return result

    runner.report("warning", "Parallel build failed, trying single-threaded build...")
    result = runner.run(
        ["make", "-j1"],
        "Compiling GROMACS with single thread",
        cwd=build_dir,
    )
    if result.ok:
        return result

    err = BuildFailureError(version, result.error or "")
    analysis = analyse_build_failure(_failure_text(result))
    if analysis:
        err.hints.insert(0, f"{analysis['cause']}: {analysis['suggestion']}")
    raise err


def run_tests(build_dir: Path, runner: CommandRunner) -> StepResult:
    """``make check``; a failure is only a warning."""
    runner.report("info", "Running GROMACS tests...")
    result = runner.run(["make", "check"], "Running available tests", cwd=build_dir)
    if result.failed:
        runner.report(
            "warning",
            "Some tests may have been skipped due to missing regression test data",
        )
    return result


def make_install(build_dir: Path, runner: CommandRunner) -> StepResult:
    """``make install`` as root.

    Raises:
        StepFailedError: The install step failed.
    """
    runner.report("info", "Installing GROMACS...")
    result = runner.run(
        ["make", "install"],
        "Installing GROMACS to system",
        cwd=build_dir,
        needs_sudo=True,
    )
    if result.failed:
        raise StepFailedError("Installing GROMACS", result.error or "")
    return result
