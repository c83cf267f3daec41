"""
L5 Orchestration — Top-level install flow.

Ties everything together: probe the host, make the pure decisions,
run the effectful steps in order, fail fast.  One run walks:

    start → tools_checked → compiler_checked → version_reconciled
          → skipped
          | downloaded → patched → configured → built → tested
            → installed → environment_configured

Completed steps are never rolled back.  The download directory is
removed on the way out, whatever happened.
"""

from __future__ import annotations

import logging
from pathlib import Path

from gmx_installer.core.config.settings import InstallerConfig
from gmx_installer.core.models.environment import ProbedEnvironment
from gmx_installer.core.models.plan import (
    FftwStrategy,
    ReconciliationDecision,
    RequestedInstall,
)
from gmx_installer.core.models.result import InstallResult, InstallStage
from gmx_installer.core.services.gromacs_install.data.constants import REQUIRED_TOOLS
from gmx_installer.core.services.gromacs_install.detection.environment import (
    probe,
    refresh_tools,
)
from gmx_installer.core.services.gromacs_install.domain.build_plan import (
    build_jobs,
    compose,
    compose_initial,
    resolve_strategy,
)
from gmx_installer.core.services.gromacs_install.domain.compiler_compat import compiler_advice
from gmx_installer.core.services.gromacs_install.domain.errors import (
    DependencyInstallError,
    PostconditionError,
    UnknownPackageManagerError,
)
from gmx_installer.core.services.gromacs_install.domain.versions import reconcile
from gmx_installer.core.services.gromacs_install.execution.build import (
    compile_sources,
    configure,
    make_install,
    prepare_build_dir,
    run_tests,
)
from gmx_installer.core.services.gromacs_install.execution.packages import install_packages
from gmx_installer.core.services.gromacs_install.execution.patching import (
    apply_compatibility_patches,
)
from gmx_installer.core.services.gromacs_install.execution.runner import (
    CommandRunner,
    ProgressCallback,
)
from gmx_installer.core.services.gromacs_install.execution.shell_config import (
    ensure_source_line,
    remove_existing_install,
)
from gmx_installer.core.services.gromacs_install.execution.source import (
    cleanup_download_dir,
    fetch_source,
    remove_download_dir,
)
from gmx_installer.core.services.gromacs_install.resolver.dependencies import (
    resolve,
    resolve_numeric_library,
)

logger = logging.getLogger(__name__)


def ensure_build_tools(
    env: ProbedEnvironment,
    runner: CommandRunner,
    config: InstallerConfig | None = None,
) -> ProbedEnvironment:
    """Install missing build tools through the system package manager.

    Returns:
        The environment, re-probed if anything was installed.

    Raises:
        UnknownPackageManagerError: Tools missing, no package manager
            (preview mode only reports it).
        DependencyInstallError: The package install failed.
    """
    runner.report("info", "Checking build tools and dependencies...")
    missing = env.missing_tools(REQUIRED_TOOLS)
    if not missing:
        runner.report("success", "All build tools are available")
        return env

    runner.report("warning", f"Missing build tools: {' '.join(missing)}")
    try:
        spec = resolve(env, REQUIRED_TOOLS)
    except UnknownPackageManagerError as exc:
        if not runner.dry_run:
            raise
        runner.report("error", str(exc))
        return env

    if spec is None:
        return env
    runner.report(
        "info", f"Installing missing build tools using {spec.package_manager.value}...",
    )
    result = install_packages(spec, runner)
    if result.failed:
        raise DependencyInstallError(spec.packages, result.error or "")

    if runner.dry_run:
        return env
    runner.report("success", "Build tools installed successfully")
    return refresh_tools(env, REQUIRED_TOOLS, config)


def report_compiler(env: ProbedEnvironment, version: str, runner: CommandRunner) -> None:
    runner.report("info", "Checking compiler compatibility...")
    for advice in compiler_advice(
        env.gcc_major, version, cxx14_supported=env.cxx14_supported,
    ):
        runner.report(advice.level, advice.message)


def resolve_fftw(env: ProbedEnvironment, runner: CommandRunner) -> FftwStrategy:
    """Run the two-phase FFTW decision, installing packages in between."""
    initial = compose_initial(env.numeric_library)
    if initial is FftwStrategy.USE_SYSTEM:
        runner.report("info", "Using system FFTW library (both precisions and headers available)")
        return initial

    missing = " ".join(env.numeric_library.missing())
    runner.report(
        "warning", f"System FFTW library incomplete (missing: {missing}). Attempting to install...",
    )
    runner.report("info", "Installing FFTW3 dependencies...")

    installed = False
    try:
        spec = resolve_numeric_library(env)
    except UnknownPackageManagerError as exc:
        runner.report("error", str(exc))
    else:
        result = install_packages(spec, runner)
        installed = result.ok
        if result.failed:
            runner.report("warning", str(DependencyInstallError(spec.packages, result.error or "")))

    strategy = resolve_strategy(initial, installed)
    if strategy is FftwStrategy.USE_SYSTEM:
        runner.report("info", "FFTW installed successfully, using system FFTW")
    else:
        runner.report("warning", "Could not install system FFTW, building own FFTW library")
    return strategy


def _patch_sources(source_root: Path, runner: CommandRunner) -> list[Path]:
    runner.report("info", "Applying compatibility patches for newer compilers...")
    if runner.dry_run and not source_root.is_dir():
        runner.preview(f"Would apply compatibility patches in {source_root}")
        return []
    return apply_compatibility_patches(source_root, runner)


def install_gromacs(
    request: RequestedInstall,
    config: InstallerConfig | None = None,
    *,
    on_progress: ProgressCallback | None = None,
    stream_output: bool = False,
) -> InstallResult:
    """Install GROMACS ``request.version`` from source.

    Args:
        request: Version and preview flag from the CLI.
        config: Installer settings (defaults if omitted).
        on_progress: Optional callback ``(level, message)`` for
            user-facing progress lines.
        stream_output: Also pass command output to ``on_progress``
            (level ``output``) line by line while it runs.

    Returns:
        ``InstallResult`` describing the decisions taken and the stage
        reached.  In preview mode every effectful step is rendered
        instead of performed.

    Raises:
        InstallerError: Any unrecoverable failure (never in preview mode
            for failures of effectful steps, since none are run).
    """
    config = config or InstallerConfig()
    version = request.version
    runner = CommandRunner(
        dry_run=request.preview_only,
        use_sudo=config.use_sudo,
        on_progress=on_progress,
        stream_output=stream_output,
    )
    result = InstallResult(version=version, preview=request.preview_only)

    runner.report("info", f"Starting GROMACS {version} installation process...")
    try:
        env = probe(config)

        env = ensure_build_tools(env, runner, config)
        result.stage = InstallStage.TOOLS_CHECKED

        report_compiler(env, version, runner)
        result.stage = InstallStage.COMPILER_CHECKED

        decision = reconcile(env.installed_version, version)
        result.decision = decision
        result.installed_version = env.installed_version
        logger.debug(
            "Reconciled installed=%s requested=%s: %s",
            env.installed_version, version, decision.value,
        )
        result.stage = InstallStage.VERSION_RECONCILED

        if decision is ReconciliationDecision.SKIP:
            runner.report("info", f"Found existing GROMACS installation: version {env.installed_version}")
            runner.report(
                "success",
                f"GROMACS version {version} is already installed "
                f"(found: {env.installed_version}). Nothing to do.",
            )
            result.stage = InstallStage.SKIPPED
            return result

        if decision is ReconciliationDecision.REPLACE_THEN_INSTALL:
            runner.report("info", f"Found existing GROMACS installation: version {env.installed_version}")
            runner.report(
                "warning",
                f"Different version ({env.installed_version}) is installed. "
                f"Will remove and install {version}",
            )
            remove_existing_install(config, runner)
        else:
            runner.report("info", "No existing GROMACS installation found")

        source_root = fetch_source(config, version, runner)
        result.stage = InstallStage.DOWNLOADED

        result.patched_files = [str(p) for p in _patch_sources(source_root, runner)]
        result.stage = InstallStage.PATCHED

        build_dir = prepare_build_dir(source_root, runner)
        runner.report("info", "Configuring GROMACS build with CMake...")
        strategy = resolve_fftw(env, runner)
        result.fftw_strategy = strategy
        logger.debug("FFTW strategy: %s", strategy.value)
        plan = compose(
            strategy,
            install_dir=config.install_dir,
            extra_flags=config.extra_cmake_flags,
        )
        configure(build_dir, plan, runner)
        result.stage = InstallStage.CONFIGURED

        jobs = build_jobs(env.cpu_count, cap=config.max_build_jobs)
        compile_sources(build_dir, jobs, runner, version=version)
        result.stage = InstallStage.BUILT

        if config.run_tests:
            run_tests(build_dir, runner)
        result.stage = InstallStage.TESTED

        make_install(build_dir, runner)
        result.stage = InstallStage.INSTALLED

        cleanup_download_dir(config, runner)

        if runner.dry_run:
            runner.report(
                "success",
                f"Dry run completed. Use without --dry-run to actually install GROMACS {version}",
            )
            return result

        gmxrc = config.gmxrc_path
        if not gmxrc.is_file():
            raise PostconditionError(
                f"Installation completed but GMXRC file not found at expected location ({gmxrc})",
            )
        runner.report("success", f"GROMACS {version} installed successfully!")

        ensure_source_line(config.rc_file_path(), gmxrc, runner)
        result.stage = InstallStage.ENVIRONMENT_CONFIGURED
        runner.report("success", "Installation complete! GROMACS is ready to use.")
        runner.report(
            "info",
            f"Run 'source {gmxrc}' to use it in this shell; new shells pick it up "
            f"from {config.rc_file_path()}.",
        )
        return result
    finally:
        result.steps = list(runner.history)
        if not runner.dry_run:
            remove_download_dir(config.download_dir)
