"""
End-to-end install flow with a simulated host.

``probe`` is patched to return a canned environment and
``CommandRunner.run`` is replaced by ``FakeHost``, which records every
command and simulates what unzip and ``make install`` leave on disk.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from gmx_installer.core.models.environment import NumericLibraryStatus, PackageManager
from gmx_installer.core.models.plan import (
    FftwStrategy,
    ReconciliationDecision,
    RequestedInstall,
)
from gmx_installer.core.models.result import InstallStage, StepResult
from gmx_installer.core.services.gromacs_install.domain.errors import (
    BuildFailureError,
    DependencyInstallError,
    PostconditionError,
    UnknownPackageManagerError,
)
from gmx_installer.core.services.gromacs_install.execution.runner import CommandRunner
from gmx_installer.core.services.gromacs_install.orchestration.orchestrator import (
    ensure_build_tools,
    install_gromacs,
)

_ORCH = "gmx_installer.core.services.gromacs_install.orchestration.orchestrator"

NEEDS_PATCH = "#include <vector>\nint m = std::numeric_limits<int>::max();\n"
COMPLETE_FFTW = NumericLibraryStatus(single_precision=True, double_precision=True, headers=True)


class FakeHost:
    """Stand-in for ``CommandRunner.run``.

    Args:
        config: The installer config (for the download and install dirs).
        version: Version being installed (names the extracted dir).
        fail: Command prefixes (space-joined) that should fail.
        installs_gmxrc: Whether ``make install`` drops bin/GMXRC.
    """

    def __init__(self, config, version, *, fail=(), installs_gmxrc=True):
        self.config = config
        self.version = version
        self.fail = tuple(fail)
        self.installs_gmxrc = installs_gmxrc
        self.commands: list[list[str]] = []

    def __call__(self, runner, cmd, description, *, cwd=None, needs_sudo=False, timeout=None):
        self.commands.append(list(cmd))
        joined = " ".join(cmd)
        if any(joined.startswith(prefix) for prefix in self.fail):
            result = StepResult.failure(description, "Command failed (exit 1)", command=cmd)
        else:
            self._side_effects(cmd)
            result = StepResult.success(description, command=cmd)
        runner.history.append(result)
        return result

    def _side_effects(self, cmd: list[str]) -> None:
        if cmd[0] == "unzip":
            src = self.config.download_dir / f"gromacs-{self.version}" / "src"
            src.mkdir(parents=True)
            (src / "gmxlib.cpp").write_text(NEEDS_PATCH)
        elif cmd == ["make", "install"] and self.installs_gmxrc:
            gmxrc = self.config.gmxrc_path
            gmxrc.parent.mkdir(parents=True, exist_ok=True)
            gmxrc.write_text("# GMXRC\n")

    def ran(self, *prefix: str) -> bool:
        return any(c[: len(prefix)] == list(prefix) for c in self.commands)

    def cmake_args(self) -> list[str]:
        return next(c for c in self.commands if c[0] == "cmake")


@pytest.fixture
def run_install(install_config, progress):
    """Run ``install_gromacs`` against a simulated host; returns (result, host)."""

    def _run(
        env, version="2023.3", *, preview=False, config=None, fftw_after_tools=None,
        **host_kwargs,
    ):
        cfg = config or install_config
        host = FakeHost(cfg, version, **host_kwargs)
        request = RequestedInstall(version=version, preview_only=preview)
        with patch(f"{_ORCH}.probe", return_value=env), \
             patch(f"{_ORCH}.refresh_tools", side_effect=lambda e, *a, **kw: e.model_copy(
                 update={"available_tools": frozenset(e.available_tools) | {
                     "cmake", "make", "gcc", "g++", "wget", "unzip", "pkg-config"},
                     "numeric_library": fftw_after_tools or e.numeric_library})), \
             patch.object(CommandRunner, "run", autospec=True, side_effect=host):
            result = install_gromacs(request, cfg, on_progress=progress)
        return result, host

    return _run


class TestCleanInstall:
    def test_full_flow_with_system_fftw(self, run_install, install_config, make_env) -> None:
        result, host = run_install(make_env())

        assert result.decision is ReconciliationDecision.CLEAN_INSTALL
        assert result.fftw_strategy is FftwStrategy.USE_SYSTEM
        assert result.stage is InstallStage.ENVIRONMENT_CONFIGURED
        assert not host.ran("apt-get")
        assert "-DGMX_BUILD_OWN_FFTW=OFF" in host.cmake_args()
        assert f"-DCMAKE_INSTALL_PREFIX={install_config.install_dir}" in host.cmake_args()
        assert host.ran("make", "check")
        assert host.ran("make", "install")

        rc = install_config.rc_file_path().read_text()
        assert f"source {install_config.gmxrc_path}" in rc
        assert not install_config.download_dir.exists()

    def test_patches_sources(self, run_install, make_env) -> None:
        result, _ = run_install(make_env())
        assert [Path(p).name for p in result.patched_files] == ["gmxlib.cpp"]

    def test_build_jobs_capped(self, run_install, make_env) -> None:
        _, host = run_install(make_env(cpus=64))
        assert host.ran("make", "-j4")

    def test_tests_can_be_disabled(self, run_install, install_config, make_env) -> None:
        cfg = install_config.model_copy(update={"run_tests": False})
        result, host = run_install(make_env(), config=cfg)
        assert not host.ran("make", "check")
        assert result.stage is InstallStage.ENVIRONMENT_CONFIGURED

    def test_failing_tests_tolerated(self, run_install, make_env) -> None:
        result, _ = run_install(make_env(), fail=("make check",))
        assert result.stage is InstallStage.ENVIRONMENT_CONFIGURED

    def test_steps_recorded(self, run_install, make_env) -> None:
        result, host = run_install(make_env())
        assert [s.command for s in result.steps] == host.commands


class TestReconciliation:
    def test_same_version_skips(self, run_install, install_config, make_env) -> None:
        result, host = run_install(make_env(installed="2020"), version="2020")

        assert result.decision is ReconciliationDecision.SKIP
        assert result.stage is InstallStage.SKIPPED
        assert host.commands == []
        assert not install_config.rc_file_path().exists()

    def test_replace_removes_old_install(self, run_install, install_config, make_env) -> None:
        install_config.install_dir.mkdir()
        rc = install_config.rc_file_path()
        rc.write_text(f"alias ll='ls -l'\nsource {install_config.gmxrc_path}\n")

        result, host = run_install(make_env(installed="2019.6"))

        assert result.decision is ReconciliationDecision.REPLACE_THEN_INSTALL
        assert host.commands[0] == ["rm", "-rf", str(install_config.install_dir)]
        assert rc.read_text().count("GMXRC") == 1
        assert rc.with_name(".bashrc.bak").exists()


class TestDependencies:
    def test_missing_tools_installed(self, run_install, make_env) -> None:
        _, host = run_install(make_env(tools=("make", "gcc", "g++", "wget", "unzip")))
        assert ["apt-get", "install", "-y", "cmake", "pkg-config"] in host.commands

    def test_fftw_pulled_in_with_tools_is_used(self, run_install, make_env) -> None:
        env = make_env(tools=("make",), fftw=NumericLibraryStatus())
        result, host = run_install(env, fftw_after_tools=COMPLETE_FFTW)

        assert result.fftw_strategy is FftwStrategy.USE_SYSTEM
        assert not host.ran("apt-get", "install", "-y", "libfftw3-dev")

    def test_refresh_gets_config(self, install_config, progress, make_env) -> None:
        env = make_env(tools=("make",))
        runner = CommandRunner(on_progress=progress)
        with patch(f"{_ORCH}.install_packages", return_value=StepResult.success("apt")), \
             patch(f"{_ORCH}.refresh_tools", return_value=env) as refresh:
            ensure_build_tools(env, runner, install_config)
        assert refresh.call_args.args[2] is install_config

    def test_nothing_resolved_installs_nothing(self, progress, make_env) -> None:
        env = make_env(tools=("make",))
        runner = CommandRunner(on_progress=progress)
        with patch(f"{_ORCH}.resolve", return_value=None), \
             patch(f"{_ORCH}.install_packages") as install:
            assert ensure_build_tools(env, runner) is env
        install.assert_not_called()

    def test_tool_install_failure_is_fatal(self, run_install, install_config, make_env) -> None:
        with pytest.raises(DependencyInstallError):
            run_install(make_env(tools=("make",)), fail=("apt-get install",))
        assert not install_config.download_dir.exists()

    def test_unknown_package_manager(self, run_install, make_env) -> None:
        env = make_env(pm=PackageManager.UNKNOWN, tools=("make",))
        with pytest.raises(UnknownPackageManagerError):
            run_install(env)

    def test_fftw_installed_from_packages(self, run_install, make_env) -> None:
        result, host = run_install(make_env(fftw=NumericLibraryStatus()))
        assert result.fftw_strategy is FftwStrategy.USE_SYSTEM
        assert host.ran("apt-get", "install", "-y", "libfftw3-dev")

    def test_fftw_install_failure_builds_own(self, run_install, progress, make_env) -> None:
        env = make_env(fftw=NumericLibraryStatus(single_precision=True))
        result, host = run_install(env, fail=("apt-get install",))

        assert result.fftw_strategy is FftwStrategy.BUILD_OWN
        assert "-DGMX_BUILD_OWN_FFTW=ON" in host.cmake_args()
        assert result.stage is InstallStage.ENVIRONMENT_CONFIGURED
        assert "Could not install system FFTW, building own FFTW library" in progress.messages("warning")

    def test_fftw_without_package_manager_builds_own(self, run_install, make_env) -> None:
        env = make_env(pm=PackageManager.UNKNOWN, fftw=NumericLibraryStatus())
        result, host = run_install(env)
        assert result.fftw_strategy is FftwStrategy.BUILD_OWN
        assert not host.ran("apt-get")


class TestFailures:
    def test_build_fails_after_retry(self, run_install, install_config, make_env) -> None:
        with pytest.raises(BuildFailureError):
            run_install(make_env(), fail=("make -j",))
        assert not install_config.download_dir.exists()

    def test_configure_failure(self, run_install, make_env) -> None:
        from gmx_installer.core.services.gromacs_install.domain.errors import StepFailedError

        with pytest.raises(StepFailedError, match="CMake configuration"):
            run_install(make_env(), fail=("cmake",))

    def test_missing_gmxrc(self, run_install, install_config, make_env) -> None:
        with pytest.raises(PostconditionError):
            run_install(make_env(), installs_gmxrc=False)
        assert not install_config.rc_file_path().exists()


class TestPreview:
    def test_nothing_is_touched(self, install_config, progress, make_env) -> None:
        env = make_env(installed="2019.6", tools=("make",), fftw=NumericLibraryStatus())
        install_config.install_dir.mkdir()
        request = RequestedInstall(version="2023.3", preview_only=True)

        with patch(f"{_ORCH}.probe", return_value=env), \
             patch("gmx_installer.core.services.gromacs_install.execution.runner.subprocess.run") as mock_run:
            result = install_gromacs(request, install_config, on_progress=progress)

        mock_run.assert_not_called()
        assert result.preview
        assert result.stage is InstallStage.INSTALLED
        assert all(s.status == "previewed" for s in result.steps if s.command)
        assert install_config.install_dir.is_dir()
        assert not install_config.download_dir.exists()
        assert not install_config.rc_file_path().exists()
        assert any(
            m.startswith("Would apply compatibility patches in")
            for m in progress.messages("dry_run")
        )

    def test_unknown_package_manager_does_not_raise(self, install_config, progress, make_env) -> None:
        env = make_env(pm=PackageManager.UNKNOWN, tools=())
        request = RequestedInstall(version="2023.3", preview_only=True)

        with patch(f"{_ORCH}.probe", return_value=env), \
             patch("gmx_installer.core.services.gromacs_install.execution.runner.subprocess.run"):
            result = install_gromacs(request, install_config, on_progress=progress)

        assert result.stage is InstallStage.INSTALLED
        assert any("Could not detect package manager" in m for m in progress.messages("error"))
