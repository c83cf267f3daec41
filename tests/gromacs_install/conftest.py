"""
Fixtures for the GROMACS install service — simulated hosts.

``make_env`` builds a ``ProbedEnvironment`` for a well-equipped apt
host; override any field to simulate something else.
"""

from __future__ import annotations

import pytest

from gmx_installer.core.models.environment import (
    NumericLibraryStatus,
    PackageManager,
    ProbedEnvironment,
)
from gmx_installer.core.services.gromacs_install.data.constants import REQUIRED_TOOLS

FULL_FFTW = NumericLibraryStatus(single_precision=True, double_precision=True, headers=True)
NO_FFTW = NumericLibraryStatus()


def _make_env(
    *,
    pm: PackageManager = PackageManager.APT,
    tools: tuple[str, ...] | None = None,
    installed: str | None = None,
    fftw: NumericLibraryStatus = FULL_FFTW,
    gcc: int | None = 12,
    cxx14: bool | None = True,
    cpus: int | None = 8,
) -> ProbedEnvironment:
    return ProbedEnvironment(
        package_manager=pm,
        available_tools=frozenset(REQUIRED_TOOLS if tools is None else tools),
        installed_version=installed,
        numeric_library=fftw,
        gcc_major=gcc,
        cxx14_supported=cxx14,
        cpu_count=cpus,
    )


@pytest.fixture
def make_env():
    return _make_env
