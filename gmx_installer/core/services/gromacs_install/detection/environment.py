"""
L3 Detection — One-shot host snapshot.

``probe()`` is the only place that reads ambient host state; the
decision layer works from the returned ``ProbedEnvironment``.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from typing import TypeVar

from gmx_installer.core.config.settings import InstallerConfig
from gmx_installer.core.models.environment import (
    NumericLibraryStatus,
    PackageManager,
    ProbedEnvironment,
)
from gmx_installer.core.services.gromacs_install.data.constants import REQUIRED_TOOLS
from gmx_installer.core.services.gromacs_install.detection.fftw import detect_numeric_library
from gmx_installer.core.services.gromacs_install.detection.gromacs import get_installed_version
from gmx_installer.core.services.gromacs_install.detection.toolchain import (
    detect_available_tools,
    detect_cxx14_support,
    detect_gcc_major,
    detect_package_manager,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _safe(probe: Callable[[], T], fallback: T) -> T:
    try:
        return probe()
    except Exception as exc:  # a probe must never abort the run
        logger.warning("Probe %s failed: %s", getattr(probe, "__name__", probe), exc)
        return fallback


def probe(
    config: InstallerConfig | None = None,
    required_tools: list[str] | tuple[str, ...] = REQUIRED_TOOLS,
) -> ProbedEnvironment:
    """Capture package manager, tools, FFTW, GROMACS and CPU count.

    Never raises: each probe falls back to unknown/empty on failure.
    """
    config = config or InstallerConfig()

    env = ProbedEnvironment(
        package_manager=_safe(detect_package_manager, PackageManager.UNKNOWN),
        available_tools=_safe(lambda: detect_available_tools(required_tools), frozenset()),
        installed_version=_safe(get_installed_version, None),
        numeric_library=_safe(
            lambda: detect_numeric_library(config.fftw_header), NumericLibraryStatus(),
        ),
        gcc_major=_safe(detect_gcc_major, None),
        cxx14_supported=_safe(detect_cxx14_support, None),
        cpu_count=os.cpu_count(),
    )
    logger.debug("Probed environment: %s", env)
    return env


def refresh_tools(
    env: ProbedEnvironment,
    required_tools: list[str] | tuple[str, ...] = REQUIRED_TOOLS,
    config: InstallerConfig | None = None,
) -> ProbedEnvironment:
    """Re-probe tools, compiler and FFTW after packages were installed."""
    config = config or InstallerConfig()
    return env.model_copy(update={
        "available_tools": _safe(lambda: detect_available_tools(required_tools), frozenset()),
        "gcc_major": _safe(detect_gcc_major, None),
        "cxx14_supported": _safe(detect_cxx14_support, None),
        "numeric_library": _safe(
            lambda: detect_numeric_library(config.fftw_header), NumericLibraryStatus(),
        ),
    })
