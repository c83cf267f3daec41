"""
L3 Detection — Package manager, build tools and compiler.

Read-only probes.  Every function degrades to ``unknown`` / empty /
``None`` instead of raising.
"""

from __future__ import annotations

import logging
import shutil
import subprocess

from gmx_installer.core.models.environment import PackageManager
from gmx_installer.core.services.gromacs_install.data.constants import (
    PACKAGE_MANAGER_BINARIES,
    REQUIRED_TOOLS,
)

logger = logging.getLogger(__name__)


def detect_package_manager() -> PackageManager:
    """First supported package manager found on PATH.

    Probed in fixed priority order (apt, yum, dnf, pacman, zypper);
    hosts with several managers get the first one.
    """
    for pm_id, binary in PACKAGE_MANAGER_BINARIES:
        if shutil.which(binary):
            return PackageManager(pm_id)
    return PackageManager.UNKNOWN


def detect_available_tools(
    required: list[str] | tuple[str, ...] = REQUIRED_TOOLS,
) -> frozenset[str]:
    """Subset of ``required`` that is on PATH."""
    return frozenset(tool for tool in required if shutil.which(tool))


def detect_gcc_major() -> int | None:
    """Major version from ``gcc -dumpversion``, or None."""
    if not shutil.which("gcc"):
        return None
    try:
        r = subprocess.run(
            ["gcc", "-dumpversion"],
            capture_output=True, text=True, timeout=10,
        )
    except (subprocess.TimeoutExpired, OSError) as exc:
        logger.warning("gcc -dumpversion failed: %s", exc)
        return None

    head = r.stdout.strip().split(".", 1)[0]
    try:
        return int(head)
    except ValueError:
        return None


def detect_cxx14_support() -> bool | None:
    """Whether gcc accepts ``-std=c++14``.  None if gcc is absent."""
    if not shutil.which("gcc"):
        return None
    try:
        r = subprocess.run(
            ["gcc", "-std=c++14", "-x", "c++", "-E", "-"],
            input="", capture_output=True, text=True, timeout=30,
        )
    except (subprocess.TimeoutExpired, OSError) as exc:
        logger.warning("C++14 probe failed: %s", exc)
        return None
    return r.returncode == 0
