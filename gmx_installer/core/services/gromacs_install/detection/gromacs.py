"""
L3 Detection — Installed GROMACS version.

Runs ``gmx --version`` and parses the ``GROMACS version:`` line.
"""

from __future__ import annotations

import logging
import shutil
import subprocess

logger = logging.getLogger(__name__)


def parse_gmx_version(output: str) -> str | None:
    """Third field of the first ``GROMACS version`` line.

    ``gmx --version`` prints e.g.::

        GROMACS version:    2023.3
    """
    for line in output.splitlines():
        if "GROMACS version" in line:
            fields = line.split()
            return fields[2] if len(fields) >= 3 else None
    return None


def get_installed_version() -> str | None:
    """Version of the ``gmx`` on PATH, or None if not installed."""
    if not shutil.which("gmx"):
        return None
    try:
        r = subprocess.run(
            ["gmx", "--version"],
            capture_output=True, text=True, timeout=30,
        )
    except (subprocess.TimeoutExpired, OSError) as exc:
        logger.warning("gmx --version failed: %s", exc)
        return None
    return parse_gmx_version(r.stdout)
