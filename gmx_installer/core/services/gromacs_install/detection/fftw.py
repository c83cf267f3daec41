"""
L3 Detection — FFTW library completeness.

Single precision (``libfftw3f``) and double precision (``libfftw3``)
come from the linker cache; headers from the include dir or pkg-config.
"""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
from pathlib import Path

from gmx_installer.core.models.environment import NumericLibraryStatus

logger = logging.getLogger(__name__)

_SINGLE = re.compile(r"libfftw3f")
_DOUBLE = re.compile(r"libfftw3[^f]")


def _ldconfig_cache() -> str:
    """Output of ``ldconfig -p``, or '' if it can't be read."""
    binary = shutil.which("ldconfig") or "/sbin/ldconfig"
    try:
        r = subprocess.run(
            [binary, "-p"],
            capture_output=True, text=True, timeout=15,
        )
        return r.stdout
    except (subprocess.TimeoutExpired, OSError) as exc:
        logger.warning("ldconfig -p failed: %s", exc)
        return ""


def _pkg_config_has_fftw() -> bool:
    if not shutil.which("pkg-config"):
        return False
    try:
        r = subprocess.run(
            ["pkg-config", "--exists", "fftw3"],
            capture_output=True, timeout=10,
        )
        return r.returncode == 0
    except (subprocess.TimeoutExpired, OSError) as exc:
        logger.warning("pkg-config --exists fftw3 failed: %s", exc)
        return False


def parse_ldconfig(output: str) -> tuple[bool, bool]:
    """``(single_precision, double_precision)`` from ``ldconfig -p`` text."""
    return bool(_SINGLE.search(output)), bool(_DOUBLE.search(output))


def detect_numeric_library(header: Path | str = "/usr/include/fftw3.h") -> NumericLibraryStatus:
    """Probe which FFTW pieces are installed."""
    single, double = parse_ldconfig(_ldconfig_cache())
    headers = Path(header).is_file() or _pkg_config_has_fftw()
    return NumericLibraryStatus(
        single_precision=single,
        double_precision=double,
        headers=headers,
    )
