"""
L1 Domain — Build failure analysis (pure).

Parses output from a failed GROMACS configure/build for known error
patterns and suggests remediation. No I/O, no subprocess.
"""

from __future__ import annotations

import re


def analyse_build_failure(output: str) -> dict | None:
    """Analyse a build failure's output for common patterns.

    Args:
        output: Combined stdout+stderr of the failed command.

    Returns:
        ``{"cause": "...", "suggestion": "...", "confidence": "high|medium"}``
        or ``None`` if the error is unrecognized.
    """
    if not output:
        return None

    s = output.lower()

    # <limits> not pulled in: the scanner missed a file
    if "numeric_limits" in s and ("is not a member of" in s or "was not declared" in s):
        return {
            "cause": "std::numeric_limits used without #include <limits>",
            "suggestion": "Add '#include <limits>' to the file named in the error, "
                          "or use GROMACS 2022 or later",
            "confidence": "high",
        }

    # Missing header files
    if "fatal error:" in s and ".h" in s:
        m = re.search(r"fatal error:\s*(\S+\.h):\s*no such file", s)
        header = m.group(1) if m else "unknown"
        return {
            "cause": f"Missing header file: {header}",
            "suggestion": "Install the development package that provides the header",
            "confidence": "high",
        }

    # Out of memory (OOM during compilation)
    if "internal compiler error" in s and ("killed" in s or "virtual memory" in s):
        return {
            "cause": "Out of memory during compilation",
            "suggestion": "Lower max_build_jobs in gmx-install.yml",
            "confidence": "medium",
        }

    # CMake: FFTW or other package not found
    if "could not find" in s:
        m = re.search(r"could not find.*?package\s+(\S+)", s)
        pkg = m.group(1) if m else "a required package"
        return {
            "cause": f"CMake package not found: {pkg}",
            "suggestion": f"Install the development package for {pkg} or set CMAKE_PREFIX_PATH",
            "confidence": "medium",
        }

    # Compiler not found
    if "cc: not found" in s or "g++: not found" in s or "gcc: not found" in s:
        return {
            "cause": "C/C++ compiler not found",
            "suggestion": "Install gcc and g++ with your package manager",
            "confidence": "high",
        }

    return None
