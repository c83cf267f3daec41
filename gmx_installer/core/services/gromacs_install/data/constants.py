"""
L0 Data — Module-level constants.

Pure data. No logic. No imports beyond stdlib.
"""

from __future__ import annotations

# Tools that must be on PATH before a source build can start.
REQUIRED_TOOLS: tuple[str, ...] = (
    "cmake",
    "make",
    "gcc",
    "g++",
    "wget",
    "unzip",
    "pkg-config",
)

# Package manager probe order; the first binary found on PATH wins.
PACKAGE_MANAGER_BINARIES: tuple[tuple[str, str], ...] = (
    ("apt", "apt-get"),
    ("yum", "yum"),
    ("dnf", "dnf"),
    ("pacman", "pacman"),
    ("zypper", "zypper"),
)

# GitHub tag archives unpack to ``gromacs-<version>/``.
ARCHIVE_NAME = "gromacs-v{version}.zip"
EXTRACTED_DIR_NAME = "gromacs-{version}"

# Source patching.
PATCH_EXTENSIONS: tuple[str, ...] = (".cpp", ".h", ".hpp")
PATCH_INCLUDE_LINE = "#include <limits>"
BACKUP_SUFFIX = ".bak"

# Lines in shell rc files containing any of these belong to us.
RC_CLEAN_MARKERS: tuple[str, ...] = ("gromacs", "GMXRC")

# Fixed CMake cache flags, applied on every build.
BASE_CMAKE_FLAGS: tuple[tuple[str, str], ...] = (
    ("REGRESSIONTEST_DOWNLOAD", "OFF"),
)
SUFFIX_CMAKE_FLAGS: tuple[tuple[str, str], ...] = (
    ("GMX_DEFAULT_SUFFIX", "OFF"),
    ("GMX_BINARY_SUFFIX", ""),
    ("GMX_LIBS_SUFFIX", ""),
)
CMAKE_EXTRA_ARGS: tuple[str, ...] = ("-Wno-dev",)
