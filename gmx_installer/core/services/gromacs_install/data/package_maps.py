"""
L0 Data — Per-package-manager tables.

One ``PackageManagerSpec`` per supported manager: how to install,
whether the index needs refreshing first, which package provides
each build tool, and which packages provide FFTW.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from gmx_installer.core.models.environment import PackageManager


@dataclass(frozen=True)
class PackageManagerSpec:
    """Everything needed to drive one package manager."""

    manager: PackageManager
    install_command: tuple[str, ...]
    tool_packages: dict[str, str] = field(default_factory=dict)
    fftw_packages: tuple[str, ...] = ()
    refresh_command: tuple[str, ...] | None = None

    def package_for(self, tool: str) -> str | None:
        return self.tool_packages.get(tool)

    def install_argv(self, packages: list[str]) -> list[str]:
        return list(self.install_command) + list(packages)


PACKAGE_MANAGERS: dict[PackageManager, PackageManagerSpec] = {
    PackageManager.APT: PackageManagerSpec(
        manager=PackageManager.APT,
        install_command=("apt-get", "install", "-y"),
        refresh_command=("apt-get", "update"),
        tool_packages={
            "cmake": "cmake",
            "make": "build-essential",
            "gcc": "build-essential",
            "g++": "build-essential",
            "wget": "wget",
            "unzip": "unzip",
            "pkg-config": "pkg-config",
        },
        fftw_packages=("libfftw3-dev", "libfftw3-single3", "libfftw3-double3"),
    ),
    PackageManager.YUM: PackageManagerSpec(
        manager=PackageManager.YUM,
        install_command=("yum", "install", "-y"),
        tool_packages={
            "cmake": "cmake",
            "make": "make",
            "gcc": "gcc",
            "g++": "gcc-c++",
            "wget": "wget",
            "unzip": "unzip",
            "pkg-config": "pkgconfig",
        },
        fftw_packages=("fftw-devel",),
    ),
    PackageManager.DNF: PackageManagerSpec(
        manager=PackageManager.DNF,
        install_command=("dnf", "install", "-y"),
        tool_packages={
            "cmake": "cmake",
            "make": "make",
            "gcc": "gcc",
            "g++": "gcc-c++",
            "wget": "wget",
            "unzip": "unzip",
            "pkg-config": "pkgconf",
        },
        fftw_packages=("fftw-devel",),
    ),
    PackageManager.PACMAN: PackageManagerSpec(
        manager=PackageManager.PACMAN,
        install_command=("pacman", "-Sy", "--noconfirm"),
        tool_packages={
            "cmake": "cmake",
            "make": "base-devel",
            "gcc": "base-devel",
            "g++": "base-devel",
            "wget": "wget",
            "unzip": "unzip",
            "pkg-config": "pkgconf",
        },
        fftw_packages=("fftw",),
    ),
    PackageManager.ZYPPER: PackageManagerSpec(
        manager=PackageManager.ZYPPER,
        install_command=("zypper", "install", "-y"),
        tool_packages={
            "cmake": "cmake",
            "make": "make",
            "gcc": "gcc",
            "g++": "gcc-c++",
            "wget": "wget",
            "unzip": "unzip",
            "pkg-config": "pkg-config",
        },
        fftw_packages=("fftw3-devel",),
    ),
}
