"""
Probed environment model — a snapshot of the host taken once per run.

Built by the detection layer and handed, read-only, to every decision
function.  Nothing in here performs I/O.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class PackageManager(str, Enum):
    """Package managers the installer knows how to drive."""

    APT = "apt"
    YUM = "yum"
    DNF = "dnf"
    PACMAN = "pacman"
    ZYPPER = "zypper"
    UNKNOWN = "unknown"


class NumericLibraryStatus(BaseModel):
    """Presence of the FFTW pieces GROMACS links against."""

    model_config = ConfigDict(frozen=True)

    single_precision: bool = False   # libfftw3f
    double_precision: bool = False   # libfftw3
    headers: bool = False            # fftw3.h

    @property
    def complete(self) -> bool:
        """Both precision variants and the headers are all present."""
        return self.single_precision and self.double_precision and self.headers

    def missing(self) -> list[str]:
        """Human-readable names of the absent parts."""
        names = []
        if not self.single_precision:
            names.append("libfftw3f")
        if not self.double_precision:
            names.append("libfftw3")
        if not self.headers:
            names.append("headers")
        return names


class ProbedEnvironment(BaseModel):
    """Everything the decision layer needs to know about the host."""

    model_config = ConfigDict(frozen=True)

    package_manager: PackageManager = PackageManager.UNKNOWN
    available_tools: frozenset[str] = Field(default_factory=frozenset)
    installed_version: str | None = None
    numeric_library: NumericLibraryStatus = Field(default_factory=NumericLibraryStatus)
    gcc_major: int | None = None
    cxx14_supported: bool | None = None
    cpu_count: int | None = None

    def missing_tools(self, required: list[str] | tuple[str, ...]) -> list[str]:
        """Required tools not found on PATH, in the order they were asked for."""
        return [t for t in required if t not in self.available_tools]
