"""
Plan models — the decisions produced for a single install run.

Requests come in from the CLI; reconciliation, FFTW strategy, patch
candidates and the CMake plan are computed by pure domain functions.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gmx_installer.core.models.environment import PackageManager


class RequestedInstall(BaseModel):
    """What the user asked for on the command line."""

    version: str
    preview_only: bool = False

    @field_validator("version")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("version must not be empty")
        return v


class ReconciliationDecision(str, Enum):
    """Outcome of comparing the requested version to the installed one."""

    SKIP = "skip"
    CLEAN_INSTALL = "clean_install"
    REPLACE_THEN_INSTALL = "replace_then_install"


class FftwStrategy(str, Enum):
    """How GROMACS gets its FFTW library."""

    USE_SYSTEM = "use_system"
    ATTEMPT_INSTALL_THEN_USE_SYSTEM = "attempt_install_then_use_system"
    BUILD_OWN = "build_own"


class PatchCandidate(BaseModel):
    """A scanned source file and whether it needs ``#include <limits>``."""

    model_config = ConfigDict(frozen=True)

    path: Path
    needs_header: bool = False


class BuildPlan(BaseModel):
    """Ordered CMake cache flags plus bare extra arguments."""

    model_config = ConfigDict(frozen=True)

    flags: tuple[tuple[str, str], ...] = ()
    extra_args: tuple[str, ...] = ()

    def get(self, key: str) -> str | None:
        """Value of a cache flag, or None if the plan doesn't set it."""
        for k, v in self.flags:
            if k == key:
                return v
        return None

    @property
    def builds_own_fftw(self) -> bool:
        return self.get("GMX_BUILD_OWN_FFTW") == "ON"

    def cmake_args(self) -> list[str]:
        """Render as ``-DKEY=VALUE`` tokens followed by the extra args."""
        return [f"-D{k}={v}" for k, v in self.flags] + list(self.extra_args)


class InstallCommandSpec(BaseModel):
    """A package-manager invocation, resolved but not executed."""

    package_manager: PackageManager
    packages: list[str] = Field(default_factory=list)
    command: list[str] = Field(default_factory=list)
    refresh_command: list[str] | None = None
