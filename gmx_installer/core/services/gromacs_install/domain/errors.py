"""
L1 Domain — Installer error taxonomy.

Raised by the resolver and orchestration layers, caught once by the
CLI which prints the message and hints and exits with ``exit_code``.
"""

from __future__ import annotations


class InstallerError(Exception):
    """Base class for every unrecoverable installer failure."""

    exit_code: int = 1

    def __init__(self, message: str, *, hints: list[str] | None = None) -> None:
        super().__init__(message)
        self.hints: list[str] = list(hints or [])


class UnsupportedEnvironmentError(InstallerError):
    """The host can't be driven (no recognised package manager, etc.)."""


class UnknownPackageManagerError(UnsupportedEnvironmentError):
    """Packages are needed but no supported package manager was detected."""

    def __init__(self, packages_for: list[str]) -> None:
        self.packages_for = list(packages_for)
        super().__init__(
            "Could not detect package manager. Please install manually: "
            + " ".join(self.packages_for),
        )


class DependencyInstallError(InstallerError):
    """The package manager exited non-zero."""

    def __init__(self, packages: list[str], detail: str = "") -> None:
        self.packages = list(packages)
        msg = f"Failed to install packages: {' '.join(self.packages)}"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)


class StepFailedError(InstallerError):
    """A download, extract or configure step failed.  Never retried."""

    def __init__(self, step: str, detail: str = "") -> None:
        self.step = step
        super().__init__(f"{step} failed" + (f": {detail}" if detail else ""))


class BuildFailureError(InstallerError):
    """Compilation failed, including the single-job retry."""

    def __init__(self, version: str, detail: str = "") -> None:
        super().__init__(
            "Build failed. This is likely due to a fatal compilation error, "
            "not warnings." + (f" ({detail})" if detail else ""),
            hints=[
                "Try a newer GROMACS version (2022 or later)",
                "Use a different GCC version",
                "Check if all dependencies are properly installed",
            ],
        )
        self.version = version


class PostconditionError(InstallerError):
    """Install reported success but the expected artifact is missing."""
