"""
Installer settings — the explicit context passed to every component.

Defaults reproduce a plain ``/usr/local/gromacs`` install.  Any field
can be overridden from ``gmx-install.yml`` (see ``loader.py``).
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_INSTALL_DIR = "/usr/local/gromacs"
DEFAULT_DOWNLOAD_DIR = "/tmp/gromacs-install"
DEFAULT_SOURCE_URL = "https://github.com/gromacs/gromacs/archive/refs/tags/v{version}.zip"
DEFAULT_FFTW_HEADER = "/usr/include/fftw3.h"

# Relative to the install dir; sourced to set up the GROMACS environment.
GMXRC_RELATIVE = "bin/GMXRC"

# Parallel make is capped to keep memory use sane on big hosts.
MAX_BUILD_JOBS = 4

# Files scanned when an old GROMACS install is removed.
SHELL_CONFIG_FILES: tuple[str, ...] = (
    "~/.bashrc",
    "~/.bash_profile",
    "~/.zshrc",
    "~/.profile",
)

# The rc file that receives the ``source .../GMXRC`` line.
DEFAULT_RC_FILE = "~/.bashrc"


class InstallerConfig(BaseModel):
    """Where to download, build and install, and how."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    install_dir: Path = Path(DEFAULT_INSTALL_DIR)
    download_dir: Path = Path(DEFAULT_DOWNLOAD_DIR)
    source_url: str = DEFAULT_SOURCE_URL
    max_build_jobs: int = Field(default=MAX_BUILD_JOBS, ge=1)
    run_tests: bool = True
    use_sudo: bool = True
    shell_rc_file: str = DEFAULT_RC_FILE
    shell_config_files: list[str] = Field(default_factory=lambda: list(SHELL_CONFIG_FILES))
    fftw_header: Path = Path(DEFAULT_FFTW_HEADER)
    extra_cmake_flags: dict[str, str] = Field(default_factory=dict)

    @field_validator("source_url")
    @classmethod
    def _has_version_placeholder(cls, v: str) -> str:
        if "{version}" not in v:
            raise ValueError("source_url must contain a '{version}' placeholder")
        return v

    @property
    def gmxrc_path(self) -> Path:
        """The environment script ``make install`` drops into the prefix."""
        return self.install_dir / GMXRC_RELATIVE

    def source_url_for(self, version: str) -> str:
        return self.source_url.replace("{version}", version)

    def rc_file_path(self) -> Path:
        return Path(self.shell_rc_file).expanduser()

    def shell_config_paths(self) -> list[Path]:
        return [Path(p).expanduser() for p in self.shell_config_files]
