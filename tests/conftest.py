"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from gmx_installer.core.config.settings import InstallerConfig


class ProgressRecorder:
    """``on_progress`` callback that keeps every ``(level, message)``."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str]] = []

    def __call__(self, level: str, message: str) -> None:
        self.events.append((level, message))

    def messages(self, level: str | None = None) -> list[str]:
        return [m for lv, m in self.events if level is None or lv == level]

    def text(self) -> str:
        return "\n".join(self.messages())


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def home_dir(tmp_path: Path) -> Path:
    """A fake home directory for shell rc files."""
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def install_config(tmp_path: Path, home_dir: Path) -> InstallerConfig:
    """Config with every path inside tmp_path and sudo disabled."""
    return InstallerConfig(
        install_dir=tmp_path / "gromacs",
        download_dir=tmp_path / "download",
        use_sudo=False,
        shell_rc_file=str(home_dir / ".bashrc"),
        shell_config_files=[str(home_dir / ".bashrc"), str(home_dir / ".zshrc")],
        fftw_header=tmp_path / "fftw3.h",
    )


@pytest.fixture
def progress() -> ProgressRecorder:
    return ProgressRecorder()
