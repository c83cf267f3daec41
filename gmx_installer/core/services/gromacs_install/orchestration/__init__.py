"""
L5 Orchestration — ``__init__.py`` re-exports the install flow.
"""

from gmx_installer.core.services.gromacs_install.orchestration.orchestrator import (  # noqa: F401
    ensure_build_tools,
    install_gromacs,
    resolve_fftw,
)
