"""
L3 Detection — ``__init__.py`` re-exports all detection functions.

These functions READ system state but never WRITE.
Subprocess calls, file reads — all read-only.
"""

from gmx_installer.core.services.gromacs_install.detection.environment import (  # noqa: F401
    probe,
    refresh_tools,
)
from gmx_installer.core.services.gromacs_install.detection.fftw import (  # noqa: F401
    detect_numeric_library,
    parse_ldconfig,
)
from gmx_installer.core.services.gromacs_install.detection.gromacs import (  # noqa: F401
    get_installed_version,
    parse_gmx_version,
)
from gmx_installer.core.services.gromacs_install.detection.source_scan import (  # noqa: F401
    files_needing_header,
    scan,
)
from gmx_installer.core.services.gromacs_install.detection.toolchain import (  # noqa: F401
    detect_available_tools,
    detect_cxx14_support,
    detect_gcc_major,
    detect_package_manager,
)
