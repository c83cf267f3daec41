"""
L0 Data — ``__init__.py`` re-exports all data constants.
"""

from gmx_installer.core.services.gromacs_install.data.constants import (  # noqa: F401
    BACKUP_SUFFIX,
    PACKAGE_MANAGER_BINARIES,
    PATCH_EXTENSIONS,
    PATCH_INCLUDE_LINE,
    RC_CLEAN_MARKERS,
    REQUIRED_TOOLS,
)
from gmx_installer.core.services.gromacs_install.data.package_maps import (  # noqa: F401
    PACKAGE_MANAGERS,
    PackageManagerSpec,
)
