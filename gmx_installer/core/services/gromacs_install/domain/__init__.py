"""
L1 Domain — ``__init__.py`` re-exports all pure domain functions.

These functions have NO subprocess calls, NO filesystem access,
NO network calls. Pure input→output.
"""

from gmx_installer.core.services.gromacs_install.domain.build_plan import (  # noqa: F401
    build_jobs,
    compose,
    compose_initial,
    resolve_strategy,
)
from gmx_installer.core.services.gromacs_install.domain.compiler_compat import (  # noqa: F401
    Advice,
    compiler_advice,
)
from gmx_installer.core.services.gromacs_install.domain.error_analysis import (  # noqa: F401
    analyse_build_failure,
)
from gmx_installer.core.services.gromacs_install.domain.errors import (  # noqa: F401
    BuildFailureError,
    DependencyInstallError,
    InstallerError,
    PostconditionError,
    StepFailedError,
    UnknownPackageManagerError,
    UnsupportedEnvironmentError,
)
from gmx_installer.core.services.gromacs_install.domain.patching import (  # noqa: F401
    already_guarded,
    find_insertion_index,
    insert_limits_header,
    needs_limits_header,
    references_facility,
)
from gmx_installer.core.services.gromacs_install.domain.versions import (  # noqa: F401
    base_version,
    reconcile,
    versions_match,
)
