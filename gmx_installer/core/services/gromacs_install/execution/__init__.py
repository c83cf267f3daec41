"""
L4 Execution — ``__init__.py`` re-exports all execution functions.

These functions WRITE to the system: subprocess calls, file writes,
shell rc modifications.  All of them honour preview mode.
"""

from gmx_installer.core.services.gromacs_install.execution.build import (  # noqa: F401
    compile_sources,
    configure,
    make_install,
    prepare_build_dir,
    run_tests,
)
from gmx_installer.core.services.gromacs_install.execution.packages import (  # noqa: F401
    install_packages,
)
from gmx_installer.core.services.gromacs_install.execution.patching import (  # noqa: F401
    apply_compatibility_patches,
    apply_patch,
)
from gmx_installer.core.services.gromacs_install.execution.runner import (  # noqa: F401
    CommandRunner,
    ProgressCallback,
)
from gmx_installer.core.services.gromacs_install.execution.shell_config import (  # noqa: F401
    clean_shell_configs,
    ensure_source_line,
    remove_existing_install,
)
from gmx_installer.core.services.gromacs_install.execution.source import (  # noqa: F401
    cleanup_download_dir,
    fetch_source,
    remove_download_dir,
)
