"""
GROMACS install service — package re-exports.

Each symbol lives in its single-responsibility module inside the
appropriate onion layer (data → domain → resolver → detection →
execution → orchestration)::

    from gmx_installer.core.services.gromacs_install import install_gromacs
"""

# ── L1: Domain ──
from gmx_installer.core.services.gromacs_install.domain.build_plan import (  # noqa: F401
    compose,
    compose_initial,
    resolve_strategy,
)
from gmx_installer.core.services.gromacs_install.domain.versions import (  # noqa: F401
    reconcile,
)

# ── L2: Resolver ──
from gmx_installer.core.services.gromacs_install.resolver.dependencies import (  # noqa: F401
    resolve,
    resolve_numeric_library,
)

# ── L3: Detection ──
from gmx_installer.core.services.gromacs_install.detection.environment import (  # noqa: F401
    probe,
)
from gmx_installer.core.services.gromacs_install.detection.source_scan import (  # noqa: F401
    files_needing_header,
    scan,
)

# ── L5: Orchestration ──
from gmx_installer.core.services.gromacs_install.orchestration.orchestrator import (  # noqa: F401
    install_gromacs,
)
