"""
L2 Resolver — ``__init__.py`` re-exports all resolver functions.

These functions turn L3 probe results into concrete package install
commands, without executing anything.
"""

from gmx_installer.core.services.gromacs_install.resolver.dependencies import (  # noqa: F401
    resolve,
    resolve_numeric_library,
)
