"""
L2 Resolver — Missing tools → package install command.

Pure functions of a ``ProbedEnvironment``: nothing is executed here.
The execution layer runs the returned ``InstallCommandSpec``.
"""

from __future__ import annotations

import logging

from gmx_installer.core.models.environment import PackageManager, ProbedEnvironment
from gmx_installer.core.models.plan import InstallCommandSpec
from gmx_installer.core.services.gromacs_install.data.constants import REQUIRED_TOOLS
from gmx_installer.core.services.gromacs_install.data.package_maps import (
    PACKAGE_MANAGERS,
    PackageManagerSpec,
)
from gmx_installer.core.services.gromacs_install.domain.errors import (
    UnknownPackageManagerError,
)

logger = logging.getLogger(__name__)


def _spec_for(pm: PackageManager) -> PackageManagerSpec | None:
    return PACKAGE_MANAGERS.get(pm)


def _command_spec(spec: PackageManagerSpec, packages: list[str]) -> InstallCommandSpec:
    return InstallCommandSpec(
        package_manager=spec.manager,
        packages=packages,
        command=spec.install_argv(packages),
        refresh_command=list(spec.refresh_command) if spec.refresh_command else None,
    )


def resolve(
    probed: ProbedEnvironment,
    required_tools: list[str] | tuple[str, ...] = REQUIRED_TOOLS,
) -> InstallCommandSpec | None:
    """Map missing build tools to a de-duplicated package install.

    Args:
        probed: Host snapshot from ``probe()``.
        required_tools: Tool ids that must be on PATH.

    Returns:
        ``None`` when every tool is present, otherwise the install
        command for the detected package manager.

    Raises:
        UnknownPackageManagerError: Tools are missing and no supported
            package manager was detected.
    """
    missing = probed.missing_tools(required_tools)
    if not missing:
        return None

    spec = _spec_for(probed.package_manager)
    if spec is None:
        raise UnknownPackageManagerError(missing)

    packages: set[str] = set()
    for tool in missing:
        pkg = spec.package_for(tool)
        if pkg is None:
            logger.warning(
                "No package known for tool '%s' on pm=%s", tool, spec.manager.value,
            )
            continue
        packages.add(pkg)

    return _command_spec(spec, sorted(packages))


def resolve_numeric_library(probed: ProbedEnvironment) -> InstallCommandSpec:
    """Package install providing FFTW (both precisions + headers).

    Raises:
        UnknownPackageManagerError: No supported package manager.
    """
    spec = _spec_for(probed.package_manager)
    if spec is None:
        raise UnknownPackageManagerError(["fftw3 development libraries"])
    return _command_spec(spec, list(spec.fftw_packages))
