"""
L1 Domain — Build plan composition (pure).

The FFTW decision is two-phase:

    compose_initial(status)            → USE_SYSTEM | ATTEMPT_INSTALL_THEN_USE_SYSTEM
    (execution layer tries the install)
    resolve_strategy(initial, ok)      → USE_SYSTEM | BUILD_OWN

``compose()`` then turns the final strategy into CMake flags.
"""

from __future__ import annotations

from pathlib import Path

from gmx_installer.core.models.environment import NumericLibraryStatus
from gmx_installer.core.models.plan import BuildPlan, FftwStrategy
from gmx_installer.core.services.gromacs_install.data.constants import (
    BASE_CMAKE_FLAGS,
    CMAKE_EXTRA_ARGS,
    SUFFIX_CMAKE_FLAGS,
)


def compose_initial(status: NumericLibraryStatus) -> FftwStrategy:
    """First phase: use the system FFTW only if every piece is there."""
    if status.complete:
        return FftwStrategy.USE_SYSTEM
    return FftwStrategy.ATTEMPT_INSTALL_THEN_USE_SYSTEM


def resolve_strategy(initial: FftwStrategy, install_succeeded: bool) -> FftwStrategy:
    """Second phase, fed the outcome of the FFTW package install attempt."""
    if initial is not FftwStrategy.ATTEMPT_INSTALL_THEN_USE_SYSTEM:
        return initial
    return FftwStrategy.USE_SYSTEM if install_succeeded else FftwStrategy.BUILD_OWN


def compose(
    strategy: FftwStrategy,
    *,
    install_dir: Path | str | None = None,
    extra_flags: dict[str, str] | None = None,
) -> BuildPlan:
    """Build the CMake configuration for a resolved FFTW strategy.

    Raises:
        ValueError: If ``strategy`` is still the unresolved
            ``ATTEMPT_INSTALL_THEN_USE_SYSTEM``.
    """
    if strategy is FftwStrategy.ATTEMPT_INSTALL_THEN_USE_SYSTEM:
        raise ValueError("FFTW strategy must be resolved before composing a build plan")

    own_fftw = "ON" if strategy is FftwStrategy.BUILD_OWN else "OFF"
    flags: list[tuple[str, str]] = list(BASE_CMAKE_FLAGS)
    flags.append(("GMX_BUILD_OWN_FFTW", own_fftw))
    flags.extend(SUFFIX_CMAKE_FLAGS)
    if install_dir is not None:
        flags.append(("CMAKE_INSTALL_PREFIX", str(install_dir)))

    reserved = {k for k, _ in flags}
    for key, value in (extra_flags or {}).items():
        if key in reserved:
            # The linkage and prefix choices are ours to make.
            continue
        flags.append((key, value))

    return BuildPlan(flags=tuple(flags), extra_args=CMAKE_EXTRA_ARGS)


def build_jobs(cpu_count: int | None, cap: int = 4) -> int:
    """Parallel job count for make: the core count, capped, at least 1."""
    return max(1, min(cpu_count or 1, cap))
