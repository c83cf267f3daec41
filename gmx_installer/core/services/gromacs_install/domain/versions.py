"""
L1 Domain — Version reconciliation (pure).

Compares the requested GROMACS version with the installed one.
Suffixes (``-dev``, ``-rc1``, ...) are ignored: ``2024.1`` and
``2024.1-dev`` count as the same release.
"""

from __future__ import annotations

from gmx_installer.core.models.plan import ReconciliationDecision


def base_version(version: str) -> str:
    """Strip everything from the first ``-`` onward."""
    return version.split("-", 1)[0]


def versions_match(installed: str, requested: str) -> bool:
    return base_version(installed) == base_version(requested)


def reconcile(installed: str | None, requested: str) -> ReconciliationDecision:
    """Decide what to do about an existing installation.

    Args:
        installed: Version reported by the installed ``gmx``, or None.
        requested: Version given on the command line.

    Returns:
        ``CLEAN_INSTALL`` when nothing is installed, ``SKIP`` when the
        base versions are textually equal, ``REPLACE_THEN_INSTALL``
        otherwise.
    """
    if installed is None:
        return ReconciliationDecision.CLEAN_INSTALL
    if versions_match(installed, requested):
        return ReconciliationDecision.SKIP
    return ReconciliationDecision.REPLACE_THEN_INSTALL
