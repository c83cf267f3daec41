"""
L3 Detection — Source tree scan for the ``<limits>`` patch.

Read-only: yields one ``PatchCandidate`` per C++ source/header file.
Each call re-walks the tree.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

from gmx_installer.core.models.plan import PatchCandidate
from gmx_installer.core.services.gromacs_install.data.constants import PATCH_EXTENSIONS
from gmx_installer.core.services.gromacs_install.domain.patching import needs_limits_header

logger = logging.getLogger(__name__)


def _iter_sources(root: Path) -> Iterator[Path]:
    for path in sorted(root.rglob("*")):
        if path.suffix in PATCH_EXTENSIONS and path.is_file():
            yield path


def scan(source_root: Path | str) -> Iterator[PatchCandidate]:
    """Walk ``source_root`` and flag files that need ``#include <limits>``.

    Unreadable files are skipped with a warning.  A missing root
    yields nothing.
    """
    root = Path(source_root)
    if not root.is_dir():
        return

    for path in _iter_sources(root):
        try:
            text = path.read_text(encoding="utf-8", errors="surrogateescape")
        except OSError as exc:
            logger.warning("Cannot read %s: %s", path, exc)
            continue
        yield PatchCandidate(path=path, needs_header=needs_limits_header(text))


def files_needing_header(source_root: Path | str) -> list[PatchCandidate]:
    """Only the positive candidates of ``scan()``."""
    return [c for c in scan(source_root) if c.needs_header]
