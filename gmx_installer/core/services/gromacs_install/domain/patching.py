"""
L1 Domain — ``#include <limits>`` compatibility patch (pure).

Newer GCC releases stopped pulling ``<limits>`` in transitively, so
older GROMACS sources that use ``std::numeric_limits`` without
including it fail to compile.  Detection and insertion are textual
heuristics over file contents; no C++ parsing.

No I/O here: callers read and write the files.
"""

from __future__ import annotations

import re

from gmx_installer.core.services.gromacs_install.data.constants import PATCH_INCLUDE_LINE

# ``std::numeric_limits`` is covered by the bare spelling; both are
# listed to mirror the two grep alternatives.
_FACILITY_SPELLINGS: tuple[str, ...] = ("std::numeric_limits", "numeric_limits")

_GUARD_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"#include\s*<limits>"),
    re.compile(r'#include\s*"limits"'),
)

# First line with real content: optional whitespace, then anything but
# a comment character or more whitespace.
_CONTENT_LINE = re.compile(r"^\s*[^/*\s]")


def references_facility(text: str) -> bool:
    """Whether the text uses ``numeric_limits`` in either spelling."""
    return any(spelling in text for spelling in _FACILITY_SPELLINGS)


def already_guarded(text: str) -> bool:
    """Whether ``<limits>`` is already included (angle or quoted form)."""
    return any(p.search(text) for p in _GUARD_PATTERNS)


def needs_limits_header(text: str) -> bool:
    return references_facility(text) and not already_guarded(text)


def split_lines(text: str) -> list[str]:
    """Split on ``\\n`` only, keeping line ends.

    Form feeds and other characters ``str.splitlines`` treats as breaks
    stay inside their line.
    """
    return [line for line in re.split(r"(?<=\n)", text) if line]


def find_insertion_index(lines: list[str]) -> tuple[int, str]:
    """Pick the line index the include goes *before*, and which rule fired.

    Rules, each tried only if the previous one finds no anchor:
        1. ``after_last_include`` — right after the last ``#include`` line
        2. ``before_first_code`` — before the first non-blank, non-comment
           line, when that line isn't the first one
        3. ``file_start`` — at the very beginning
    """
    last_include = None
    for i, line in enumerate(lines):
        if "#include" in line:
            last_include = i
    if last_include is not None:
        return last_include + 1, "after_last_include"

    for i, line in enumerate(lines):
        if _CONTENT_LINE.match(line):
            if i > 0:
                return i, "before_first_code"
            break

    return 0, "file_start"


def insert_limits_header(text: str) -> tuple[str, str]:
    """Insert ``#include <limits>`` into ``text``.

    Line endings are preserved; a missing newline on the anchor line is
    added so the include always lands on its own line.

    Returns:
        ``(new_text, rule)`` where ``rule`` names the anchor used.
    """
    newline = "\r\n" if "\r\n" in text else "\n"
    lines = split_lines(text)
    index, rule = find_insertion_index(lines)

    if index > 0 and not lines[index - 1].endswith("\n"):
        lines[index - 1] += newline

    lines.insert(index, PATCH_INCLUDE_LINE + newline)
    return "".join(lines), rule
