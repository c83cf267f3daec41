"""
The ``#include <limits>`` patch — detection, anchor rules, and apply.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from gmx_installer.core.services.gromacs_install.detection.source_scan import (
    files_needing_header,
    scan,
)
from gmx_installer.core.services.gromacs_install.domain.patching import (
    already_guarded,
    find_insertion_index,
    insert_limits_header,
    needs_limits_header,
    references_facility,
)
from gmx_installer.core.services.gromacs_install.execution.patching import (
    apply_compatibility_patches,
)
from gmx_installer.core.services.gromacs_install.execution.runner import CommandRunner

USES_LIMITS = "int m = std::numeric_limits<int>::max();\n"


# ── Detection predicates ──────────────────────────────────────

class TestPredicates:
    def test_references_both_spellings(self) -> None:
        assert references_facility("std::numeric_limits<float>::epsilon()")
        assert references_facility("using std::numeric_limits; numeric_limits<int>")
        assert not references_facility("std::vector<int> v;")

    @pytest.mark.parametrize("directive", [
        "#include <limits>",
        "#include<limits>",
        "#include   <limits>",
        '#include "limits"',
    ])
    def test_already_guarded(self, directive: str) -> None:
        assert already_guarded(f"{directive}\n{USES_LIMITS}")
        assert not needs_limits_header(f"{directive}\n{USES_LIMITS}")

    def test_needs_header(self) -> None:
        assert needs_limits_header("#include <vector>\n" + USES_LIMITS)

    def test_no_reference_no_patch(self) -> None:
        assert not needs_limits_header("#include <vector>\nint x;\n")


# ── Anchor rules ──────────────────────────────────────────────

class TestInsertionIndex:
    def test_after_last_include(self) -> None:
        lines = ["#include <vector>\n", "#include \"gmx.h\"\n", "\n", USES_LIMITS]
        assert find_insertion_index(lines) == (2, "after_last_include")

    def test_before_first_code_after_license(self) -> None:
        lines = [
            "/*\n",
            " * This file is part of the GROMACS package.\n",
            " */\n",
            "\n",
            USES_LIMITS,
        ]
        assert find_insertion_index(lines) == (4, "before_first_code")

    def test_line_comment_header(self) -> None:
        lines = ["// license\n", "namespace gmx {\n"]
        assert find_insertion_index(lines) == (1, "before_first_code")

    def test_code_on_first_line_falls_to_file_start(self) -> None:
        assert find_insertion_index([USES_LIMITS]) == (0, "file_start")

    def test_only_comments(self) -> None:
        assert find_insertion_index(["// nothing here\n", "\n"]) == (0, "file_start")

    def test_empty(self) -> None:
        assert find_insertion_index([]) == (0, "file_start")


class TestInsertLimitsHeader:
    def test_after_includes(self) -> None:
        new, rule = insert_limits_header("#include <vector>\n" + USES_LIMITS)
        assert rule == "after_last_include"
        assert new == "#include <vector>\n#include <limits>\n" + USES_LIMITS

    def test_last_include_without_newline(self) -> None:
        new, _ = insert_limits_header("#include <vector>")
        assert new == "#include <vector>\n#include <limits>\n"

    def test_crlf_preserved(self) -> None:
        new, _ = insert_limits_header("#include <vector>\r\nint x;\r\n")
        assert new == "#include <vector>\r\n#include <limits>\r\nint x;\r\n"

    def test_empty_file(self) -> None:
        new, rule = insert_limits_header("")
        assert (new, rule) == ("#include <limits>\n", "file_start")

    def test_form_feed_stays_inside_its_line(self) -> None:
        text = "/* lic */\n#include <a>\x0c// page\nint x = std::numeric_limits<int>::max();\n"
        new, rule = insert_limits_header(text)
        assert rule == "after_last_include"
        assert new.replace("#include <limits>\n", "", 1) == text
        assert "#include <a>\x0c// page\n#include <limits>\n" in new

    @pytest.mark.parametrize("sep", ["\x0b", "\x1c", "\x85", "\u2028"])
    def test_only_newline_splits_lines(self, sep: str) -> None:
        text = f"#include <a>{sep}int y;\n" + USES_LIMITS
        new, _ = insert_limits_header(text)
        assert new == f"#include <a>{sep}int y;\n#include <limits>\n" + USES_LIMITS

    def test_patched_text_no_longer_needs_patch(self) -> None:
        new, _ = insert_limits_header("/* c */\n" + USES_LIMITS)
        assert not needs_limits_header(new)


# ── Scanner ───────────────────────────────────────────────────

@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """A GROMACS-like tree: two files need the patch, one is guarded."""
    src = tmp_path / "gromacs-2020" / "src"
    (src / "gromacs" / "math").mkdir(parents=True)
    (src / "a.cpp").write_text("#include <cmath>\n" + USES_LIMITS)
    (src / "b.h").write_text("#include <limits>\n" + USES_LIMITS)
    (src / "notes.txt").write_text(USES_LIMITS)
    (src / "gromacs" / "math" / "c.hpp").write_text("/* license */\n\n" + USES_LIMITS)
    (src / "plain.cpp").write_text("int main() { return 0; }\n")
    return tmp_path / "gromacs-2020"


class TestScan:
    def test_yields_every_source_file(self, source_tree: Path) -> None:
        names = sorted(c.path.name for c in scan(source_tree / "src"))
        assert names == ["a.cpp", "b.h", "c.hpp", "plain.cpp"]

    def test_positive_candidates(self, source_tree: Path) -> None:
        names = sorted(c.path.name for c in files_needing_header(source_tree / "src"))
        assert names == ["a.cpp", "c.hpp"]

    def test_is_lazy_and_rewalks(self, source_tree: Path) -> None:
        it = scan(source_tree / "src")
        assert iter(it) is it
        assert len(list(scan(source_tree))) == len(list(scan(source_tree)))

    def test_missing_root(self, tmp_path: Path) -> None:
        assert list(scan(tmp_path / "nope")) == []


# ── Apply ─────────────────────────────────────────────────────

class TestApplyCompatibilityPatches:
    def test_patches_with_backups(self, source_tree: Path, progress) -> None:
        runner = CommandRunner(on_progress=progress)
        original = (source_tree / "src" / "a.cpp").read_text()

        patched = apply_compatibility_patches(source_tree, runner)

        assert sorted(p.name for p in patched) == ["a.cpp", "c.hpp"]
        a = source_tree / "src" / "a.cpp"
        assert "#include <cmath>\n#include <limits>\n" in a.read_text()
        assert (source_tree / "src" / "a.cpp.bak").read_text() == original
        c = (source_tree / "src" / "gromacs" / "math" / "c.hpp").read_text()
        assert c.startswith("/* license */\n\n#include <limits>\n")
        assert not (source_tree / "src" / "b.h.bak").exists()
        assert "Compatibility patches applied to 2 files" in progress.messages("success")

    def test_file_bytes_preserved_around_insert(self, tmp_path: Path, progress) -> None:
        src = tmp_path / "src"
        src.mkdir()
        cpp = src / "d.cpp"
        original = (
            b"// caf\xe9\r\n#include <cmath>\x0c\r\n"
            b"double m = std::numeric_limits<double>::max();\r\n"
        )
        cpp.write_bytes(original)

        apply_compatibility_patches(tmp_path, CommandRunner(on_progress=progress))

        assert cpp.read_bytes() == (
            b"// caf\xe9\r\n#include <cmath>\x0c\r\n#include <limits>\r\n"
            b"double m = std::numeric_limits<double>::max();\r\n"
        )
        assert (src / "d.cpp.bak").read_bytes() == original

    def test_second_run_is_noop(self, source_tree: Path, progress) -> None:
        runner = CommandRunner(on_progress=progress)
        apply_compatibility_patches(source_tree, runner)
        assert apply_compatibility_patches(source_tree, runner) == []
        assert "No compatibility patches needed" in progress.messages("info")

    def test_preview_leaves_files_alone(self, source_tree: Path, progress) -> None:
        runner = CommandRunner(dry_run=True, on_progress=progress)
        before = (source_tree / "src" / "a.cpp").read_text()

        patched = apply_compatibility_patches(source_tree, runner)

        assert len(patched) == 2
        assert (source_tree / "src" / "a.cpp").read_text() == before
        assert not (source_tree / "src" / "a.cpp.bak").exists()
        assert progress.messages("dry_run")

    def test_missing_src_dir(self, tmp_path: Path, progress) -> None:
        runner = CommandRunner(on_progress=progress)
        assert apply_compatibility_patches(tmp_path, runner) == []
        assert progress.messages("warning") == [
            "Source directory not found. Skipping compatibility patches.",
        ]
