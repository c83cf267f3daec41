"""
L1 Domain — Compiler compatibility advice (pure).

Advisory only.  The orchestrator reports these messages but never
stops an install because of them.
"""

from __future__ import annotations

from typing import Literal, NamedTuple

_OLD_RELEASES = ("2018", "2019", "2020")
_GOOD_RELEASES = ("2021", "2022")

# GCC majors from here on are stricter about transitive includes.
_STRICT_GCC_MAJOR = 11


class Advice(NamedTuple):
    level: Literal["info", "warning"]
    message: str


def compiler_advice(
    gcc_major: int | None,
    version: str,
    *,
    cxx14_supported: bool | None = None,
) -> list[Advice]:
    """Recommendations for building GROMACS ``version`` with this GCC.

    Release matching is on the whole version string: ``2020`` matches, ``2020.6`` doesn't.
    """
    advice: list[Advice] = []

    if gcc_major is not None:
        advice.append(Advice("info", f"Detected GCC version: {gcc_major}"))
        if gcc_major >= _STRICT_GCC_MAJOR:
            if version in _OLD_RELEASES:
                advice.append(Advice(
                    "warning",
                    f"GCC {gcc_major} with GROMACS {version} may have compatibility issues",
                ))
                advice.append(Advice(
                    "info",
                    f"Recommendation: Consider using GROMACS 2022 or later for better "
                    f"GCC {gcc_major} compatibility",
                ))
                advice.append(Advice(
                    "info",
                    f"Or install GCC 9-10 for better compatibility with GROMACS {version}",
                ))
            elif version in _GOOD_RELEASES:
                advice.append(Advice(
                    "info", f"GCC {gcc_major} with GROMACS {version} should work well",
                ))
            else:
                advice.append(Advice(
                    "info",
                    f"GCC {gcc_major} with GROMACS {version} - compatibility unknown, "
                    "proceeding anyway",
                ))
        else:
            advice.append(Advice(
                "info", f"GCC {gcc_major} should work well with GROMACS {version}",
            ))

    if cxx14_supported is False:
        advice.append(Advice(
            "warning", "C++14 support may be limited. This could cause build issues.",
        ))

    return advice
