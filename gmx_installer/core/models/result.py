"""
StepResult and InstallResult — the execution contract.

Every effectful step returns a StepResult; the orchestrator collects
them into an InstallResult.  Runners never raise for a failed command,
failures are captured in the StepResult and the orchestrator decides
what is fatal.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field

from gmx_installer.core.models.plan import FftwStrategy, ReconciliationDecision


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class StepResult(BaseModel):
    """Outcome of one command or file operation."""

    step: str
    status: Literal["ok", "skipped", "failed", "previewed"] = "ok"
    command: list[str] = Field(default_factory=list)

    started_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    output: str = ""
    error: str | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the step succeeded (a preview counts as success)."""
        return self.status in ("ok", "skipped", "previewed")

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def success(cls, step: str, output: str = "", **kwargs: Any) -> StepResult:
        """Create a success result."""
        return cls(step=step, status="ok", output=output, **kwargs)

    @classmethod
    def failure(cls, step: str, error: str, **kwargs: Any) -> StepResult:
        """Create a failure result."""
        return cls(step=step, status="failed", error=error, **kwargs)

    @classmethod
    def skip(cls, step: str, reason: str = "", **kwargs: Any) -> StepResult:
        """Create a skip result."""
        return cls(step=step, status="skipped", output=reason, **kwargs)

    @classmethod
    def preview(cls, step: str, **kwargs: Any) -> StepResult:
        """Create a result for a step that was only rendered."""
        return cls(step=step, status="previewed", **kwargs)


class InstallStage(str, Enum):
    """Progress markers of a single install run, in order."""

    START = "start"
    TOOLS_CHECKED = "tools_checked"
    COMPILER_CHECKED = "compiler_checked"
    VERSION_RECONCILED = "version_reconciled"
    SKIPPED = "skipped"
    DOWNLOADED = "downloaded"
    PATCHED = "patched"
    CONFIGURED = "configured"
    BUILT = "built"
    TESTED = "tested"
    INSTALLED = "installed"
    ENVIRONMENT_CONFIGURED = "environment_configured"


class InstallResult(BaseModel):
    """Summary of an install run."""

    version: str
    preview: bool = False
    stage: InstallStage = InstallStage.START
    decision: ReconciliationDecision | None = None
    installed_version: str | None = None
    fftw_strategy: FftwStrategy | None = None
    patched_files: list[str] = Field(default_factory=list)
    steps: list[StepResult] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
