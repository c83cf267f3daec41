"""
Domain models — Pydantic types for the installer.

All models are re-exported here for convenient access:

    from gmx_installer.core.models import ProbedEnvironment, BuildPlan, StepResult
"""

from gmx_installer.core.models.environment import (
    NumericLibraryStatus,
    PackageManager,
    ProbedEnvironment,
)
from gmx_installer.core.models.plan import (
    BuildPlan,
    FftwStrategy,
    InstallCommandSpec,
    PatchCandidate,
    ReconciliationDecision,
    RequestedInstall,
)
from gmx_installer.core.models.result import InstallResult, InstallStage, StepResult

__all__ = [
    # plan.py
    "BuildPlan",
    "FftwStrategy",
    "InstallCommandSpec",
    # result.py
    "InstallResult",
    "InstallStage",
    # environment.py
    "NumericLibraryStatus",
    "PackageManager",
    "PatchCandidate",
    "ProbedEnvironment",
    "ReconciliationDecision",
    "RequestedInstall",
    "StepResult",
]
