"""
ledgerplan.schemas - Data structures for the deployment orchestrator.

DeploymentPlan -> PlanItem -> (Argument, WireAction, HookSpec)
ArtifactDescriptor -> DeployedComponentRecord -> ExecutionResult

Lifecycle:
1. DeploymentPlan: Static plan definition, loaded once, immutable during a run
2. ArtifactDescriptor: Compiled interface + payload, read-only
3. DeployedComponentRecord: One per confirmed deployment
4. ExecutionResult: Full or partial outcome of a run
"""

from .arguments import (
    Argument,
    Literal,
    Reference,
    REF_MARKER,
    parse_argument,
    parse_arguments,
    symbol_for,
)
from .plan import (
    DeploymentPlan,
    PlanItem,
    WireAction,
    HookSpec,
)
from .artifact import ArtifactDescriptor
from .result import (
    DeployedComponentRecord,
    WiredCallRecord,
    ExecutionResult,
)

__all__ = [
    # Arguments
    "Argument",
    "Literal",
    "Reference",
    "REF_MARKER",
    "parse_argument",
    "parse_arguments",
    "symbol_for",
    # Plan
    "DeploymentPlan",
    "PlanItem",
    "WireAction",
    "HookSpec",
    # Artifacts
    "ArtifactDescriptor",
    # Results
    "DeployedComponentRecord",
    "WiredCallRecord",
    "ExecutionResult",
]
