"""
Execution result schemas.

DeployedComponentRecord is the output of one successful deployment step.
ExecutionResult is returned by the PlanExecutor for both full and partial
runs; on failure it still carries every component deployed before the
failing step, so an operator knows what is live on the ledger.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from ledgerplan.errors import PlanExecutionError


@dataclass(frozen=True)
class DeployedComponentRecord:
    """A component confirmed on the ledger during this run."""
    symbol: str
    name: str
    address: str
    tx_hash: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        result = {"symbol": self.symbol, "name": self.name, "address": self.address}
        if self.tx_hash is not None:
            result["tx_hash"] = self.tx_hash
        return result


@dataclass(frozen=True)
class WiredCallRecord:
    """A wiring call (or hook call) confirmed on the ledger during this run."""
    component: str
    target: str
    method: str
    address: str
    args: tuple[Any, ...] = ()
    tx_hash: Optional[str] = None

    def describe(self) -> str:
        return f"{self.target}.{self.method}({','.join(str(a) for a in self.args)})"

    def to_dict(self) -> dict[str, Any]:
        return {
            "component": self.component,
            "target": self.target,
            "method": self.method,
            "address": self.address,
            "args": list(self.args),
            **({"tx_hash": self.tx_hash} if self.tx_hash else {}),
        }


@dataclass
class ExecutionResult:
    """
    Result of executing a plan.

    - success: true only when every item, hook and wiring call completed
    - deployed: components deployed, in plan order (partial on failure)
    - wired: wiring calls completed, in execution order
    - error: the error that aborted the run
    - failed_item / failed_action: where the run stopped
    """
    plan_id: str
    run_id: str
    success: bool = True
    deployed: list[DeployedComponentRecord] = field(default_factory=list)
    wired: list[WiredCallRecord] = field(default_factory=list)
    error: Optional[PlanExecutionError] = None
    failed_item: Optional[str] = None
    failed_action: Optional[str] = None
    duration_ms: int = 0

    @property
    def addresses(self) -> list[tuple[str, str]]:
        """Ordered (symbol, address) pairs for deployed components."""
        return [(r.symbol, r.address) for r in self.deployed]

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "plan_id": self.plan_id,
            "run_id": self.run_id,
            "success": self.success,
            "deployed": [r.to_dict() for r in self.deployed],
            "wired": [w.to_dict() for w in self.wired],
            "duration_ms": self.duration_ms,
        }
        if self.error is not None:
            result["error"] = {
                "type": type(self.error).__name__,
                "message": str(self.error),
                "transient": self.error.transient,
            }
            result["failed_item"] = self.failed_item
            if self.failed_action:
                result["failed_action"] = self.failed_action
        return result
