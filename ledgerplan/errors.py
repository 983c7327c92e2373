"""
Error classes for ledgerplan.

Gateway failures are classified at the ledger boundary:
- TransientError: timeouts, dropped connections, node unavailable
- PermanentError: reverts, invalid input, unknown methods

Neither is retried by the orchestrator. The classification is reported so
an operator can tell a network hiccup from a contract that will never accept
the call.

Plan execution failures derive from PlanExecutionError and carry the name of
the component (and wiring action, when there is one) that triggered them.
Every one of them aborts the run.
"""

from typing import Optional


class LedgerplanError(Exception):
    """Base exception for ledgerplan."""
    pass


class TransientError(LedgerplanError):
    """
    Transient ledger failure.

    Examples:
    - Confirmation timeout
    - Connection refused / reset
    - Node temporarily unavailable
    """
    pass


class PermanentError(LedgerplanError):
    """
    Permanent ledger failure.

    Examples:
    - Transaction reverted
    - Method not present in the interface
    - Malformed constructor arguments
    """
    pass


class ConfigError(LedgerplanError):
    """Configuration validation error."""
    pass


class AccountNotFoundError(LedgerplanError):
    """Raised when an account tag is missing or has no usable key."""
    pass


class PlanNotFoundError(LedgerplanError):
    """Raised when a plan definition is not found."""
    pass


class PlanValidationError(LedgerplanError):
    """Raised when a plan definition fails validation."""
    pass


class PlanExecutionError(LedgerplanError):
    """Raised when a plan item cannot be carried out."""

    def __init__(
        self,
        message: str,
        component: Optional[str] = None,
        action: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        self.component = component
        self.action = action
        self.cause = cause
        super().__init__(message)

    @property
    def transient(self) -> bool:
        """True when the underlying ledger failure was classified transient."""
        return isinstance(self.cause, TransientError)


class UnresolvedReferenceError(PlanExecutionError):
    """A placeholder symbol is not bound in the resolution environment."""

    def __init__(self, symbol: str, component: Optional[str] = None, action: Optional[str] = None):
        self.symbol = symbol
        where = f" (component '{component}')" if component else ""
        super().__init__(
            f"Unresolved reference {symbol}{where}",
            component=component,
            action=action,
        )


class ArtifactNotFoundError(PlanExecutionError):
    """No artifact store key matches the component name."""
    pass


class AmbiguousArtifactError(PlanExecutionError):
    """More than one artifact store key matches the component name (strict mode)."""

    def __init__(self, name: str, candidates: list[str]):
        self.candidates = list(candidates)
        super().__init__(
            f"Ambiguous artifact for '{name}': {', '.join(self.candidates)}",
            component=name,
        )


class UnknownTargetError(PlanExecutionError):
    """A wiring action targets a component not deployed in this run."""
    pass


class DeploymentFailedError(PlanExecutionError):
    """The ledger rejected or failed to confirm a deployment."""
    pass


class WireCallFailedError(PlanExecutionError):
    """The ledger rejected or failed to confirm a wiring call."""
    pass


class HookError(PlanExecutionError):
    """A custom post-deploy hook is unknown or misconfigured."""
    pass
