"""
Ledger gateway protocol.

The gateway is the only place the orchestrator touches the network. Both
operations block until the ledger confirms (or rejects) the transaction.

Error contract:
- TransientError: the transaction may not have been mined (timeouts,
  connection failures). Not retried here.
- PermanentError: the ledger rejected it (revert, unknown method, bad args).
"""

from dataclasses import dataclass
from typing import Any, Optional, Protocol, Sequence, runtime_checkable

from ledgerplan.accounts import Signer
from ledgerplan.schemas import ArtifactDescriptor


@dataclass(frozen=True)
class DeployReceipt:
    """Confirmed deployment."""
    address: str
    tx_hash: Optional[str] = None
    block_number: Optional[int] = None


@dataclass(frozen=True)
class CallReceipt:
    """Confirmed state-changing call."""
    tx_hash: Optional[str] = None
    block_number: Optional[int] = None
    status: int = 1


@runtime_checkable
class LedgerGateway(Protocol):
    """
    Protocol for ledger access.

    This interface keeps the executor free of any network client imports so
    that the backend can be swapped (JSON-RPC node, in-memory simulation,
    test double).
    """

    def deploy(
        self,
        artifact: ArtifactDescriptor,
        args: Sequence[Any],
        signer: Signer,
    ) -> DeployReceipt:
        """
        Deploy a component and wait for confirmation.

        Args:
            artifact: Compiled interface and payload
            args: Resolved constructor arguments
            signer: Account signing the transaction

        Returns:
            DeployReceipt with the confirmed address
        """
        ...

    def call(
        self,
        address: str,
        interface: Sequence[dict[str, Any]],
        method: str,
        args: Sequence[Any],
        signer: Signer,
    ) -> CallReceipt:
        """
        Send a state-changing call and wait for confirmation.

        Args:
            address: Deployed component address
            interface: ABI of the component
            method: Method name
            args: Resolved call arguments
            signer: Account signing the transaction

        Returns:
            CallReceipt for the confirmed transaction
        """
        ...
