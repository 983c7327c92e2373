"""
In-memory ledger gateway for dry runs and tests.

Simulates a ledger well enough to exercise a plan end to end:
- every deployment gets a fresh random 20-byte address
- calls are checked against the target's interface
- deployments and calls can be configured to revert
Nothing leaves the process.
"""

import secrets
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence

from ledgerplan.accounts import Signer
from ledgerplan.errors import PermanentError
from ledgerplan.schemas import ArtifactDescriptor
from .base import CallReceipt, DeployReceipt


def random_address() -> str:
    """Return a random 0x-prefixed 20-byte hex address."""
    return "0x" + secrets.token_hex(20)


def _tx_hash() -> str:
    return "0x" + secrets.token_hex(32)


@dataclass
class DeploymentCall:
    """A deployment seen by the in-memory gateway."""
    name: str
    args: list[Any]
    signer_tag: str
    address: str


@dataclass
class MethodCall:
    """A state-changing call seen by the in-memory gateway."""
    address: str
    method: str
    args: list[Any]
    signer_tag: str


@dataclass
class InMemoryLedgerGateway:
    """
    LedgerGateway implementation that keeps everything in memory.

    Attributes:
        revert_deploys: Component names whose deployment reverts
        revert_calls: Method names whose calls revert
        address_factory: Produces deployment addresses (random by default)
        check_interface: Reject calls to methods missing from the interface
    """
    revert_deploys: set[str] = field(default_factory=set)
    revert_calls: set[str] = field(default_factory=set)
    address_factory: Callable[[], str] = random_address
    check_interface: bool = True
    deployments: list[DeploymentCall] = field(default_factory=list)
    calls: list[MethodCall] = field(default_factory=list)
    _block: int = 0

    def _next_block(self) -> int:
        self._block += 1
        return self._block

    def deploy(
        self,
        artifact: ArtifactDescriptor,
        args: Sequence[Any],
        signer: Signer,
    ) -> DeployReceipt:
        if artifact.name in self.revert_deploys:
            raise PermanentError(f"Deployment of {artifact.name} reverted")
        address = self.address_factory()
        self.deployments.append(DeploymentCall(
            name=artifact.name,
            args=list(args),
            signer_tag=signer.tag,
            address=address,
        ))
        return DeployReceipt(address=address, tx_hash=_tx_hash(), block_number=self._next_block())

    def call(
        self,
        address: str,
        interface: Sequence[dict[str, Any]],
        method: str,
        args: Sequence[Any],
        signer: Signer,
    ) -> CallReceipt:
        if self.check_interface and not any(
            entry.get("type", "function") == "function" and entry.get("name") == method
            for entry in interface
        ):
            raise PermanentError(f"Method '{method}' not found in interface at {address}")
        if method in self.revert_calls:
            raise PermanentError(f"Call {method} at {address} reverted")
        self.calls.append(MethodCall(
            address=address,
            method=method,
            args=list(args),
            signer_tag=signer.tag,
        ))
        return CallReceipt(tx_hash=_tx_hash(), block_number=self._next_block())

    def deployed_names(self) -> list[str]:
        return [d.name for d in self.deployments]

    def address_of(self, name: str) -> Optional[str]:
        for d in self.deployments:
            if d.name == name:
                return d.address
        return None
