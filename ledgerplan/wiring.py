"""
Wiring action executor.

A wiring action is a confirmed, state-changing call against a component
deployed earlier in the same run, typically telling component A the address
of component B:

    [SensorOracle, setShipment, ["$Shipper"]]

Execution order for one action:
1. Resolve the target to a component deployed in this run
2. Look up its interface in the artifact store (same policy as deployment)
3. Resolve the call arguments
4. gateway.call(...) and wait for confirmation
"""

import logging
from typing import Optional

from ledgerplan.accounts import Signer
from ledgerplan.artifacts import ArtifactStore
from ledgerplan.environment import ResolutionEnvironment
from ledgerplan.errors import (
    PermanentError,
    PlanExecutionError,
    TransientError,
    UnknownTargetError,
    WireCallFailedError,
)
from ledgerplan.gateway import LedgerGateway
from ledgerplan.schemas import WireAction, WiredCallRecord

logger = logging.getLogger(__name__)


class WireActionExecutor:
    """Runs WireActions through a LedgerGateway."""

    def __init__(self, artifacts: ArtifactStore, gateway: LedgerGateway, signer: Signer):
        self._artifacts = artifacts
        self._gateway = gateway
        self._signer = signer

    def run(
        self,
        action: WireAction,
        env: ResolutionEnvironment,
        component: Optional[str] = None,
    ) -> WiredCallRecord:
        """
        Execute one wiring action.

        Args:
            action: The action to run
            env: Resolution environment of the current run
            component: Plan item that owns the action (for reporting)

        Returns:
            WiredCallRecord for the confirmed call

        Raises:
            UnknownTargetError: Target not deployed in this run
            UnresolvedReferenceError: An argument symbol is not bound
            ArtifactNotFoundError / AmbiguousArtifactError: Interface lookup failed
            WireCallFailedError: Ledger reverted or did not confirm
        """
        owner = component or action.target_name
        description = action.describe()
        target_name = action.target_name

        if not env.is_deployed(target_name):
            raise UnknownTargetError(
                f"Wiring target '{target_name}' has not been deployed in this run",
                component=owner,
                action=description,
            )
        address = env.lookup(target_name)

        try:
            artifact = self._artifacts.lookup(target_name)
            args = env.resolve_all(action.args, component=owner)
        except PlanExecutionError as e:
            e.action = e.action or description
            e.component = e.component or owner
            raise

        try:
            receipt = self._gateway.call(address, artifact.interface, action.method, args, self._signer)
        except (TransientError, PermanentError) as e:
            raise WireCallFailedError(
                f"Wiring call {description} on {address} failed: {e}",
                component=owner,
                action=description,
                cause=e,
            ) from e

        record = WiredCallRecord(
            component=owner,
            target=target_name,
            method=action.method,
            address=address,
            args=tuple(args),
            tx_hash=receipt.tx_hash,
        )
        logger.info(f"{record.describe()}")
        return record
