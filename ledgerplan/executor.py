"""
Plan executor - sequential, fail-fast deployment engine.

Execution flow, per PlanItem in plan order:
1. Resolve constructor args against the environment
   (UnresolvedReferenceError before any ledger contact for the item)
2. Look up the artifact (fuzzy or strict policy)
3. Deploy through the LedgerGateway and wait for confirmation
4. Record $<name> -> address in the environment
5. Run the custom post-deploy hook, if any
6. Run the wiring actions in order

Failure semantics:
- The first failure stops the run; no later action or item is attempted
- Nothing is rolled back: components deployed before the failure stay on
  the ledger and are reported in the partial ExecutionResult
- Nothing is retried
"""

import logging
import time
from typing import Optional

from ledgerplan.accounts import Signer
from ledgerplan.artifacts import ArtifactStore
from ledgerplan.environment import ResolutionEnvironment
from ledgerplan.errors import (
    DeploymentFailedError,
    PermanentError,
    PlanExecutionError,
    TransientError,
)
from ledgerplan.gateway import LedgerGateway
from ledgerplan.hooks import HookContext, HookRegistry
from ledgerplan.schemas import (
    DeployedComponentRecord,
    DeploymentPlan,
    ExecutionResult,
    PlanItem,
)
from ledgerplan.utils import generate_ulid
from ledgerplan.wiring import WireActionExecutor

logger = logging.getLogger(__name__)


class PlanExecutor:
    """
    Execution engine for DeploymentPlans.

    Usage:
        executor = PlanExecutor(artifacts, gateway, signer)
        env = ResolutionEnvironment({"Admin": admin, "Operator": operator})
        result = executor.execute(plan, env)
        if not result.success:
            print(result.error, result.deployed)
    """

    def __init__(
        self,
        artifacts: ArtifactStore,
        gateway: LedgerGateway,
        signer: Signer,
        hooks: Optional[HookRegistry] = None,
    ):
        self._artifacts = artifacts
        self._gateway = gateway
        self._signer = signer
        self._hooks = hooks or HookRegistry()
        self._wiring = WireActionExecutor(artifacts, gateway, signer)

    def execute(
        self,
        plan: DeploymentPlan,
        env: ResolutionEnvironment,
        run_id: Optional[str] = None,
    ) -> ExecutionResult:
        """
        Execute a plan against a fresh, caller-owned environment.

        Args:
            plan: The plan to execute
            env: Resolution environment, already seeded with role bindings
            run_id: Identifier for log correlation (generated if omitted)

        Returns:
            ExecutionResult; on failure it holds the partial deployment list
            and the triggering error
        """
        result = ExecutionResult(plan_id=plan.plan_id, run_id=run_id or generate_ulid())
        started = time.monotonic()
        logger.info(
            f"[{result.run_id}] Executing plan '{plan.plan_id}' "
            f"({len(plan)} items, signer {self._signer.tag})"
        )

        for index, item in enumerate(plan.items, start=1):
            logger.info(f"[{result.run_id}] ({index}/{len(plan)}) {item.name}",
                        extra={"run_id": result.run_id, "component": item.name})
            try:
                self._execute_item(item, env, result)
            except PlanExecutionError as e:
                result.success = False
                result.error = e
                result.failed_item = item.name
                result.failed_action = e.action
                logger.error(f"[{result.run_id}] Plan '{plan.plan_id}' aborted at {item.name}: {e}",
                             extra={"run_id": result.run_id, "component": item.name})
                break

        result.duration_ms = int((time.monotonic() - started) * 1000)
        if result.success:
            logger.info(
                f"[{result.run_id}] Plan '{plan.plan_id}' completed: "
                f"{len(result.deployed)} deployed, {len(result.wired)} wiring calls"
            )
        return result

    def _execute_item(self, item: PlanItem, env: ResolutionEnvironment, result: ExecutionResult) -> None:
        """Run steps 1-6 for one item; raises PlanExecutionError on failure."""
        ctor_args = env.resolve_all(item.constructor_args, component=item.name)
        artifact = self._artifacts.lookup(item.name)

        try:
            receipt = self._gateway.deploy(artifact, ctor_args, self._signer)
        except (TransientError, PermanentError) as e:
            raise DeploymentFailedError(
                f"Deployment of {item.name} failed: {e}",
                component=item.name,
                cause=e,
            ) from e

        env.record(item.symbol, receipt.address)
        result.deployed.append(DeployedComponentRecord(
            symbol=item.symbol,
            name=item.name,
            address=receipt.address,
            tx_hash=receipt.tx_hash,
        ))
        logger.info(f"Deployed {item.name} -> {receipt.address}")

        if item.custom_post_deploy is not None:
            ctx = HookContext(
                component=item.name,
                address=receipt.address,
                env=env,
                wiring=self._wiring,
            )
            try:
                self._hooks.run(item.custom_post_deploy, ctx)
            finally:
                result.wired.extend(ctx.calls)

        for action in item.post_deploy_actions:
            result.wired.append(self._wiring.run(action, env, component=item.name))


def execute_plan(
    plan: DeploymentPlan,
    bindings: dict[str, str],
    artifacts: ArtifactStore,
    gateway: LedgerGateway,
    signer: Signer,
    hooks: Optional[HookRegistry] = None,
) -> tuple[ExecutionResult, ResolutionEnvironment]:
    """
    Execute a plan with a fresh environment seeded from role bindings.

    Returns:
        (ExecutionResult, the run's ResolutionEnvironment)
    """
    env = ResolutionEnvironment(bindings)
    executor = PlanExecutor(artifacts, gateway, signer, hooks=hooks)
    return executor.execute(plan, env), env
