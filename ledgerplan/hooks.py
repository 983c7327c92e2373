"""
Custom post-deploy hooks.

A plan item may name one hook to run right after its deployment is recorded
and before its wiring actions. Hooks can perform arbitrary additional
ledger calls; any error they raise aborts the run.

Hooks are looked up by name:
- built-ins registered in BUILTIN_HOOKS (e.g. "grant_role")
- "module:function" paths from allowlisted modules

Hook signature:
    def my_hook(ctx: HookContext, params: dict[str, Any]) -> None
"""

import importlib
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from ledgerplan.environment import ResolutionEnvironment
from ledgerplan.errors import HookError, PlanExecutionError
from ledgerplan.schemas import HookSpec, Literal, WireAction, WiredCallRecord, parse_arguments
from ledgerplan.wiring import WireActionExecutor


@dataclass
class HookContext:
    """
    What a hook may use.

    Attributes:
        component: Name of the plan item that was just deployed
        address: Its confirmed address
        env: Resolution environment of the run
        wiring: Executor for confirmed calls against deployed components
        calls: Calls made through call(), in order
    """
    component: str
    address: str
    env: ResolutionEnvironment
    wiring: WireActionExecutor
    calls: list[WiredCallRecord] = field(default_factory=list)

    def call(self, target: str, method: str, args: list[Any]) -> WiredCallRecord:
        """Run a confirmed call against a component deployed in this run."""
        action = WireAction(target=Literal(target), method=method, args=parse_arguments(args))
        record = self.wiring.run(action, self.env, component=self.component)
        self.calls.append(record)
        return record


HookFn = Callable[[HookContext, dict[str, Any]], None]


def grant_role(ctx: HookContext, params: dict[str, Any]) -> None:
    """
    Grant a role on an access-control component.

    Params:
        target: Component holding the roles (default: the deployed item)
        role: Role identifier as the contract expects it
        account: Address receiving the role (default: the deployed item)
        method: Method name (default: grantRole)
    """
    if "role" not in params:
        raise HookError("grant_role requires a 'role' param", component=ctx.component)
    target = params.get("target", ctx.component)
    account = params.get("account", ctx.address)
    method = params.get("method", "grantRole")
    ctx.call(target, method, [params["role"], account])


BUILTIN_HOOKS: dict[str, HookFn] = {
    "grant_role": grant_role,
}


class HookRegistry:
    """
    Registry of named post-deploy hooks.

    Usage:
        hooks = HookRegistry(allowed_modules=["mydeploy.hooks"])
        hooks.register("notify", notify_fn)
        hooks.run(spec, ctx)
    """

    def __init__(self, allowed_modules: Optional[list[str]] = None):
        self._hooks: dict[str, HookFn] = dict(BUILTIN_HOOKS)
        self._allowed_modules = list(allowed_modules or [])

    def register(self, name: str, fn: HookFn) -> None:
        self._hooks[name] = fn

    def names(self) -> list[str]:
        return sorted(self._hooks)

    def _is_allowed_module(self, module_path: str) -> bool:
        for allowed in self._allowed_modules:
            if module_path == allowed or module_path.startswith(allowed + "."):
                return True
        return False

    def get(self, name: str, component: Optional[str] = None) -> HookFn:
        """
        Resolve a hook by name or "module:function" path.

        Raises:
            HookError: Unknown hook, module not allowlisted, or not callable
        """
        if name in self._hooks:
            return self._hooks[name]

        if ":" not in name:
            raise HookError(
                f"Unknown post-deploy hook '{name}'. Available: {', '.join(self.names())}",
                component=component,
            )

        module_path, func_name = name.rsplit(":", 1)
        if not self._is_allowed_module(module_path):
            raise HookError(
                f"Hook module '{module_path}' not in allowlist. Allowed: {self._allowed_modules}",
                component=component,
            )
        try:
            module = importlib.import_module(module_path)
        except ImportError as e:
            raise HookError(f"Cannot import hook module '{module_path}': {e}", component=component) from e

        fn = getattr(module, func_name, None)
        if not callable(fn):
            raise HookError(f"Hook '{name}' is not a callable", component=component)

        self._hooks[name] = fn
        return fn

    def run(self, spec: HookSpec, ctx: HookContext) -> list[WiredCallRecord]:
        """
        Resolve the hook's params and invoke it.

        PlanExecutionErrors raised by the hook propagate unchanged; any
        other exception is wrapped in HookError with the original as cause.

        Returns:
            Calls the hook made through ctx.call()
        """
        fn = self.get(spec.hook, component=ctx.component)
        params = {k: ctx.env.resolve(v, component=ctx.component) for k, v in spec.params.items()}
        try:
            fn(ctx, params)
        except PlanExecutionError:
            raise
        except Exception as e:
            raise HookError(
                f"Hook '{spec.hook}' failed for {ctx.component}: {e}",
                component=ctx.component,
                action=spec.hook,
                cause=e,
            ) from e
        return list(ctx.calls)
