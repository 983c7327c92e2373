"""
DeploymentPlan schema - the declarative deployment definition.

A DeploymentPlan is the static, version-controlled description of what to
deploy and in which order. Order is supplied by the author and is never
derived from the references between items: item i may only reference
symbols bound by the seed or by items 0..i-1.

Plan YAML schema:
    plan_id: supply_chain
    version: "1.0"
    description: Cake supply chain contracts
    items:
      - name: RoleManager
        ctor: ["$Admin"]
      - name: SensorOracle
        ctor: ["$Admin", "$SensorEOA"]
        after:
          - [SensorOracle, setShipment, ["$Shipper"]]
      - name: Warehouse
        ctor: ["$Admin", "$CakeLifecycleRegistry"]
        hook:
          name: grant_role
          params: {target: RoleManager, role: WAREHOUSE_ROLE, account: "$Warehouse"}
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from ledgerplan.errors import PlanValidationError
from .arguments import Argument, Reference, parse_argument, parse_arguments


@dataclass(frozen=True)
class WireAction:
    """
    A state-changing call made after a component is deployed.

    Attributes:
        target: Component name (Literal) or Reference to a deployed component
        method: Method to invoke on the target
        args: Ordered call arguments
    """
    target: Argument
    method: str
    args: tuple[Argument, ...] = ()

    @property
    def target_name(self) -> str:
        """Component name the action targets."""
        if isinstance(self.target, Reference):
            return self.target.name
        return str(self.target.value)

    def describe(self) -> str:
        return f"{self.target_name}.{self.method}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "target": self.target.to_plan_value(),
            "method": self.method,
            "args": [a.to_plan_value() for a in self.args],
        }

    @classmethod
    def from_value(cls, data: Any) -> "WireAction":
        """Build from either {target, method, args} or [target, method, args]."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise PlanValidationError(
                    f"Wiring action must be [target, method, args], got: {data!r}"
                )
            target, method, args = data
        elif isinstance(data, dict):
            target = data.get("target")
            method = data.get("method")
            args = data.get("args", [])
        else:
            raise PlanValidationError(f"Invalid wiring action: {data!r}")

        if not isinstance(method, str) or not method:
            raise PlanValidationError(
                f"Method name must be a string, got: {type(method).__name__}"
            )
        if not isinstance(target, str) or not target:
            raise PlanValidationError(f"Wiring target must be a component name, got: {target!r}")

        return cls(
            target=parse_argument(target),
            method=method,
            args=parse_arguments(args),
        )


@dataclass(frozen=True)
class HookSpec:
    """
    A custom post-deploy hook invocation.

    Attributes:
        hook: Registered hook name (see ledgerplan.hooks)
        params: Hook parameters; values are Arguments
    """
    hook: str
    params: dict[str, Argument] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.hook,
            "params": {k: v.to_plan_value() for k, v in self.params.items()},
        }

    @classmethod
    def from_value(cls, data: Any) -> "HookSpec":
        if isinstance(data, str):
            return cls(hook=data)
        if not isinstance(data, dict) or not isinstance(data.get("name"), str):
            raise PlanValidationError(f"Hook must be a name or {{name, params}}, got: {data!r}")
        params = data.get("params") or {}
        if not isinstance(params, dict):
            raise PlanValidationError(f"Hook params must be a mapping, got: {params!r}")
        return cls(
            hook=data["name"],
            params={k: parse_argument(v) for k, v in params.items()},
        )


@dataclass(frozen=True)
class PlanItem:
    """
    One deployable component within a plan.

    Attributes:
        name: Component name; also the artifact lookup key and the
              symbol ($name) recorded after deployment
        constructor_args: Ordered constructor arguments
        post_deploy_actions: Wiring calls run after this deployment
        custom_post_deploy: Optional hook run before the wiring calls
    """
    name: str
    constructor_args: tuple[Argument, ...] = ()
    post_deploy_actions: tuple[WireAction, ...] = ()
    custom_post_deploy: Optional[HookSpec] = None

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name or self.name.startswith("$"):
            raise PlanValidationError(f"Invalid component name: {self.name!r}")

    @property
    def symbol(self) -> str:
        return f"${self.name}"

    def references(self) -> list[str]:
        """All symbols this item reads, in order of appearance."""
        values: list[Argument] = list(self.constructor_args)
        if self.custom_post_deploy is not None:
            values.extend(self.custom_post_deploy.params.values())
        for action in self.post_deploy_actions:
            values.append(action.target)
            values.extend(action.args)
        return [v.symbol for v in values if isinstance(v, Reference)]

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "name": self.name,
            "ctor": [a.to_plan_value() for a in self.constructor_args],
        }
        if self.post_deploy_actions:
            result["after"] = [a.to_dict() for a in self.post_deploy_actions]
        if self.custom_post_deploy is not None:
            result["hook"] = self.custom_post_deploy.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PlanItem":
        if not isinstance(data, dict) or "name" not in data:
            raise PlanValidationError(f"Plan item must be a mapping with 'name': {data!r}")
        hook = data.get("hook")
        return cls(
            name=data["name"],
            constructor_args=parse_arguments(data.get("ctor", [])),
            post_deploy_actions=tuple(
                WireAction.from_value(a) for a in data.get("after") or []
            ),
            custom_post_deploy=HookSpec.from_value(hook) if hook is not None else None,
        )


@dataclass(frozen=True)
class DeploymentPlan:
    """
    An ordered deployment plan.

    Attributes:
        plan_id: Unique identifier for the plan
        items: Plan items in execution order
        version: Version of the plan definition
        description: Free-form description
    """
    plan_id: str
    items: tuple[PlanItem, ...] = ()
    version: str = "1.0"
    description: str = ""

    def __post_init__(self):
        names = [item.name for item in self.items]
        if len(names) != len(set(names)):
            duplicates = sorted({n for n in names if names.count(n) > 1})
            raise PlanValidationError(f"Duplicate plan item names: {duplicates}")

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def get_item(self, name: str) -> Optional[PlanItem]:
        for item in self.items:
            if item.name == name:
                return item
        return None

    def component_names(self) -> list[str]:
        return [item.name for item in self.items]

    def to_dict(self) -> dict[str, Any]:
        return {
            "plan_id": self.plan_id,
            "version": self.version,
            **({"description": self.description} if self.description else {}),
            "items": [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DeploymentPlan":
        if not isinstance(data, dict):
            raise PlanValidationError("Plan definition must be a mapping")
        if "plan_id" not in data:
            raise PlanValidationError("Plan definition is missing 'plan_id'")
        items = data.get("items") or []
        if not isinstance(items, list):
            raise PlanValidationError("'items' must be a list")
        return cls(
            plan_id=data["plan_id"],
            version=str(data.get("version", "1.0")),
            description=data.get("description", ""),
            items=tuple(PlanItem.from_dict(i) for i in items),
        )


__all__ = ["WireAction", "HookSpec", "PlanItem", "DeploymentPlan"]
