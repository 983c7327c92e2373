"""
PlanRegistry - Load and validate DeploymentPlans from storage.

The registry provides:
- Loading DeploymentPlans from YAML or JSON files in a definitions directory
- Version pinning (optional, default="latest")
- Caching loaded definitions
- A SHA256 content hash for each plan
"""

import hashlib
import json
from pathlib import Path
from typing import Optional

import yaml

from ledgerplan.errors import PlanNotFoundError, PlanValidationError
from ledgerplan.schemas import DeploymentPlan

# Plans shipped with the package
PACKAGED_DEFINITIONS_DIR = Path(__file__).parent / "plans" / "definitions"


class PlanRegistry:
    """
    Registry for loading and caching DeploymentPlans.

    Example directory structure:
        definitions/
            supply_chain.yaml
            staging/
                supply_chain_v2.json
    """

    def __init__(self, definitions_dir: Optional[Path | str] = None):
        """
        Initialize the registry.

        Args:
            definitions_dir: Directory containing plan definition files.
                             Defaults to the plans shipped with ledgerplan.
        """
        self._definitions_dir = Path(definitions_dir) if definitions_dir else PACKAGED_DEFINITIONS_DIR
        self._cache: dict[str, DeploymentPlan] = {}

    @property
    def definitions_dir(self) -> Path:
        return self._definitions_dir

    def load(self, plan_id: str, version: Optional[str] = None) -> DeploymentPlan:
        """
        Load a DeploymentPlan by ID and optional version.

        Searches for {plan_id}.yaml, .yml or .json in the definitions tree.
        YAML files are preferred over JSON when both exist.

        Raises:
            PlanNotFoundError: If no definition file exists or the version
                               does not match
            PlanValidationError: If the definition is invalid
        """
        if version is None or version == "latest":
            if plan_id in self._cache:
                return self._cache[plan_id]

        def_path = self._find_definition(plan_id)
        if def_path is None:
            raise PlanNotFoundError(f"Plan definition not found: {plan_id}")

        try:
            data = self._load_file(def_path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise PlanValidationError(f"Failed to load {def_path}: {e}")

        try:
            plan = DeploymentPlan.from_dict(data)
        except (PlanValidationError, ValueError) as e:
            raise PlanValidationError(f"Invalid plan in {def_path}: {e}")

        if plan.plan_id != plan_id:
            raise PlanValidationError(
                f"Plan ID mismatch: file is '{plan_id}' but plan_id is '{plan.plan_id}'"
            )

        if version is not None and version != "latest" and plan.version != version:
            raise PlanNotFoundError(
                f"Version mismatch for {plan_id}: requested '{version}', found '{plan.version}'"
            )

        self._cache[plan_id] = plan
        return plan

    def _load_file(self, path: Path) -> dict:
        suffix = path.suffix.lower()
        with open(path) as f:
            if suffix in (".yaml", ".yml"):
                return yaml.safe_load(f)
            elif suffix == ".json":
                return json.load(f)
            else:
                raise ValueError(f"Unsupported file format: {suffix}")

    def list_plans(self) -> list[str]:
        """Sorted plan IDs found in the definitions directory."""
        if not self._definitions_dir.exists():
            return []

        plan_ids = set()
        for ext in ["*.yaml", "*.yml", "*.json"]:
            for f in self._definitions_dir.glob(f"**/{ext}"):
                plan_ids.add(f.stem)
        return sorted(plan_ids)

    def _find_definition(self, plan_id: str) -> Optional[Path]:
        for ext in [".yaml", ".yml", ".json"]:
            filename = f"{plan_id}{ext}"

            root_path = self._definitions_dir / filename
            if root_path.exists():
                return root_path

            matches = sorted(self._definitions_dir.glob(f"**/{filename}"))
            if matches:
                return matches[0]

        return None

    @staticmethod
    def compute_hash(plan: DeploymentPlan) -> str:
        """SHA256 of the plan's canonical JSON (sorted keys, compact)."""
        canonical = json.dumps(plan.to_dict(), sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(canonical.encode()).hexdigest()
