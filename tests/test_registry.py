"""Tests for ledgerplan.registry module.

Tests PlanRegistry loading, caching, version pinning and hashing.
"""

import json
from pathlib import Path

import pytest
import yaml

from ledgerplan.errors import PlanNotFoundError, PlanValidationError
from ledgerplan.registry import PACKAGED_DEFINITIONS_DIR, PlanRegistry


def _write_yaml(path: Path, data: dict):
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.dump(data, f)


SIMPLE_PLAN = {
    "plan_id": "simple",
    "version": "1.0",
    "items": [{"name": "A", "ctor": ["$Admin"]}, {"name": "B", "ctor": ["$A"]}],
}


class TestPlanRegistry:
    """Tests for PlanRegistry."""

    def test_load_yaml(self, tmp_path):
        _write_yaml(tmp_path / "simple.yaml", SIMPLE_PLAN)
        plan = PlanRegistry(tmp_path).load("simple")
        assert plan.component_names() == ["A", "B"]

    def test_load_json(self, tmp_path):
        (tmp_path / "simple.json").write_text(json.dumps(SIMPLE_PLAN))
        assert PlanRegistry(tmp_path).load("simple").plan_id == "simple"

    def test_yaml_preferred_over_json(self, tmp_path):
        _write_yaml(tmp_path / "simple.yaml", SIMPLE_PLAN)
        (tmp_path / "simple.json").write_text(json.dumps({**SIMPLE_PLAN, "version": "9.9"}))
        assert PlanRegistry(tmp_path).load("simple").version == "1.0"

    def test_nested_directory(self, tmp_path):
        _write_yaml(tmp_path / "staging" / "simple.yaml", SIMPLE_PLAN)
        registry = PlanRegistry(tmp_path)
        assert registry.list_plans() == ["simple"]
        assert registry.load("simple").plan_id == "simple"

    def test_not_found(self, tmp_path):
        with pytest.raises(PlanNotFoundError):
            PlanRegistry(tmp_path).load("missing")

    def test_id_mismatch(self, tmp_path):
        _write_yaml(tmp_path / "other.yaml", SIMPLE_PLAN)
        with pytest.raises(PlanValidationError, match="mismatch"):
            PlanRegistry(tmp_path).load("other")

    def test_invalid_plan(self, tmp_path):
        _write_yaml(tmp_path / "bad.yaml", {"plan_id": "bad", "items": [{"name": "A"}, {"name": "A"}]})
        with pytest.raises(PlanValidationError, match="Invalid plan"):
            PlanRegistry(tmp_path).load("bad")

    def test_invalid_reference_symbol(self, tmp_path):
        _write_yaml(tmp_path / "bad.yaml", {"plan_id": "bad", "items": [{"name": "A", "ctor": ["$"]}]})
        with pytest.raises(PlanValidationError):
            PlanRegistry(tmp_path).load("bad")

    def test_invalid_yaml(self, tmp_path):
        (tmp_path / "bad.yaml").write_text("items: [unclosed")
        with pytest.raises(PlanValidationError, match="Failed to load"):
            PlanRegistry(tmp_path).load("bad")

    def test_version_check(self, tmp_path):
        _write_yaml(tmp_path / "simple.yaml", SIMPLE_PLAN)
        registry = PlanRegistry(tmp_path)
        assert registry.load("simple", version="1.0").version == "1.0"
        with pytest.raises(PlanNotFoundError, match="Version mismatch"):
            registry.load("simple", version="2.0")

    def test_cache(self, tmp_path):
        _write_yaml(tmp_path / "simple.yaml", SIMPLE_PLAN)
        registry = PlanRegistry(tmp_path)
        first = registry.load("simple")
        (tmp_path / "simple.yaml").unlink()
        assert registry.load("simple") is first
        with pytest.raises(PlanNotFoundError):
            PlanRegistry(tmp_path).load("simple")

    def test_hash_is_stable(self, tmp_path):
        _write_yaml(tmp_path / "simple.yaml", SIMPLE_PLAN)
        (tmp_path / "other").mkdir()
        (tmp_path / "other" / "simple.json").write_text(json.dumps(SIMPLE_PLAN))
        sha = PlanRegistry.compute_hash(PlanRegistry(tmp_path).load("simple"))
        assert len(sha) == 64
        assert sha == PlanRegistry.compute_hash(PlanRegistry(tmp_path / "other").load("simple"))

    def test_non_string_item_name(self, tmp_path):
        _write_yaml(tmp_path / "bad.yaml", {"plan_id": "bad", "items": [{"name": 123}]})
        with pytest.raises(PlanValidationError, match="Invalid component name"):
            PlanRegistry(tmp_path).load("bad")

    def test_list_missing_dir(self, tmp_path):
        assert PlanRegistry(tmp_path / "nope").list_plans() == []


class TestPackagedPlans:
    """Tests for the plans shipped with ledgerplan."""

    def test_default_dir(self):
        assert PlanRegistry().definitions_dir == PACKAGED_DEFINITIONS_DIR

    def test_supply_chain(self):
        plan = PlanRegistry().load("supply_chain")
        assert plan.component_names() == [
            "RoleManager",
            "CakeLifecycleRegistry",
            "CakeFactory",
            "Shipper",
            "Warehouse",
            "SensorOracle",
            "Auditor",
        ]
        oracle = plan.get_item("SensorOracle")
        assert oracle.post_deploy_actions[0].describe() == "SensorOracle.setShipment"

    def test_supply_chain_only_references_earlier_items(self):
        plan = PlanRegistry().load("supply_chain")
        available = {"$Admin", "$Operator", "$Sensor", "$SensorEOA", "$ShipperEOA"}
        for item in plan:
            for symbol in item.references():
                if symbol != item.symbol:
                    assert symbol in available, f"{item.name} reads {symbol} too early"
            available.add(item.symbol)
