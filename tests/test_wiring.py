"""Tests for WireActionExecutor."""

import pytest

from ledgerplan.environment import ResolutionEnvironment
from ledgerplan.errors import (
    ArtifactNotFoundError,
    UnknownTargetError,
    UnresolvedReferenceError,
    WireCallFailedError,
)
from ledgerplan.gateway import InMemoryLedgerGateway
from ledgerplan.schemas import WireAction
from ledgerplan.wiring import WireActionExecutor


@pytest.fixture
def env():
    env = ResolutionEnvironment({"Admin": "0xAAA"})
    env.record("$Shipper", "0x01")
    env.record("$SensorOracle", "0x02")
    return env


class TestWireActionExecutor:
    """Tests for running one wiring action."""

    def test_call_against_deployed_target(self, artifacts, gateway, signer, env):
        wiring = WireActionExecutor(artifacts, gateway, signer)
        action = WireAction.from_value(["SensorOracle", "setShipment", ["$Shipper"]])

        record = wiring.run(action, env, component="SensorOracle")

        assert record.address == "0x02"
        assert record.args == ("0x01",)
        assert record.describe() == "SensorOracle.setShipment(0x01)"
        assert [(c.address, c.method, c.args) for c in gateway.calls] == [("0x02", "setShipment", ["0x01"])]

    def test_reference_target(self, artifacts, gateway, signer, env):
        wiring = WireActionExecutor(artifacts, gateway, signer)
        action = WireAction.from_value(["$SensorOracle", "setShipment", ["$Shipper"]])
        assert wiring.run(action, env).target == "SensorOracle"

    def test_target_not_deployed(self, artifacts, gateway, signer, env):
        wiring = WireActionExecutor(artifacts, gateway, signer)
        action = WireAction.from_value(["Auditor", "audit", []])
        with pytest.raises(UnknownTargetError) as exc_info:
            wiring.run(action, env, component="SensorOracle")
        assert exc_info.value.component == "SensorOracle"
        assert exc_info.value.action == "Auditor.audit"
        assert gateway.calls == []

    def test_seeded_role_is_not_a_target(self, artifacts, gateway, signer, env):
        wiring = WireActionExecutor(artifacts, gateway, signer)
        with pytest.raises(UnknownTargetError):
            wiring.run(WireAction.from_value(["Admin", "grantRole", []]), env)

    def test_unresolved_argument(self, artifacts, gateway, signer, env):
        wiring = WireActionExecutor(artifacts, gateway, signer)
        action = WireAction.from_value(["SensorOracle", "setShipment", ["$Warehouse"]])
        with pytest.raises(UnresolvedReferenceError) as exc_info:
            wiring.run(action, env, component="SensorOracle")
        assert exc_info.value.action == "SensorOracle.setShipment"
        assert gateway.calls == []

    def test_interface_lookup_failure(self, make_compiled, gateway, signer, env):
        from ledgerplan.artifacts import ArtifactStore

        wiring = WireActionExecutor(ArtifactStore({"Shipper.sol": {"Shipper": make_compiled()}}), gateway, signer)
        with pytest.raises(ArtifactNotFoundError) as exc_info:
            wiring.run(WireAction.from_value(["SensorOracle", "setShipment", []]), env)
        assert exc_info.value.action == "SensorOracle.setShipment"

    def test_revert_becomes_wire_call_failed(self, artifacts, signer, env):
        gateway = InMemoryLedgerGateway(revert_calls={"setShipment"})
        wiring = WireActionExecutor(artifacts, gateway, signer)
        with pytest.raises(WireCallFailedError) as exc_info:
            wiring.run(WireAction.from_value(["SensorOracle", "setShipment", ["$Shipper"]]), env)
        assert exc_info.value.transient is False
        assert exc_info.value.action == "SensorOracle.setShipment"

    def test_method_missing_from_interface(self, artifacts, gateway, signer, env):
        wiring = WireActionExecutor(artifacts, gateway, signer)
        with pytest.raises(WireCallFailedError, match="not found in interface"):
            wiring.run(WireAction.from_value(["SensorOracle", "nope", []]), env)
