import itertools
from unittest.mock import patch

import pytest

from ledgerplan.accounts import Signer
from ledgerplan.artifacts import ArtifactStore
from ledgerplan.config import DeployConfig
from ledgerplan.gateway import InMemoryLedgerGateway


def compiled(*methods, bytecode="6080604052"):
    """Minimal solc output entry exposing the given function names."""
    return {
        "abi": [{"type": "function", "name": m, "inputs": [], "outputs": []} for m in methods],
        "evm": {"bytecode": {"object": bytecode}},
    }


SUPPLY_CHAIN_SOURCES = {
    "RoleManager.sol": {"RoleManager": compiled("grantRole")},
    "CakeLifecycleRegistry.sol": {"CakeLifecycleRegistry": compiled("register")},
    "CakeFactory.sol": {"CakeFactory": compiled("bake")},
    "Shipper.sol": {"Shipper": compiled("ship")},
    "Warehouse.sol": {"Warehouse": compiled("store")},
    "SensorOracle.sol": {"SensorOracle": compiled("setShipment", "report")},
    "Auditor.sol": {"Auditor": compiled("audit")},
}


@pytest.fixture
def make_compiled():
    return compiled


@pytest.fixture
def supply_chain_sources():
    return SUPPLY_CHAIN_SOURCES


@pytest.fixture
def signer():
    return Signer(tag="acc0", private_key="0x" + "11" * 32)


@pytest.fixture
def artifacts():
    """Artifact store holding the cake supply chain contracts."""
    return ArtifactStore(SUPPLY_CHAIN_SOURCES)


@pytest.fixture
def sequential_addresses():
    """Deterministic address factory: 0x...01, 0x...02, ..."""
    counter = itertools.count(1)
    return lambda: "0x" + format(next(counter), "040x")


@pytest.fixture
def gateway(sequential_addresses):
    return InMemoryLedgerGateway(address_factory=sequential_addresses)


@pytest.fixture
def test_config(tmp_path):
    return DeployConfig(
        rpc_url="http://127.0.0.1:8545",
        accounts_file=str(tmp_path / "accounts.json"),
        build_dir=str(tmp_path / "build"),
    )


@pytest.fixture(autouse=True)
def ledgerplan_home(tmp_path, monkeypatch):
    home = tmp_path / "ledgerplan_home"
    monkeypatch.setenv("LEDGERPLAN_HOME", str(home))
    return home


@pytest.fixture(autouse=True)
def mock_load_config(request, test_config):
    # Don't patch for config tests
    if "test_config" in request.module.__name__:
        yield
        return

    with patch("ledgerplan.config.load_config", return_value=test_config):
        yield
