"""
Ledger gateways - the network boundary of the orchestrator.

Implementations:
- InMemoryLedgerGateway: dry runs and tests, nothing leaves the process
- Web3LedgerGateway: JSON-RPC node via web3.py

Usage:
    from ledgerplan.gateway import create_gateway

    gateway = create_gateway(config, dry_run=False)
"""

from ledgerplan.gateway.base import CallReceipt, DeployReceipt, LedgerGateway
from ledgerplan.gateway.memory import InMemoryLedgerGateway, random_address
from ledgerplan.gateway.web3_client import Web3LedgerGateway


def create_gateway(config, dry_run: bool = False) -> LedgerGateway:
    """Build the gateway selected by configuration."""
    if dry_run:
        return InMemoryLedgerGateway()
    return Web3LedgerGateway(config.rpc_url, timeout_s=config.timeout_s)


__all__ = [
    "LedgerGateway",
    "DeployReceipt",
    "CallReceipt",
    "InMemoryLedgerGateway",
    "Web3LedgerGateway",
    "random_address",
    "create_gateway",
]
