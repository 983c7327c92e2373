"""
ledgerplan - Deployment orchestrator for on-ledger components

Deploys an ordered plan of contracts through a ledger gateway, resolving
$Symbol references between them, and wires the results together.
"""

__version__ = "0.1.0"


__all__ = ["DeployConfig", "load_config", "get_ledgerplan_home"]

from .config import DeployConfig, load_config, get_ledgerplan_home
