"""
Web3 ledger gateway - JSON-RPC node access through web3.py.

Transactions are built against the node, signed locally with the signer's
private key, sent raw, and confirmed by waiting for the receipt.

Error classification (same contract as the other gateway boundaries):
- TransientError/PermanentError raised here propagate unchanged
- Builtin TimeoutError, web3 TimeExhausted, ConnectionError -> TransientError
- Receipt with status != 1 -> PermanentError (revert)
- Unknown exceptions -> PermanentError (fail fast, no string matching)
"""

import logging
import re
from typing import Any, Optional, Sequence

from ledgerplan.accounts import Signer
from ledgerplan.errors import PermanentError, TransientError
from ledgerplan.schemas import ArtifactDescriptor
from .base import CallReceipt, DeployReceipt

logger = logging.getLogger(__name__)

ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")

DEFAULT_TIMEOUT_S = 120


def _hex(value: Any) -> str:
    text = value.hex() if hasattr(value, "hex") else str(value)
    return text if text.startswith("0x") else "0x" + text


class Web3LedgerGateway:
    """
    LedgerGateway backed by a web3 HTTP provider.

    Usage:
        gateway = Web3LedgerGateway("http://127.0.0.1:8545")
        receipt = gateway.deploy(artifact, ["0xAdmin..."], signer)
    """

    def __init__(
        self,
        rpc_url: str,
        timeout_s: int = DEFAULT_TIMEOUT_S,
        poll_latency_s: float = 0.5,
        web3: Optional[Any] = None,
    ):
        """
        Initialize the gateway.

        Args:
            rpc_url: JSON-RPC endpoint of the node
            timeout_s: Seconds to wait for a receipt
            poll_latency_s: Receipt polling interval
            web3: Pre-built Web3 instance (tests, custom providers)
        """
        self.rpc_url = rpc_url
        self.timeout_s = timeout_s
        self.poll_latency_s = poll_latency_s
        if web3 is None:
            from web3 import Web3

            web3 = Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": timeout_s}))
        self._w3 = web3
        self._accounts: dict[str, Any] = {}

    def _account(self, signer: Signer) -> Any:
        account = self._accounts.get(signer.tag)
        if account is None:
            account = self._w3.eth.account.from_key(signer.private_key)
            self._accounts[signer.tag] = account
        return account

    def _normalize_args(self, args: Sequence[Any]) -> list[Any]:
        """Checksum anything that looks like an address; web3 rejects lower-case ones."""
        normalized = []
        for value in args:
            if isinstance(value, str) and ADDRESS_PATTERN.match(value):
                value = self._w3.to_checksum_address(value)
            normalized.append(value)
        return normalized

    def _send(self, tx_builder: Any, signer: Signer) -> dict[str, Any]:
        """Build, sign, send and confirm a transaction; return the receipt."""
        account = self._account(signer)
        nonce = self._w3.eth.get_transaction_count(account.address, "pending")
        tx = tx_builder.build_transaction({"from": account.address, "nonce": nonce})
        signed = account.sign_transaction(tx)
        tx_hash = self._w3.eth.send_raw_transaction(signed.raw_transaction)
        logger.debug(f"Sent transaction {_hex(tx_hash)} from {account.address}")
        receipt = self._w3.eth.wait_for_transaction_receipt(
            tx_hash, timeout=self.timeout_s, poll_latency=self.poll_latency_s
        )
        if receipt["status"] != 1:
            raise PermanentError(f"Transaction {_hex(tx_hash)} reverted")
        return dict(receipt, transactionHash=tx_hash)

    def _classified(self, description: str, fn):
        from web3.exceptions import TimeExhausted

        try:
            return fn()
        except (TransientError, PermanentError):
            raise
        except (TimeoutError, TimeExhausted, ConnectionError) as e:
            raise TransientError(f"{description}: {e}") from e
        except Exception as e:
            raise PermanentError(f"{description}: {e}") from e

    def deploy(
        self,
        artifact: ArtifactDescriptor,
        args: Sequence[Any],
        signer: Signer,
    ) -> DeployReceipt:
        def _deploy() -> DeployReceipt:
            factory = self._w3.eth.contract(abi=list(artifact.interface), bytecode=artifact.payload)
            receipt = self._send(factory.constructor(*self._normalize_args(args)), signer)
            address = receipt.get("contractAddress")
            if not address:
                raise PermanentError(f"No contract address in receipt for {artifact.name}")
            return DeployReceipt(
                address=address,
                tx_hash=_hex(receipt["transactionHash"]),
                block_number=receipt.get("blockNumber"),
            )

        return self._classified(f"deploy {artifact.name}", _deploy)

    def call(
        self,
        address: str,
        interface: Sequence[dict[str, Any]],
        method: str,
        args: Sequence[Any],
        signer: Signer,
    ) -> CallReceipt:
        def _call() -> CallReceipt:
            if not any(e.get("type", "function") == "function" and e.get("name") == method for e in interface):
                raise PermanentError(f"Method '{method}' not found in interface")
            contract = self._w3.eth.contract(
                address=self._w3.to_checksum_address(address), abi=list(interface)
            )
            fn = getattr(contract.functions, method)
            receipt = self._send(fn(*self._normalize_args(args)), signer)
            return CallReceipt(
                tx_hash=_hex(receipt["transactionHash"]),
                block_number=receipt.get("blockNumber"),
                status=receipt["status"],
            )

        return self._classified(f"call {method} at {address}", _call)
