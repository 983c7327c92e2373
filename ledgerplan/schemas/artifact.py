"""
ArtifactDescriptor schema - one compiled, deployable component.

Produced by the external compile step; the orchestrator only reads it.
"""

from dataclasses import dataclass, field
from typing import Any

from ledgerplan.errors import ArtifactNotFoundError


@dataclass(frozen=True)
class ArtifactDescriptor:
    """
    Compiled interface and executable payload for one component.

    Attributes:
        name: Contract name inside the compiled source
        source_key: Artifact store key the descriptor was found under
        interface: ABI entries (method/event signatures)
        payload: Deployment bytecode, hex with a 0x prefix
    """
    name: str
    source_key: str
    interface: tuple[dict[str, Any], ...] = field(default_factory=tuple)
    payload: str = "0x"

    def __post_init__(self):
        if not self.payload.startswith("0x"):
            object.__setattr__(self, "payload", "0x" + self.payload)

    def has_method(self, method: str) -> bool:
        """Check whether the interface declares a function with this name."""
        return any(
            entry.get("type", "function") == "function" and entry.get("name") == method
            for entry in self.interface
        )

    def method_names(self) -> list[str]:
        return sorted({
            entry["name"] for entry in self.interface
            if entry.get("type", "function") == "function" and "name" in entry
        })

    @classmethod
    def from_compiled(cls, name: str, source_key: str, data: dict[str, Any]) -> "ArtifactDescriptor":
        """
        Build from a solc output entry.

        Accepts {abi, evm: {bytecode: {object}}} as written by solc, and the
        flattened {abi, bytecode} form.

        Raises:
            ArtifactNotFoundError: If the entry does not have either shape
        """
        def malformed(reason: str) -> ArtifactNotFoundError:
            return ArtifactNotFoundError(
                f"Malformed artifact for '{name}' in '{source_key}': {reason}",
                component=name,
            )

        if not isinstance(data, dict):
            raise malformed("entry is not an object")

        abi = data.get("abi") or []
        if not isinstance(abi, list) or not all(isinstance(entry, dict) for entry in abi):
            raise malformed("abi must be a list of objects")

        bytecode = data.get("bytecode")
        if bytecode is None:
            evm = data.get("evm") or {}
            if not isinstance(evm, dict):
                raise malformed("evm must be an object")
            bytecode = evm.get("bytecode") or {}
        if isinstance(bytecode, dict):
            bytecode = bytecode.get("object") or ""
        if not isinstance(bytecode, str):
            raise malformed("bytecode must be a hex string")

        return cls(
            name=name,
            source_key=source_key,
            interface=tuple(abi),
            payload=bytecode or "0x",
        )
