"""
Artifact store - compiled components keyed by source.

The store is read-only input produced by the external compile step. It maps
a source key (e.g. "Shipper.sol" or "Shipper") to the contracts compiled
from that source.

Lookup policy:
- lenient (default): the first source key, in load order, that contains the
  component name case-insensitively wins. Further matches are logged and
  ignored, so "Oracle" against {"SensorOracle.sol", "PriceOracle.sol"}
  silently resolves to SensorOracle.
- strict: a key whose canonical form (extension stripped) equals the name
  wins outright; otherwise more than one candidate raises
  AmbiguousArtifactError.
"""

import json
import logging
from pathlib import Path
from typing import Any, Mapping, Optional

from ledgerplan.errors import AmbiguousArtifactError, ArtifactNotFoundError
from ledgerplan.schemas import ArtifactDescriptor

logger = logging.getLogger(__name__)

# Keys that mark a flat per-contract artifact rather than a solc source map
_FLAT_MARKERS = ("abi", "evm", "bytecode")


def canonical_key(source_key: str) -> str:
    """Strip a trailing file extension: "Shipper.sol" -> "Shipper"."""
    name = source_key.rsplit("/", 1)[-1]
    for ext in (".sol", ".json"):
        if name.lower().endswith(ext):
            return name[: -len(ext)]
    return name


def _is_flat(entry: Mapping[str, Any]) -> bool:
    return any(marker in entry for marker in _FLAT_MARKERS)


class ArtifactStore:
    """
    In-memory view over compiled artifacts.

    Usage:
        store = ArtifactStore.from_build_dir(Path("build"))
        artifact = store.lookup("Shipper")
        artifact.payload, artifact.interface
    """

    def __init__(self, sources: Optional[Mapping[str, Mapping[str, Any]]] = None, strict: bool = False):
        """
        Initialize the store.

        Args:
            sources: Mapping of source key to either {ContractName: artifact}
                     or a single flat artifact ({abi, evm|bytecode})
            strict: Treat ambiguous matches as errors
        """
        self.strict = strict
        self._sources: dict[str, dict[str, Any]] = {}
        for key, entry in (sources or {}).items():
            self.add_source(key, entry)

    @classmethod
    def from_build_dir(cls, build_dir: Path | str, strict: bool = False) -> "ArtifactStore":
        """
        Load every *.json file in a build directory.

        Files are read in sorted order. A source key already loaded from an
        earlier file is not replaced.

        Raises:
            ArtifactNotFoundError: If the directory does not exist or a file
                                   cannot be read as JSON
        """
        build_dir = Path(build_dir)
        if not build_dir.is_dir():
            raise ArtifactNotFoundError(f"Artifact build directory not found: {build_dir}")

        store = cls(strict=strict)
        for path in sorted(build_dir.glob("*.json")):
            try:
                with open(path) as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                raise ArtifactNotFoundError(f"Invalid artifact file {path}: {e}")
            if not isinstance(data, dict):
                logger.warning(f"Skipping non-object artifact file {path.name}")
                continue
            if _is_flat(data):
                store.add_source(path.stem, data)
                continue
            for source_key, entry in data.items():
                if source_key in store._sources:
                    continue
                if isinstance(entry, dict):
                    store.add_source(source_key, entry)

        logger.debug(f"Loaded {len(store)} artifact sources from {build_dir}")
        return store

    def add_source(self, source_key: str, entry: Mapping[str, Any]) -> None:
        if _is_flat(entry):
            self._sources[source_key] = {canonical_key(source_key): dict(entry)}
        else:
            self._sources[source_key] = dict(entry)

    def keys(self) -> list[str]:
        return list(self._sources)

    def __len__(self) -> int:
        return len(self._sources)

    def __contains__(self, source_key: object) -> bool:
        return source_key in self._sources

    def candidates(self, name: str) -> list[str]:
        """Source keys whose text contains the name, case-insensitively, in load order."""
        needle = name.lower()
        return [key for key in self._sources if needle in key.lower()]

    def find_source_key(self, name: str, strict: Optional[bool] = None) -> str:
        """
        Pick the source key for a component name.

        Args:
            name: Component name
            strict: Override the store's policy for this lookup

        Raises:
            ArtifactNotFoundError: No key matches
            AmbiguousArtifactError: Strict mode and several keys match
        """
        strict = self.strict if strict is None else strict
        matches = self.candidates(name)
        if not matches:
            raise ArtifactNotFoundError(
                f"No artifact matches component '{name}'", component=name
            )
        if len(matches) == 1:
            return matches[0]

        if strict:
            exact = [k for k in matches if canonical_key(k).lower() == name.lower()]
            if len(exact) == 1:
                return exact[0]
            raise AmbiguousArtifactError(name, matches)

        logger.warning(
            f"Artifact lookup for '{name}' matched {len(matches)} keys "
            f"({', '.join(matches)}); using '{matches[0]}'"
        )
        return matches[0]

    def lookup(self, name: str, strict: Optional[bool] = None) -> ArtifactDescriptor:
        """
        Locate the ArtifactDescriptor for a component.

        The contract is taken from the matched source by exact name, then by
        case-insensitive name.

        Raises:
            ArtifactNotFoundError: No matching source, or the source does
                                   not contain the contract
            AmbiguousArtifactError: Strict mode and several keys match
        """
        source_key = self.find_source_key(name, strict=strict)
        contracts = self._sources[source_key]

        contract_name = name if name in contracts else None
        if contract_name is None:
            for candidate in contracts:
                if candidate.lower() == name.lower():
                    contract_name = candidate
                    break
        if contract_name is None:
            raise ArtifactNotFoundError(
                f"Artifact source '{source_key}' has no contract named '{name}' "
                f"(found: {', '.join(sorted(contracts)) or 'none'})",
                component=name,
            )

        return ArtifactDescriptor.from_compiled(contract_name, source_key, contracts[contract_name])
