"""
Account store - resolves an account tag to a signing credential.

accounts.json format:
    {
      "acc0": {"pvtKey": "0x4f3e..."},
      "acc1": {"pvtKey": "0x6c87..."}
    }
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from ledgerplan.errors import AccountNotFoundError, ConfigError


@dataclass(frozen=True)
class Signer:
    """Signing credential for one account tag."""
    tag: str
    private_key: str = field(repr=False)

    def __repr__(self) -> str:
        return f"Signer(tag={self.tag!r})"


class AccountStore:
    """Lookup of signing credentials by tag."""

    def __init__(self, accounts: Mapping[str, Any]):
        self._accounts = dict(accounts)

    @classmethod
    def from_file(cls, path: Path | str) -> "AccountStore":
        """
        Load accounts from a JSON file.

        Raises:
            ConfigError: If the file is missing or not a JSON object
        """
        path = Path(path).expanduser()
        if not path.exists():
            raise ConfigError(f"Accounts file not found: {path}")
        try:
            with open(path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid accounts file {path}: {e}")
        if not isinstance(data, dict):
            raise ConfigError(f"Accounts file must contain a JSON object: {path}")
        return cls(data)

    def tags(self) -> list[str]:
        return sorted(self._accounts)

    def get(self, tag: str) -> Signer:
        """
        Resolve a tag to a Signer.

        Raises:
            AccountNotFoundError: If the tag is missing or has no string pvtKey
        """
        info = self._accounts.get(tag)
        if not isinstance(info, dict) or not isinstance(info.get("pvtKey"), str):
            raise AccountNotFoundError(f"Account tag '{tag}' not found or invalid in accounts file")
        return Signer(tag=tag, private_key=info["pvtKey"])
