"""
Configuration management for ledgerplan.

Loads and validates config.yaml from the ledgerplan home directory
($LEDGERPLAN_HOME, default ~/.config/ledgerplan).

config.yaml:
    network:
      rpc_url: http://127.0.0.1:8545
      timeout_s: 120
    accounts_file: ~/.config/ledgerplan/accounts.json
    artifacts:
      build_dir: build
      strict: false
    plans:
      definitions_dir: null        # null = plans shipped with ledgerplan
      default: supply_chain
    roles:
      aliases: {SensorEOA: Operator, Sensor: Operator, ShipperEOA: Admin}
    hooks:
      allowed_modules: []
    logging:
      level: INFO
      format: pretty               # pretty | structured
      file: null
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from ledgerplan.errors import ConfigError

LOG_FORMATS = ("pretty", "structured")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Fixed role symbols bound from the command line
ADMIN_ROLE = "Admin"
OPERATOR_ROLE = "Operator"

DEFAULT_ROLE_ALIASES = {
    "Sensor": OPERATOR_ROLE,
    "SensorEOA": OPERATOR_ROLE,
    "ShipperEOA": ADMIN_ROLE,
}


def get_ledgerplan_home() -> Path:
    """Return the ledgerplan home directory."""
    return Path(os.environ.get("LEDGERPLAN_HOME", "~/.config/ledgerplan")).expanduser()


@dataclass
class DeployConfig:
    """Complete deployment configuration."""
    rpc_url: str = "http://127.0.0.1:8545"
    timeout_s: int = 120
    accounts_file: Optional[str] = None
    build_dir: str = "build"
    strict_artifacts: bool = False
    definitions_dir: Optional[str] = None
    default_plan: str = "supply_chain"
    role_aliases: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_ROLE_ALIASES))
    hook_modules: list[str] = field(default_factory=list)
    log_level: str = "INFO"
    log_format: str = "pretty"
    log_file: Optional[str] = None

    def __post_init__(self):
        self.validate()

    @property
    def accounts_path(self) -> Path:
        if self.accounts_file:
            return Path(self.accounts_file).expanduser()
        return get_ledgerplan_home() / "accounts.json"

    @property
    def build_path(self) -> Path:
        return Path(self.build_dir).expanduser()

    @property
    def definitions_path(self) -> Optional[Path]:
        if self.definitions_dir:
            return Path(self.definitions_dir).expanduser()
        return None

    @property
    def log_path(self) -> Optional[Path]:
        if self.log_file:
            return Path(self.log_file).expanduser()
        return None

    def role_bindings(self, admin_address: str, operator_address: str) -> dict[str, str]:
        """
        Build the initial environment bindings for a run.

        $Admin and $Operator come from the command line; every alias is
        bound to the address of the role it points at.
        """
        bindings = {ADMIN_ROLE: admin_address, OPERATOR_ROLE: operator_address}
        for alias, role in self.role_aliases.items():
            bindings[alias] = bindings[role]
        return bindings

    def validate(self) -> None:
        """Validate configuration values."""
        if not self.rpc_url:
            raise ConfigError("network.rpc_url is required")
        if not isinstance(self.timeout_s, int) or self.timeout_s <= 0:
            raise ConfigError(f"network.timeout_s must be a positive integer, got: {self.timeout_s!r}")
        if self.log_format not in LOG_FORMATS:
            raise ConfigError(f"logging.format must be one of {LOG_FORMATS}, got: {self.log_format!r}")
        if not isinstance(self.log_level, str) or self.log_level.upper() not in LOG_LEVELS:
            raise ConfigError(f"logging.level must be one of {LOG_LEVELS}, got: {self.log_level!r}")
        for alias, role in self.role_aliases.items():
            if role not in (ADMIN_ROLE, OPERATOR_ROLE):
                raise ConfigError(
                    f"roles.aliases.{alias} must point at {ADMIN_ROLE} or {OPERATOR_ROLE}, got: {role!r}"
                )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DeployConfig":
        """Build from the nested config.yaml structure."""
        network = data.get("network") or {}
        artifacts = data.get("artifacts") or {}
        plans = data.get("plans") or {}
        roles = data.get("roles") or {}
        hooks = data.get("hooks") or {}
        logging_cfg = data.get("logging") or {}

        aliases = roles.get("aliases")
        return cls(
            rpc_url=network.get("rpc_url", cls.rpc_url),
            timeout_s=network.get("timeout_s", cls.timeout_s),
            accounts_file=data.get("accounts_file"),
            build_dir=artifacts.get("build_dir", cls.build_dir),
            strict_artifacts=bool(artifacts.get("strict", False)),
            definitions_dir=plans.get("definitions_dir"),
            default_plan=plans.get("default", cls.default_plan),
            role_aliases=dict(DEFAULT_ROLE_ALIASES if aliases is None else aliases),
            hook_modules=list(hooks.get("allowed_modules") or []),
            log_level=logging_cfg.get("level", cls.log_level),
            log_format=logging_cfg.get("format", cls.log_format),
            log_file=logging_cfg.get("file"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the nested config.yaml structure."""
        return {
            "network": {"rpc_url": self.rpc_url, "timeout_s": self.timeout_s},
            "accounts_file": self.accounts_file,
            "artifacts": {"build_dir": self.build_dir, "strict": self.strict_artifacts},
            "plans": {"definitions_dir": self.definitions_dir, "default": self.default_plan},
            "roles": {"aliases": dict(self.role_aliases)},
            "hooks": {"allowed_modules": list(self.hook_modules)},
            "logging": {"level": self.log_level, "format": self.log_format, "file": self.log_file},
        }


def load_config(config_path: Optional[Path] = None) -> DeployConfig:
    """
    Load deployment configuration from YAML.

    Args:
        config_path: Path to config file. Defaults to $LEDGERPLAN_HOME/config.yaml

    Returns:
        DeployConfig instance

    Raises:
        FileNotFoundError: If the config file does not exist
        ConfigError: If the config is not valid YAML or has invalid values
    """
    if config_path is None:
        config_path = get_ledgerplan_home() / "config.yaml"
    config_path = Path(config_path).expanduser()

    if not config_path.exists():
        raise FileNotFoundError(f"ledgerplan config.yaml not found at {config_path}")

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in {config_path}: {e}")

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file must contain a mapping: {config_path}")

    return DeployConfig.from_dict(data)
