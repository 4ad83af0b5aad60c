"""Configuration management for the netinfo agent."""

import json
import os
from dataclasses import dataclass, asdict, field, fields
from pathlib import Path
from typing import Dict, Optional

DEFAULT_CONFIG_PATH = "/etc/netinfo-agent/config.json"


@dataclass
class AgentConfig:
    """Agent configuration."""

    api_url: Optional[str] = None
    api_token: Optional[str] = None
    sysfs_root: str = "/sys/class/net"
    include_ipv6: bool = True
    retry_attempts: int = 3
    retry_backoff: float = 2.0
    timeout: int = 30  # seconds
    tags: Dict[str, str] = field(default_factory=dict)


class ConfigManager:
    """Manages agent configuration."""

    def __init__(self, config_path: str = DEFAULT_CONFIG_PATH):
        self.config_path = Path(config_path)

    def load(self) -> AgentConfig:
        """
        Load configuration from file.

        Keys missing from the file keep their AgentConfig defaults.

        Raises:
            FileNotFoundError: If the config file does not exist
            ValueError: If the file is not a JSON object or has unknown keys
        """
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        with open(self.config_path, "r") as f:
            data = json.load(f)

        if not isinstance(data, dict):
            raise ValueError(f"Config file must hold a JSON object: {self.config_path}")

        known = {item.name for item in fields(AgentConfig)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys in {self.config_path}: {', '.join(unknown)}")

        return AgentConfig(**data)

    def load_or_default(self) -> AgentConfig:
        """Load configuration, or return defaults when no file exists."""
        if not self.exists():
            return AgentConfig()
        return self.load()

    def save(self, config: AgentConfig) -> None:
        """Save configuration to file, leaving unset optional keys out."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {key: value for key, value in asdict(config).items() if value is not None}
        with open(self.config_path, "w") as f:
            json.dump(data, f, indent=2, sort_keys=True)

        # May hold an API token
        os.chmod(self.config_path, 0o600)

    def exists(self) -> bool:
        return self.config_path.is_file()
