#!/usr/bin/env python3
"""
ERC-8004 Deployment Tool - Configuration Loader

Reads the project's .env file once at startup and produces an immutable
DeployConfig that is handed to every other component.
"""

import os
import pathlib
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional
from .formatter import *
from .networks import Network

ENV_FILE_NAME = ".env"


@dataclass(frozen=True)
class DeployConfig:
    root_dir: pathlib.Path
    env_file: pathlib.Path
    private_key: str
    values: Mapping[str, str] = field(default_factory=dict)

    def get(self, key: str) -> Optional[str]:
        value = self.values.get(key)
        return value if value else None

    def rpc_url(self, network: Network) -> Optional[str]:
        return self.get(network.descriptor.rpc_var)

    def child_env(self) -> Dict[str, str]:
        """Environment for forge/cast: the process environment overlaid with .env values"""
        env = os.environ.copy()
        env.update(self.values)
        return env

    def secrets(self) -> Dict[str, str]:
        """Values that must never be echoed, keyed by variable name"""
        secrets = {"PRIVATE_KEY": self.private_key}
        for network in Network:
            if url := self.rpc_url(network):
                secrets[network.descriptor.rpc_var] = url
        return secrets


def parse_env_file(env_file: pathlib.Path) -> Dict[str, str]:
    """Parse KEY=VALUE lines the way `source .env` would for plain assignments"""
    env_vars: Dict[str, str] = {}
    with open(env_file, "r") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            if line.startswith("export "):
                line = line[len("export "):].lstrip()
            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip()
            if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
                value = value[1:-1]
            elif " #" in value:
                # Inline comment after an unquoted value
                value = value.split(" #", 1)[0].rstrip()
            env_vars[key] = value
    return env_vars


def _missing_env_file_hint():
    print_info("Please create a .env file with:")
    print_info("  PRIVATE_KEY=your_private_key")
    for network in Network:
        print_info(f"  {network.descriptor.rpc_var}=...")


def load_config(root_dir: pathlib.Path, env_file: Optional[pathlib.Path] = None,
                environ: Optional[Mapping[str, str]] = None) -> DeployConfig:
    """
    Load and validate deployment configuration.

    Values from the .env file win over the process environment; keys absent
    from the file fall back to `environ` (os.environ by default).

    Raises:
        FileNotFoundError: the .env file does not exist
        ValueError: PRIVATE_KEY is missing or empty
    """
    print_subsection("Loading configuration")
    env_file = pathlib.Path(env_file) if env_file else root_dir / ENV_FILE_NAME
    if not env_file.exists():
        print_error(f"{format_path(env_file, root_dir)} file not found!")
        _missing_env_file_hint()
        raise FileNotFoundError(f"Environment file {env_file} not found")

    values = dict(os.environ if environ is None else environ)
    values.update(parse_env_file(env_file))

    private_key = values.get("PRIVATE_KEY", "")
    if not private_key:
        print_error(f"PRIVATE_KEY not set in {format_path(env_file, root_dir)}")
        raise ValueError("PRIVATE_KEY is required")

    config = DeployConfig(
        root_dir=root_dir,
        env_file=env_file,
        private_key=private_key,
        values=MappingProxyType(values),
    )
    configured = [n.identifier for n in Network if config.rpc_url(n)]
    print_success(f"Configuration loaded from {format_path(env_file, root_dir)}")
    print_info(f"RPC URLs configured: {', '.join(configured) if configured else 'none'}")
    return config
