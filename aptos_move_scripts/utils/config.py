"""
Environment configuration for the Aptos Move scripts

Settings are read from the process environment after an optional .env file
has been loaded. Variables already present in the environment win over the
.env file.

Design Notes:
- Each command asks only for the variables it needs
- All missing variables are reported at once, before any network or CLI call
- APTOS_NODE_URL replaces the fullnode URL derived from the network name
"""

import logging
import os
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional, Union

from dotenv import find_dotenv, load_dotenv

from .exceptions import ConfigurationError

LOG = logging.getLogger(__name__)

ENV_NETWORK = "NEXT_PUBLIC_APP_NETWORK"
ENV_MODULE_ADDRESS = "NEXT_PUBLIC_MODULE_ADDRESS"
ENV_PUBLISHER_ADDRESS = "NEXT_MODULE_PUBLISHER_ACCOUNT_ADDRESS"
ENV_NODE_URL = "APTOS_NODE_URL"
ENV_APTOS_CLI = "APTOS_CLI"

DEFAULT_APTOS_CLI = "aptos"
FULLNODE_URL_TEMPLATE = "https://fullnode.{network}.aptoslabs.com/v1"


def load_env(env_file: Optional[Union[str, Path]] = None) -> bool:
    """
    Load a .env file into the process environment.

    Args:
        env_file: Explicit path; when omitted, .env is searched upwards from
            the current working directory

    Returns:
        True if a file was found and loaded
    """
    if env_file is None:
        env_file = find_dotenv(usecwd=True)
        if not env_file:
            LOG.debug("No .env file found")
            return False
    elif not Path(env_file).is_file():
        raise ConfigurationError(f"Env file not found: {env_file}", field="env_file")

    LOG.debug(f"Loading environment from {env_file}")
    return load_dotenv(env_file, override=False)


def fullnode_url(network: str) -> str:
    """Return the public fullnode REST base URL for a network"""
    return FULLNODE_URL_TEMPLATE.format(network=network)


@dataclass(frozen=True)
class Settings:
    """
    Values read from the environment.

    Attributes:
        network: Aptos network name (mainnet, testnet, devnet, ...)
        module_address: Account the ABI modules are published under
        publisher_address: Account bound to the package's named addresses on compile
        node_url: Explicit fullnode REST base URL
        aptos_cli: Command used to run the Aptos CLI
    """
    network: Optional[str] = None
    module_address: Optional[str] = None
    publisher_address: Optional[str] = None
    node_url: Optional[str] = None
    aptos_cli: str = DEFAULT_APTOS_CLI

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from an environment mapping (default: os.environ)"""
        if environ is None:
            environ = os.environ

        def _get(key: str) -> Optional[str]:
            value = environ.get(key)
            if value is None:
                return None
            value = value.strip()
            return value or None

        return cls(
            network=_get(ENV_NETWORK),
            module_address=_get(ENV_MODULE_ADDRESS),
            publisher_address=_get(ENV_PUBLISHER_ADDRESS),
            node_url=_get(ENV_NODE_URL),
            aptos_cli=_get(ENV_APTOS_CLI) or DEFAULT_APTOS_CLI,
        )

    def require(self, *env_keys: str) -> "Settings":
        """
        Ensure the given environment variables were set.

        Raises:
            ConfigurationError: One or more variables are missing
        """
        values = {
            ENV_NETWORK: self.network,
            ENV_MODULE_ADDRESS: self.module_address,
            ENV_PUBLISHER_ADDRESS: self.publisher_address,
            ENV_NODE_URL: self.node_url,
        }
        missing: List[str] = [key for key in env_keys if not values.get(key)]
        if missing:
            raise ConfigurationError(
                "Missing required environment variable(s): " + ", ".join(missing),
                missing=missing,
            )
        return self

    def require_for_abi(self) -> "Settings":
        """Validate what the ABI fetch needs"""
        if self.node_url:
            return self.require(ENV_MODULE_ADDRESS)
        return self.require(ENV_NETWORK, ENV_MODULE_ADDRESS)

    def require_for_compile(self) -> "Settings":
        """Validate what package compilation needs"""
        return self.require(ENV_PUBLISHER_ADDRESS)

    @property
    def base_url(self) -> str:
        """Fullnode REST base URL, explicit override first"""
        if self.node_url:
            return self.node_url.rstrip("/")
        if not self.network:
            raise ConfigurationError(
                f"{ENV_NETWORK} is not set", field=ENV_NETWORK
            )
        return fullnode_url(self.network)

    def cli_command(self) -> List[str]:
        """Split the Aptos CLI command into argv form"""
        return shlex.split(self.aptos_cli)
