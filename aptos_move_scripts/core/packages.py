"""
Move packages in the workspace

Each package records the named addresses it is compiled and tested with and
the modules whose ABIs are exported for the platform app.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from .abi_fetcher import ModuleRef
from ..utils.exceptions import ConfigurationError

DEFAULT_ABI_OUTPUT_DIR = "../../apps/platform/lib/abis"


@dataclass(frozen=True)
class MovePackage:
    """
    A Move package in the workspace.

    Attributes:
        name: Package name
        publisher_named_addresses: Named addresses bound to the publisher on compile
        test_named_addresses: Fixed named addresses used by unit tests
        abi_modules: Modules whose ABI is exported to the frontend
        abi_output_dir: Where generated ABI files go, relative to the package dir
    """
    name: str
    publisher_named_addresses: Tuple[str, ...]
    test_named_addresses: Dict[str, str] = field(default_factory=dict)
    abi_modules: Tuple[str, ...] = ()
    abi_output_dir: str = DEFAULT_ABI_OUTPUT_DIR

    def compile_named_addresses(self, publisher_address: str) -> Dict[str, str]:
        return {name: publisher_address for name in self.publisher_named_addresses}

    def module_refs(self, address: str) -> List[ModuleRef]:
        return [ModuleRef(address=address, name=name) for name in self.abi_modules]


SHARE_MARKET = MovePackage(
    name="share-market",
    publisher_named_addresses=("panana", "amm_address", "admin", "user1", "user2"),
    test_named_addresses={
        "panana": "0x100",
        "amm_address": "0xaaa",
        "admin": "0xcafe3",
        "user1": "0xcafe1",
        "user2": "0xcafe2",
    },
    abi_modules=("cpmm", "cpmm_utils", "market", "config"),
)

CRYPTO_MARKET = MovePackage(
    name="crypto-market",
    publisher_named_addresses=("owner", "panana"),
    test_named_addresses={
        "panana": "0x100",
        "admin": "0x100",
    },
)

PACKAGES: Dict[str, MovePackage] = {
    SHARE_MARKET.name: SHARE_MARKET,
    CRYPTO_MARKET.name: CRYPTO_MARKET,
}


def get_package(name: str) -> MovePackage:
    """Look up a package by name"""
    try:
        return PACKAGES[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown package '{name}'. Available: {', '.join(sorted(PACKAGES))}",
            field="package",
        )
