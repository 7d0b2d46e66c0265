#!/usr/bin/env python3
"""
ERC-8004 Deployment Tool - Network Definitions

The closed set of networks this tool deploys to. Every network binds its RPC
environment variable, display name and verification mode statically; the
forge alias used for --rpc-url is the network identifier itself and must
match an entry in foundry.toml [rpc_endpoints].
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

OKLINK_VERIFIER_URL = "https://www.oklink.com/api/v5/explorer/contract/verify-source-code-plugin/{short_name}"


class VerifyMode(Enum):
    VERIFY = "verify"
    NO_VERIFY = "no-verify"
    OKLINK = "oklink-plugin-verify"


@dataclass(frozen=True)
class OklinkTarget:
    """Chain id and OKLink chain short name used by the verification plugin"""
    chain_id: int
    short_name: str

    @property
    def verifier_url(self) -> str:
        return OKLINK_VERIFIER_URL.format(short_name=self.short_name)


@dataclass(frozen=True)
class NetworkDescriptor:
    identifier: str
    rpc_var: str
    display_name: str
    verify_mode: VerifyMode
    description: str
    note: Optional[str] = None
    oklink: Optional[OklinkTarget] = None


XLAYER_MAINNET = OklinkTarget(chain_id=196, short_name="XLAYER")
XLAYER_TESTNET = OklinkTarget(chain_id=1952, short_name="XLAYER_TESTNET")


class Network(Enum):
    SEPOLIA = NetworkDescriptor(
        "sepolia", "SEPOLIA_RPC_URL", "Ethereum Sepolia", VerifyMode.VERIFY,
        "Ethereum Sepolia testnet",
    )
    BASE_SEPOLIA = NetworkDescriptor(
        "base_sepolia", "BASE_SEPOLIA_RPC_URL", "Base Sepolia", VerifyMode.VERIFY,
        "Base Sepolia testnet",
    )
    OPTIMISM_SEPOLIA = NetworkDescriptor(
        "optimism_sepolia", "OPTIMISM_SEPOLIA_RPC_URL", "Optimism Sepolia", VerifyMode.VERIFY,
        "Optimism Sepolia testnet",
    )
    MODE_TESTNET = NetworkDescriptor(
        "mode_testnet", "MODE_TESTNET_RPC_URL", "Mode Testnet", VerifyMode.VERIFY,
        "Mode Testnet",
    )
    ZG_TESTNET = NetworkDescriptor(
        "zg_testnet", "ZG_TESTNET_RPC_URL", "0G Testnet", VerifyMode.NO_VERIFY,
        "0G testnet",
        note="0G testnet verification not yet supported via forge",
    )
    XLAYER = NetworkDescriptor(
        "xlayer", "XLAYER_RPC_URL", "X Layer Mainnet", VerifyMode.OKLINK,
        f"X Layer Mainnet (chainId {XLAYER_MAINNET.chain_id})",
        note="X Layer: using OKLink plugin verification",
        oklink=XLAYER_MAINNET,
    )
    XLAYER_TESTNET = NetworkDescriptor(
        "xlayer_testnet", "XLAYER_TESTNET_RPC_URL", "X Layer Testnet", VerifyMode.OKLINK,
        f"X Layer Testnet (chainId {XLAYER_TESTNET.chain_id})",
        note="X Layer Testnet: using OKLink plugin verification",
        oklink=XLAYER_TESTNET,
    )

    @property
    def descriptor(self) -> NetworkDescriptor:
        return self.value

    @property
    def identifier(self) -> str:
        return self.value.identifier

    @classmethod
    def from_identifier(cls, identifier: str) -> Optional["Network"]:
        for network in cls:
            if network.identifier == identifier:
                return network
        return None


# Order used by the "all" command: testnets first, then the X Layer pair
ALL_NETWORKS: Tuple[Network, ...] = (
    Network.SEPOLIA,
    Network.BASE_SEPOLIA,
    Network.OPTIMISM_SEPOLIA,
    Network.MODE_TESTNET,
    Network.ZG_TESTNET,
    Network.XLAYER_TESTNET,
    Network.XLAYER,
)

# Verification-only commands, keyed by CLI token
VERIFY_ONLY_COMMANDS = {
    "verify_xlayer": Network.XLAYER,
    "verify_xlayer_testnet": Network.XLAYER_TESTNET,
}
