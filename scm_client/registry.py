"""
Registry of the contracts the SCM client talks to.
"""
from dataclasses import dataclass
from typing import Dict, Any, List, Optional

from web3 import Web3

from .abi import ERC20_ABI, ICO_ABI
from .config import NetworkSettings
from .exceptions import ConfigError

WETH = "weth"
SCM = "scm"
ICO = "ico"


@dataclass(frozen=True)
class ContractEntry:
    """Address and interface of one deployed contract"""
    name: str
    address: str
    abi: List[Dict[str, Any]]


class ContractRegistry:
    """Lookup from logical contract name to its deployed address and ABI"""

    def __init__(self, entries: Dict[str, ContractEntry]):
        self._entries = dict(entries)

    @classmethod
    def from_settings(cls, settings: NetworkSettings) -> "ContractRegistry":
        """
        Build the registry for a network, validating every address

        Raises:
            ConfigError: If an address is missing or malformed
        """
        return cls({
            WETH: ContractEntry(WETH, _checksum(WETH, settings.weth_address, settings.name), ERC20_ABI),
            SCM: ContractEntry(SCM, _checksum(SCM, settings.scm_address, settings.name), ERC20_ABI),
            ICO: ContractEntry(ICO, _checksum(ICO, settings.ico_address, settings.name), ICO_ABI),
        })

    def get(self, name: str) -> ContractEntry:
        try:
            return self._entries[name]
        except KeyError:
            raise ConfigError(f"Unknown contract '{name}'")

    def address(self, name: str) -> str:
        return self.get(name).address

    def __contains__(self, name: str) -> bool:
        return name in self._entries


def _checksum(name: str, address: Optional[str], network: str) -> str:
    if not address:
        raise ConfigError(
            f"No {name} contract address configured for network '{network}'; pass --{name}-address"
        )
    if not Web3.is_address(address):
        raise ConfigError(f"Malformed {name} contract address: {address}")
    return Web3.to_checksum_address(address)
