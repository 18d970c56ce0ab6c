"""
Parsing of addresses and private keys supplied on the command line.
"""
import re
from typing import Any, Dict, Protocol

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import Web3

from .exceptions import ArgumentError

# Order of the SECP256K1 elliptic curve; valid private keys lie in [1, N-1]
SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

_HEX_RE = re.compile(r"(?:[0-9a-fA-F]{2})*")


class Signer(Protocol):
    """Protocol for custom signers"""
    address: str

    def sign_transaction(self, transaction_dict: Dict[str, Any]) -> Any:
        """Sign transaction and return signed tx object"""
        ...


def parse_address(value: str) -> str:
    """
    Parse an account address

    Returns:
        Checksummed address

    Raises:
        ArgumentError: If the value is not a 20-byte hex address, or is
            mixed-case with an invalid checksum
    """
    if not Web3.is_address(value):
        raise ArgumentError(f"Invalid address: '{value}'")
    return Web3.to_checksum_address(value)


def parse_private_key(key: str) -> bytes:
    """
    Decode a hex private key, with or without a 0x prefix

    Raises:
        ArgumentError: If the key is not 32 bytes of hex or outside the curve range
    """
    # allow passing "0xab12.." as well as "ab12.." as the private key
    stripped = key[2:] if key.startswith("0x") else key
    # bytes.fromhex would skip whitespace between digits
    if not _HEX_RE.fullmatch(stripped):
        raise ArgumentError("Private key is not valid hex")
    raw = bytes.fromhex(stripped)

    if len(raw) != 32:
        raise ArgumentError(f"Private key must be 32 bytes, got {len(raw)}")
    if not 1 <= int.from_bytes(raw, "big") < SECP256K1_N:
        raise ArgumentError("Private key is outside the secp256k1 range")
    return raw


def load_signer(key: str) -> LocalAccount:
    """Build a local signing account from a hex private key"""
    return Account.from_key(parse_private_key(key))
