"""
SCM client - query and invest in the SCM ICO.
"""
from .chain import ChainClient
from .config import NetworkConfig, NetworkSettings
from .exceptions import (
    ScmClientError, ConfigError, ArgumentError, AmountParseError,
    TransactionError, ContractCallError, TxStep
)
from .models import TransactionIntent, PendingTransaction, TxReceipt
from .registry import ContractRegistry
from .sequencer import (
    ClaimSequencer, InvestmentSequencer, SequencingPolicy,
    FireAndForgetPolicy, AwaitApprovalPolicy
)
from .signer import load_signer, parse_address, parse_private_key
from .units import parse_amount
from .version import __version__

__all__ = [
    "ChainClient",
    "NetworkConfig",
    "NetworkSettings",
    "ScmClientError",
    "ConfigError",
    "ArgumentError",
    "AmountParseError",
    "TransactionError",
    "ContractCallError",
    "TxStep",
    "TransactionIntent",
    "PendingTransaction",
    "TxReceipt",
    "ContractRegistry",
    "ClaimSequencer",
    "InvestmentSequencer",
    "SequencingPolicy",
    "FireAndForgetPolicy",
    "AwaitApprovalPolicy",
    "load_signer",
    "parse_address",
    "parse_private_key",
    "parse_amount",
    "__version__",
]
