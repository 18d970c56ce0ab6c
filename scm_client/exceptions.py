"""
Exceptions for the SCM client.
"""
from enum import Enum
from typing import Optional


class TxStep(str, Enum):
    """
    Stage of a transaction's lifecycle at which it failed.
    """
    FILL = "fill"
    SIGN = "sign"
    SEND = "send"
    CONFIRM = "confirm"


class ScmClientError(Exception):
    """Base exception for all SCM client errors."""
    pass


class ConfigError(ScmClientError):
    """Raised when network or contract configuration is malformed."""
    pass


class ArgumentError(ScmClientError):
    """Raised when a command-line argument is missing or malformed."""
    pass


class AmountParseError(ArgumentError):
    """Raised when an amount or unit cannot be converted to wei."""
    pass


class TransactionError(ScmClientError):
    """Raised when filling, signing, sending or confirming a transaction fails."""

    def __init__(self, step: TxStep, message: str, tx_hash: Optional[str] = None):
        self.step = step
        self.tx_hash = tx_hash
        super().__init__(message)


class ContractCallError(ScmClientError):
    """Raised when a read-only contract call fails or returns undecodable data."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(f"{operation} failed: {message}")
